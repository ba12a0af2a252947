"""Command-line interface for deptree: render, list and browse resolved dependency trees."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from deptree import __version__
from deptree.api import collect_nodes, copy_tree, render_tree
from deptree.config import default_log_level, default_token_style
from deptree.core.errors import DependencyTreeError
from deptree.core.loader import load_tree
from deptree.core.node import DependencyNode, NodeState
from deptree.traversal.filtering import NodePredicate
from deptree.traversal.filters import AndFilter, ArtifactFilter, StateFilter
from deptree.traversal.serializing import TOKEN_SETS

logger = logging.getLogger(__name__)

STATE_CHOICES = [s.value for s in NodeState]


def _load(path: str) -> DependencyNode | None:
    """Load a tree file, reporting problems on stderr."""
    try:
        return load_tree(Path(path))
    except OSError as e:
        print(f"Cannot read {path}: {e.strerror or e}", file=sys.stderr)
    except DependencyTreeError as e:
        print(f"Invalid tree file: {e}", file=sys.stderr)
    return None


def _build_predicate(args: argparse.Namespace) -> NodePredicate | None:
    """Combine --state and --include options into one predicate; None when neither is given."""
    filters: list[NodePredicate] = []
    if getattr(args, "state", None):
        filters.append(StateFilter(*(NodeState(s) for s in args.state)))
    if getattr(args, "include", None):
        filters.append(ArtifactFilter(args.include))
    if not filters:
        return None
    logger.debug("Filtering nodes with %s", filters)
    return filters[0] if len(filters) == 1 else AndFilter(filters)


def _emit(output: str, destination: str | None) -> None:
    if destination:
        Path(destination).write_text(output, encoding="utf-8")
        print(f"Tree written to: {destination}", file=sys.stderr)
    else:
        sys.stdout.write(output)


def cmd_tree(args: argparse.Namespace) -> int:
    """Show the dependency tree diagram (or its filtered copy as JSON)."""
    tree = _load(args.file)
    if tree is None:
        return 1
    predicate = _build_predicate(args)

    if args.json:
        result = copy_tree(tree, predicate=predicate)
        if result is None:
            print("No nodes matched the given filters.", file=sys.stderr)
            return 1
        _emit(json.dumps(result.to_dict(), indent=2) + "\n", args.output)
        return 0

    output = render_tree(tree, tokens=args.tokens or default_token_style(), predicate=predicate)
    if not output:
        print("No nodes matched the given filters.", file=sys.stderr)
        return 1
    _emit(output, args.output)
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """List the tree's nodes in pre-order."""
    tree = _load(args.file)
    if tree is None:
        return 1
    nodes = collect_nodes(tree, predicate=_build_predicate(args))

    if args.json:
        print(
            json.dumps(
                [
                    {"artifact": str(n.artifact), "state": n.state.value, "depth": n.depth}
                    for n in nodes
                ],
                indent=2,
            )
        )
        return 0
    if not nodes:
        print("No nodes matched the given filters.", file=sys.stderr)
        return 1
    for node in nodes:
        print(node.to_node_string() if args.verbose else str(node.artifact))
    if args.verbose:
        print(f"\n{len(nodes)} node(s)")
    return 0


def cmd_tui(args: argparse.Namespace) -> int:
    """Launch the interactive TUI."""
    tree = _load(args.file)
    if tree is None:
        return 1
    from deptree.tui.app import DepTreeApp

    app = DepTreeApp(root_node=tree, source=args.file)
    app.run()
    return 0


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--state",
        action="append",
        choices=STATE_CHOICES,
        help="Only keep nodes in this resolution state (can be repeated)",
    )
    parser.add_argument(
        "-i",
        "--include",
        action="append",
        metavar="PATTERN",
        help="Only keep artifacts matching this glob, e.g. 'org.example:*' (can be repeated)",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the deptree CLI."""
    parser = argparse.ArgumentParser(
        prog="deptree",
        description="Render and explore resolved dependency trees from the command line.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging and fuller node labels",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # deptree tree
    tree_parser = subparsers.add_parser(
        "tree",
        help="Show the dependency tree diagram",
        description="Draw a dependency tree loaded from a JSON file.",
    )
    tree_parser.add_argument("file", help="JSON tree file")
    tree_parser.add_argument(
        "-t",
        "--tokens",
        choices=list(TOKEN_SETS),
        default=None,
        help="Connector style (default: $DEPTREE_TOKENS or ascii)",
    )
    _add_filter_arguments(tree_parser)
    tree_parser.add_argument(
        "--json",
        action="store_true",
        help="Output the (filtered) tree as JSON instead of a diagram",
    )
    tree_parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Output file (default: stdout)",
    )
    tree_parser.set_defaults(func=cmd_tree)

    # deptree list
    list_parser = subparsers.add_parser(
        "list",
        help="List tree nodes in pre-order",
        description="Flatten a dependency tree into one artifact per line.",
    )
    list_parser.add_argument("file", help="JSON tree file")
    _add_filter_arguments(list_parser)
    list_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    list_parser.set_defaults(func=cmd_list)

    # deptree tui
    tui_parser = subparsers.add_parser(
        "tui",
        help="Launch the interactive terminal UI",
        description="Browse a dependency tree interactively.",
    )
    tui_parser.add_argument("file", help="JSON tree file")
    tui_parser.set_defaults(func=cmd_tui)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else default_log_level(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

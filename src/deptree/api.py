"""Public API: use deptree from Python or from other tools.

Every function builds fresh visitors, so calls never share traversal state.
"""

from __future__ import annotations

from collections.abc import Callable
from io import StringIO
from pathlib import Path

from deptree.core.loader import load_tree as _load_tree
from deptree.core.node import DependencyNode
from deptree.traversal.building import BuildingVisitor
from deptree.traversal.collecting import CollectingVisitor
from deptree.traversal.filtering import FilteringVisitor, NodePredicate
from deptree.traversal.serializing import SerializingVisitor, TextSink, TokenSet


def load_tree(path: Path | str) -> DependencyNode:
    """Load a dependency tree from a JSON file written by ``DependencyNode.to_dict()``."""
    return _load_tree(path)


def collect_nodes(
    root: DependencyNode,
    *,
    predicate: NodePredicate | None = None,
) -> tuple[DependencyNode, ...]:
    """
    Flatten a tree into its nodes in pre-order.

    With a predicate, only accepted nodes are listed; descendants of rejected
    nodes are still considered.
    """
    collector = CollectingVisitor()
    root.accept(FilteringVisitor(collector, predicate) if predicate is not None else collector)
    return collector.nodes


class _KeepRoot:
    """
    Wrap a predicate so that the walk's root is always accepted.

    A filtered copy then has one root even when the predicate rejects it,
    and accepted top-level subtrees all hang below that root. ``matched``
    records whether the predicate itself accepted any node.
    """

    def __init__(self, root: DependencyNode, predicate: NodePredicate) -> None:
        self.root = root
        self.predicate = predicate
        self.matched = False

    def __call__(self, node: DependencyNode) -> bool:
        accepted = bool(self.predicate(node))
        self.matched = self.matched or accepted
        return accepted or node is self.root


def copy_tree(
    root: DependencyNode,
    *,
    predicate: NodePredicate | None = None,
) -> DependencyNode | None:
    """
    Build an independent copy of a tree.

    With a predicate, rejected nodes are left out and their accepted
    descendants attach to the nearest accepted ancestor. The root is always
    copied, so the result is a single tree. Returns None when the predicate
    accepts no node at all.
    """
    builder = BuildingVisitor()
    if predicate is None:
        root.accept(builder)
        return builder.dependency_tree
    keep = _KeepRoot(root, predicate)
    root.accept(FilteringVisitor(builder, keep))
    return builder.dependency_tree if keep.matched else None


def _resolve_tokens(tokens: TokenSet | str) -> TokenSet:
    return TokenSet.named(tokens) if isinstance(tokens, str) else tokens


def write_tree(
    root: DependencyNode,
    sink: TextSink,
    *,
    tokens: TokenSet | str = "ascii",
    predicate: NodePredicate | None = None,
    formatter: Callable[[DependencyNode], str] | None = None,
) -> None:
    """
    Write the tree diagram to sink, one line per node.

    With a predicate, a filtered copy is built first (see copy_tree) and the
    diagram is drawn from the finished copy, so connectors match the visible
    nodes. Nothing is written when the predicate accepts no node.
    """
    serializer = SerializingVisitor(sink, _resolve_tokens(tokens), formatter)
    if predicate is None:
        root.accept(serializer)
        return
    keep = _KeepRoot(root, predicate)
    # The copy is complete before the serializer runs, so keep.matched is final.
    serializer_if_matched = FilteringVisitor(serializer, lambda node: keep.matched)
    root.accept(FilteringVisitor(BuildingVisitor(serializer_if_matched), keep))


def render_tree(
    root: DependencyNode,
    *,
    tokens: TokenSet | str = "ascii",
    predicate: NodePredicate | None = None,
    formatter: Callable[[DependencyNode], str] | None = None,
) -> str:
    """Return the tree diagram as a string (see write_tree)."""
    buffer = StringIO()
    write_tree(root, buffer, tokens=tokens, predicate=predicate, formatter=formatter)
    return buffer.getvalue()


def tree_stats(node: DependencyNode) -> tuple[int, int, int]:
    """Return (direct_children, total_descendants, max_depth) for a node."""
    nodes = collect_nodes(node)
    base = node.depth
    max_depth = max(n.depth for n in nodes) - base
    return len(node.children), len(nodes) - 1, max_depth

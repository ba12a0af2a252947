"""Textual TUI for browsing a resolved dependency tree."""

from __future__ import annotations

import sys
from typing import Any

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, Input, Static, Tree
from textual.widgets.tree import TreeNode

from deptree.api import tree_stats
from deptree.core.errors import DependencyTreeError
from deptree.core.loader import load_tree
from deptree.core.node import DependencyNode, NodeState
from deptree.traversal.filtering import FilteringVisitor, NodePredicate
from deptree.traversal.filters import ArtifactFilter, StateFilter
from deptree.traversal.visitor import DependencyNodeVisitor

# Limits to avoid huge trees
MAX_TREE_DEPTH = 12
MAX_TREE_NODES = 2000
EXPAND_DEPTH_DEFAULT = 2

COLOR_HEADER = "bold magenta"
COLOR_PKG = "white"
COLOR_OMITTED = "dim"
COLOR_CONFLICT = "yellow"
COLOR_STATS = "cyan"

STATE_LABELS = {
    NodeState.INCLUDED: "included",
    NodeState.OMITTED_FOR_DUPLICATE: "omitted (duplicate)",
    NodeState.OMITTED_FOR_CONFLICT: "omitted (conflict)",
    NodeState.OMITTED_FOR_CYCLE: "omitted (cycle)",
}


def _node_label(node: DependencyNode) -> str:
    """Markup label for one tree row."""
    artifact = node.artifact
    text = f"{escape(artifact.group_id)}:[{COLOR_PKG}]{escape(artifact.artifact_id)}[/] [dim]{escape(artifact.version)}[/]"
    if artifact.scope:
        text += f" [dim]({escape(artifact.scope)})[/]"
    if node.state is NodeState.OMITTED_FOR_CONFLICT:
        return f"[{COLOR_CONFLICT}]{text} ✗ {escape(node.related_artifact.version)}[/]"
    if node.state is not NodeState.INCLUDED:
        return f"[{COLOR_OMITTED}]{text} ({STATE_LABELS[node.state]})[/]"
    return text


class TextualTreeBuilder(DependencyNodeVisitor):
    """
    Mirror the visited nodes into a textual Tree, starting at a given TreeNode.

    Prunes below ``max_depth`` and stops adding rows after ``max_nodes``,
    leaving a marker leaf in both cases.
    """

    def __init__(
        self,
        root: TreeNode,
        *,
        max_depth: int = MAX_TREE_DEPTH,
        max_nodes: int = MAX_TREE_NODES,
    ) -> None:
        self.root = root
        self.max_depth = max_depth
        self.max_nodes = max_nodes
        self.count = 0
        self.truncated = False
        # One entry per open visit; None for nodes that got no row.
        self._stack: list[TreeNode | None] = []

    def visit(self, node: DependencyNode) -> bool:
        if not self._stack:
            self.root.set_label(_node_label(node))
            self.root.data = node
            self.count += 1
            self._stack.append(self.root)
            return True
        parent = self._stack[-1]
        if self.count >= self.max_nodes:
            if not self.truncated:
                self.truncated = True
                parent.add_leaf(f"[dim]… truncated ({self.max_nodes} nodes max)[/]")
            self._stack.append(None)
            return False
        if len(self._stack) > self.max_depth:
            parent.add_leaf(f"[dim]{escape(node.artifact.artifact_id)} …[/]")
            self._stack.append(None)
            return False
        self.count += 1
        if node.children:
            tn = parent.add(_node_label(node), data=node, expand=False)
        else:
            tn = parent.add_leaf(_node_label(node), data=node)
        self._stack.append(tn)
        return True

    def end_visit(self, node: DependencyNode) -> bool:
        self._stack.pop()
        # Once truncated, skip the remaining siblings at every level.
        return not self.truncated


def _expand_to_depth(tn: TreeNode, depth: int, current: int = 0) -> None:
    """Expand tree nodes up to given depth (0 = root only)."""
    if current >= depth:
        return
    tn.expand()
    for child in tn.children:
        _expand_to_depth(child, depth, current + 1)


def _format_node(node: DependencyNode) -> str:
    """Details panel text for one node."""
    direct, total_desc, max_depth = tree_stats(node)
    lines = [
        f"[{COLOR_HEADER}]Artifact[/]",
        f"  [{COLOR_PKG}]{escape(str(node.artifact))}[/]",
        "",
        f"[{COLOR_HEADER}]Resolution[/]",
        f"  {STATE_LABELS[node.state]}",
    ]
    if node.related_artifact is not None:
        lines.append(f"  related: {escape(str(node.related_artifact))}")
    notes = node.to_node_string()
    if notes != str(node.artifact):
        lines.append(f"  [dim]{escape(notes)}[/]")
    lines += [
        "",
        f"[{COLOR_HEADER}]Stats[/]",
        f"  Direct dependencies:   [{COLOR_STATS}]{direct}[/]",
        f"  Total descendants:     [{COLOR_STATS}]{total_desc}[/] [dim](transitive)[/]",
        f"  Max depth from here:   [{COLOR_STATS}]{max_depth}[/] [dim]levels[/]",
    ]
    return "\n".join(lines)


SEARCH_HELP = (
    "[bold cyan]Find artifacts[/]\n\n"
    "  [bold]core[/]              part of the coordinates\n"
    "  [bold]org.example:*[/]     coordinate glob\n"
    "  [bold]state:conflict[/]    resolution state (included, duplicate, conflict, cycle, omitted)\n"
    "  [bold]scope:test[/]        dependency scope"
)


def search_predicate(query: str) -> NodePredicate:
    """
    Turn a search query into a node predicate.

    Raises ValueError for an unknown ``state:`` value or an empty query.
    """
    query = query.strip()
    if not query:
        raise ValueError("Empty search")
    key, sep, value = query.partition(":")
    key, value = key.strip().lower(), value.strip().lower()

    if sep and key == "state":
        if value == "omitted":
            states = [s for s in NodeState if s is not NodeState.INCLUDED]
        else:
            states = [s for s in NodeState if value in (s.value, s.value.removeprefix("omitted-"))]
        if not states:
            raise ValueError(
                f"Unknown state {value!r}; use included, duplicate, conflict, cycle or omitted"
            )
        return StateFilter(*states)
    if sep and key == "scope":
        return lambda node: (node.artifact.scope or "").lower() == value
    if any(c in query for c in "*?["):
        return ArtifactFilter([query])
    needle = query.lower()
    return lambda node: needle in str(node.artifact).lower()


def find_matches(root: TreeNode, predicate: NodePredicate) -> list[TreeNode]:
    """Tree rows, in display order, whose dependency node satisfies predicate."""
    matches = []
    stack = [root]
    while stack:
        tn = stack.pop()
        if isinstance(tn.data, DependencyNode) and predicate(tn.data):
            matches.append(tn)
        stack.extend(reversed(tn.children))
    return matches


class SearchScreen(ModalScreen[str | None]):
    """Ask for a search query; invalid queries keep the screen open with the error shown."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    DEFAULT_CSS = """
    SearchScreen {
        align: center top;
    }
    SearchScreen > Vertical {
        width: 80;
        height: auto;
        margin-top: 3;
        padding: 1 2;
        border: round $accent;
        background: $panel;
    }
    SearchScreen #search_error {
        color: $error;
        height: auto;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(SEARCH_HELP, markup=True)
            yield Input(placeholder="state:conflict", id="search_input")
            yield Static("", id="search_error")

    def on_mount(self) -> None:
        self.query_one("#search_input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        try:
            search_predicate(event.value)
        except ValueError as e:
            self.query_one("#search_error", Static).update(escape(str(e)))
            return
        self.dismiss(event.value.strip())

    def action_cancel(self) -> None:
        self.dismiss(None)


class DepTreeApp(App[None]):
    """Terminal UI to explore a resolved dependency tree."""

    TITLE = "deptree"
    BINDINGS = [
        Binding("/", "search", "Search"),
        Binding("n", "next_match", "Next match", show=False),
        Binding("N", "prev_match", "Prev match", show=False),
        Binding("o", "toggle_omitted", "Omitted"),
        Binding("d", "toggle_details", "Details"),
        Binding("e", "expand_all", "Expand all"),
        Binding("c", "collapse_all", "Collapse"),
        Binding("q", "quit", "Quit"),
    ]

    DEFAULT_CSS = """
    #details {
        padding: 1 2;
        border: solid $primary;
        height: auto;
        min-height: 8;
    }
    """

    def __init__(self, root_node: DependencyNode, source: str | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._root_node = root_node
        self._source = source
        self._hide_omitted = False
        self._search_matches: list[TreeNode] = []
        self._search_index: int = 0
        self._details_visible: bool = True

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        yield Tree("Dependencies", id="dep_tree")
        yield Static(
            "[dim]↑/↓[/] move  ·  [dim]Enter[/]/[dim]Space[/] select  ·  [dim]o[/] = hide omitted",
            id="details",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = self._source or "Dependency Tree Explorer"
        self._populate()

    def _populate(self) -> None:
        tree = self.query_one("#dep_tree", Tree)
        tree.clear()
        builder = TextualTreeBuilder(tree.root)
        if self._hide_omitted:
            self._root_node.accept(FilteringVisitor(builder, StateFilter(NodeState.INCLUDED)))
        else:
            self._root_node.accept(builder)
        _expand_to_depth(tree.root, EXPAND_DEPTH_DEFAULT)
        self._search_matches = []
        self._set_details(_format_node(self._root_node))
        tree.focus()

    def _set_details(self, text: str) -> None:
        self.query_one("#details", Static).update(text)

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        node = event.node.data
        if isinstance(node, DependencyNode):
            self._set_details(_format_node(node))

    def action_toggle_omitted(self) -> None:
        self._hide_omitted = not self._hide_omitted
        self._populate()
        self.notify(
            "Hiding omitted nodes" if self._hide_omitted else "Showing all nodes",
            severity="information",
            timeout=2,
        )

    def action_expand_all(self) -> None:
        self.query_one("#dep_tree", Tree).root.expand_all()

    def action_collapse_all(self) -> None:
        root = self.query_one("#dep_tree", Tree).root
        root.collapse_all()
        root.expand()

    def action_search(self) -> None:
        self.push_screen(SearchScreen(), self._on_search_done)

    def _on_search_done(self, query: str | None) -> None:
        if not query:
            return
        self._search_matches = []
        self._search_index = 0
        tree = self.query_one("#dep_tree", Tree)
        self._search_matches = find_matches(tree.root, search_predicate(query))

        if not self._search_matches:
            self.notify(f"No matches for '{query}'", severity="warning", timeout=2)
            return
        self.notify(
            f"Found {len(self._search_matches)} match(es) for '{query}'",
            severity="information",
            timeout=2,
        )
        self._goto_match(0)

    def _goto_match(self, index: int) -> None:
        if not self._search_matches:
            return
        self._search_index = index % len(self._search_matches)
        match_node = self._search_matches[self._search_index]

        parent = match_node.parent
        while parent is not None:
            parent.expand()
            parent = parent.parent

        tree = self.query_one("#dep_tree", Tree)
        tree.select_node(match_node)
        tree.scroll_to_node(match_node)
        self.notify(
            f"Match {self._search_index + 1}/{len(self._search_matches)}: {match_node.data.artifact}",
            severity="information",
            timeout=2,
        )

    def action_next_match(self) -> None:
        if not self._search_matches:
            self.notify("No active search. Press / to search.", severity="information", timeout=2)
            return
        self._goto_match(self._search_index + 1)

    def action_prev_match(self) -> None:
        if not self._search_matches:
            self.notify("No active search. Press / to search.", severity="information", timeout=2)
            return
        self._goto_match(self._search_index - 1)

    def action_toggle_details(self) -> None:
        self._details_visible = not self._details_visible
        details = self.query_one("#details", Static)
        details.styles.display = "block" if self._details_visible else "none"

    def action_quit(self) -> None:
        self.exit()


def main() -> int:
    """Entry point for the deptree TUI: ``deptree-tui FILE``."""
    if len(sys.argv) < 2:
        print("usage: deptree-tui FILE", file=sys.stderr)
        return 1
    path = sys.argv[1].strip()
    try:
        root = load_tree(path)
    except (OSError, DependencyTreeError) as e:
        print(f"Cannot load {path}: {e}", file=sys.stderr)
        return 1
    DepTreeApp(root_node=root, source=path).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())

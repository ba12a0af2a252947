"""Render a dependency tree as an indented text diagram."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from deptree.traversal.visitor import DependencyNodeVisitor

if TYPE_CHECKING:
    from deptree.core.node import DependencyNode


class TextSink(Protocol):
    def write(self, text: str, /) -> object: ...


@dataclass(frozen=True)
class TokenSet:
    """The four glyph strings used to draw branches and vertical bars."""

    node_connector: str
    last_node_connector: str
    fill_connector: str
    last_fill_connector: str

    @classmethod
    def named(cls, name: str) -> TokenSet:
        """Look up a built-in token set by name (plain, ascii, extended), case-insensitively."""
        try:
            return TOKEN_SETS[name.strip().lower()]
        except KeyError:
            raise ValueError(
                f"Unknown token style {name!r}; expected one of: {', '.join(TOKEN_SETS)}"
            ) from None


PLAIN = TokenSet("   ", "   ", "   ", "   ")
ASCII = TokenSet("+- ", "\\- ", "|  ", "   ")
EXTENDED = TokenSet("├─ ", "└─ ", "│  ", "   ")

TOKEN_SETS: dict[str, TokenSet] = {
    "plain": PLAIN,
    "ascii": ASCII,
    "extended": EXTENDED,
}


def _node_label(node: DependencyNode) -> str:
    return node.to_node_string()


class SerializingVisitor(DependencyNodeVisitor):
    """
    Write one line per visited node, indented with connector and fill tokens.

    Sibling position is tracked from the visit/end_visit stream itself: each
    open level keeps a frame ``[children still to come, node was last]``.
    A node is last when its parent's counter reaches zero on arrival, and the
    fill drawn for an ancestor level depends on whether that ancestor was
    last. Parent links are never followed.

    Meant to see every node of the tree it renders. To render a filtered
    view, build a filtered copy first (see ``deptree.api.render_tree``).
    """

    def __init__(
        self,
        sink: TextSink,
        tokens: TokenSet = ASCII,
        formatter: Callable[[DependencyNode], str] | None = None,
    ) -> None:
        self.sink = sink
        self.tokens = tokens
        self.formatter = formatter or _node_label
        self._frames: list[list] = []

    @property
    def depth(self) -> int:
        return len(self._frames)

    def visit(self, node: DependencyNode) -> bool:
        if self._frames:
            parent_frame = self._frames[-1]
            parent_frame[0] -= 1
            last = parent_frame[0] <= 0
        else:
            last = True

        indent = []
        # frames[0] is the root, which draws no fill.
        for _, ancestor_last in self._frames[1:]:
            indent.append(
                self.tokens.last_fill_connector if ancestor_last else self.tokens.fill_connector
            )
        if self._frames:
            indent.append(self.tokens.last_node_connector if last else self.tokens.node_connector)

        self.sink.write("".join(indent) + self.formatter(node) + "\n")
        self._frames.append([len(node.children), last])
        return True

    def end_visit(self, node: DependencyNode) -> bool:
        self._frames.pop()
        return True

    def reset(self) -> None:
        self._frames.clear()

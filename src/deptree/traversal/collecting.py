"""Flatten a dependency tree into a pre-order list of nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from deptree.traversal.visitor import DependencyNodeVisitor

if TYPE_CHECKING:
    from deptree.core.node import DependencyNode


class CollectingVisitor(DependencyNodeVisitor):
    """Records every visited node; never prunes."""

    def __init__(self) -> None:
        self._nodes: list[DependencyNode] = []

    def visit(self, node: DependencyNode) -> bool:
        self._nodes.append(node)
        return True

    def end_visit(self, node: DependencyNode) -> bool:
        return True

    @property
    def nodes(self) -> tuple[DependencyNode, ...]:
        """Visited nodes in pre-order (parents before descendants, siblings in order)."""
        return tuple(self._nodes)

    def reset(self) -> None:
        self._nodes.clear()

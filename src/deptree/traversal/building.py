"""Clone visited nodes into a new tree, then optionally hand it to another visitor."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from deptree.traversal.visitor import DependencyNodeVisitor

if TYPE_CHECKING:
    from deptree.core.node import DependencyNode

logger = logging.getLogger(__name__)


class BuildingVisitor(DependencyNodeVisitor):
    """
    Build an independent copy of every node it is shown.

    Wrapped in a FilteringVisitor, the copy keeps only accepted nodes; an
    accepted node is attached to its nearest accepted ancestor. The
    downstream visitor, if any, runs over a copy once that copy is finished.
    It never sees a partially built tree.

    The walk's root must be accepted for the copy to be one tree. If it is
    rejected, every accepted top-level subtree is built as a separate copy:
    each replaces the previous one as dependency_tree (with a warning) and
    the downstream visitor runs once per copy. deptree.api.copy_tree keeps
    the root for this reason.
    """

    def __init__(self, visitor: DependencyNodeVisitor | None = None) -> None:
        self.visitor = visitor
        self._parents: list[DependencyNode] = []
        self._root: DependencyNode | None = None

    def visit(self, node: DependencyNode) -> bool:
        new_node = node.copy()
        if self._parents:
            self._parents[-1].add_child(new_node)
        else:
            if self._root is not None:
                logger.warning(
                    "Replacing built root %s with %s; the predicate rejected their common ancestor",
                    self._root.artifact,
                    new_node.artifact,
                )
            self._root = new_node
        self._parents.append(new_node)
        return True

    def end_visit(self, node: DependencyNode) -> bool:
        self._parents.pop()
        if not self._parents and self.visitor is not None:
            logger.debug("Tree copy of %s complete, running %s", node.artifact, type(self.visitor).__name__)
            self._root.accept(self.visitor)
        return True

    @property
    def dependency_tree(self) -> DependencyNode | None:
        """Root of the copy, or None if no node was accepted."""
        return self._root

    def reset(self) -> None:
        self._parents.clear()
        self._root = None

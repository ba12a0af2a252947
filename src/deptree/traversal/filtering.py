"""Delegate to another visitor only for nodes accepted by a predicate."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from deptree.core.errors import PredicateError
from deptree.traversal.visitor import DependencyNodeVisitor

if TYPE_CHECKING:
    from deptree.core.node import DependencyNode

NodePredicate = Callable[["DependencyNode"], bool]


class FilteringVisitor(DependencyNodeVisitor):
    """
    Visitor decorator that selects which nodes reach the inner visitor.

    A rejected node is hidden from the inner visitor but its subtree is
    still walked: descendants may be accepted. Only the inner visitor's own
    False results prune. A predicate that raises aborts the walk with
    PredicateError.
    """

    def __init__(self, visitor: DependencyNodeVisitor, predicate: NodePredicate) -> None:
        self.visitor = visitor
        self.predicate = predicate

    def _accepts(self, node: DependencyNode) -> bool:
        try:
            return bool(self.predicate(node))
        except Exception as e:
            raise PredicateError(node, e) from e

    def visit(self, node: DependencyNode) -> bool:
        if self._accepts(node):
            return self.visitor.visit(node)
        return True

    def end_visit(self, node: DependencyNode) -> bool:
        if self._accepts(node):
            return self.visitor.end_visit(node)
        return True

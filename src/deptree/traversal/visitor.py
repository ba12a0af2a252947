"""Visitor protocol for dependency trees and the pre-order walk that drives it."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from deptree.core.node import DependencyNode


class DependencyNodeVisitor(ABC):
    """
    Receives each node of a tree twice: on arrival and after its children.

    The boolean results steer the walk:

    - ``visit`` returning False skips the node's children entirely.
    - ``end_visit`` returning False skips the node's remaining siblings;
      the walk resumes at the parent level.

    Visitors keep per-traversal state; use a fresh instance (or ``reset()``
    where offered) for every traversal.
    """

    @abstractmethod
    def visit(self, node: DependencyNode) -> bool:
        """Called before the node's children; True to descend into them."""

    @abstractmethod
    def end_visit(self, node: DependencyNode) -> bool:
        """Called after the node's children; True to continue with the next sibling."""


def traverse(root: DependencyNode, visitor: DependencyNodeVisitor) -> bool:
    """
    Walk the subtree under root in pre-order and return ``visitor.end_visit(root)``.

    Uses an explicit stack of (node, remaining children) frames, so tree depth
    is not limited by the interpreter recursion limit.
    """
    no_children: Iterator[DependencyNode] = iter(())
    stack: list[tuple[DependencyNode, Iterator[DependencyNode]]] = []
    node = root
    while True:
        descend = visitor.visit(node)
        stack.append((node, iter(node.children) if descend else no_children))

        while True:
            current, remaining = stack[-1]
            child = next(remaining, None)
            if child is not None:
                node = child
                break
            stack.pop()
            result = visitor.end_visit(current)
            if not stack:
                return result
            if not result:
                # Skip the rest of current's siblings.
                parent, _ = stack[-1]
                stack[-1] = (parent, no_children)

"""Exceptions raised while building, loading and traversing dependency trees."""

from __future__ import annotations

from typing import Any


class DependencyTreeError(Exception):
    """Base class for all deptree errors."""


class StructureError(DependencyTreeError):
    """A node's parent does not list the node among its children."""


class NodeStateError(DependencyTreeError):
    """A resolution state transition is not allowed from the node's current state."""


class TreeFormatError(DependencyTreeError, ValueError):
    """Malformed serialized tree or artifact coordinates."""

    def __init__(self, message: str, location: str = "") -> None:
        self.location = location
        super().__init__(f"{location}: {message}" if location else message)


class PredicateError(DependencyTreeError):
    """A node predicate raised instead of answering; aborts the traversal."""

    def __init__(self, node: Any, cause: BaseException) -> None:
        self.node = node
        label = getattr(node, "artifact", node)
        super().__init__(f"Predicate failed on node {label}: {cause!r}")

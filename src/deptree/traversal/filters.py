"""Ready-made node predicates for FilteringVisitor."""

from __future__ import annotations

from collections.abc import Iterable
from fnmatch import fnmatchcase
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from deptree.core.node import DependencyNode, NodeState
    from deptree.traversal.filtering import NodePredicate


class StateFilter:
    """Accept nodes whose resolution state is one of the given states."""

    def __init__(self, *states: NodeState) -> None:
        self.states = frozenset(states)

    def __call__(self, node: DependencyNode) -> bool:
        return node.state in self.states

    def __repr__(self) -> str:
        names = sorted(s.name for s in self.states)
        return f"StateFilter({', '.join(names)})"


class ArtifactFilter:
    """
    Accept nodes whose artifact matches any of the glob patterns.

    A pattern is matched against ``group:artifact``, the conflict id and the
    full coordinates, so ``org.example:*`` and ``*:core:jar:*`` both work.
    """

    def __init__(self, patterns: Iterable[str]) -> None:
        self.patterns = tuple(patterns)

    def __call__(self, node: DependencyNode) -> bool:
        artifact = node.artifact
        candidates = (
            f"{artifact.group_id}:{artifact.artifact_id}",
            artifact.conflict_id,
            str(artifact),
        )
        return any(fnmatchcase(c, p) for p in self.patterns for c in candidates)

    def __repr__(self) -> str:
        return f"ArtifactFilter({list(self.patterns)!r})"


class AndFilter:
    """Accept nodes accepted by every filter; an empty AndFilter accepts everything."""

    def __init__(self, filters: Iterable[NodePredicate]) -> None:
        self.filters = tuple(filters)

    def __call__(self, node: DependencyNode) -> bool:
        return all(f(node) for f in self.filters)


class AncestorOrSelfFilter:
    """Accept the given nodes and every ancestor of them (compared by identity)."""

    def __init__(self, descendants: Iterable[DependencyNode]) -> None:
        self.descendants = tuple(descendants)

    def __call__(self, node: DependencyNode) -> bool:
        for descendant in self.descendants:
            current = descendant
            while current is not None:
                if current is node:
                    return True
                current = current.parent
        return False

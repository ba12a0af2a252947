"""Shared fixtures: small dependency trees and a recording visitor."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from deptree.core.node import Artifact, DependencyNode
from deptree.traversal.visitor import DependencyNodeVisitor


def _make_node(name: str, *children: DependencyNode, **kwargs) -> DependencyNode:
    version = kwargs.pop("version", "1.0")
    return DependencyNode(
        artifact=Artifact("org.example", name, version),
        children=list(children),
        **kwargs,
    )


@pytest.fixture
def make_node() -> Callable[..., DependencyNode]:
    """Factory: make_node("a", child1, child2, state=...) with group org.example, version 1.0."""
    return _make_node


@pytest.fixture
def sample_tree() -> DependencyNode:
    """R -> A -> [A1, A2], R -> B."""
    return _make_node(
        "R",
        _make_node("A", _make_node("A1"), _make_node("A2")),
        _make_node("B"),
    )


@pytest.fixture
def name_of() -> Callable[[DependencyNode], str]:
    """Label formatter that prints only the artifact id."""
    return lambda node: node.artifact.artifact_id


class RecordingVisitor(DependencyNodeVisitor):
    """Records the visit/end_visit stream; prunes on request by artifact id."""

    def __init__(self, skip_children: set[str] = frozenset(), stop_siblings: set[str] = frozenset()):
        self.events: list[tuple[str, str]] = []
        self.skip_children = set(skip_children)
        self.stop_siblings = set(stop_siblings)

    def visit(self, node: DependencyNode) -> bool:
        self.events.append(("visit", node.artifact.artifact_id))
        return node.artifact.artifact_id not in self.skip_children

    def end_visit(self, node: DependencyNode) -> bool:
        self.events.append(("end", node.artifact.artifact_id))
        return node.artifact.artifact_id not in self.stop_siblings

    @property
    def visited(self) -> list[str]:
        return [name for kind, name in self.events if kind == "visit"]


@pytest.fixture
def recorder() -> type[RecordingVisitor]:
    return RecordingVisitor

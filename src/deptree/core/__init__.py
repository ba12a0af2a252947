"""Core library: artifacts, dependency tree nodes, errors, JSON loading."""

from deptree.core.errors import (
    DependencyTreeError,
    NodeStateError,
    PredicateError,
    StructureError,
    TreeFormatError,
)
from deptree.core.node import Artifact, DependencyNode, NodeState
from deptree.core.loader import dumps_tree, load_tree, loads_tree

__all__ = [
    "Artifact",
    "DependencyNode",
    "NodeState",
    "DependencyTreeError",
    "NodeStateError",
    "PredicateError",
    "StructureError",
    "TreeFormatError",
    "dumps_tree",
    "load_tree",
    "loads_tree",
]

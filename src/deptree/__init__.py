"""deptree: traverse, filter, copy and render resolved dependency trees (library, CLI, TUI)."""

from importlib.metadata import version, PackageNotFoundError

from deptree.api import (
    collect_nodes,
    copy_tree,
    load_tree,
    render_tree,
    tree_stats,
    write_tree,
)
from deptree.core import Artifact, DependencyNode, NodeState

__all__ = [
    "Artifact",
    "DependencyNode",
    "NodeState",
    "collect_nodes",
    "copy_tree",
    "load_tree",
    "render_tree",
    "tree_stats",
    "write_tree",
    "__version__",
]

try:
    __version__ = version("deptree")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed as package

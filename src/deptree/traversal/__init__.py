"""Tree traversal: visitor protocol, collecting/filtering/building/serializing visitors, predicates."""

from deptree.traversal.visitor import DependencyNodeVisitor, traverse
from deptree.traversal.collecting import CollectingVisitor
from deptree.traversal.filtering import FilteringVisitor, NodePredicate
from deptree.traversal.building import BuildingVisitor
from deptree.traversal.serializing import (
    ASCII,
    EXTENDED,
    PLAIN,
    TOKEN_SETS,
    SerializingVisitor,
    TokenSet,
)
from deptree.traversal.filters import (
    AncestorOrSelfFilter,
    AndFilter,
    ArtifactFilter,
    StateFilter,
)

__all__ = [
    "DependencyNodeVisitor",
    "traverse",
    "CollectingVisitor",
    "FilteringVisitor",
    "NodePredicate",
    "BuildingVisitor",
    "SerializingVisitor",
    "TokenSet",
    "PLAIN",
    "ASCII",
    "EXTENDED",
    "TOKEN_SETS",
    "AncestorOrSelfFilter",
    "AndFilter",
    "ArtifactFilter",
    "StateFilter",
]

"""Represent resolved dependency trees: artifacts, resolution states and tree nodes."""

from __future__ import annotations

import enum
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from io import StringIO
from typing import Any

from deptree.core.errors import NodeStateError, StructureError, TreeFormatError
from deptree.traversal.visitor import DependencyNodeVisitor, traverse


@dataclass(frozen=True)
class Artifact:
    """Coordinates of one artifact, as handed over by the resolver."""

    group_id: str
    artifact_id: str
    version: str
    type: str = "jar"
    classifier: str | None = None
    scope: str | None = None

    @property
    def conflict_id(self) -> str:
        """Identity used to detect two versions of the same artifact."""
        parts = [self.group_id, self.artifact_id, self.type]
        if self.classifier:
            parts.append(self.classifier)
        return ":".join(parts)

    def __str__(self) -> str:
        text = f"{self.conflict_id}:{self.version}"
        if self.scope:
            text += f":{self.scope}"
        return text

    @classmethod
    def parse(cls, coords: str) -> Artifact:
        """
        Parse ``g:a:v``, ``g:a:t:v``, ``g:a:t:v:s`` or ``g:a:t:c:v:s`` coordinates.

        The six-part form is what ``str()`` produces for classified artifacts.
        """
        parts = coords.strip().split(":")
        if any(not p for p in parts):
            raise TreeFormatError(f"empty coordinate in {coords!r}")
        if len(parts) == 3:
            g, a, v = parts
            return cls(g, a, v)
        if len(parts) == 4:
            g, a, t, v = parts
            return cls(g, a, v, type=t)
        if len(parts) == 5:
            g, a, t, v, s = parts
            return cls(g, a, v, type=t, scope=s)
        if len(parts) == 6:
            g, a, t, c, v, s = parts
            return cls(g, a, v, type=t, classifier=c, scope=s)
        raise TreeFormatError(f"expected 3 to 6 colon-separated coordinates, got {coords!r}")

    def to_dict(self) -> dict:
        return {
            "group_id": self.group_id,
            "artifact_id": self.artifact_id,
            "version": self.version,
            "type": self.type,
            "classifier": self.classifier,
            "scope": self.scope,
        }

    @classmethod
    def from_dict(cls, data: Any, location: str = "artifact") -> Artifact:
        """Build an Artifact from a coordinate string or a to_dict() mapping."""
        if isinstance(data, str):
            try:
                return cls.parse(data)
            except TreeFormatError as e:
                raise TreeFormatError(str(e), location) from e
        if not isinstance(data, Mapping):
            raise TreeFormatError("expected coordinates string or object", location)
        missing = [k for k in ("group_id", "artifact_id", "version") if not data.get(k)]
        if missing:
            raise TreeFormatError(f"missing {', '.join(missing)}", location)
        return cls(
            group_id=str(data["group_id"]),
            artifact_id=str(data["artifact_id"]),
            version=str(data["version"]),
            type=str(data.get("type") or "jar"),
            classifier=data.get("classifier") or None,
            scope=data.get("scope") or None,
        )


class NodeState(enum.Enum):
    """Resolution outcome of a node, decided by the resolver."""

    INCLUDED = "included"
    OMITTED_FOR_DUPLICATE = "omitted-duplicate"
    OMITTED_FOR_CONFLICT = "omitted-conflict"
    OMITTED_FOR_CYCLE = "omitted-cycle"

    @property
    def requires_related_artifact(self) -> bool:
        return self in (NodeState.OMITTED_FOR_DUPLICATE, NodeState.OMITTED_FOR_CONFLICT)


# Optional string overrides copied verbatim between trees, in label order.
_OVERRIDE_LABELS = (
    ("premanaged_version", "version managed from "),
    ("premanaged_scope", "scope managed from "),
    ("original_scope", "scope updated from "),
    ("failed_update_scope", "scope not updated to "),
)


@dataclass(eq=False)
class DependencyNode:
    """A node in the dependency tree: one artifact, its resolution state and its children."""

    artifact: Artifact
    state: NodeState = NodeState.INCLUDED
    related_artifact: Artifact | None = None
    original_scope: str | None = None
    premanaged_scope: str | None = None
    premanaged_version: str | None = None
    failed_update_scope: str | None = None
    version_selected_from_range: str | None = None
    available_versions: tuple[str, ...] | None = None
    children: list[DependencyNode] = field(default_factory=list, repr=False)
    # Non-owning back-reference; None for the root.
    parent: DependencyNode | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.state.requires_related_artifact and self.related_artifact is None:
            raise ValueError(
                "Related artifact is required for states OMITTED_FOR_DUPLICATE and OMITTED_FOR_CONFLICT"
            )
        if not self.state.requires_related_artifact and self.related_artifact is not None:
            raise ValueError(
                "Related artifact is only allowed for states OMITTED_FOR_DUPLICATE and OMITTED_FOR_CONFLICT"
            )
        if self.available_versions is not None:
            self.available_versions = tuple(self.available_versions)
        children, self.children = self.children, []
        for child in children:
            self.add_child(child)

    # -- structure ---------------------------------------------------------

    def add_child(self, child: DependencyNode) -> None:
        """Append child as the last child of this node."""
        if child.parent is not None:
            raise StructureError(f"{child.artifact} already has parent {child.parent.artifact}")
        self.children.append(child)
        child.parent = self

    def remove_child(self, child: DependencyNode) -> None:
        for i, c in enumerate(self.children):
            if c is child:
                del self.children[i]
                child.parent = None
                return
        raise StructureError(f"{child.artifact} is not a child of {self.artifact}")

    def _detach_children(self) -> None:
        for child in self.children:
            child.parent = None
        self.children.clear()

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def depth(self) -> int:
        """Number of parent links between this node and the root."""
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    @property
    def is_last(self) -> bool:
        """True for the root, else whether this node is its parent's final child."""
        if self.parent is None:
            return True
        siblings = self.parent.children
        if not any(c is self for c in siblings):
            raise StructureError(
                f"{self.artifact} names {self.parent.artifact} as parent but is not among its children"
            )
        return siblings[-1] is self

    # -- comparison --------------------------------------------------------

    def _payload(self) -> tuple:
        return (
            self.artifact,
            self.state,
            self.related_artifact,
            self.original_scope,
            self.premanaged_scope,
            self.premanaged_version,
            self.failed_update_scope,
            self.version_selected_from_range,
            self.available_versions,
        )

    def __eq__(self, other: object) -> bool:
        """Structural equality: same payloads and same child shapes, parents ignored."""
        if not isinstance(other, DependencyNode):
            return NotImplemented
        pairs = [(self, other)]
        while pairs:
            a, b = pairs.pop()
            if a is b:
                continue
            if len(a.children) != len(b.children) or a._payload() != b._payload():
                return False
            pairs.extend(zip(a.children, b.children))
        return True

    def __hash__(self) -> int:
        # Children count only, so hashing stays shallow.
        return hash((self._payload(), len(self.children)))

    # -- resolution state --------------------------------------------------

    def omit_for_conflict(self, related_artifact: Artifact) -> None:
        """Mark this node as losing to related_artifact; duplicate when versions match."""
        if self.state is not NodeState.INCLUDED:
            raise NodeStateError("Only INCLUDED dependency nodes can be omitted for conflict")
        if related_artifact is None:
            raise ValueError("Related artifact cannot be None")
        if related_artifact.conflict_id != self.artifact.conflict_id:
            raise ValueError("Related artifact has a different dependency conflict id")
        self.related_artifact = related_artifact
        if self.artifact.version == related_artifact.version:
            self.state = NodeState.OMITTED_FOR_DUPLICATE
        else:
            self.state = NodeState.OMITTED_FOR_CONFLICT
        self._detach_children()

    def omit_for_cycle(self) -> None:
        if self.state is not NodeState.INCLUDED:
            raise NodeStateError("Only INCLUDED dependency nodes can be omitted for cycle")
        self.state = NodeState.OMITTED_FOR_CYCLE
        self._detach_children()

    # -- traversal ---------------------------------------------------------

    def accept(self, visitor: DependencyNodeVisitor) -> bool:
        """Walk this subtree in pre-order with visitor; returns visitor.end_visit(self)."""
        return traverse(self, visitor)

    def preorder(self) -> Iterator[DependencyNode]:
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def postorder(self) -> Iterator[DependencyNode]:
        """Children before parents, siblings in order."""
        stack: list[tuple[DependencyNode, bool]] = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            if expanded:
                yield node
                continue
            stack.append((node, True))
            stack.extend((c, False) for c in reversed(node.children))

    # -- copying and serialization ----------------------------------------

    def copy(self) -> DependencyNode:
        """Copy the payload field by field; the copy has no parent and no children."""
        return DependencyNode(
            artifact=replace(self.artifact),
            state=self.state,
            related_artifact=replace(self.related_artifact) if self.related_artifact else None,
            original_scope=self.original_scope,
            premanaged_scope=self.premanaged_scope,
            premanaged_version=self.premanaged_version,
            failed_update_scope=self.failed_update_scope,
            version_selected_from_range=self.version_selected_from_range,
            available_versions=(
                tuple(self.available_versions) if self.available_versions is not None else None
            ),
        )

    def to_node_string(self) -> str:
        """One-line label: artifact plus management and omission notes."""
        items = []
        for attr, text in _OVERRIDE_LABELS:
            value = getattr(self, attr)
            if value is not None:
                items.append(text + value)
        if self.version_selected_from_range is not None:
            items.append("version selected from range " + self.version_selected_from_range)
            versions = ", ".join(self.available_versions or ())
            items.append(f"available versions [{versions}]")
        if self.state is NodeState.OMITTED_FOR_DUPLICATE:
            items.append("omitted for duplicate")
        elif self.state is NodeState.OMITTED_FOR_CONFLICT:
            items.append("omitted for conflict with " + self.related_artifact.version)
        elif self.state is NodeState.OMITTED_FOR_CYCLE:
            items.append("omitted for cycle")

        if self.state is NodeState.INCLUDED:
            return f"{self.artifact} ({'; '.join(items)})" if items else str(self.artifact)
        return f"({self.artifact} - {'; '.join(items)})"

    def to_dict(self) -> dict:
        """Serialize node to a JSON-friendly dict; unset fields are left out."""
        data: dict[str, Any] = {
            "artifact": self.artifact.to_dict(),
            "state": self.state.value,
        }
        if self.related_artifact is not None:
            data["related_artifact"] = self.related_artifact.to_dict()
        for attr, _ in _OVERRIDE_LABELS:
            value = getattr(self, attr)
            if value is not None:
                data[attr] = value
        if self.version_selected_from_range is not None:
            data["version_selected_from_range"] = self.version_selected_from_range
        if self.available_versions is not None:
            data["available_versions"] = list(self.available_versions)
        data["children"] = [c.to_dict() for c in self.children]
        return data

    @classmethod
    def from_dict(cls, data: Any, location: str = "root") -> DependencyNode:
        """
        Build a tree from a to_dict() mapping.

        Raises TreeFormatError naming the offending location
        (e.g. ``root.children[1].state``) on malformed input.
        """
        if not isinstance(data, Mapping):
            raise TreeFormatError("expected an object", location)
        if "artifact" not in data:
            raise TreeFormatError("missing artifact", location)
        artifact = Artifact.from_dict(data["artifact"], f"{location}.artifact")

        raw_state = data.get("state", NodeState.INCLUDED.value)
        try:
            state = NodeState(raw_state)
        except ValueError:
            valid = ", ".join(s.value for s in NodeState)
            raise TreeFormatError(
                f"unknown state {raw_state!r} (expected one of {valid})", f"{location}.state"
            ) from None

        related = None
        if data.get("related_artifact") is not None:
            related = Artifact.from_dict(data["related_artifact"], f"{location}.related_artifact")

        overrides = {}
        for attr in [a for a, _ in _OVERRIDE_LABELS] + ["version_selected_from_range"]:
            value = data.get(attr)
            if value is not None and not isinstance(value, str):
                raise TreeFormatError("expected a string", f"{location}.{attr}")
            overrides[attr] = value

        versions = data.get("available_versions")
        if versions is not None and not isinstance(versions, list):
            raise TreeFormatError("expected a list", f"{location}.available_versions")

        raw_children = data.get("children", [])
        if not isinstance(raw_children, list):
            raise TreeFormatError("expected a list", f"{location}.children")
        children = [
            cls.from_dict(c, f"{location}.children[{i}]") for i, c in enumerate(raw_children)
        ]

        try:
            return cls(
                artifact=artifact,
                state=state,
                related_artifact=related,
                available_versions=tuple(str(v) for v in versions) if versions is not None else None,
                children=children,
                **overrides,
            )
        except ValueError as e:
            raise TreeFormatError(str(e), location) from e

    def __str__(self) -> str:
        from deptree.traversal.serializing import ASCII, SerializingVisitor

        buffer = StringIO()
        self.accept(SerializingVisitor(buffer, ASCII))
        return buffer.getvalue()

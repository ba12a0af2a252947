"""Load and save dependency trees as JSON documents (the DependencyNode.to_dict() layout)."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from deptree.core.errors import TreeFormatError
from deptree.core.node import DependencyNode

logger = logging.getLogger(__name__)


def loads_tree(text: str, *, source: str = "<string>") -> DependencyNode:
    """Parse a JSON document into a tree. Raises TreeFormatError on malformed input."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise TreeFormatError(f"invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})", source) from e
    root = DependencyNode.from_dict(data)
    logger.debug("Loaded tree rooted at %s from %s", root.artifact, source)
    return root


def load_tree(path: Path | str) -> DependencyNode:
    """
    Read a tree from a JSON file.

    OSError from reading the file propagates unchanged; malformed content
    raises TreeFormatError naming the file.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    return loads_tree(text, source=str(path))


def dumps_tree(root: DependencyNode, *, indent: int | None = 2) -> str:
    return json.dumps(root.to_dict(), indent=indent)

"""Tests for deptree.api module."""

from __future__ import annotations

import re
from io import StringIO
from pathlib import Path

import pytest

import deptree
from deptree.api import (
    collect_nodes,
    copy_tree,
    load_tree,
    render_tree,
    tree_stats,
    write_tree,
)
from deptree.core.loader import dumps_tree
from deptree.core.node import Artifact, NodeState
from deptree.traversal.filters import StateFilter
from deptree.traversal.serializing import TokenSet


class TestModuleExports:
    """Tests for deptree module-level exports."""

    def test_version_is_string(self) -> None:
        assert isinstance(deptree.__version__, str)

    def test_version_format(self) -> None:
        pattern = r"^\d+\.\d+\.\d+(\+.+)?$"
        assert re.match(pattern, deptree.__version__), f"Invalid version: {deptree.__version__}"

    def test_all_exports_exist(self) -> None:
        for name in deptree.__all__:
            assert hasattr(deptree, name), name


def _ids(nodes) -> list[str]:
    return [n.artifact.artifact_id for n in nodes]


class TestCollectNodes:
    def test_all_nodes(self, sample_tree) -> None:
        assert _ids(collect_nodes(sample_tree)) == ["R", "A", "A1", "A2", "B"]

    def test_with_predicate(self, sample_tree) -> None:
        nodes = collect_nodes(sample_tree, predicate=lambda n: not n.children)
        assert _ids(nodes) == ["A1", "A2", "B"]

    def test_fresh_visitor_per_call(self, sample_tree) -> None:
        assert collect_nodes(sample_tree) == collect_nodes(sample_tree)
        assert len(collect_nodes(sample_tree)) == 5


class TestCopyTree:
    def test_copy(self, sample_tree) -> None:
        copy = copy_tree(sample_tree)
        assert copy == sample_tree
        assert copy is not sample_tree

    def test_filtered_copy(self, make_node) -> None:
        root = make_node(
            "r",
            make_node("a"),
            make_node("c", state=NodeState.OMITTED_FOR_CYCLE),
        )
        copy = copy_tree(root, predicate=StateFilter(NodeState.INCLUDED))
        assert _ids(copy.preorder()) == ["r", "a"]

    def test_nothing_accepted(self, sample_tree) -> None:
        assert copy_tree(sample_tree, predicate=lambda n: False) is None

    def test_rejected_root_keeps_every_accepted_subtree(self, sample_tree) -> None:
        copy = copy_tree(sample_tree, predicate=lambda n: n.artifact.artifact_id != "R")
        assert _ids(copy.preorder()) == ["R", "A", "A1", "A2", "B"]
        assert copy.parent is None

    def test_rejected_root_with_nested_matches(self, sample_tree) -> None:
        copy = copy_tree(sample_tree, predicate=lambda n: n.artifact.artifact_id in ("A2", "B"))
        assert _ids(copy.preorder()) == ["R", "A2", "B"]
        assert all(c.parent is copy for c in copy.children)

    def test_agrees_with_collect_nodes(self, sample_tree) -> None:
        predicate = lambda n: n.artifact.artifact_id != "R"
        copied = _ids(copy_tree(sample_tree, predicate=predicate).preorder())[1:]
        assert copied == _ids(collect_nodes(sample_tree, predicate=predicate))


class TestRenderTree:
    def test_token_name(self, sample_tree, name_of) -> None:
        assert render_tree(sample_tree, tokens="extended", formatter=name_of) == (
            "R\n├─ A\n│  ├─ A1\n│  └─ A2\n└─ B\n"
        )

    def test_token_set(self, sample_tree, name_of) -> None:
        tokens = TokenSet("* ", "* ", "  ", "  ")
        assert render_tree(sample_tree, tokens=tokens, formatter=name_of) == (
            "R\n* A\n  * A1\n  * A2\n* B\n"
        )

    def test_unknown_token_name(self, sample_tree) -> None:
        with pytest.raises(ValueError):
            render_tree(sample_tree, tokens="nope")

    def test_predicate_connectors_follow_visible_nodes(self, make_node, name_of) -> None:
        root = make_node(
            "R",
            make_node("A", make_node("A1"), make_node("A2", state=NodeState.OMITTED_FOR_CYCLE)),
            make_node(
                "B",
                state=NodeState.OMITTED_FOR_DUPLICATE,
                related_artifact=Artifact("org.example", "B", "1.0"),
            ),
        )
        output = render_tree(root, predicate=StateFilter(NodeState.INCLUDED), formatter=name_of)
        assert output == "R\n\\- A\n   \\- A1\n"

    def test_rejected_inner_node_children_move_up(self, sample_tree, name_of) -> None:
        output = render_tree(
            sample_tree, predicate=lambda n: n.artifact.artifact_id != "A", formatter=name_of
        )
        assert output == "R\n+- A1\n+- A2\n\\- B\n"

    def test_rejected_root_draws_downstream_once(self, sample_tree, name_of) -> None:
        output = render_tree(
            sample_tree, predicate=lambda n: n.artifact.artifact_id != "R", formatter=name_of
        )
        assert output.count("R\n") == 1
        assert output == "R\n+- A\n|  +- A1\n|  \\- A2\n\\- B\n"

    def test_nothing_accepted_writes_nothing(self, sample_tree) -> None:
        assert render_tree(sample_tree, predicate=lambda n: False) == ""

    def test_default_labels(self, make_node) -> None:
        root = make_node("R", make_node("C", state=NodeState.OMITTED_FOR_CYCLE))
        assert render_tree(root) == (
            "org.example:R:jar:1.0\n\\- (org.example:C:jar:1.0 - omitted for cycle)\n"
        )

    def test_write_tree_to_sink(self, sample_tree, name_of) -> None:
        buffer = StringIO()
        write_tree(sample_tree, buffer, formatter=name_of)
        assert buffer.getvalue() == "R\n+- A\n|  +- A1\n|  \\- A2\n\\- B\n"


class TestTreeStats:
    def test_root(self, sample_tree) -> None:
        assert tree_stats(sample_tree) == (2, 4, 2)

    def test_inner_node(self, sample_tree) -> None:
        assert tree_stats(sample_tree.children[0]) == (2, 2, 1)

    def test_leaf(self, sample_tree) -> None:
        assert tree_stats(sample_tree.children[1]) == (0, 0, 0)


class TestLoadTree:
    def test_load(self, tmp_path: Path, sample_tree) -> None:
        path = tmp_path / "tree.json"
        path.write_text(dumps_tree(sample_tree))
        assert load_tree(path) == sample_tree

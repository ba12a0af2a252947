"""Tests for deptree CLI."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import pytest

from deptree.cli import (
    _build_predicate,
    cmd_list,
    cmd_tree,
    main,
)
from deptree.core.loader import dumps_tree
from deptree.core.node import Artifact, DependencyNode, NodeState
from deptree.traversal.filters import AndFilter, ArtifactFilter, StateFilter


@pytest.fixture
def tree_file(tmp_path: Path) -> Path:
    """app -> [lib -> [util], old (omitted for conflict)]"""
    root = DependencyNode(
        Artifact("org.example", "app", "1.0"),
        children=[
            DependencyNode(
                Artifact("org.example", "lib", "2.0", scope="compile"),
                children=[DependencyNode(Artifact("com.other", "util", "3.1", scope="runtime"))],
            ),
            DependencyNode(
                Artifact("org.example", "old", "0.9", scope="compile"),
                state=NodeState.OMITTED_FOR_CONFLICT,
                related_artifact=Artifact("org.example", "old", "1.2"),
            ),
        ],
    )
    path = tmp_path / "tree.json"
    path.write_text(dumps_tree(root))
    return path


ASCII_OUTPUT = (
    "org.example:app:jar:1.0\n"
    "+- org.example:lib:jar:2.0:compile\n"
    "|  \\- com.other:util:jar:3.1:runtime\n"
    "\\- (org.example:old:jar:0.9:compile - omitted for conflict with 1.2)\n"
)


def _tree_args(path: Path, **overrides) -> argparse.Namespace:
    values = dict(file=str(path), tokens=None, state=None, include=None, json=False, output=None, verbose=False)
    values.update(overrides)
    return argparse.Namespace(**values)


class TestBuildPredicate:
    def test_none(self) -> None:
        assert _build_predicate(argparse.Namespace(state=None, include=None)) is None

    def test_state_only(self) -> None:
        predicate = _build_predicate(argparse.Namespace(state=["included"], include=None))
        assert isinstance(predicate, StateFilter)
        assert predicate.states == {NodeState.INCLUDED}

    def test_include_only(self) -> None:
        predicate = _build_predicate(argparse.Namespace(state=None, include=["org.*"]))
        assert isinstance(predicate, ArtifactFilter)

    def test_combined(self) -> None:
        predicate = _build_predicate(argparse.Namespace(state=["included"], include=["org.*"]))
        assert isinstance(predicate, AndFilter)
        assert len(predicate.filters) == 2


class TestCmdTree:
    def test_ascii(self, tree_file: Path, capsys, monkeypatch) -> None:
        monkeypatch.delenv("DEPTREE_TOKENS", raising=False)
        assert cmd_tree(_tree_args(tree_file)) == 0
        assert capsys.readouterr().out == ASCII_OUTPUT

    def test_token_option(self, tree_file: Path, capsys) -> None:
        assert cmd_tree(_tree_args(tree_file, tokens="extended")) == 0
        out = capsys.readouterr().out
        assert "├─ org.example:lib" in out
        assert "│  └─ com.other:util" in out

    def test_token_env_default(self, tree_file: Path, capsys, monkeypatch) -> None:
        monkeypatch.setenv("DEPTREE_TOKENS", "extended")
        assert cmd_tree(_tree_args(tree_file)) == 0
        assert "└─ (org.example:old" in capsys.readouterr().out

    def test_state_filter(self, tree_file: Path, capsys) -> None:
        assert cmd_tree(_tree_args(tree_file, state=["included"], tokens="ascii")) == 0
        assert capsys.readouterr().out == (
            "org.example:app:jar:1.0\n"
            "\\- org.example:lib:jar:2.0:compile\n"
            "   \\- com.other:util:jar:3.1:runtime\n"
        )

    def test_rejected_root_keeps_matches_in_json(self, tree_file: Path, capsys) -> None:
        assert cmd_tree(_tree_args(tree_file, json=True, include=["com.other:*"])) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["artifact"]["artifact_id"] == "app"
        assert [c["artifact"]["artifact_id"] for c in data["children"]] == ["util"]

    def test_rejected_root_diagram(self, tree_file: Path, capsys) -> None:
        assert cmd_tree(_tree_args(tree_file, tokens="ascii", include=["*:lib", "*:old"])) == 0
        assert capsys.readouterr().out == (
            "org.example:app:jar:1.0\n"
            "+- org.example:lib:jar:2.0:compile\n"
            "\\- (org.example:old:jar:0.9:compile - omitted for conflict with 1.2)\n"
        )

    def test_no_match(self, tree_file: Path, capsys) -> None:
        assert cmd_tree(_tree_args(tree_file, include=["nothing:*"])) == 1
        assert "No nodes matched" in capsys.readouterr().err

    def test_json(self, tree_file: Path, capsys) -> None:
        assert cmd_tree(_tree_args(tree_file, json=True, state=["included"])) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["artifact"]["artifact_id"] == "app"
        assert [c["artifact"]["artifact_id"] for c in data["children"]] == ["lib"]

    def test_output_file(self, tree_file: Path, tmp_path: Path, capsys) -> None:
        out = tmp_path / "out.txt"
        assert cmd_tree(_tree_args(tree_file, tokens="ascii", output=str(out))) == 0
        assert out.read_text() == ASCII_OUTPUT
        assert "Tree written to" in capsys.readouterr().err

    def test_missing_file(self, tmp_path: Path, capsys) -> None:
        assert cmd_tree(_tree_args(tmp_path / "missing.json")) == 1
        assert "Cannot read" in capsys.readouterr().err

    def test_invalid_file(self, tmp_path: Path, capsys) -> None:
        path = tmp_path / "bad.json"
        path.write_text('{"artifact": "g:a:1", "state": "gone"}')
        assert cmd_tree(_tree_args(path)) == 1
        assert "Invalid tree file" in capsys.readouterr().err


class TestCmdList:
    def test_plain(self, tree_file: Path, capsys) -> None:
        assert cmd_list(_tree_args(tree_file)) == 0
        assert capsys.readouterr().out.splitlines() == [
            "org.example:app:jar:1.0",
            "org.example:lib:jar:2.0:compile",
            "com.other:util:jar:3.1:runtime",
            "org.example:old:jar:0.9:compile",
        ]

    def test_include_pattern_keeps_nested_matches(self, tree_file: Path, capsys) -> None:
        assert cmd_list(_tree_args(tree_file, include=["com.other:*"])) == 0
        assert capsys.readouterr().out.splitlines() == ["com.other:util:jar:3.1:runtime"]

    def test_verbose(self, tree_file: Path, capsys) -> None:
        assert cmd_list(_tree_args(tree_file, verbose=True)) == 0
        out = capsys.readouterr().out
        assert "omitted for conflict with 1.2" in out
        assert "4 node(s)" in out

    def test_json(self, tree_file: Path, capsys) -> None:
        assert cmd_list(_tree_args(tree_file, json=True)) == 0
        data = json.loads(capsys.readouterr().out)
        assert data[2] == {"artifact": "com.other:util:jar:3.1:runtime", "state": "included", "depth": 2}
        assert data[3]["state"] == "omitted-conflict"

    def test_no_match(self, tree_file: Path, capsys) -> None:
        assert cmd_list(_tree_args(tree_file, state=["omitted-cycle"])) == 1


class TestMain:
    def test_tree_command(self, tree_file: Path, capsys) -> None:
        assert main(["tree", str(tree_file), "-t", "ascii"]) == 0
        assert capsys.readouterr().out == ASCII_OUTPUT

    def test_list_with_filters(self, tree_file: Path, capsys) -> None:
        assert main(["list", str(tree_file), "--state", "included", "-i", "org.example:*"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "org.example:app:jar:1.0",
            "org.example:lib:jar:2.0:compile",
        ]

    def test_no_command(self, capsys) -> None:
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_invalid_state_choice(self, tree_file: Path) -> None:
        with pytest.raises(SystemExit):
            main(["tree", str(tree_file), "--state", "lost"])

    def test_version(self, capsys) -> None:
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])
        assert excinfo.value.code == 0
        assert capsys.readouterr().out.startswith("deptree ")

    def test_tui_missing_file(self, tmp_path: Path, capsys) -> None:
        assert main(["tui", str(tmp_path / "missing.json")]) == 1
        assert "Cannot read" in capsys.readouterr().err

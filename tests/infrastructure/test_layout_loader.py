"""Tests for layout loading from TOML and JSON."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from boxplan.infrastructure.layout_loader import LayoutError, load_layout, parse_layout


class TestLoadLayout:
    def test_toml(self, board_root: Path) -> None:
        doc = load_layout(board_root / "layout.toml")
        assert [spec.id for spec in doc.entities][:2] == ["Fall 2022-23", "Winter 2022-23"]

    def test_json(self, tmp_path: Path) -> None:
        path = tmp_path / "layout.json"
        path.write_text(
            json.dumps({"entities": [{"id": "A", "type": "class", "properties": {"units": 4}}]})
        )
        doc = load_layout(path)
        assert doc.entities[0].properties == {"units": 4}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(LayoutError) as exc_info:
            load_layout(tmp_path / "nope.toml")
        assert exc_info.value.reason == "file not found"

    def test_bad_syntax(self, tmp_path: Path) -> None:
        path = tmp_path / "layout.toml"
        path.write_text("[[entities]\n")
        with pytest.raises(LayoutError, match="Invalid layout"):
            load_layout(path)

    def test_json_top_level_must_be_object(self, tmp_path: Path) -> None:
        path = tmp_path / "layout.json"
        path.write_text("[]")
        with pytest.raises(LayoutError, match="top level"):
            load_layout(path)

    def test_invalid_region(self, tmp_path: Path) -> None:
        path = tmp_path / "layout.toml"
        path.write_text(
            '[[entities]]\nid = "A"\ntype = "class"\n'
            "regions = [{ left_top = [5, 5], right_bottom = [1, 1] }]\n"
        )
        with pytest.raises(LayoutError, match="strictly less"):
            load_layout(path)


class TestParseLayout:
    def test_in_memory_source(self) -> None:
        with pytest.raises(LayoutError, match="<memory>"):
            parse_layout({"entities": [{"id": "A"}]})

"""Layout document loading (TOML or JSON)."""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from boxplan.domain.layout import LayoutDocument


class LayoutError(Exception):
    """The layout document is missing, unparseable, or invalid."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid layout {path}: {reason}")


def parse_layout(data: dict[str, Any], *, source: Path | None = None) -> LayoutDocument:
    """Validate already-decoded layout data."""
    try:
        return LayoutDocument.model_validate(data)
    except ValidationError as exc:
        raise LayoutError(source or Path("<memory>"), str(exc)) from exc


def load_layout(path: Path) -> LayoutDocument:
    """Read and validate the layout at *path*.

    ``.json`` files are decoded as JSON; anything else as TOML.
    """
    if not path.is_file():
        raise LayoutError(path, "file not found")
    raw = path.read_text(encoding="utf-8")
    try:
        data = json.loads(raw) if path.suffix == ".json" else tomllib.loads(raw)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise LayoutError(path, str(exc)) from exc
    if not isinstance(data, dict):
        raise LayoutError(path, "top level must be a table/object")
    return parse_layout(data, source=path)

"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, boxplan.toml only contains overrides.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from boxplan.domain.display import ERROR_COLOR, NO_COLOR

# --- boxplan.toml sections ---


class BoardConfig(BaseModel):
    """[board] section."""

    model_config = {"frozen": True}

    layout: str = "layout.toml"
    snapshots: bool = True


class ScheduleConfig(BaseModel):
    """[schedule] section.

    A class counts as scheduled when one of its parents is named
    ``"<quarter> <year>"`` for a known quarter and year, or is the transfer
    entity.
    """

    model_config = {"frozen": True}

    years: list[str] = Field(default_factory=lambda: ["2022-23", "2023-24", "2024-25", "2025-26"])
    quarters: list[str] = Field(default_factory=lambda: ["Fall", "Winter", "Spring"])
    transfer_id: str = "Transfer"

    def slot_ids(self) -> frozenset[str]:
        """Every ``"<quarter> <year>"`` id in the catalog."""
        return frozenset(f"{quarter} {year}" for year in self.years for quarter in self.quarters)


class DisplayConfig(BaseModel):
    """[display] section."""

    model_config = {"frozen": True}

    error_color: str = ERROR_COLOR
    clear_color: str = NO_COLOR


class LoggingConfig(BaseModel):
    """[logging] section."""

    model_config = {"frozen": True}

    trace_relations: bool = False
    sql_echo: bool = False


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    local: dict[str, Any] = Field(default_factory=lambda: {"enabled": True})


class BoxplanConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    board: BoardConfig = Field(default_factory=BoardConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest

from boxplan.config.logging import (
    PROPAGATION_LOGGER,
    SQL_LOGGER,
    configure_logging,
    logger_levels,
)

_TUNED = ("boxplan", PROPAGATION_LOGGER, "sqlalchemy", SQL_LOGGER)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root and tuned logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    levels = {name: logging.getLogger(name).level for name in _TUNED}
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


class TestLoggerLevels:
    def test_quiet_defaults(self) -> None:
        assert logger_levels() == {
            "boxplan": logging.WARNING,
            PROPAGATION_LOGGER: logging.WARNING,
            "sqlalchemy": logging.WARNING,
            SQL_LOGGER: logging.WARNING,
        }

    def test_verbose_leaves_relation_tracing_off(self) -> None:
        levels = logger_levels(verbose=True)
        assert levels["boxplan"] == logging.DEBUG
        assert levels[PROPAGATION_LOGGER] == logging.INFO

    def test_trace_relations(self) -> None:
        assert logger_levels(trace_relations=True)[PROPAGATION_LOGGER] == logging.DEBUG

    def test_sql_echo(self) -> None:
        levels = logger_levels(sql_echo=True)
        assert levels[SQL_LOGGER] == logging.INFO
        assert levels["sqlalchemy"] == logging.WARNING


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("boxplan").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("boxplan").level == logging.WARNING

    def test_relation_changes_need_their_own_switch(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        propagation = logging.getLogger(PROPAGATION_LOGGER)
        configure_logging(verbose=True)
        propagation.debug("MATH 19 includes Fall 2022-23 in its parents with count 1")
        assert "MATH 19" not in capsys.readouterr().err

        configure_logging(verbose=True, trace_relations=True)
        propagation.debug("MATH 19 includes Fall 2022-23 in its parents with count 1")
        assert "MATH 19 includes Fall 2022-23" in capsys.readouterr().err

    def test_json_mode_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("boxplan.engine.store").debug("Registered entity %s", "MATH 19")
        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "Registered entity MATH 19"
        assert payload["level"] == "debug"
        assert payload["logger"] == "boxplan.engine.store"

    def test_json_mode_structures_tracebacks(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            logging.getLogger("boxplan.infrastructure.board").warning(
                "Plugin hook %s failed", "post_save", exc_info=True
            )
        payload = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert payload["event"] == "Plugin hook post_save failed"
        assert payload["exception"][0]["exc_type"] == "RuntimeError"

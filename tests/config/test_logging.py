"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from farmctl.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    farm_logger = logging.getLogger("farmctl")
    farm_level = farm_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    farm_logger.setLevel(farm_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("farmctl").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_quiet_by_default(self) -> None:
        configure_logging()
        assert logging.getLogger("farmctl").level == logging.WARNING

    def test_json_mode_structured_event(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("farmctl.services.distributor").debug(
            "rebalance.complete", color="RED", barns=3
        )
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "rebalance.complete"
        assert parsed["color"] == "RED"
        assert parsed["barns"] == 3
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "farmctl.services.distributor"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("farmctl.services.farm").error("Rebalance aborted: boom")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Rebalance aborted: boom"
        assert parsed["level"] == "error"

    def test_sqlalchemy_debug_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("sqlalchemy.engine").info("SELECT 1")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=True)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1

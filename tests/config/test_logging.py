"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from dropctl.config.logging import LOGGER_NAME, configure_logging, log_level
from dropctl.infrastructure.project import Project
from dropctl.services.invoker import CommandInvoker, CommandRegistry


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    drop = logging.getLogger(LOGGER_NAME)
    drop_level = drop.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    drop.setLevel(drop_level)


@pytest.mark.parametrize(
    ("verbose", "quiet", "expected"),
    [
        (False, False, logging.WARNING),
        (True, False, logging.DEBUG),
        (False, True, logging.ERROR),
        (True, True, logging.DEBUG),
    ],
)
def test_log_level(verbose: bool, quiet: bool, expected: int) -> None:
    assert log_level(verbose=verbose, quiet=quiet) == expected


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger(LOGGER_NAME).level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_quiet_only_reports_errors(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(quiet=True, log_json=True)
        log = structlog.get_logger("dropctl.test")
        log.warning("pipeline.step_failed", command="setup:settings", status=3)
        log.error("permissions.chmod_failed", path="sites/default")
        lines = capfd.readouterr().err.strip().splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["permissions.chmod_failed"]

    def test_verbose_wins_over_quiet(self) -> None:
        configure_logging(verbose=True, quiet=True)
        assert logging.getLogger(LOGGER_NAME).level == logging.DEBUG

    def test_single_handler_installed(self) -> None:
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_third_party_kept_at_warning(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("sqlalchemy").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("dropctl.test")
        log.warning("pipeline.step_failed", command="setup:settings", status=3)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "pipeline.step_failed"
        assert parsed["status"] == 3
        assert parsed["level"] == "warning"
        assert "timestamp" in parsed

    def test_step_name_on_handler_logs(
        self, project: Project, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(log_json=True)
        log = structlog.get_logger("dropctl.test")
        registry = CommandRegistry()
        registry.register("setup:behat", lambda _p: log.warning("behat.template_missing") or 0)

        CommandInvoker(registry, project).invoke("setup:behat", position="1/4")

        events = [json.loads(line) for line in capfd.readouterr().err.strip().splitlines()]
        warning = next(e for e in events if e["event"] == "behat.template_missing")
        assert warning["step"] == "setup:behat"

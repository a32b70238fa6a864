"""
Tests for logging setup and workflow-command formatting.
"""

import logging

import pytest

from setup_testkube.core.observability.logging_config import (
    WorkflowCommandFormatter,
    _parse_level,
    running_in_actions,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(level: int, msg: str) -> logging.LogRecord:
    return logging.LogRecord("setup_testkube.test", level, __file__, 1, msg, None, None)


class TestWorkflowCommandFormatter:
    def test_warning(self):
        fmt = WorkflowCommandFormatter("%(message)s")
        assert fmt.format(_record(logging.WARNING, "careful")) == "::warning::careful"

    def test_error_escapes_newlines(self):
        fmt = WorkflowCommandFormatter("%(message)s")
        assert fmt.format(_record(logging.ERROR, "a\nb 100%")) == "::error::a%0Ab 100%25"

    def test_info_unchanged(self):
        fmt = WorkflowCommandFormatter("%(message)s")
        assert fmt.format(_record(logging.INFO, "hello")) == "hello"


class TestSetupLogging:
    def test_level_applied(self):
        setup_logging(level="INFO", workflow_commands=False)
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert not isinstance(root.handlers[0].formatter, WorkflowCommandFormatter)

    def test_actions_auto_detected(self, monkeypatch):
        monkeypatch.setenv("GITHUB_ACTIONS", "true")
        assert running_in_actions()
        setup_logging(level="WARNING")
        assert isinstance(logging.getLogger().handlers[0].formatter, WorkflowCommandFormatter)

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "setup.log"
        setup_logging(level="WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        logging.getLogger("setup_testkube.x").debug("to file only")
        for h in root.handlers:
            h.flush()
        assert "to file only" in log_file.read_text()
        for h in root.handlers:
            h.close()

    @pytest.mark.parametrize("raw,expected", [
        ("debug", logging.DEBUG),
        ("ERROR", logging.ERROR),
        ("bogus", logging.WARNING),
        (None, logging.WARNING),
    ])
    def test_parse_level(self, raw, expected):
        assert _parse_level(raw) == expected

"""
Logging configuration — set up once by main.py.

Every module that does ``logger = logging.getLogger(__name__)``
inherits this config.

Level precedence:
    CLI flag  >  SETUP_TESTKUBE_LOG_LEVEL env var  >  WARNING (default)

Optional file output via SETUP_TESTKUBE_LOG_FILE / SETUP_TESTKUBE_LOG_FILE_LEVEL.

When running inside GitHub Actions (``GITHUB_ACTIONS=true``) warnings
and errors are emitted as workflow commands (``::warning::...``) so
they show up as annotations on the run.
"""

from __future__ import annotations

import logging
import os
import sys

# ── Format strings ──────────────────────────────────────────────

_FMT_MINIMAL = "%(message)s"

_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_DATEFMT_VERBOSE = "%H:%M:%S"

_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"

_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# urllib3 only shows up when something else pulls in requests
_NOISY_LOGGERS = ("urllib3", "charset_normalizer")

_WORKFLOW_COMMANDS = {
    logging.DEBUG: "debug",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


class WorkflowCommandFormatter(logging.Formatter):
    """Prefix records with ``::<level>::`` for the Actions log parser.

    INFO has no workflow command and is passed through unchanged.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = _WORKFLOW_COMMANDS.get(record.levelno)
        if command is None:
            return message
        # Multi-line annotations must be %-escaped
        escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        return f"::{command}::{escaped}"


def running_in_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS", "").lower() == "true"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
    workflow_commands: bool | None = None,
) -> None:
    """Configure Python logging for the installer process.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Separate level for the log file (defaults to ``level``).
        quiet_third_party: Keep noisy third-party loggers at WARNING
            unless we're at DEBUG level.
        workflow_commands: Emit ``::warning::``-style lines.  Defaults to
            auto-detecting GitHub Actions.
    """
    numeric_level = _parse_level(level)
    if workflow_commands is None:
        workflow_commands = running_in_actions()

    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_DEBUG
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_VERBOSE
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    formatter_cls = WorkflowCommandFormatter if workflow_commands else logging.Formatter

    # stdout carries the progress lines, diagnostics go to stderr
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(formatter_cls(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    effective_level = numeric_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective_level)

    if quiet_third_party and numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric

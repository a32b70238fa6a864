"""
L4 Execution — Core subprocess runner.

The single place where the installed CLI is executed.  Secrets
passed as arguments are masked before anything is logged.
"""

from __future__ import annotations

import logging
import subprocess
import time
from typing import Any

logger = logging.getLogger(__name__)

_MASK = "***"


def mask_args(cmd: list[str], secrets: tuple[str, ...] = ()) -> list[str]:
    """Copy of ``cmd`` with every secret value replaced by ``***``."""
    hidden = {s for s in secrets if s}
    return [_MASK if part in hidden else part for part in cmd]


def run_command(cmd: list[str], *, secrets: tuple[str, ...] = ()) -> dict[str, Any]:
    """Run a command to completion and report its exit status.

    The child inherits stdout/stderr so its output lands directly in
    the CI log.  There is no timeout: the CI host's own
    job timeout is the only limit.

    Args:
        cmd: Command list for ``subprocess.run()``.
        secrets: Argument values to mask in logs.

    Returns:
        ``{"ok": bool, "returncode": N, "elapsed_ms": N}``, or
        ``{"ok": False, "error": "..."}`` if the command can't start.
    """
    shown = " ".join(mask_args(cmd, secrets))
    logger.info("Running: %s", shown)

    start = time.monotonic()
    try:
        result = subprocess.run(cmd)
    except OSError as e:
        logger.error("Could not start %s: %s", cmd[0], e)
        return {"ok": False, "returncode": None, "error": f"Could not start {cmd[0]}: {e}"}

    elapsed_ms = int((time.monotonic() - start) * 1000)
    returncode = result.returncode if result.returncode is not None else 0
    out: dict[str, Any] = {
        "ok": returncode == 0,
        "returncode": returncode,
        "elapsed_ms": elapsed_ms,
    }
    if returncode != 0:
        out["error"] = f"Command failed (exit {returncode})"
        logger.warning("%s exited with %d", shown, returncode)
    return out

"""
L3 Detection — Writable directory on PATH.

Finds where the CLI binary can be placed so that it is immediately
runnable.  Write probes run in parallel; nothing is written.
"""

from __future__ import annotations

import concurrent.futures
import logging
import os

from setup_testkube.core.models.result import ErrorKind, StageResult
from setup_testkube.core.services.installer.data.constants import PREFERRED_INSTALL_DIRS

logger = logging.getLogger(__name__)

STAGE = "resolve_path"

_MAX_PROBE_WORKERS = 16


def candidate_dirs(path_value: str) -> list[str]:
    """Split a PATH value into non-empty entries, shortest first.

    Shorter paths tend to be the canonical system locations.  The sort
    is stable so equal-length entries keep their PATH order.
    """
    entries = [p for p in path_value.split(os.pathsep) if p]
    return sorted(entries, key=len)


def is_writable(dir_path: str) -> bool:
    """Write-permission probe.  Any error (missing dir included) → False."""
    try:
        return os.access(dir_path, os.W_OK)
    except (OSError, ValueError):
        return False


def writable_dirs(candidates: list[str]) -> list[str]:
    """Probe all candidates concurrently; keep the writable ones in input order."""
    if not candidates:
        return []

    def _probe(d: str) -> bool:
        try:
            return is_writable(d)
        except Exception:
            logger.debug("Write probe crashed for %s", d, exc_info=True)
            return False

    with concurrent.futures.ThreadPoolExecutor(
        max_workers=min(len(candidates), _MAX_PROBE_WORKERS),
    ) as pool:
        results = list(pool.map(_probe, candidates))

    return [d for d, ok in zip(candidates, results) if ok]


def select_install_dir(writable: list[str]) -> str | None:
    """Prefer the conventional bin dirs, else the first writable entry."""
    for preferred in PREFERRED_INSTALL_DIRS:
        if preferred in writable:
            return preferred
    return writable[0] if writable else None


def resolve_install_dir(path_value: str | None = None) -> StageResult:
    """Choose the directory the CLI binary will be extracted into.

    Args:
        path_value: PATH to scan (default: ``os.environ["PATH"]``).

    Returns:
        ``ok`` with ``data["install_dir"]`` and ``data["writable"]``,
        or ``NoWritablePath``.
    """
    if path_value is None:
        path_value = os.environ.get("PATH", "")

    candidates = candidate_dirs(path_value)
    writable = writable_dirs(candidates)
    logger.debug("Writable PATH entries: %s", writable)

    install_dir = select_install_dir(writable)
    logger.info("Binary path: %s", install_dir or "<none>")
    if not install_dir:
        return StageResult.failure(
            STAGE,
            ErrorKind.NO_WRITABLE_PATH,
            "Could not find a writable path that is exposed in PATH to put the binary.",
            candidates=candidates,
        )

    return StageResult.success(
        STAGE,
        f"Binary path: {install_dir}",
        install_dir=install_dir,
        writable=writable,
    )

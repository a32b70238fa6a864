"""
L3 Detection — Is the CLI already installed?

Three outcomes:

    pinned + cached        → reuse the cache entry
    unpinned + on PATH     → reuse whatever binary is there
    anything else          → not installed, continue to download

A pinned version only trusts the cache: a binary found on PATH has
no recorded version and could be anything.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from setup_testkube.core.models.platform import Installation
from setup_testkube.core.models.result import StageResult
from setup_testkube.core.services.installer.execution.tool_cache import ToolCache

logger = logging.getLogger(__name__)

STAGE = "check_installed"


def check_installed(
    version: str | None,
    arch: str,
    binary_name: str,
    cache: ToolCache,
) -> StageResult:
    """Look for an existing installation.

    Returns:
        ``ok`` with ``data["installation"]`` (and ``data["cache_dir"]``
        for cache hits) when already satisfied, else ``skipped`` with
        ``data["installed"] = False``.  Never fails.
    """
    if version:
        cached = cache.find(binary_name, version, arch)
        if cached is not None:
            installation = Installation(
                binary_path=str(Path(cached) / binary_name),
                version=version,
                source="cache",
            )
            logger.info("Found cached %s %s at %s", binary_name, version, cached)
            return StageResult.success(
                STAGE,
                f"Found cached Testkube CLI {version}.",
                installed=True,
                installation=installation,
                cache_dir=str(cached),
            )
        logger.info("Version %s is not cached yet", version)
        return StageResult.skip(STAGE, f"Testkube CLI {version} is not installed.", installed=False)

    existing = shutil.which(binary_name)
    if existing:
        logger.info("Found %s on PATH at %s", binary_name, existing)
        return StageResult.success(
            STAGE,
            "Looks like you already have the Testkube CLI installed. Skipping...",
            installed=True,
            installation=Installation(binary_path=existing, source="path"),
        )

    return StageResult.skip(STAGE, "Testkube CLI is not installed.", installed=False)

"""
L4 Execution — Versioned tool cache.

Binaries are kept at ``{root}/{tool}/{version}/{arch}/`` so a later
run pinned to the same version can skip the download.  A
``{version}/{arch}.complete`` marker is written last; directories
without it are ignored.  Entries are never invalidated.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

_DEFAULT_CACHE_DIR = Path.home() / ".cache" / "setup-testkube" / "tool-cache"


def get_cache_root() -> Path:
    """Return the cache root: ``RUNNER_TOOL_CACHE`` > ``SETUP_TESTKUBE_CACHE`` > default."""
    root = os.environ.get("RUNNER_TOOL_CACHE") or os.environ.get("SETUP_TESTKUBE_CACHE")
    return Path(root) if root else _DEFAULT_CACHE_DIR


class ToolCache:
    """Directory-backed cache of tool binaries keyed by (tool, version, arch)."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = root or get_cache_root()

    def entry_dir(self, tool: str, version: str, arch: str) -> Path:
        return self.root / tool / version / arch

    def _marker(self, tool: str, version: str, arch: str) -> Path:
        return self.root / tool / version / f"{arch}.complete"

    def find(self, tool: str, version: str, arch: str) -> Path | None:
        """Return the cached directory for this version, or None."""
        entry = self.entry_dir(tool, version, arch)
        if self._marker(tool, version, arch).is_file() and entry.is_dir():
            logger.debug("Cache hit: %s %s (%s) at %s", tool, version, arch, entry)
            return entry
        return None

    def cache_file(self, source: Path, tool: str, version: str, arch: str) -> Path:
        """Copy a binary into the cache and mark the entry complete.

        Returns:
            The cache entry directory (the one to put on PATH).

        Raises:
            OSError: If the copy fails.
        """
        entry = self.entry_dir(tool, version, arch)
        marker = self._marker(tool, version, arch)
        if marker.exists():
            marker.unlink()
        entry.mkdir(parents=True, exist_ok=True)

        target = entry / source.name
        shutil.copy2(source, target)
        os.chmod(target, 0o755)

        marker.write_text("")
        logger.info("Cached %s %s at %s", tool, version, entry)
        return entry


def add_to_path(directory: Path | str) -> None:
    """Make ``directory`` visible on PATH for this process and later CI steps.

    Prepends to ``os.environ["PATH"]`` and, when the CI host provides a
    ``GITHUB_PATH`` file, appends the directory to it.
    """
    directory = str(directory)
    current = os.environ.get("PATH", "")
    if directory not in current.split(os.pathsep):
        os.environ["PATH"] = directory + (os.pathsep + current if current else "")

    github_path = os.environ.get("GITHUB_PATH")
    if github_path:
        with open(github_path, "a", encoding="utf-8") as f:
            f.write(directory + "\n")
    logger.debug("Added %s to PATH", directory)

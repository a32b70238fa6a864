"""
L4 Execution — Short-name aliases for the CLI.

``kubectl-testkube`` is what kubectl's plugin lookup needs; people
type ``testkube`` or ``tk``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def create_links(binary_path: Path, link_dir: Path, aliases: tuple[str, ...]) -> list[Path]:
    """Point each alias in ``link_dir`` at ``binary_path``.

    Whatever sits at an alias location (old link, stale file) is
    removed first.

    Raises:
        OSError: If removal or symlink creation fails (e.g. unsupported
            on the host filesystem).
    """
    created: list[Path] = []
    for alias in aliases:
        link = link_dir / alias
        if link.is_symlink() or link.exists():
            link.unlink()
        os.symlink(binary_path, link)
        logger.info("Linked CLI as %s", link)
        created.append(link)
    return created

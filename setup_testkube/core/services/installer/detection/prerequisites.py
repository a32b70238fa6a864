"""
L3 Detection — Required external tools.

Existence check only: the tool is looked up on PATH, never run.
"""

from __future__ import annotations

import logging
import shutil

from setup_testkube.core.models.result import ErrorKind, StageResult
from setup_testkube.core.services.installer.data.constants import CLUSTER_PREREQUISITE

logger = logging.getLogger(__name__)

STAGE = "check_prerequisite"


def check_prerequisite(mode: str = "cluster", tool: str = CLUSTER_PREREQUISITE) -> StageResult:
    """Verify ``kubectl`` is available when the CLI will talk to a cluster.

    Cloud mode connects through the Testkube API and needs nothing
    else, so the lookup is skipped entirely.
    """
    if mode == "cloud":
        return StageResult.skip(STAGE, f"{tool}: not required in cloud mode")

    found = shutil.which(tool)
    logger.info("%s: %s", tool, "detected" if found else "not available")
    if not found:
        return StageResult.failure(
            STAGE,
            ErrorKind.MISSING_PREREQUISITE,
            f"You do not have {tool} installed. Most likely you need to configure "
            "your workflow to initialize connection with Kubernetes cluster.",
            tool=tool,
        )

    return StageResult.success(STAGE, f"{tool}: detected", tool=tool, path=found)

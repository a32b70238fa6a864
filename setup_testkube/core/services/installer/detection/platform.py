"""
L3 Detection — Operating system and CPU architecture.

Maps raw host identifiers onto the names used in release artifacts.
"""

from __future__ import annotations

import logging
import platform

from setup_testkube.core.models.platform import Platform
from setup_testkube.core.models.result import ErrorKind, StageResult
from setup_testkube.core.services.installer.data.constants import (
    ARCHITECTURE_MAP,
    SYSTEM_MAP,
)

logger = logging.getLogger(__name__)

STAGE = "detect_platform"


def detect_platform(
    machine: str | None = None,
    system: str | None = None,
) -> StageResult:
    """Normalize the host platform.

    Args:
        machine: Raw architecture (default: ``platform.machine()``).
        system: Raw OS name (default: ``platform.system()``).

    Returns:
        ``ok`` with ``data["platform"]`` set to a :class:`Platform`,
        or ``UnsupportedPlatform`` if either axis has no mapping.
    """
    raw_machine = platform.machine() if machine is None else machine
    raw_system = platform.system() if system is None else system

    architecture = ARCHITECTURE_MAP.get(raw_machine)
    logger.info("Architecture: %s (%s)", raw_machine, architecture or "unsupported")
    if not architecture:
        return StageResult.failure(
            STAGE,
            ErrorKind.UNSUPPORTED_PLATFORM,
            f"Architecture '{raw_machine}' is not supported yet.",
            raw_machine=raw_machine,
        )

    system_name = SYSTEM_MAP.get(raw_system)
    logger.info("System: %s (%s)", raw_system, system_name or "unsupported")
    if not system_name:
        return StageResult.failure(
            STAGE,
            ErrorKind.UNSUPPORTED_PLATFORM,
            f"Operating system '{raw_system}' is not supported yet.",
            raw_system=raw_system,
        )

    detected = Platform(
        architecture=architecture,
        system=system_name,
        raw_machine=raw_machine,
        raw_system=raw_system,
    )
    return StageResult.success(
        STAGE,
        f"Architecture: {raw_machine} ({architecture}), System: {raw_system} ({system_name})",
        platform=detected,
    )

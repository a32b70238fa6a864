"""
Domain models — Pydantic types for the installer.

All models are re-exported here for convenient access:

    from setup_testkube.core.models import Parameters, Platform, StageResult
"""

from setup_testkube.core.models.params import Parameters, normalize_version
from setup_testkube.core.models.platform import Installation, Platform, ReleaseRecord
from setup_testkube.core.models.result import ErrorKind, PipelineReport, StageResult

__all__ = [
    # result.py
    "ErrorKind",
    # platform.py
    "Installation",
    # params.py
    "Parameters",
    "PipelineReport",
    "Platform",
    "ReleaseRecord",
    "StageResult",
    "normalize_version",
]

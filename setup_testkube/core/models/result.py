"""
StageResult — the pipeline's execution contract.

Every pipeline stage returns a StageResult instead of raising.
The driver inspects ``status`` / ``error_kind`` and decides the
process exit code; stages never call ``sys.exit`` themselves.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    """Terminal failure categories.  None of them is retried."""

    UNSUPPORTED_PLATFORM = "UnsupportedPlatform"
    NO_WRITABLE_PATH = "NoWritablePath"
    MISSING_PREREQUISITE = "MissingPrerequisite"
    NO_MATCHING_VERSION = "NoMatchingVersion"
    INVALID_CONFIGURATION = "InvalidConfiguration"
    NETWORK_OR_IO_FAILURE = "NetworkOrIOFailure"


class StageResult(BaseModel):
    """Outcome of a single pipeline stage.

    ``data`` carries whatever the stage produced (detected platform,
    chosen directory, resolved version, ...) for the stages after it.
    """

    stage: str
    status: Literal["ok", "skipped", "failed"] = "ok"
    message: str = ""
    error_kind: ErrorKind | None = None
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the stage succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the stage failed."""
        return self.status == "failed"

    @classmethod
    def success(cls, stage: str, message: str = "", **data: Any) -> StageResult:
        """Create a success result."""
        return cls(stage=stage, status="ok", message=message, data=data)

    @classmethod
    def failure(cls, stage: str, kind: ErrorKind, message: str, **data: Any) -> StageResult:
        """Create a failure result."""
        return cls(
            stage=stage,
            status="failed",
            message=message,
            error_kind=kind,
            data=data,
        )

    @classmethod
    def skip(cls, stage: str, reason: str = "", **data: Any) -> StageResult:
        """Create a skip result."""
        return cls(stage=stage, status="skipped", message=reason, data=data)

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage": self.stage,
            "status": self.status,
            "message": self.message,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "data": {
                k: v.model_dump() if isinstance(v, BaseModel) else v
                for k, v in self.data.items()
            },
        }


class PipelineReport(BaseModel):
    """All stage results of one run plus the exit code the driver should use."""

    variant: Literal["install", "setup"]
    stages: list[StageResult] = Field(default_factory=list)
    exit_code: int = 0

    def add(self, result: StageResult) -> StageResult:
        self.stages.append(result)
        return result

    def get(self, stage: str) -> StageResult | None:
        for result in self.stages:
            if result.stage == stage:
                return result
        return None

    @property
    def failure(self) -> StageResult | None:
        """The stage that aborted the run, if any."""
        for result in self.stages:
            if result.failed:
                return result
        return None

    @property
    def ok(self) -> bool:
        return self.failure is None and self.exit_code == 0

    def to_dict(self) -> dict[str, Any]:
        failure = self.failure
        return {
            "variant": self.variant,
            "ok": self.ok,
            "exit_code": self.exit_code,
            "error_kind": failure.error_kind.value if failure and failure.error_kind else None,
            "stages": [s.to_dict() for s in self.stages],
        }

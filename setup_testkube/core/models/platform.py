"""
Platform, release and installation records.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict

from setup_testkube.core.models.params import normalize_version

_CHANNEL_RE = re.compile(r"-([^0-9]+)")


class Platform(BaseModel):
    """Normalized (architecture, system) pair for artifact naming."""

    model_config = ConfigDict(frozen=True)

    architecture: str
    system: str
    raw_machine: str = ""
    raw_system: str = ""


class ReleaseRecord(BaseModel):
    """A release as reported by the releases API (only the tag matters)."""

    tag: str

    @property
    def channel(self) -> str:
        """Channel suffix of the tag: ``v1.2.0-beta.1`` → ``beta.``, ``v1.0.0`` → ``stable``."""
        m = _CHANNEL_RE.search(self.tag)
        return m.group(1) if m else "stable"

    @property
    def version(self) -> str | None:
        return normalize_version(self.tag)


class Installation(BaseModel):
    """Where the CLI binary lives once the pipeline is satisfied."""

    binary_path: str
    version: str | None = None
    source: Literal["cache", "path", "download"] = "download"

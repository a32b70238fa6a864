"""
Parameters — the run configuration, built once and passed down.

Constructed by the config loader from CLI options, CI inputs and an
optional YAML file.  Immutable after construction.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


def normalize_version(version: str | None) -> str | None:
    """Strip a single leading ``v`` (``v1.2.3`` → ``1.2.3``).  Empty → None."""
    if not version:
        return None
    version = version.strip()
    if version.startswith("v"):
        version = version[1:]
    return version or None


class Parameters(BaseModel):
    """Inputs for one installer run."""

    model_config = ConfigDict(frozen=True)

    version: str | None = None
    channel: str = "stable"

    # ── Context configuration (setup variant only) ───────────────
    namespace: str = "testkube"
    url: str = "testkube.io"
    url_api_subdomain: str | None = None
    url_ui_subdomain: str | None = None
    url_logs_subdomain: str | None = None

    # ── Cloud credentials: all three or none ─────────────────────
    organization: str | None = None
    environment: str | None = None
    token: str | None = None

    @field_validator("version", mode="before")
    @classmethod
    def _strip_version(cls, value: str | None) -> str | None:
        return normalize_version(value)

    @field_validator("channel", "namespace", "url", mode="before")
    @classmethod
    def _default_when_empty(cls, value, info):
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields[info.field_name].default
        return value

    @field_validator(
        "url_api_subdomain",
        "url_ui_subdomain",
        "url_logs_subdomain",
        "organization",
        "environment",
        "token",
        mode="before",
    )
    @classmethod
    def _empty_is_unset(cls, value: str | None) -> str | None:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _cloud_fields_all_or_none(self) -> Parameters:
        cloud = {
            "organization": self.organization,
            "environment": self.environment,
            "token": self.token,
        }
        present = [name for name, value in cloud.items() if value]
        if present and len(present) != len(cloud):
            missing = sorted(set(cloud) - set(present))
            raise ValueError(
                "Cloud connection needs organization, environment and token together; "
                f"missing: {', '.join(missing)}"
            )
        return self

    @property
    def mode(self) -> Literal["cloud", "cluster"]:
        """Connection mode for the installed CLI."""
        return "cloud" if self.token else "cluster"

    def redacted(self) -> dict[str, str | None]:
        """Dump for logs and JSON output with the token masked."""
        data = self.model_dump()
        if data.get("token"):
            data["token"] = "***"
        data["mode"] = self.mode
        return data

"""
L0 Data — Lookup tables and release source defaults.

Pure data. No logic. No imports beyond stdlib and models.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# Raw ``platform.machine()`` → architecture segment of the artifact name.
# Testkube publishes raw uname-style names (x86_64, not amd64).
ARCHITECTURE_MAP: dict[str, str] = {
    "x86_64": "x86_64",
    "x64": "x86_64",
    "amd64": "x86_64",
    "arm64": "arm64",
    "aarch64": "arm64",
    "i386": "i386",
}

# Raw ``platform.system()`` → system segment of the artifact name.
SYSTEM_MAP: dict[str, str] = {
    "Linux": "Linux",
    "Darwin": "Darwin",
    "Windows": "Windows",
    "Windows_NT": "Windows",
}

# Checked in order before falling back to the shortest writable PATH entry
PREFERRED_INSTALL_DIRS: tuple[str, ...] = ("/usr/local/bin", "/usr/bin")

# Needed in cluster mode to talk to the Kubernetes API
CLUSTER_PREREQUISITE = "kubectl"

USER_AGENT = "setup-testkube/1.0"


class ReleaseSource(BaseModel):
    """Where releases are listed and downloaded from, and how they are named."""

    model_config = ConfigDict(frozen=True)

    api_base: str = "https://api.github.com/repos/kubeshop/testkube"
    download_base: str = "https://github.com/kubeshop/testkube/releases/download"
    artifact_prefix: str = "testkube"
    archive_ext: str = "tar.gz"
    binary_name: str = "kubectl-testkube"
    aliases: tuple[str, ...] = ("testkube", "tk")


DEFAULT_SOURCE = ReleaseSource()

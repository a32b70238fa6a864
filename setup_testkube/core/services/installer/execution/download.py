"""
L4 Execution — Artifact download and extraction.

The archive is streamed straight from the HTTP response into
``tarfile``; only the CLI binary is written to disk.
"""

from __future__ import annotations

import http.client
import logging
import os
import tarfile
import tempfile
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path
from typing import IO

from setup_testkube.core.models.platform import Platform
from setup_testkube.core.services.installer.data.constants import (
    DEFAULT_SOURCE,
    USER_AGENT,
    ReleaseSource,
)

logger = logging.getLogger(__name__)


class ArtifactError(Exception):
    """Raised when the artifact can't be downloaded or extracted."""


def build_download_url(
    version: str,
    target: Platform,
    source: ReleaseSource = DEFAULT_SOURCE,
) -> str:
    """Release artifact URL, every interpolated segment percent-encoded.

    ``1.2.3`` on Linux/x86_64 →
    ``.../download/v1.2.3/testkube_1.2.3_Linux_x86_64.tar.gz``
    """
    v = urllib.parse.quote(version, safe="")
    system = urllib.parse.quote(target.system, safe="")
    arch = urllib.parse.quote(target.architecture, safe="")
    return (
        f"{source.download_base}/v{v}/"
        f"{source.artifact_prefix}_{v}_{system}_{arch}.{source.archive_ext}"
    )


def _member_matches(member: tarfile.TarInfo, binary_name: str) -> bool:
    name = member.name
    while name.startswith("./"):
        name = name[2:]
    return member.isfile() and name == binary_name


def extract_binary(fileobj: IO[bytes], binary_name: str, dest_dir: Path) -> Path:
    """Extract one member from a gzipped tar stream into ``dest_dir``.

    The other members are skipped.  An existing file with the same
    name is replaced atomically.

    Raises:
        ArtifactError: If the stream breaks off or is not a valid
            archive, or if the binary is missing from it.
    """
    target = dest_dir / binary_name
    try:
        with tarfile.open(fileobj=fileobj, mode="r|gz") as tf:
            for member in tf:
                if not _member_matches(member, binary_name):
                    continue
                src = tf.extractfile(member)
                if src is None:
                    break
                fd, tmp_name = tempfile.mkstemp(prefix=f".{binary_name}.", dir=dest_dir)
                try:
                    with os.fdopen(fd, "wb") as out:
                        while True:
                            chunk = src.read(64 * 1024)
                            if not chunk:
                                break
                            out.write(chunk)
                    os.chmod(tmp_name, 0o755)
                    os.replace(tmp_name, target)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
                return target
    except (tarfile.TarError, EOFError) as exc:
        raise ArtifactError(f"Extract failed: {exc}") from exc
    except http.client.HTTPException as exc:
        raise ArtifactError(f"Download interrupted: {exc}") from exc
    except OSError as exc:
        raise ArtifactError(f"Could not write {target}: {exc}") from exc

    raise ArtifactError(f"Binary '{binary_name}' not found in release archive")


def download_and_extract(url: str, binary_name: str, dest_dir: Path) -> Path:
    """Download the release archive and extract the CLI binary.

    No retry: any failure is returned to the caller as ArtifactError.
    """
    logger.info('Downloading the artifact from "%s"', url)
    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    try:
        with urllib.request.urlopen(req) as resp:
            path = extract_binary(resp, binary_name, dest_dir)
    except (urllib.error.URLError, http.client.HTTPException, OSError) as exc:
        raise ArtifactError(f"Download failed: {exc}") from exc

    logger.info("Extracted CLI to %s", path)
    return path

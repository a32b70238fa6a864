"""
L2 Resolver — Which version to install.

A pinned version wins.  Otherwise the releases API is asked for the
newest release on the requested channel, where ``stable`` releases
always qualify as well.
"""

from __future__ import annotations

import json
import logging
import os
import urllib.error
import urllib.request
from typing import Any

from setup_testkube.core.models.platform import ReleaseRecord
from setup_testkube.core.models.result import ErrorKind, StageResult
from setup_testkube.core.services.installer.data.constants import (
    DEFAULT_SOURCE,
    USER_AGENT,
    ReleaseSource,
)

logger = logging.getLogger(__name__)

STAGE = "resolve_version"


class ReleaseAPIError(Exception):
    """Raised when the releases API can't be reached or returns garbage."""


def fetch_json(url: str) -> Any:
    """GET a GitHub API URL and decode the JSON body.

    Sends a bearer token when ``GITHUB_TOKEN`` is set, which lifts the
    anonymous rate limit on shared CI runners.
    """
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": USER_AGENT,
    }
    token = os.environ.get("GITHUB_TOKEN", "")
    if token:
        headers["Authorization"] = f"Bearer {token}"

    logger.debug("GET %s", url)
    req = urllib.request.Request(url, headers=headers)
    try:
        with urllib.request.urlopen(req) as resp:
            body = resp.read()
    except (urllib.error.URLError, OSError) as exc:
        raise ReleaseAPIError(f"Failed to fetch {url}: {exc}") from exc

    try:
        return json.loads(body)
    except ValueError as exc:
        raise ReleaseAPIError(f"Invalid JSON from {url}: {exc}") from exc


def fetch_latest_release(source: ReleaseSource = DEFAULT_SOURCE) -> ReleaseRecord | None:
    data = fetch_json(f"{source.api_base}/releases/latest")
    tag = data.get("tag_name") if isinstance(data, dict) else None
    return ReleaseRecord(tag=tag) if isinstance(tag, str) and tag else None


def fetch_releases(source: ReleaseSource = DEFAULT_SOURCE) -> list[ReleaseRecord]:
    """All releases in server order (newest first on GitHub)."""
    data = fetch_json(f"{source.api_base}/releases")
    if not isinstance(data, list):
        raise ReleaseAPIError(f"Expected a list of releases, got {type(data).__name__}")
    return [
        ReleaseRecord(tag=item["tag_name"])
        for item in data
        if isinstance(item, dict) and isinstance(item.get("tag_name"), str) and item["tag_name"]
    ]


def select_release(releases: list[ReleaseRecord], channel: str) -> ReleaseRecord | None:
    """First release whose channel is ``stable`` or ``channel``."""
    accepted = {"stable", channel}
    for release in releases:
        if release.channel in accepted:
            return release
    return None


def resolve_version(
    version: str | None,
    channel: str = "stable",
    source: ReleaseSource = DEFAULT_SOURCE,
) -> StageResult:
    """Resolve the version to download.

    Returns:
        ``ok`` with ``data["version"]`` (no leading ``v``), or
        ``NoMatchingVersion`` / ``NetworkOrIOFailure``.
    """
    if version:
        version = version.removeprefix("v")
        logger.info('Forcing "%s" version', version)
        return StageResult.success(STAGE, f'Forcing "{version}" version...', version=version, pinned=True)

    logger.info('Detecting the latest version for minimum of "%s" channel', channel)
    try:
        if channel == "stable":
            release = fetch_latest_release(source)
        else:
            release = select_release(fetch_releases(source), channel)
    except ReleaseAPIError as exc:
        return StageResult.failure(STAGE, ErrorKind.NETWORK_OR_IO_FAILURE, str(exc))

    resolved = release.version if release else None
    if not resolved:
        return StageResult.failure(
            STAGE,
            ErrorKind.NO_MATCHING_VERSION,
            f'Not found any version matching criteria (channel "{channel}").',
            channel=channel,
        )

    logger.info("Latest version: %s", resolved)
    return StageResult.success(
        STAGE,
        f"Latest version: {resolved}",
        version=resolved,
        tag=release.tag,
        pinned=False,
    )

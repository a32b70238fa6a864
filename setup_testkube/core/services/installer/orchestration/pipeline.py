"""
L5 Orchestration — The install pipeline.

    detect_platform → resolve_path → check_prerequisite → check_installed
        → { skip | resolve_version → fetch → link }
        → [configure_context]

Strictly linear.  The first failed stage ends the run; its result is
the report's ``failure`` and the driver turns it into an exit code.

Two variants share the same stages:

    install — cluster only, stops once the CLI is in place
    setup   — adds cloud mode and finishes with ``testkube set context``
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Literal

from setup_testkube.core.models.params import Parameters
from setup_testkube.core.models.platform import Installation, Platform
from setup_testkube.core.models.result import ErrorKind, PipelineReport, StageResult
from setup_testkube.core.services.installer.data.constants import DEFAULT_SOURCE, ReleaseSource
from setup_testkube.core.services.installer.detection.install_path import resolve_install_dir
from setup_testkube.core.services.installer.detection.install_state import check_installed
from setup_testkube.core.services.installer.detection.platform import detect_platform
from setup_testkube.core.services.installer.detection.prerequisites import check_prerequisite
from setup_testkube.core.services.installer.execution.context import configure_context
from setup_testkube.core.services.installer.execution.download import (
    ArtifactError,
    build_download_url,
    download_and_extract,
)
from setup_testkube.core.services.installer.execution.links import create_links
from setup_testkube.core.services.installer.execution.tool_cache import ToolCache, add_to_path
from setup_testkube.core.services.installer.resolver.version import resolve_version

logger = logging.getLogger(__name__)

Variant = Literal["install", "setup"]
ProgressCallback = Callable[[StageResult], None]


def _record(
    report: PipelineReport,
    result: StageResult,
    on_progress: ProgressCallback | None,
) -> StageResult:
    report.add(result)
    if result.failed:
        report.exit_code = result.data.get("exit_code", 1) or 1
        logger.error("%s failed: %s", result.stage, result.message)
    else:
        logger.debug("%s: %s", result.stage, result.status)
    if on_progress:
        on_progress(result)
    return result


def fetch_and_install(
    version: str,
    target: Platform,
    install_dir: Path,
    cache: ToolCache,
    source: ReleaseSource = DEFAULT_SOURCE,
) -> StageResult:
    """Download the artifact, place the binary, and record it in the cache."""
    url = build_download_url(version, target, source)
    try:
        binary = download_and_extract(url, source.binary_name, install_dir)
    except ArtifactError as exc:
        return StageResult.failure("fetch", ErrorKind.NETWORK_OR_IO_FAILURE, str(exc), url=url)

    try:
        cache_dir = cache.cache_file(binary, source.binary_name, version, target.architecture)
        add_to_path(cache_dir)
    except OSError as exc:
        return StageResult.failure(
            "fetch",
            ErrorKind.NETWORK_OR_IO_FAILURE,
            f"Could not cache {binary}: {exc}",
            url=url,
        )

    return StageResult.success(
        "fetch",
        f"Extracted CLI to {binary}.",
        url=url,
        installation=Installation(binary_path=str(binary), version=version, source="download"),
        cache_dir=str(cache_dir),
    )


def link_binary(binary: Path, link_dir: Path, source: ReleaseSource = DEFAULT_SOURCE) -> StageResult:
    try:
        links = create_links(binary, link_dir, source.aliases)
    except OSError as exc:
        return StageResult.failure(
            "link",
            ErrorKind.NETWORK_OR_IO_FAILURE,
            f"Could not link CLI aliases in {link_dir}: {exc}",
        )
    return StageResult.success(
        "link",
        "Linked CLI as " + ", ".join(str(p) for p in links) + ".",
        links=[str(p) for p in links],
    )


def run_pipeline(
    params: Parameters,
    variant: Variant = "setup",
    *,
    source: ReleaseSource = DEFAULT_SOURCE,
    cache: ToolCache | None = None,
    path_value: str | None = None,
    machine: str | None = None,
    system: str | None = None,
    on_progress: ProgressCallback | None = None,
) -> PipelineReport:
    """Install (and for ``setup``, configure) the Testkube CLI.

    Args:
        params: Validated inputs.
        variant: ``install`` or ``setup``.
        source: Release locations and artifact naming.
        cache: Tool cache (default: rooted at ``get_cache_root()``).
        path_value: PATH to scan for an install dir (default: env).
        machine: Raw architecture override (default: host).
        system: Raw OS override (default: host).
        on_progress: Called with every stage result as it is produced.

    Returns:
        PipelineReport; ``exit_code`` is what the process should exit with.
    """
    report = PipelineReport(variant=variant)
    cache = cache or ToolCache()
    # The plain installer has no cloud inputs; it always talks to a cluster
    mode = params.mode if variant == "setup" else "cluster"

    # ── Platform ──
    result = _record(report, detect_platform(machine, system), on_progress)
    if result.failed:
        return report
    target: Platform = result.data["platform"]

    # ── Install directory ──
    result = _record(report, resolve_install_dir(path_value), on_progress)
    if result.failed:
        return report
    install_dir = Path(result.data["install_dir"])

    # ── Prerequisite ──
    result = _record(report, check_prerequisite(mode), on_progress)
    if result.failed:
        return report

    # ── Already installed? ──
    result = _record(
        report,
        check_installed(params.version, target.architecture, source.binary_name, cache),
        on_progress,
    )
    installation: Installation | None = None
    if result.data.get("installed"):
        installation = result.data["installation"]
        if result.data.get("cache_dir"):
            add_to_path(result.data["cache_dir"])
        if variant == "install":
            return report
    else:
        # ── Version ──
        result = _record(report, resolve_version(params.version, params.channel, source), on_progress)
        if result.failed:
            return report
        version: str = result.data["version"]

        # ── Fetch ──
        result = _record(
            report,
            fetch_and_install(version, target, install_dir, cache, source),
            on_progress,
        )
        if result.failed:
            return report
        installation = result.data["installation"]

        # ── Link ──
        result = _record(report, link_binary(Path(installation.binary_path), install_dir, source), on_progress)
        if result.failed:
            return report

    if variant == "install":
        return report

    # ── Context ──
    result = _record(report, configure_context(installation.binary_path, params), on_progress)
    report.exit_code = result.data.get("exit_code", 0) or 0
    return report

"""
L4 Execution — Persist the CLI's connection context.

Runs ``testkube set context`` once the binary is in place, either
against the current kubeconfig (cluster mode) or against the
Testkube cloud API (cloud mode).
"""

from __future__ import annotations

import logging

from setup_testkube.core.models.params import Parameters
from setup_testkube.core.models.result import ErrorKind, StageResult
from setup_testkube.core.services.installer.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)

STAGE = "configure_context"


def build_context_args(params: Parameters) -> list[str]:
    """Arguments after ``set context`` for the connection mode."""
    if params.mode == "cloud":
        args = [
            "--api-key", params.token or "",
            "--root-domain", params.url,
            "--org-id", params.organization or "",
            "--env-id", params.environment or "",
        ]
        if params.url_api_subdomain:
            args += ["--api-prefix", params.url_api_subdomain]
        if params.url_ui_subdomain:
            args += ["--ui-prefix", params.url_ui_subdomain]
        if params.url_logs_subdomain:
            args += ["--logs-prefix", params.url_logs_subdomain]
        return args

    return ["--kubeconfig", "--namespace", params.namespace]


def configure_context(binary_path: str, params: Parameters) -> StageResult:
    """Run ``<binary> set context ...``.

    The stage succeeds only when the CLI exits 0; its exit code is
    reported in ``data["exit_code"]`` either way.
    """
    cmd = [binary_path, "set", "context", *build_context_args(params)]
    result = run_command(cmd, secrets=(params.token or "",))

    if result["returncode"] is None:
        return StageResult.failure(
            STAGE,
            ErrorKind.NETWORK_OR_IO_FAILURE,
            result.get("error", "Could not run the Testkube CLI"),
            exit_code=1,
        )

    exit_code = result["returncode"]
    if exit_code != 0:
        return StageResult(
            stage=STAGE,
            status="failed",
            message=f"Setting {params.mode} context failed (exit {exit_code})",
            data={"exit_code": exit_code, "mode": params.mode},
        )

    return StageResult.success(
        STAGE,
        f"Configured Testkube CLI for {params.mode} mode.",
        exit_code=exit_code,
        mode=params.mode,
    )

"""
setup-testkube — CLI entrypoint.

Usage:
    setup-testkube --help
    setup-testkube install --version 1.16.0
    setup-testkube setup --channel beta
    python -m setup_testkube.main setup --json

Inputs may also come from the CI host as ``INPUT_*`` environment
variables, or from a YAML file passed with ``--config``.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from setup_testkube import __version__
from setup_testkube.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="setup-testkube")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="YAML file with inputs (same keys as the action inputs).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Install and configure the Testkube CLI on a CI runner."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("SETUP_TESTKUBE_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("SETUP_TESTKUBE_LOG_FILE"),
        log_file_level=os.environ.get("SETUP_TESTKUBE_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )


_VERSION_OPTIONS = (
    click.option("--version", "version", default=None, help="Pin a CLI version (a leading 'v' is fine)."),
    click.option("--channel", default=None, help="Release channel when not pinned (default: stable)."),
    click.option("--json-output", "--json", "as_json", is_flag=True, help="Output the report as JSON."),
)


def _version_options(fn):
    """Options shared by both commands."""
    for option in reversed(_VERSION_OPTIONS):
        fn = option(fn)
    return fn


def _run(ctx: click.Context, variant: str, overrides: dict, as_json: bool) -> None:
    from setup_testkube.core.config.loader import ConfigError, load_parameters
    from setup_testkube.core.services.installer.orchestration.pipeline import run_pipeline

    try:
        params = load_parameters(config_path=ctx.obj.get("config_path"), overrides=overrides)
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({
                "variant": variant,
                "ok": False,
                "exit_code": 1,
                "error_kind": e.kind.value,
                "error": str(e),
                "stages": [],
            }, indent=2))
        else:
            click.secho(f"❌ {e.kind.value}: {e}", fg="red", err=True)
        sys.exit(1)

    quiet = ctx.obj.get("quiet", False)

    def _progress(result) -> None:
        if as_json or result.failed:
            return
        if quiet and not ctx.obj.get("verbose"):
            return
        if result.message:
            click.echo(result.message)

    report = run_pipeline(params, variant, on_progress=_progress)

    if as_json:
        data = report.to_dict()
        data["inputs"] = params.redacted()
        click.echo(json.dumps(data, indent=2))
        sys.exit(report.exit_code)

    failure = report.failure
    if failure is not None:
        kind = f"{failure.error_kind.value}: " if failure.error_kind else ""
        click.secho(f"❌ {kind}{failure.message}", fg="red", err=True)

    sys.exit(report.exit_code)


@cli.command()
@_version_options
@click.pass_context
def install(ctx: click.Context, version: str | None, channel: str | None, as_json: bool) -> None:
    """Install the Testkube CLI next to kubectl.

    Exits 0 without downloading when the CLI is already available.
    """
    _run(ctx, "install", {"version": version, "channel": channel}, as_json)


@cli.command()
@_version_options
@click.option("--namespace", default=None, help="Namespace Testkube runs in (cluster mode).")
@click.option("--url", default=None, help="Root domain of the Testkube API (cloud mode).")
@click.option("--url-api-subdomain", default=None, help="API subdomain prefix override.")
@click.option("--url-ui-subdomain", default=None, help="UI subdomain prefix override.")
@click.option("--url-logs-subdomain", default=None, help="Logs subdomain prefix override.")
@click.option("--organization", default=None, help="Organization ID (cloud mode).")
@click.option("--environment", default=None, help="Environment ID (cloud mode).")
@click.option("--token", default=None, help="API token (cloud mode).")
@click.pass_context
def setup(
    ctx: click.Context,
    version: str | None,
    channel: str | None,
    as_json: bool,
    namespace: str | None,
    url: str | None,
    url_api_subdomain: str | None,
    url_ui_subdomain: str | None,
    url_logs_subdomain: str | None,
    organization: str | None,
    environment: str | None,
    token: str | None,
) -> None:
    """Install the Testkube CLI and set its connection context.

    Cloud mode is used when organization, environment and token are
    all given; otherwise the CLI is pointed at the current kubeconfig.
    The exit code is that of ``testkube set context``.
    """
    overrides = {
        "version": version,
        "channel": channel,
        "namespace": namespace,
        "url": url,
        "url_api_subdomain": url_api_subdomain,
        "url_ui_subdomain": url_ui_subdomain,
        "url_logs_subdomain": url_logs_subdomain,
        "organization": organization,
        "environment": environment,
        "token": token,
    }
    _run(ctx, "setup", overrides, as_json)


if __name__ == "__main__":
    cli()

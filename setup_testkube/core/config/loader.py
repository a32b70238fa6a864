"""
Configuration loader — reads installer inputs into a Parameters model.

Sources, highest precedence first:

    1. explicit overrides (CLI options)
    2. CI inputs from the environment (``INPUT_VERSION``, ``INPUT_CHANNEL``, ...)
    3. an optional YAML file keyed by input name
    4. model defaults

The result is validated once and handed to the pipeline; nothing
here keeps module-level state.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from setup_testkube.core.models.params import Parameters
from setup_testkube.core.models.result import ErrorKind

logger = logging.getLogger(__name__)

# Input name (as the CI host spells it) → Parameters field
INPUT_FIELDS: dict[str, str] = {
    "version": "version",
    "channel": "channel",
    "namespace": "namespace",
    "url": "url",
    "urlApiSubdomain": "url_api_subdomain",
    "urlUiSubdomain": "url_ui_subdomain",
    "urlLogsSubdomain": "url_logs_subdomain",
    "organization": "organization",
    "environment": "environment",
    "token": "token",
}


class ConfigError(Exception):
    """Raised when installer inputs are invalid."""

    kind = ErrorKind.INVALID_CONFIGURATION


def input_env_name(name: str) -> str:
    """Environment variable the CI host uses for an input: ``urlApiSubdomain`` → ``INPUT_URLAPISUBDOMAIN``."""
    return "INPUT_" + name.replace(" ", "_").upper()


def read_env_inputs(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Collect non-empty CI inputs from the environment, keyed by field name."""
    env = os.environ if environ is None else environ
    values: dict[str, str] = {}
    for input_name, field in INPUT_FIELDS.items():
        raw = env.get(input_env_name(input_name), "")
        if raw.strip():
            values[field] = raw.strip()
    return values


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML inputs file.  Keys may be input names or field names."""
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading inputs from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The file may wrap everything under a "with" key, like a workflow step
    if isinstance(data.get("with"), dict):
        data = data["with"]

    known_fields = set(INPUT_FIELDS.values())
    values: dict[str, Any] = {}
    for key, value in data.items():
        field = INPUT_FIELDS.get(key, key)
        if field not in known_fields:
            logger.warning("Ignoring unknown input '%s' in %s", key, path)
            continue
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            raise ConfigError(f"Input '{key}' in {path} must be a single value")
        # YAML reads 1.10 as the float 1.1; only the quoted text is exact
        if field == "version" and not isinstance(value, str):
            raise ConfigError(
                f"Input 'version' in {path} must be quoted, e.g. version: \"1.10.0\""
            )
        values[field] = str(value)
    return values


def load_parameters(
    config_path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Parameters:
    """Merge all input sources and validate them.

    Args:
        config_path: Optional YAML inputs file.
        overrides: Field values from the CLI; ``None`` entries are ignored.
        environ: Environment to read ``INPUT_*`` from (default: ``os.environ``).

    Returns:
        Validated, frozen Parameters.

    Raises:
        ConfigError: If the file is unreadable or the inputs are inconsistent
            (e.g. partial cloud credentials).
    """
    merged: dict[str, Any] = {}
    if config_path is not None:
        merged.update(read_config_file(config_path))
    merged.update(read_env_inputs(environ))
    if overrides:
        merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        params = Parameters.model_validate(merged)
    except ValidationError as e:
        messages = "; ".join(err["msg"].removeprefix("Value error, ") for err in e.errors())
        raise ConfigError(f"Invalid inputs: {messages}") from e

    logger.info(
        "Inputs: version=%s channel=%s mode=%s",
        params.version or "<latest>", params.channel, params.mode,
    )
    return params

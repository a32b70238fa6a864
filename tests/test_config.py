"""
Tests for input loading — Parameters model, CI inputs, YAML file, precedence.
"""

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from setup_testkube.core.config.loader import (
    ConfigError,
    input_env_name,
    load_parameters,
    read_config_file,
    read_env_inputs,
)
from setup_testkube.core.models import ErrorKind, Parameters


class TestParameters:
    def test_defaults(self):
        p = Parameters()
        assert p.version is None
        assert p.channel == "stable"
        assert p.namespace == "testkube"
        assert p.url == "testkube.io"
        assert p.mode == "cluster"

    @pytest.mark.parametrize("raw,expected", [
        ("v1.2.3", "1.2.3"),
        ("1.2.3", "1.2.3"),
        (" v2.0.0-beta1 ", "2.0.0-beta1"),
        ("", None),
        (None, None),
    ])
    def test_version_normalized(self, raw, expected):
        assert Parameters(version=raw).version == expected

    def test_empty_strings_fall_back_to_defaults(self):
        p = Parameters(channel="", namespace="  ", url="")
        assert (p.channel, p.namespace, p.url) == ("stable", "testkube", "testkube.io")

    def test_cloud_mode(self):
        p = Parameters(organization="org", environment="env", token="tkn")
        assert p.mode == "cloud"

    @pytest.mark.parametrize("fields", [
        {"organization": "org"},
        {"organization": "org", "environment": "env"},
        {"token": "tkn"},
        {"environment": "env", "token": "tkn"},
    ])
    def test_partial_cloud_credentials_rejected(self, fields):
        with pytest.raises(ValidationError, match="organization, environment and token"):
            Parameters(**fields)

    def test_empty_cloud_fields_are_unset(self):
        p = Parameters(organization="", environment="", token="")
        assert p.mode == "cluster"

    def test_frozen(self):
        p = Parameters()
        with pytest.raises(ValidationError):
            p.channel = "beta"

    def test_redacted_hides_token(self):
        p = Parameters(organization="org", environment="env", token="secret")
        data = p.redacted()
        assert data["token"] == "***"
        assert data["mode"] == "cloud"


class TestEnvInputs:
    def test_env_name(self):
        assert input_env_name("version") == "INPUT_VERSION"
        assert input_env_name("urlApiSubdomain") == "INPUT_URLAPISUBDOMAIN"

    def test_reads_known_inputs(self):
        env = {
            "INPUT_VERSION": "v1.0.0",
            "INPUT_URLUISUBDOMAIN": "app",
            "INPUT_CHANNEL": "",
            "UNRELATED": "x",
        }
        assert read_env_inputs(env) == {"version": "v1.0.0", "url_ui_subdomain": "app"}


class TestConfigFile:
    def test_reads_input_names(self, tmp_path: Path):
        path = tmp_path / "inputs.yml"
        path.write_text(textwrap.dedent("""\
            version: v1.5.0
            channel: beta
            urlApiSubdomain: api2
        """))
        assert read_config_file(path) == {
            "version": "v1.5.0",
            "channel": "beta",
            "url_api_subdomain": "api2",
        }

    def test_with_wrapper(self, tmp_path: Path):
        path = tmp_path / "step.yml"
        path.write_text("with:\n  namespace: qa\n")
        assert read_config_file(path) == {"namespace": "qa"}

    def test_unknown_keys_ignored(self, tmp_path: Path):
        path = tmp_path / "inputs.yml"
        path.write_text("channel: beta\nflavour: vanilla\n")
        assert read_config_file(path) == {"channel": "beta"}

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "inputs.yml"
        path.write_text("")
        assert read_config_file(path) == {}

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            read_config_file(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "inputs.yml"
        path.write_text(":: invalid: yaml: [")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            read_config_file(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "inputs.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            read_config_file(path)

    def test_unquoted_numeric_version_rejected(self, tmp_path: Path):
        path = tmp_path / "inputs.yml"
        path.write_text("version: 1.10\n")
        with pytest.raises(ConfigError, match="must be quoted"):
            load_parameters(config_path=path, environ={})

    def test_quoted_version_kept_as_written(self, tmp_path: Path):
        path = tmp_path / "inputs.yml"
        path.write_text("version: \"1.10\"\n")
        assert load_parameters(config_path=path, environ={}).version == "1.10"

    def test_nested_value_rejected(self, tmp_path: Path):
        path = tmp_path / "inputs.yml"
        path.write_text("namespace:\n  - a\n")
        with pytest.raises(ConfigError, match="single value"):
            read_config_file(path)


class TestLoadParameters:
    def test_defaults_with_no_sources(self):
        p = load_parameters(environ={})
        assert p == Parameters()

    def test_precedence(self, tmp_path: Path):
        path = tmp_path / "inputs.yml"
        path.write_text("version: 1.0.0\nchannel: alpha\nnamespace: from-file\n")
        env = {"INPUT_VERSION": "2.0.0", "INPUT_CHANNEL": "beta"}
        p = load_parameters(config_path=path, overrides={"version": "v3.0.0", "channel": None}, environ=env)
        assert p.version == "3.0.0"
        assert p.channel == "beta"
        assert p.namespace == "from-file"

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("INPUT_VERSION", "v9.9.9")
        assert load_parameters().version == "9.9.9"

    def test_partial_cloud_is_invalid_configuration(self):
        with pytest.raises(ConfigError) as excinfo:
            load_parameters(environ={"INPUT_ORGANIZATION": "org-1"})
        assert excinfo.value.kind is ErrorKind.INVALID_CONFIGURATION
        assert "environment" in str(excinfo.value)
        assert "token" in str(excinfo.value)

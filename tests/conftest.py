"""
Shared test fixtures and configuration.
"""

import os
from pathlib import Path

import pytest

from setup_testkube.core.services.installer.execution.tool_cache import ToolCache
from archive_helpers import build_archive

_HOST_VARS = (
    "GITHUB_PATH",
    "GITHUB_TOKEN",
    "GITHUB_ACTIONS",
    "RUNNER_TOOL_CACHE",
    "SETUP_TESTKUBE_CACHE",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Strip CI inputs and host variables so tests see a blank runner."""
    for name in list(os.environ):
        if name.startswith("INPUT_"):
            monkeypatch.delenv(name, raising=False)
    for name in _HOST_VARS:
        monkeypatch.delenv(name, raising=False)
    # add_to_path() mutates PATH; monkeypatch restores it afterwards
    monkeypatch.setenv("PATH", os.environ.get("PATH", ""))


@pytest.fixture
def cli_archive() -> bytes:
    """A release archive shaped like the real one."""
    return build_archive({
        "README.md": b"# Testkube\n",
        "LICENSE": b"MIT\n",
        "kubectl-testkube": b"#!/bin/sh\necho testkube\n",
    })


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """A writable directory to install into."""
    d = tmp_path / "bin"
    d.mkdir()
    return d


@pytest.fixture
def tool_cache(tmp_path: Path) -> ToolCache:
    return ToolCache(tmp_path / "tool-cache")

"""
Tests for the versioned tool cache and PATH registration.
"""

import os
from pathlib import Path

from setup_testkube.core.services.installer.execution.tool_cache import (
    ToolCache,
    add_to_path,
    get_cache_root,
)


def _binary(tmp_path: Path, content: bytes = b"bin") -> Path:
    src = tmp_path / "kubectl-testkube"
    src.write_bytes(content)
    return src


class TestCacheRoot:
    def test_runner_tool_cache_wins(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("RUNNER_TOOL_CACHE", str(tmp_path / "runner"))
        monkeypatch.setenv("SETUP_TESTKUBE_CACHE", str(tmp_path / "own"))
        assert get_cache_root() == tmp_path / "runner"

    def test_own_override(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("SETUP_TESTKUBE_CACHE", str(tmp_path / "own"))
        assert get_cache_root() == tmp_path / "own"

    def test_default_under_home(self):
        assert get_cache_root().parts[-2:] == ("setup-testkube", "tool-cache")


class TestToolCache:
    def test_miss_on_empty_cache(self, tool_cache: ToolCache):
        assert tool_cache.find("kubectl-testkube", "1.2.3", "x86_64") is None

    def test_cache_then_find(self, tool_cache: ToolCache, tmp_path: Path):
        entry = tool_cache.cache_file(_binary(tmp_path), "kubectl-testkube", "1.2.3", "x86_64")
        assert entry == tool_cache.root / "kubectl-testkube" / "1.2.3" / "x86_64"
        assert tool_cache.find("kubectl-testkube", "1.2.3", "x86_64") == entry
        cached = entry / "kubectl-testkube"
        assert cached.read_bytes() == b"bin"
        assert os.access(cached, os.X_OK)

    def test_keyed_by_version_and_arch(self, tool_cache: ToolCache, tmp_path: Path):
        tool_cache.cache_file(_binary(tmp_path), "kubectl-testkube", "1.2.3", "x86_64")
        assert tool_cache.find("kubectl-testkube", "1.2.4", "x86_64") is None
        assert tool_cache.find("kubectl-testkube", "1.2.3", "arm64") is None

    def test_incomplete_entry_ignored(self, tool_cache: ToolCache):
        entry = tool_cache.entry_dir("kubectl-testkube", "1.2.3", "x86_64")
        entry.mkdir(parents=True)
        (entry / "kubectl-testkube").write_bytes(b"half")
        assert tool_cache.find("kubectl-testkube", "1.2.3", "x86_64") is None

    def test_overwrite_same_version(self, tool_cache: ToolCache, tmp_path: Path):
        tool_cache.cache_file(_binary(tmp_path, b"first"), "kubectl-testkube", "1.2.3", "x86_64")
        entry = tool_cache.cache_file(_binary(tmp_path, b"second"), "kubectl-testkube", "1.2.3", "x86_64")
        assert (entry / "kubectl-testkube").read_bytes() == b"second"


class TestAddToPath:
    def test_prepends_once(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("PATH", "/usr/bin")
        add_to_path(tmp_path)
        add_to_path(tmp_path)
        assert os.environ["PATH"] == f"{tmp_path}{os.pathsep}/usr/bin"

    def test_appends_to_github_path_file(self, monkeypatch, tmp_path: Path):
        github_path = tmp_path / "github_path"
        github_path.write_text("/existing\n")
        monkeypatch.setenv("GITHUB_PATH", str(github_path))
        add_to_path(tmp_path / "cache")
        assert github_path.read_text() == f"/existing\n{tmp_path / 'cache'}\n"

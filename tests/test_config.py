"""Tests for clifx_installer.config."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

import clifx_installer.config
from clifx_installer.config import InstallationRequest, InstallerConfig
from clifx_installer.errors import ConfigurationError


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    config = InstallerConfig()
    assert config.repo == "durableprogramming/clifx"
    assert config.tool_name == "clifx"
    assert config.install_dir == Path("~/.local/bin").expanduser()
    assert config.github_token is None
    assert config.latest_release_url == (
        "https://api.github.com/repos/durableprogramming/clifx/releases/latest"
    )


def test_github_token_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "abc")
    assert InstallerConfig().github_token == "abc"
    assert "abc" not in repr(InstallerConfig())


def test_config_is_immutable() -> None:
    config = InstallerConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.tool_name = "other"  # type: ignore[misc]
    request = InstallationRequest(install_dir=Path("/tmp"))
    with pytest.raises(dataclasses.FrozenInstanceError):
        request.version = "v1"  # type: ignore[misc]


def test_load_from_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    config_file = tmp_path / "installer.yaml"
    config_file.write_text(
        "repo_owner: someone\n"
        "repo_name: clifx-fork\n"
        "install_dir: ~/bin\n"
        "timeout: 5\n",
    )

    config = InstallerConfig.load_from_file(config_file)

    assert config.repo == "someone/clifx-fork"
    assert config.install_dir == tmp_path / "bin"
    assert config.timeout == 5.0
    assert config.tool_name == "clifx"


def test_load_from_empty_file(tmp_path: Path) -> None:
    config_file = tmp_path / "installer.yaml"
    config_file.write_text("")
    assert InstallerConfig.load_from_file(config_file).repo == "durableprogramming/clifx"


def test_explicit_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        InstallerConfig.load_from_file(tmp_path / "missing.yaml")


def test_default_file_missing_uses_defaults(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(clifx_installer.config, "DEFAULT_CONFIG_PATH", tmp_path / "none.yaml")
    assert InstallerConfig.load_from_file() == InstallerConfig()


def test_default_file_is_read(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    default = tmp_path / "installer.yaml"
    default.write_text("tool_name: fx\n")
    monkeypatch.setattr(clifx_installer.config, "DEFAULT_CONFIG_PATH", default)
    assert InstallerConfig.load_from_file().tool_name == "fx"


@pytest.mark.parametrize(
    ("content", "match"),
    [
        ("tools: [unclosed", "Invalid YAML"),
        ("- a\n- b\n", "must contain a mapping"),
        ("platforms: [linux]\n", "Unknown configuration keys: platforms"),
        ("timeout: soon\n", "Invalid timeout"),
    ],
)
def test_invalid_file(tmp_path: Path, content: str, match: str) -> None:
    config_file = tmp_path / "installer.yaml"
    config_file.write_text(content)
    with pytest.raises(ConfigurationError, match=match):
        InstallerConfig.load_from_file(config_file)

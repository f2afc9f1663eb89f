"""Configuration management for the clifx installer."""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/clifx/installer.yaml")
DEFAULT_INSTALL_DIR = Path("~/.local/bin")


def _default_github_token() -> str | None:
    return os.environ.get("GITHUB_TOKEN") or None


@dataclass(frozen=True)
class InstallerConfig:
    """Where releases come from and what gets installed."""

    repo_owner: str = "durableprogramming"
    repo_name: str = "clifx"
    tool_name: str = "clifx"
    api_url: str = "https://api.github.com"
    download_url: str = "https://github.com"
    install_dir: Path = field(
        default_factory=lambda: DEFAULT_INSTALL_DIR.expanduser(),
    )
    timeout: float = 30.0
    github_token: str | None = field(default_factory=_default_github_token, repr=False)

    @property
    def repo(self) -> str:
        """Return the repository as ``owner/name``."""
        return f"{self.repo_owner}/{self.repo_name}"

    @property
    def latest_release_url(self) -> str:
        """Return the API endpoint describing the latest release."""
        return f"{self.api_url.rstrip('/')}/repos/{self.repo}/releases/latest"

    def release_download_url(self, version: str, filename: str) -> str:
        """Return the download URL of a release asset."""
        base = self.download_url.rstrip("/")
        return f"{base}/{self.repo}/releases/download/{version}/{filename}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InstallerConfig:
        """Build a configuration from a mapping, rejecting unknown keys."""
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            msg = f"Unknown configuration keys: {', '.join(unknown)}"
            raise ConfigurationError(msg)

        values = dict(data)
        if values.get("install_dir") is not None:
            values["install_dir"] = Path(os.path.expanduser(str(values["install_dir"])))
        if values.get("timeout") is not None:
            try:
                values["timeout"] = float(values["timeout"])
            except (TypeError, ValueError) as e:
                msg = f"Invalid timeout: {values['timeout']!r}"
                raise ConfigurationError(msg) from e
        return cls(**{k: v for k, v in values.items() if v is not None})

    @classmethod
    def load_from_file(cls, config_path: str | Path | None = None) -> InstallerConfig:
        """Load configuration from a YAML file.

        Without an explicit path the default location is tried and built-in
        defaults are used when it does not exist.
        """
        explicit = config_path is not None
        path = Path(config_path if explicit else DEFAULT_CONFIG_PATH).expanduser()

        if not path.exists():
            if explicit:
                msg = f"Configuration file not found: {path}"
                raise ConfigurationError(msg)
            logger.debug("No configuration file at %s, using defaults", path)
            return cls()

        try:
            with open(path) as file:
                data = yaml.safe_load(file)
        except yaml.YAMLError as e:
            msg = f"Invalid YAML in configuration file: {path}"
            raise ConfigurationError(msg) from e
        except OSError as e:
            msg = f"Cannot read configuration file {path}: {e}"
            raise ConfigurationError(msg) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            msg = f"Configuration file {path} must contain a mapping"
            raise ConfigurationError(msg)

        logger.debug("Loaded configuration from %s", path)
        return cls.from_dict(data)


@dataclass(frozen=True)
class InstallationRequest:
    """What the caller asked for; built once from the command line."""

    install_dir: Path
    version: str | None = None
    use_native_package: bool = False

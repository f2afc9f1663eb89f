"""Resolve release versions and artifact names for the clifx installer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

import requests

from .errors import (
    DebianPackageUnavailable,
    DownloadFailed,
    UnsupportedDebArchitecture,
    VersionResolutionFailed,
)
from .platforms import Arch, Os
from .utils import github_token_header, log

if TYPE_CHECKING:
    from .config import InstallerConfig
    from .platforms import TargetTriple

logger = logging.getLogger(__name__)


class PackageFormat(str, Enum):
    """How the release artifact is packaged."""

    TARBALL = "tarball"
    DEBIAN_PACKAGE = "debian_package"


DEB_ARCH_MAP: dict[Arch, str] = {
    Arch.X86_64: "amd64",
    Arch.AARCH64: "arm64",
}


@dataclass(frozen=True)
class ArtifactDescriptor:
    """A downloadable release file."""

    filename: str
    download_url: str
    format: PackageFormat


class ReleaseTransport(Protocol):
    """Network access needed to resolve and fetch releases."""

    def fetch_latest_version(self) -> str:
        """Return the tag of the latest published release."""
        ...

    def download(self, url: str) -> bytes:
        """Return the body of ``url``, following redirects."""
        ...


class GitHubTransport:
    """ReleaseTransport backed by the GitHub releases API."""

    def __init__(
        self,
        config: InstallerConfig,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize with the installer configuration and an optional session."""
        self.config = config
        self.session = session or requests.Session()

    def fetch_latest_version(self) -> str:
        """Return the tag_name of the latest release from the GitHub API."""
        url = self.config.latest_release_url
        log(f"Fetching latest release from {url}", "info", "🔍")
        try:
            response = self.session.get(
                url,
                headers=github_token_header(self.config.github_token),
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            release = response.json()
        except requests.RequestException as e:
            msg = f"Failed to fetch latest version from {url}: {e}"
            raise VersionResolutionFailed(msg) from e
        except ValueError as e:
            msg = f"Invalid release metadata from {url}"
            raise VersionResolutionFailed(msg) from e

        tag = release.get("tag_name") if isinstance(release, dict) else None
        if not isinstance(tag, str) or not tag.strip():
            msg = f"No tag_name in release metadata from {url}"
            raise VersionResolutionFailed(msg)
        return tag.strip()

    def download(self, url: str) -> bytes:
        """Download a release asset and return its bytes."""
        logger.debug("GET %s", url)
        try:
            response = self.session.get(
                url,
                allow_redirects=True,
                timeout=self.config.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise DownloadFailed(url, str(e)) from e
        return response.content


def resolve_version(
    explicit: str | None,
    transport: ReleaseTransport,
) -> str:
    """Return the release version to install.

    An explicit version always wins and is used verbatim, without checking
    that such a release exists.
    """
    if explicit:
        logger.debug("Using explicit version %s", explicit)
        return explicit

    version = transport.fetch_latest_version()
    if not version:
        msg = "Failed to fetch latest version"
        raise VersionResolutionFailed(msg)
    log(f"Latest version: {version}", "info", "🏷️")
    return version


def deb_arch(arch: Arch) -> str:
    """Map an architecture to its Debian name."""
    try:
        return DEB_ARCH_MAP[arch]
    except KeyError:
        raise UnsupportedDebArchitecture(getattr(arch, "value", str(arch))) from None


def resolve_artifact(
    version: str,
    triple: TargetTriple,
    fmt: PackageFormat,
    config: InstallerConfig,
) -> ArtifactDescriptor:
    """Derive the artifact filename and URL; performs no I/O."""
    tool = config.tool_name
    if fmt is PackageFormat.TARBALL:
        filename = f"{tool}-{version}-{triple.target}.tar.gz"
    elif fmt is PackageFormat.DEBIAN_PACKAGE:
        if triple.os is not Os.LINUX:
            msg = ".deb installation is only available for Linux"
            raise DebianPackageUnavailable(msg)
        filename = f"{tool}-{version}-{deb_arch(triple.arch)}.deb"
    else:  # pragma: no cover
        msg = f"Unknown package format: {fmt}"
        raise ValueError(msg)

    return ArtifactDescriptor(
        filename=filename,
        download_url=config.release_download_url(version, filename),
        format=fmt,
    )

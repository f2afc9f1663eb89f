"""clifx-installer - install the clifx command-line tool.

Detects the host platform (OS, CPU architecture and C library), resolves
the matching GitHub release artifact of clifx, downloads it and installs
the executable, either from the release tarball or from the .deb package.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import InstallationRequest, InstallerConfig
from .platforms import Arch, Libc, Os, TargetTriple, detect_platform
from .release import (
    ArtifactDescriptor,
    GitHubTransport,
    PackageFormat,
    resolve_artifact,
    resolve_version,
)

__all__ = [
    "Arch",
    "ArtifactDescriptor",
    "GitHubTransport",
    "InstallationRequest",
    "InstallerConfig",
    "Libc",
    "Os",
    "PackageFormat",
    "TargetTriple",
    "detect_platform",
    "resolve_artifact",
    "resolve_version",
]

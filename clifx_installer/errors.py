"""Exceptions raised by the clifx installer."""

from __future__ import annotations


class InstallerError(Exception):
    """Base class for every failure that aborts an installation run."""

    label = "Installation error"

    def __init__(self, message: str) -> None:
        """Initialize the InstallerError."""
        self.message = message
        super().__init__(message)


class UnsupportedPlatform(InstallerError):
    """The host is outside the closed set of supported platforms."""

    label = "Unsupported platform"


class UnsupportedArchitecture(UnsupportedPlatform):
    """The machine architecture is not supported."""

    def __init__(self, raw: str) -> None:
        """Initialize with the raw architecture string."""
        self.raw = raw
        super().__init__(f"Unsupported architecture: {raw}")


class UnsupportedOS(UnsupportedPlatform):
    """The operating system is not supported."""

    def __init__(self, raw: str) -> None:
        """Initialize with the raw operating system string."""
        self.raw = raw
        super().__init__(f"Unsupported operating system: {raw}")


class UnsupportedDebArchitecture(UnsupportedPlatform):
    """No .deb package is published for this architecture."""

    def __init__(self, arch: str) -> None:
        """Initialize with the architecture that has no .deb mapping."""
        self.arch = arch
        super().__init__(f"Unsupported architecture for .deb package: {arch}")


class DebianPackageUnavailable(UnsupportedPlatform):
    """A .deb installation was requested on a host that cannot use one."""


class MissingPrerequisite(InstallerError):
    """A required external command is not on the search path."""

    label = "Missing prerequisite"

    def __init__(self, command: str, hint: str = "") -> None:
        """Initialize with the missing command name."""
        self.command = command
        msg = f"Required command '{command}' not found"
        if hint:
            msg = f"{msg}. {hint}"
        super().__init__(msg)


class VersionResolutionFailed(InstallerError):
    """The latest release version could not be determined."""

    label = "Version resolution failed"


class DownloadFailed(InstallerError):
    """An artifact could not be downloaded."""

    label = "Download failed"

    def __init__(self, url: str, reason: str = "") -> None:
        """Initialize with the URL that failed."""
        self.url = url
        msg = f"Failed to download {url}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class ExtractionFailed(InstallerError):
    """The archive is malformed or lacks the expected executable."""

    label = "Extraction failed"


class InstallFailed(InstallerError):
    """The executable or package could not be installed."""

    label = "Installation failed"


class ConfigurationError(InstallerError):
    """The configuration file is missing or invalid."""

    label = "Configuration error"

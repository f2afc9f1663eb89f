"""Install a downloaded artifact onto the host."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import ExtractionFailed, InstallFailed
from .extract import extract_binary
from .release import PackageFormat
from .utils import CommandRunner, is_root, log, run_command

if TYPE_CHECKING:
    from .config import InstallationRequest, InstallerConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallOutcome:
    """What an installation did."""

    installed_path: Path | None = None
    remediated: bool = False
    remediation_succeeded: bool = False


def copy_binary_to_destination(source_path: Path, destination_dir: Path, binary_name: str) -> Path:
    """Copy the binary to its destination and set permissions."""
    dest_path = destination_dir / binary_name
    try:
        destination_dir.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source_path, dest_path)
        dest_path.chmod(dest_path.stat().st_mode | 0o755)
    except OSError as e:
        msg = f"Could not install {binary_name} to {destination_dir}: {e}"
        raise InstallFailed(msg) from e
    log(f"Copied binary to {dest_path}", "success", "✅")
    return dest_path


def install_from_archive(
    archive_path: Path,
    request: InstallationRequest,
    config: InstallerConfig,
    area: Path,
) -> InstallOutcome:
    """Extract the archive in the working area and copy the executable out."""
    log("Extracting archive...", "info", "📦")
    extracted = extract_binary(archive_path, config.tool_name, area / "extracted")
    if not extracted.is_file():
        msg = f"Extraction of {archive_path.name} did not produce {config.tool_name}"
        raise ExtractionFailed(msg)

    log(f"Installing {config.tool_name} to {request.install_dir}...", "info", "📂")
    dest = copy_binary_to_destination(extracted, request.install_dir, config.tool_name)
    return InstallOutcome(installed_path=dest)


def _privileged(args: list[str]) -> list[str]:
    return args if is_root() else ["sudo", *args]


def install_from_deb(
    package_path: Path,
    runner: CommandRunner = run_command,
) -> InstallOutcome:
    """Install a .deb with dpkg, repairing dependencies once if that fails."""
    log("Installing .deb package...", "info", "📦")
    result = runner(_privileged(["dpkg", "-i", str(package_path)]))
    if result.returncode == 0:
        return InstallOutcome()

    log("Failed to install .deb package", "error", "❌")
    log("Attempting to fix dependencies...", "info", "🔧")
    repair = runner(_privileged(["apt-get", "install", "-f", "-y"]))
    if repair.returncode != 0:
        log(
            f"Dependency repair failed (exit code {repair.returncode})",
            "warning",
            "⚠️",
        )
    return InstallOutcome(
        remediated=True,
        remediation_succeeded=repair.returncode == 0,
    )


def install(
    local_path: Path,
    fmt: PackageFormat,
    request: InstallationRequest,
    config: InstallerConfig,
    area: Path,
    runner: CommandRunner = run_command,
) -> InstallOutcome:
    """Install an artifact using the procedure matching its format."""
    if fmt is PackageFormat.TARBALL:
        return install_from_archive(local_path, request, config, area)
    if fmt is PackageFormat.DEBIAN_PACKAGE:
        return install_from_deb(local_path, runner)
    msg = f"Unknown package format: {fmt}"  # pragma: no cover
    raise ValueError(msg)  # pragma: no cover

"""Command-line interface for the clifx installer."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from pathlib import Path
from types import FrameType
from typing import Callable, NoReturn, Sequence

from . import __version__
from .config import InstallationRequest, InstallerConfig
from .download import fetch, working_area
from .errors import DebianPackageUnavailable, InstallerError, InstallFailed
from .install import install
from .platforms import Os, TargetTriple, detect_platform
from .release import (
    GitHubTransport,
    PackageFormat,
    ReleaseTransport,
    deb_arch,
    resolve_artifact,
    resolve_version,
)
from .utils import (
    CommandRunner,
    is_root,
    log,
    require_commands,
    run_command,
    setup_logging,
)
from .verify import VerificationResult, verify

logger = logging.getLogger(__name__)

EXAMPLES = """\
examples:
  clifx-install                 # Install latest version
  clifx-install -v v0.1.0       # Install specific version
  clifx-install --deb           # Install using .deb package
  clifx-install -d ~/bin        # Install to custom directory
"""


class _HelpFormatter(
    argparse.ArgumentDefaultsHelpFormatter,
    argparse.RawDescriptionHelpFormatter,
):
    pass


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on invalid options."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        log(f"Error: {message}", "error", "❌")
        sys.exit(1)


def check_native_package_support(triple: TargetTriple) -> None:
    """Fail unless this host can install the .deb package."""
    if triple.os is not Os.LINUX:
        msg = ".deb installation is only available for Linux"
        raise DebianPackageUnavailable(msg)
    deb_arch(triple.arch)
    hint = ".deb installation requires a Debian-based system"
    require_commands(["dpkg", "apt-get"], hint)
    if not is_root():
        require_commands(["sudo"], "Installing a .deb package needs root privileges")


def run_install(
    request: InstallationRequest,
    config: InstallerConfig,
    transport: ReleaseTransport,
    runner: CommandRunner | None = None,
    detector: Callable[..., TargetTriple] | None = None,
) -> VerificationResult:
    """Detect, resolve, download, install and verify; raise on any failure."""
    runner = runner or run_command
    detector = detector or detect_platform
    log(f"{config.tool_name} installer", "info", "🛠️")

    triple = detector(runner=runner)
    log(f"Detected system: {triple}", "info", "💻")

    fmt = PackageFormat.TARBALL
    if request.use_native_package:
        check_native_package_support(triple)
        fmt = PackageFormat.DEBIAN_PACKAGE

    version = resolve_version(request.version, transport)
    descriptor = resolve_artifact(version, triple, fmt, config)
    logger.debug("Resolved artifact %s", descriptor)

    with working_area() as area:
        local_path = fetch(descriptor, area, transport)
        outcome = install(local_path, fmt, request, config, area, runner)

    # dpkg installs to /usr/bin, so install_dir says nothing about shadowing
    is_deb = fmt is PackageFormat.DEBIAN_PACKAGE
    result = verify(config, request.install_dir, runner, check_shadowing=not is_deb)
    if outcome.remediated and not result.found:
        msg = f"{config.tool_name} is not available after repairing package dependencies"
        raise InstallFailed(msg)

    via = " via .deb package" if is_deb else ""
    log(f"{config.tool_name} {version} installed successfully{via}!", "success", "✅")
    if result.found:
        log(
            f"Installation complete! Run '{config.tool_name} --help' to get started.",
            "success",
            "🎉",
        )
        log(f"Installed version: {result.version or 'unknown'}", "info", "🏷️")
    return result


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = _ArgumentParser(
        prog="clifx-install",
        description="Install the clifx command-line tool from its GitHub releases",
        epilog=EXAMPLES,
        formatter_class=_HelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--version",
        metavar="VERSION",
        help="Install specific version (default: latest)",
    )
    parser.add_argument(
        "-d",
        "--dir",
        metavar="DIRECTORY",
        help="Install directory (default: ~/.local/bin)",
    )
    parser.add_argument(
        "--deb",
        action="store_true",
        help="Use .deb package installation (Debian/Ubuntu only)",
    )
    parser.add_argument(
        "--config-file",
        type=str,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--installer-version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def _exit_on_signal(signum: int, _frame: FrameType | None) -> NoReturn:
    log(f"Received signal {signum}, aborting", "error", "❌")
    sys.exit(1)


def main(argv: Sequence[str] | None = None) -> None:
    """Main function to parse arguments and run the installation."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    signal.signal(signal.SIGTERM, _exit_on_signal)

    try:
        config = InstallerConfig.load_from_file(args.config_file)
        install_dir = Path(args.dir).expanduser() if args.dir else config.install_dir
        request = InstallationRequest(
            install_dir=install_dir,
            version=args.version,
            use_native_package=args.deb,
        )
        run_install(request, config, GitHubTransport(config))
    except InstallerError as e:
        log(f"{e.label}: {e.message}", "error", "❌")
        sys.exit(1)
    except KeyboardInterrupt:
        log("Installation interrupted", "error", "❌")
        sys.exit(1)
    except Exception as e:  # noqa: BLE001
        log(f"Error: {e!s}", "error", "❌", print_exception=True)
        sys.exit(1)


if __name__ == "__main__":
    main()

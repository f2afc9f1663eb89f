"""Check that the installed executable can be found and run."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from .utils import CommandRunner, log, run_command

if TYPE_CHECKING:
    from .config import InstallerConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    """Whether the tool was found on PATH, where, and the version it reported."""

    found: bool
    version: str | None = None
    path: Path | None = None


def _same_file(a: Path, b: Path) -> bool:
    try:
        return a.resolve() == b.resolve()
    except OSError:
        return False


def verify(
    config: InstallerConfig,
    install_dir: Path,
    runner: CommandRunner = run_command,
    *,
    check_shadowing: bool = True,
) -> VerificationResult:
    """Look the tool up on PATH and read its reported version.

    Never raises for a missing binary: it may be installed correctly in a
    directory that is simply not on PATH yet. With ``check_shadowing`` a
    different copy earlier on PATH than ``install_dir`` is reported.
    """
    tool = config.tool_name
    found = shutil.which(tool)
    if found is None:
        log(f"{tool} was installed but not found in PATH", "warning", "⚠️")
        log(f"You may need to add {install_dir} to your PATH", "info", "💡")
        return VerificationResult(found=False)

    path = Path(found)
    expected = install_dir / tool
    if check_shadowing and expected.exists() and not _same_file(path, expected):
        log(
            f"{path} shadows the newly installed {expected} on your PATH",
            "warning",
            "⚠️",
        )

    result = runner([str(path), "--version"], capture=True)
    version = (result.stdout or "").strip() if result.returncode == 0 else ""
    logger.debug("%s --version exited with %s", path, result.returncode)
    return VerificationResult(found=True, version=version or None, path=path)

"""Utility functions for the clifx installer."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from typing import Callable, Literal, Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .errors import MissingPrerequisite

# Initialize rich console
console = Console()
logger = logging.getLogger(__name__)

CommandRunner = Callable[..., "subprocess.CompletedProcess[str]"]

_STYLES = {
    "info": "blue",
    "success": "green",
    "warning": "yellow",
    "error": "bold red",
}


def log(
    message: str,
    level: Literal["default", "info", "success", "warning", "error"] = "default",
    emoji: str = "",
    *,
    print_exception: bool = False,
) -> None:
    """Print a styled message to the console."""
    if emoji:
        emoji = f"{emoji} "
    message = escape(message)
    style = _STYLES.get(level)
    if style:
        console.print(f"{emoji}[{style}]{message}[/{style}]")
    else:
        console.print(f"{emoji}{message}")
    if print_exception:
        console.print_exception()


def setup_logging(verbose: bool = False) -> None:  # noqa: FBT001, FBT002
    """Configure logging level based on verbosity."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def run_command(
    args: Sequence[str],
    *,
    capture: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Run an external command and return its completed process.

    With ``capture`` the combined stdout/stderr is collected in ``stdout``;
    otherwise the command writes straight to the terminal.
    A missing executable is reported as exit code 127 and one that cannot be
    executed as 126, like a shell would.
    """
    logger.debug("Running %s", " ".join(args))
    try:
        return subprocess.run(  # noqa: S603
            list(args),
            check=False,
            text=True,
            stdout=subprocess.PIPE if capture else None,
            stderr=subprocess.STDOUT if capture else None,
        )
    except FileNotFoundError as e:
        logger.debug("Command not found: %s", e)
        return subprocess.CompletedProcess(list(args), 127, stdout="", stderr=None)
    except OSError as e:
        logger.debug("Command could not be executed: %s", e)
        return subprocess.CompletedProcess(list(args), 126, stdout="", stderr=None)


def require_commands(commands: Sequence[str], hint: str = "") -> None:
    """Fail unless every command is available on the search path."""
    for cmd in commands:
        if shutil.which(cmd) is None:
            raise MissingPrerequisite(cmd, hint)
        logger.debug("Found prerequisite %s", cmd)


def is_root() -> bool:
    """Return True when running with an effective uid of 0."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def github_token_header(github_token: str | None) -> dict[str, str]:
    """Return an Authorization header when a GitHub token is available."""
    if github_token is None:
        return {}
    logger.debug("Using GitHub token for authentication")
    return {"Authorization": f"token {github_token}"}

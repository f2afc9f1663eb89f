"""Detect the host platform and map it to a canonical target triple."""

from __future__ import annotations

import logging
import platform
from dataclasses import dataclass
from enum import Enum

from .errors import UnsupportedArchitecture, UnsupportedOS
from .utils import CommandRunner, run_command

logger = logging.getLogger(__name__)


class Os(str, Enum):
    """Supported operating systems."""

    LINUX = "linux"
    DARWIN = "darwin"


class Arch(str, Enum):
    """Supported CPU architectures."""

    X86_64 = "x86_64"
    AARCH64 = "aarch64"


class Libc(str, Enum):
    """C library variants; NONE on systems where it is not part of the target."""

    GNU = "gnu"
    MUSL = "musl"
    NONE = "none"


_OS_ALIASES: dict[str, Os] = {
    "linux": Os.LINUX,
    "darwin": Os.DARWIN,
}

_ARCH_ALIASES: dict[str, Arch] = {
    "x86_64": Arch.X86_64,
    "amd64": Arch.X86_64,
    "aarch64": Arch.AARCH64,
    "arm64": Arch.AARCH64,
}


@dataclass(frozen=True)
class TargetTriple:
    """Canonical (os, arch, libc) identifier of a build target."""

    os: Os
    arch: Arch
    libc: Libc

    def __post_init__(self) -> None:
        """Check that libc is set exactly when the OS has one."""
        if (self.os is Os.LINUX) == (self.libc is Libc.NONE):
            msg = f"Invalid libc {self.libc.value!r} for {self.os.value}"
            raise ValueError(msg)

    @property
    def target(self) -> str:
        """Return the target string used in release archive names."""
        if self.os is Os.LINUX:
            return f"{self.arch.value}-unknown-linux-{self.libc.value}"
        return f"{self.arch.value}-apple-darwin"

    def __str__(self) -> str:
        """Return a short os/arch[/libc] description."""
        parts = [self.os.value, self.arch.value]
        if self.libc is not Libc.NONE:
            parts.append(self.libc.value)
        return "/".join(parts)


def normalize_os(raw: str) -> Os:
    """Map a raw operating system name (e.g. from uname -s) to an Os."""
    try:
        return _OS_ALIASES[raw.strip().lower()]
    except KeyError:
        raise UnsupportedOS(raw) from None


def normalize_arch(raw: str) -> Arch:
    """Map a raw machine name (e.g. from uname -m) to an Arch."""
    try:
        return _ARCH_ALIASES[raw.strip().lower()]
    except KeyError:
        raise UnsupportedArchitecture(raw) from None


def detect_libc(os_: Os, runner: CommandRunner = run_command) -> Libc:
    """Detect the C library by inspecting the dynamic linker's version banner.

    musl's ``ldd`` prints its banner and exits non-zero, so only the output
    is inspected, never the exit status.
    """
    if os_ is not Os.LINUX:
        return Libc.NONE
    result = runner(["ldd", "--version"], capture=True)
    banner = result.stdout or ""
    if "musl" in banner.lower():
        return Libc.MUSL
    return Libc.GNU


def detect_platform(
    system: str | None = None,
    machine: str | None = None,
    runner: CommandRunner = run_command,
) -> TargetTriple:
    """Detect the current platform and return its target triple."""
    raw_system = platform.system() if system is None else system
    raw_machine = platform.machine() if machine is None else machine
    logger.debug("Raw platform: system=%s machine=%s", raw_system, raw_machine)

    arch = normalize_arch(raw_machine)
    os_ = normalize_os(raw_system)
    libc = detect_libc(os_, runner)
    return TargetTriple(os=os_, arch=arch, libc=libc)

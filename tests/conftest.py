"""Configuration for pytest fixtures used in clifx installer tests."""

from __future__ import annotations

import io
import subprocess
import tarfile
from pathlib import Path
from typing import Callable, Sequence

import pytest

from clifx_installer.config import InstallerConfig
from clifx_installer.errors import DownloadFailed, VersionResolutionFailed


def create_tar_archive(files: dict[str, bytes]) -> bytes:
    """Create a gzip-compressed tar archive with the specified files.

    Names without an extension get mode 0o755, everything else 0o644.
    """
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(content)
            info.mode = 0o644 if "." in Path(name).name else 0o755
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


class FakeTransport:
    """In-memory ReleaseTransport recording every network access."""

    def __init__(
        self,
        latest: str | None = "v1.2.3",
        payloads: dict[str, bytes] | None = None,
    ) -> None:
        self.latest = latest
        self.payloads = payloads or {}
        self.version_calls = 0
        self.downloads: list[str] = []

    @property
    def network_calls(self) -> int:
        return self.version_calls + len(self.downloads)

    def fetch_latest_version(self) -> str:
        self.version_calls += 1
        if self.latest is None:
            msg = "Failed to fetch latest version"
            raise VersionResolutionFailed(msg)
        return self.latest

    def download(self, url: str) -> bytes:
        self.downloads.append(url)
        filename = url.rsplit("/", 1)[-1]
        if filename not in self.payloads:
            raise DownloadFailed(url, "404 Client Error: Not Found")
        return self.payloads[filename]


class FakeRunner:
    """CommandRunner returning canned results keyed by command name."""

    def __init__(self, results: dict[str, tuple[int, str]] | None = None) -> None:
        self.results = results or {}
        self.calls: list[list[str]] = []

    def __call__(
        self,
        args: Sequence[str],
        *,
        capture: bool = False,  # noqa: ARG002
    ) -> subprocess.CompletedProcess[str]:
        args = list(args)
        self.calls.append(args)
        command = [a for a in args if a != "sudo"]
        returncode, stdout = self.results.get(Path(command[0]).name, (0, ""))
        return subprocess.CompletedProcess(args, returncode, stdout=stdout)

    def commands(self, name: str) -> list[list[str]]:
        """Return the recorded calls of one command, sudo stripped."""
        stripped = [[a for a in call if a != "sudo"] for call in self.calls]
        return [call for call in stripped if Path(call[0]).name == name]


@pytest.fixture
def config() -> InstallerConfig:
    """A configuration that never reads the environment."""
    return InstallerConfig(github_token=None)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner({"ldd": (0, "ldd (Ubuntu GLIBC 2.35-0ubuntu3) 2.35")})


@pytest.fixture
def path_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty directory that is the only entry on PATH."""
    bin_dir = tmp_path / "path_bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", str(bin_dir))
    return bin_dir


@pytest.fixture
def make_executable() -> Callable[[Path, str], Path]:
    """Return a function that writes an executable shell script."""

    def _make(directory: Path, name: str) -> Path:
        path = directory / name
        path.write_text("#!/bin/sh\necho fake\n")
        path.chmod(0o755)
        return path

    return _make

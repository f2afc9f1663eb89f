"""Extract the executable from a release archive."""

from __future__ import annotations

import gzip
import io
import tarfile
from dataclasses import dataclass
from pathlib import Path

from .errors import ExtractionFailed


@dataclass
class ArchiveMember:
    """A regular file read from an archive."""

    name: str
    mode: int
    data: bytes


def _is_definitely_not_exec(filename: str) -> bool:
    """Check if a file is definitely not executable."""
    return filename.endswith((".deb", ".1", ".txt", ".md"))


def is_exec(filename: str, mode: int) -> bool:
    """Determine if a file is executable based on name and permissions."""
    if _is_definitely_not_exec(filename):
        return False
    if mode & 0o111 != 0:
        return True
    return "." not in Path(filename).name


def binary_chooser(name: str, mode: int, tool: str) -> tuple[bool, bool]:
    """Return (is the tool's binary, could be an executable)."""
    is_possible = is_exec(name, mode)
    return Path(name).name == tool and is_possible, is_possible


def _decompress_data(data: bytes) -> bytes:
    """Decompress gzip data."""
    try:
        with gzip.GzipFile(fileobj=io.BytesIO(data)) as gz:
            return gz.read()
    except (OSError, EOFError) as e:
        msg = f"Failed to decompress with gzip: {e}"
        raise ExtractionFailed(msg) from e


def read_tar_members(filename: str, data: bytes) -> list[ArchiveMember]:
    """Read every regular file of a gzip-compressed tar archive."""
    if not filename.endswith((".tar.gz", ".tgz")):
        msg = f"Unsupported archive format: {filename}"
        raise ExtractionFailed(msg)
    decompressed = _decompress_data(data)
    members = []
    try:
        with tarfile.open(fileobj=io.BytesIO(decompressed), mode="r:") as tar:
            for member in tar.getmembers():
                if not member.isfile():
                    continue
                file_data = tar.extractfile(member)
                if file_data:
                    members.append(
                        ArchiveMember(name=member.name, mode=member.mode, data=file_data.read()),
                    )
    except tarfile.TarError as e:
        msg = f"Failed to extract {filename}: {e}"
        raise ExtractionFailed(msg) from e
    return members


def choose_binary(members: list[ArchiveMember], tool: str) -> ArchiveMember:
    """Pick the tool's executable among the archive members.

    A direct name match wins; the shallowest one if there are several.
    """
    direct = [m for m in members if binary_chooser(m.name, m.mode, tool)[0]]
    if not direct:
        candidates = [m.name for m in members if binary_chooser(m.name, m.mode, tool)[1]]
        msg = f"Executable '{tool}' not found in archive"
        if candidates:
            msg = f"{msg} (candidates: {', '.join(candidates)})"
        raise ExtractionFailed(msg)
    return min(direct, key=lambda m: m.name.count("/"))


def extract_binary(archive_path: Path, tool: str, dest_dir: Path) -> Path:
    """Extract the tool's executable from an archive into ``dest_dir``.

    Only the chosen member is written, under its base name, so member paths
    inside the archive never influence where files land.
    """
    members = read_tar_members(archive_path.name, archive_path.read_bytes())
    member = choose_binary(members, tool)

    dest_dir.mkdir(parents=True, exist_ok=True)
    target = dest_dir / tool
    target.write_bytes(member.data)
    target.chmod((member.mode & 0o777) | 0o755)
    return target

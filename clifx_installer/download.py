"""Download release artifacts into a temporary working area."""

from __future__ import annotations

import contextlib
import logging
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

from .errors import DownloadFailed
from .utils import log

if TYPE_CHECKING:
    from .release import ArtifactDescriptor, ReleaseTransport

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def working_area(prefix: str = "clifx-install-") -> Iterator[Path]:
    """Create a private temporary directory, removed however the block exits."""
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix))
    logger.debug("Created working area %s", temp_dir)
    try:
        yield temp_dir
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)
        logger.debug("Removed working area %s", temp_dir)


def fetch(
    descriptor: ArtifactDescriptor,
    area: Path,
    transport: ReleaseTransport,
) -> Path:
    """Download an artifact into the working area and return its local path."""
    log(f"Downloading {descriptor.filename}...", "info", "📥")
    destination = area / descriptor.filename
    data = transport.download(descriptor.download_url)
    if not data:
        raise DownloadFailed(descriptor.download_url, "empty response")

    try:
        destination.write_bytes(data)
    except OSError as e:
        raise DownloadFailed(descriptor.download_url, str(e)) from e

    logger.debug("Saved %d bytes to %s", len(data), destination)
    return destination

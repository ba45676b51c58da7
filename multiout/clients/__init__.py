"""Storage client protocol for multiout transfers.

All clients implement the ``StorageClient`` protocol: ``download`` fetches
an object into a local directory and ``upload`` writes a local file to a
storage path.  Storage paths have the form ``<container>/<key>`` where the
container is the bucket (or Onedata space) name.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


class DownloadError(RuntimeError):
    """Raised when the source object cannot be fetched."""


class UploadError(RuntimeError):
    """Raised when a file cannot be written to a destination."""


def split_storage_path(path: str) -> tuple[str, str]:
    """Split ``<container>/<key>`` on the first slash.

    Leading and trailing slashes are ignored.  Raises ``ValueError`` if the
    path has no key part.
    """
    container, _, key = path.strip("/").partition("/")
    if not container or not key:
        raise ValueError(f"Storage path {path!r} must have the form <container>/<key>")
    return container, key


@runtime_checkable
class StorageClient(Protocol):
    """Protocol that every storage backend client must implement."""

    def download(self, work_dir: Path | str, source_path: str) -> str:
        """Fetch *source_path* into *work_dir* under the key's base name.

        Returns the local file name.  Raises ``DownloadError``.
        """
        ...

    def upload(self, local_file: Path | str, destination_path: str) -> None:
        """Write *local_file* to *destination_path*.

        Raises ``UploadError``.
        """
        ...


__all__ = [
    "DownloadError",
    "UploadError",
    "StorageClient",
    "split_storage_path",
]

"""Onedata storage client — Oneprovider CDMI REST API over ``httpx``.

Objects are addressed as ``https://<oneprovider>/cdmi/<space>/<key>``.
Non-CDMI GET/PUT requests transfer raw file contents, so no CDMI envelope
is built or parsed.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from urllib.parse import quote

import httpx

from multiout.clients import DownloadError, UploadError, split_storage_path

logger = logging.getLogger(__name__)

CDMI_PREFIX = "cdmi"


class OnedataStorageClient:
    """Downloads and uploads files in a Onedata space.

    Parameters
    ----------
    endpoint:
        Oneprovider host, with or without ``https://``.
    token:
        Access token sent as ``X-Auth-Token``.
    space:
        If set, every path must live in this space.
    """

    def __init__(
        self,
        endpoint: str,
        token: str,
        space: str = "",
        *,
        timeout: float = 60.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        base = endpoint if "://" in endpoint else f"https://{endpoint}"
        self.base_url = base.rstrip("/")
        self.space = space
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(
            headers={"X-Auth-Token": token},
            timeout=timeout,
        )

    def close(self) -> None:
        """Release the connection pool if this client created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> OnedataStorageClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _url(self, path: str) -> tuple[str, str]:
        space, key = split_storage_path(path)
        if self.space and space != self.space:
            raise ValueError(
                f"Path {path!r} is outside the configured space {self.space!r}"
            )
        return f"{self.base_url}/{CDMI_PREFIX}/{quote(space)}/{quote(key)}", key

    def download(self, work_dir: Path | str, source_path: str) -> str:
        try:
            url, key = self._url(source_path)
        except ValueError as exc:
            raise DownloadError(f"Error downloading file: {exc}") from exc

        target = Path(work_dir) / PurePosixPath(key).name
        try:
            with self._http.stream("GET", url) as response:
                response.raise_for_status()
                with target.open("wb") as fh:
                    for chunk in response.iter_bytes():
                        fh.write(chunk)
        except (httpx.HTTPError, OSError) as exc:
            raise DownloadError(f"Error downloading file '{source_path}': {exc}") from exc

        logger.debug("Downloaded %s to %s", url, target)
        return str(target)

    def upload(self, local_file: Path | str, destination_path: str) -> None:
        try:
            url, _ = self._url(destination_path)
        except ValueError as exc:
            raise UploadError(f"Error uploading file: {exc}") from exc

        try:
            with open(local_file, "rb") as fh:
                response = self._http.put(url, content=fh)
                response.raise_for_status()
        except (httpx.HTTPError, OSError) as exc:
            raise UploadError(f"Error uploading file to '{destination_path}': {exc}") from exc

        logger.debug("Uploaded %s to %s", local_file, url)

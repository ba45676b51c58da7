"""MinIO storage client built on the ``minio`` SDK."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from urllib.parse import urlsplit

from minio import Minio
from minio.error import MinioException

from multiout.clients import DownloadError, UploadError, split_storage_path

logger = logging.getLogger(__name__)


def parse_endpoint(endpoint: str) -> tuple[str, bool]:
    """Return ``(host[:port], secure)`` for a MinIO endpoint.

    ``https://`` enables TLS; ``http://`` and bare hosts do not.
    """
    if "://" not in endpoint:
        return endpoint.rstrip("/"), False
    parts = urlsplit(endpoint)
    return parts.netloc, parts.scheme.lower() == "https"


class MinioStorageClient:
    """Downloads and uploads objects on a MinIO server.

    Parameters
    ----------
    endpoint:
        Server URL, e.g. ``http://minio.example:9000``.
    access_key, secret_key:
        Static credentials.
    region:
        Region reported to the server; MinIO ignores it but the SDK
        otherwise performs a lookup request.
    """

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        *,
        region: str = "us-east-1",
        client: Minio | None = None,
    ) -> None:
        host, secure = parse_endpoint(endpoint)
        self.endpoint = host
        self.client = client or Minio(
            endpoint=host,
            access_key=access_key,
            secret_key=secret_key,
            secure=secure,
            region=region,
        )

    def download(self, work_dir: Path | str, source_path: str) -> str:
        try:
            bucket, key = split_storage_path(source_path)
        except ValueError as exc:
            raise DownloadError(f"Error downloading file: {exc}") from exc

        target = Path(work_dir) / PurePosixPath(key).name
        try:
            self.client.fget_object(
                bucket_name=bucket, object_name=key, file_path=str(target)
            )
        except (MinioException, OSError, ValueError) as exc:
            raise DownloadError(
                f"Error downloading file '{key}' from bucket '{bucket}': {exc}"
            ) from exc

        logger.debug("Downloaded %s/%s from %s to %s", bucket, key, self.endpoint, target)
        return str(target)

    def upload(self, local_file: Path | str, destination_path: str) -> None:
        try:
            bucket, key = split_storage_path(destination_path)
        except ValueError as exc:
            raise UploadError(f"Error uploading file: {exc}") from exc

        try:
            self.client.fput_object(
                bucket_name=bucket, object_name=key, file_path=str(local_file)
            )
        except (MinioException, OSError, ValueError) as exc:
            raise UploadError(
                f"Error uploading file '{key}' to bucket '{bucket}': {exc}"
            ) from exc

        logger.debug("Uploaded %s to %s/%s on %s", local_file, bucket, key, self.endpoint)

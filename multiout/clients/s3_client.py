"""Amazon S3 storage client built on ``boto3``."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Any, Optional

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from multiout.clients import DownloadError, UploadError, split_storage_path

logger = logging.getLogger(__name__)


class S3StorageClient:
    """Downloads and uploads objects on Amazon S3 (or an S3-compatible endpoint).

    Without explicit keys the default boto3 credential chain applies, which
    is what a function running with an execution role wants.
    """

    def __init__(
        self,
        access_key: str = "",
        secret_key: str = "",
        endpoint: str = "",
        region: Optional[str] = None,
        *,
        client: Any = None,
    ) -> None:
        if client is None:
            session = boto3.session.Session(region_name=region) if region else boto3.session.Session()
            kwargs: dict[str, Any] = {}
            if access_key and secret_key:
                kwargs["aws_access_key_id"] = access_key
                kwargs["aws_secret_access_key"] = secret_key
            if endpoint:
                kwargs["endpoint_url"] = endpoint
            client = session.client("s3", **kwargs)
        self.client = client

    def download(self, work_dir: Path | str, source_path: str) -> str:
        try:
            bucket, key = split_storage_path(source_path)
        except ValueError as exc:
            raise DownloadError(f"Error downloading file: {exc}") from exc

        target = Path(work_dir) / PurePosixPath(key).name
        try:
            self.client.download_file(bucket, key, str(target))
        except (BotoCoreError, ClientError, OSError) as exc:
            raise DownloadError(
                f"Error downloading file '{key}' from bucket '{bucket}': {exc}"
            ) from exc

        logger.debug("Downloaded s3://%s/%s to %s", bucket, key, target)
        return str(target)

    def upload(self, local_file: Path | str, destination_path: str) -> None:
        try:
            bucket, key = split_storage_path(destination_path)
        except ValueError as exc:
            raise UploadError(f"Error uploading file: {exc}") from exc

        try:
            self.client.upload_file(str(local_file), bucket, key)
        except (BotoCoreError, ClientError, S3UploadFailedError, OSError) as exc:
            raise UploadError(
                f"Error uploading file '{key}' to bucket '{bucket}': {exc}"
            ) from exc

        logger.debug("Uploaded %s to s3://%s/%s", local_file, bucket, key)

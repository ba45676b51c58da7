"""Storage client factory — builds the client for a provider declaration."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional

from multiout.clients import StorageClient
from multiout.clients.minio_client import MinioStorageClient
from multiout.clients.onedata_client import OnedataStorageClient
from multiout.clients.s3_client import S3StorageClient
from multiout.models.config import StorageProviderConfig

logger = logging.getLogger(__name__)

ClientFactory = Callable[[StorageProviderConfig], Optional[StorageClient]]


def _minio(provider: StorageProviderConfig, region: str) -> StorageClient:
    return MinioStorageClient(
        provider.auth.endpoint,
        provider.auth.access_key,
        provider.auth.secret_key,
        region=region,
    )


def _s3(provider: StorageProviderConfig, region: str) -> StorageClient:
    return S3StorageClient(
        access_key=provider.auth.access_key,
        secret_key=provider.auth.secret_key,
        endpoint=provider.auth.endpoint,
    )


def _onedata(provider: StorageProviderConfig, region: str) -> StorageClient:
    return OnedataStorageClient(
        provider.auth.endpoint,
        provider.auth.token,
        provider.auth.space,
    )


# Registry for client construction by provider type
CLIENT_BUILDERS: dict[str, Callable[[StorageProviderConfig, str], StorageClient]] = {
    "minio": _minio,
    "s3": _s3,
    "onedata": _onedata,
}


def get_client(
    provider: StorageProviderConfig, *, region: str = "us-east-1"
) -> StorageClient | None:
    """Return a client for *provider*, or ``None`` for an unknown type.

    The type match is case-insensitive.  ``None`` is a normal, checkable
    outcome; callers decide whether it is fatal.
    """
    builder = CLIENT_BUILDERS.get(provider.type.lower())
    if builder is None:
        logger.warning(
            "No storage client for provider %r of type %r", provider.name, provider.type
        )
        return None
    return builder(provider, region)

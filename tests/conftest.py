"""Shared test fixtures for multiout."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from multiout.clients import DownloadError, UploadError
from multiout.models.config import (
    AuthConfig,
    OutputRule,
    RoutingConfig,
    StorageProviderConfig,
)
from multiout.models.events import Event, EventSource

# ---------------------------------------------------------------------------
# Raw payloads, one per dialect
# ---------------------------------------------------------------------------


@pytest.fixture
def minio_payload() -> dict[str, Any]:
    """A MinIO ObjectCreated notification as MinIO emits it."""
    return {
        "Key": "images/nature-wallpaper-229.jpg",
        "Records": [
            {
                "s3": {
                    "object": {
                        "key": "nature-wallpaper-229.jpg",
                        "userMetadata": {"content-type": "image/jpeg"},
                        "eTag": "dd20b7e4b74467ff16ce2d901c054419",
                        "contentType": "image/jpeg",
                        "sequencer": "153C9A7A7A3FB6AE",
                        "versionId": "1",
                        "size": 1019645,
                    },
                    "s3SchemaVersion": "1.0",
                    "bucket": {
                        "ownerIdentity": {"principalId": "minio"},
                        "name": "images",
                        "arn": "arn:aws:s3:::images",
                    },
                    "configurationId": "Config",
                },
                "requestParameters": {"sourceIPAddress": "10.244.0.0:34852"},
                "responseElements": {
                    "x-amz-request-id": "153C9A7A7A3FB6AE",
                    "x-minio-origin-endpoint": "http://10.244.1.3:9000",
                },
                "eventVersion": "2.0",
                "eventName": "s3:ObjectCreated:Put",
                "awsRegion": "",
                "eventTime": "2018-06-29T10:23:44Z",
                "eventSource": "minio:s3",
                "userIdentity": {"principalId": "minio"},
            }
        ],
        "EventName": "s3:ObjectCreated:Put",
    }


@pytest.fixture
def s3_payload() -> dict[str, Any]:
    """An AWS S3 ObjectCreated notification."""
    return {
        "Records": [
            {
                "awsRegion": "us-east-1",
                "eventName": "ObjectCreated:Put",
                "eventSource": "aws:s3",
                "eventTime": "2019-02-23T11:40:46.473Z",
                "eventVersion": "2.1",
                "s3": {
                    "bucket": {
                        "arn": "arn:aws:s3:::scar-darknet-bucket",
                        "name": "scar-darknet-bucket",
                    },
                    "object": {
                        "eTag": "XXXXX",
                        "key": "scar-darknet-s3/input/dog.jpg",
                        "size": 999,
                    },
                    "s3SchemaVersion": "1.0",
                },
            }
        ]
    }


@pytest.fixture
def onedata_payload() -> dict[str, Any]:
    """A OneTrigger notification from a Onedata space."""
    return {
        "Key": "/my-onedata-space/files/file.txt",
        "Records": [
            {
                "objectKey": "file.txt",
                "objectId": "0000034500046EE9C6775",
                "eventTime": "2019-02-07T09:51:04.347823",
                "eventSource": "OneTrigger",
            }
        ],
    }


@pytest.fixture
def to_bytes() -> Callable[[Any], bytes]:
    """Serialize a payload dict the way the hosting runtime delivers it."""

    def _dump(payload: Any) -> bytes:
        return json.dumps(payload).encode("utf-8")

    return _dump


# ---------------------------------------------------------------------------
# Model factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """Factory fixture: build an Event with sensible defaults."""

    def _factory(
        object_key: str = "input/clip.avi",
        event_source: EventSource = EventSource.MINIO,
        **overrides: Any,
    ) -> Event:
        defaults: dict[str, Any] = {
            "path": f"in-bucket/{object_key}",
            "object_key": object_key,
            "event_time": "2018-06-29T10:23:44Z",
            "event_source": event_source,
        }
        defaults.update(overrides)
        return Event(**defaults)

    return _factory


@pytest.fixture
def make_rule() -> Callable[..., OutputRule]:
    """Factory fixture: build an OutputRule with sensible defaults."""

    def _factory(
        storage_name: str = "minio-out",
        path: str = "out-bucket/results",
        **overrides: Any,
    ) -> OutputRule:
        return OutputRule(storage_name=storage_name, path=path, **overrides)

    return _factory


@pytest.fixture
def make_provider() -> Callable[..., StorageProviderConfig]:
    """Factory fixture: build a StorageProviderConfig with sensible defaults."""

    def _factory(
        name: str = "minio-in",
        type: str = "minio",
        **auth: str,
    ) -> StorageProviderConfig:
        return StorageProviderConfig(name=name, type=type, auth=AuthConfig(**auth))

    return _factory


@pytest.fixture
def providers(make_provider: Callable[..., StorageProviderConfig]) -> dict[str, StorageProviderConfig]:
    """A source MinIO provider plus three destination providers."""
    declared = [
        make_provider("minio-in", "minio", endpoint="http://minio:9000"),
        make_provider("out-a", "minio", endpoint="http://a:9000"),
        make_provider("out-b", "s3"),
        make_provider("out-c", "onedata", endpoint="oneprovider", token="t"),
    ]
    return {p.name: p for p in declared}


@pytest.fixture
def routing_config(
    providers: dict[str, StorageProviderConfig],
    make_rule: Callable[..., OutputRule],
) -> RoutingConfig:
    """Config routing .avi files to out-a and everything to out-b."""
    return RoutingConfig(
        storage_providers=providers,
        outputs=[
            make_rule("out-a", "bucket-a/videos", suffix=["avi"]),
            make_rule("out-b", "bucket-b/all"),
        ],
    )


# ---------------------------------------------------------------------------
# In-memory storage backend
# ---------------------------------------------------------------------------


class FakeStorageClient:
    """StorageClient that reads and writes an in-memory object map."""

    def __init__(
        self,
        name: str,
        objects: dict[str, bytes],
        *,
        fail_download: bool = False,
        fail_upload: bool = False,
        upload_exc: type[Exception] = UploadError,
    ) -> None:
        self.name = name
        self.objects = objects
        self.fail_download = fail_download
        self.fail_upload = fail_upload
        self.upload_exc = upload_exc
        self.downloads: list[str] = []
        self.uploads: list[str] = []
        self.work_dirs: list[Path] = []
        self.closed = 0

    def download(self, work_dir: Path | str, source_path: str) -> str:
        self.downloads.append(source_path)
        self.work_dirs.append(Path(work_dir))
        if self.fail_download:
            raise DownloadError(f"{self.name}: download refused")
        key = source_path.strip("/")
        if key not in self.objects:
            raise DownloadError(f"{self.name}: no such object {key}")
        target = Path(work_dir) / key.rsplit("/", 1)[-1]
        target.write_bytes(self.objects[key])
        return str(target)

    def upload(self, local_file: Path | str, destination_path: str) -> None:
        self.uploads.append(destination_path)
        if self.fail_upload:
            raise self.upload_exc(f"{self.name}: upload refused")
        self.objects[destination_path.strip("/")] = Path(local_file).read_bytes()

    def close(self) -> None:
        self.closed += 1


class FakeBackend:
    """Client factory handing out one FakeStorageClient per provider name.

    Every provider shares the same object map so uploads can be inspected
    in one place.  Names listed in ``failing_uploads`` reject uploads;
    names in ``no_client`` make the factory return ``None``.
    """

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.failing_uploads: set[str] = set()
        self.failing_downloads: set[str] = set()
        self.no_client: set[str] = set()
        self.clients: dict[str, FakeStorageClient] = {}
        self.created: list[str] = []

    def __call__(self, provider: StorageProviderConfig) -> FakeStorageClient | None:
        self.created.append(provider.name)
        if provider.name in self.no_client:
            return None
        client = FakeStorageClient(
            provider.name,
            self.objects,
            fail_download=provider.name in self.failing_downloads,
            fail_upload=provider.name in self.failing_uploads,
        )
        self.clients[provider.name] = client
        return client

    def upload_attempts(self) -> dict[str, list[str]]:
        return {name: list(c.uploads) for name, c in self.clients.items() if c.uploads}


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Provide an in-memory backend preloaded with one source object."""
    backend = FakeBackend()
    backend.objects["in-bucket/input/clip.avi"] = b"\x00fake-video\x01"
    return backend


@pytest.fixture
def make_fake_client() -> Callable[..., FakeStorageClient]:
    """Factory fixture: build a standalone FakeStorageClient."""

    def _factory(name: str = "fake", objects: dict[str, bytes] | None = None, **kwargs: Any) -> FakeStorageClient:
        return FakeStorageClient(name, objects if objects is not None else {}, **kwargs)

    return _factory

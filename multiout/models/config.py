"""Routing configuration models — storage providers and output rules."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class AuthConfig(BaseModel):
    """Credentials and endpoint bag for one storage provider.

    Which fields matter depends on the provider type: MinIO and S3 use the
    key pair and endpoint, Onedata uses endpoint, token and space.
    """

    model_config = ConfigDict(frozen=True)

    access_key: StrictStr = ""
    secret_key: StrictStr = ""
    endpoint: StrictStr = ""
    token: StrictStr = ""
    space: StrictStr = ""


class StorageProviderConfig(BaseModel):
    """A named storage provider declaration."""

    model_config = ConfigDict(frozen=True)

    name: StrictStr = Field(min_length=1)
    type: StrictStr = ""  # stamped from the group the provider is declared in
    auth: AuthConfig = AuthConfig()


class OutputRule(BaseModel):
    """Filter + destination pair controlling fan-out.

    An empty ``prefix`` or ``suffix`` list matches any object key for
    that dimension.
    """

    model_config = ConfigDict(frozen=True)

    storage_name: StrictStr = Field(min_length=1)
    path: StrictStr
    suffix: list[StrictStr] = []
    prefix: list[StrictStr] = []

    @field_validator("suffix", "prefix", mode="before")
    @classmethod
    def _null_means_empty(cls, value: object) -> object:
        return [] if value is None else value


class StorageGroups(BaseModel):
    """Provider declarations grouped by provider type."""

    model_config = ConfigDict(frozen=True)

    s3: list[StorageProviderConfig] = []
    minio: list[StorageProviderConfig] = []
    onedata: list[StorageProviderConfig] = []

    @field_validator("s3", "minio", "onedata", mode="before")
    @classmethod
    def _null_means_empty(cls, value: object) -> object:
        return [] if value is None else value


class RawRoutingConfig(BaseModel):
    """The configuration document exactly as written."""

    model_config = ConfigDict(frozen=True)

    storages: StorageGroups = StorageGroups()
    output: list[OutputRule] = []

    @field_validator("storages", mode="before")
    @classmethod
    def _null_storages(cls, value: object) -> object:
        return {} if value is None else value

    @field_validator("output", mode="before")
    @classmethod
    def _null_output(cls, value: object) -> object:
        return [] if value is None else value


class RoutingConfig(BaseModel):
    """Loaded configuration, read-only for the whole invocation.

    ``storage_providers`` is keyed by provider name; iteration order is the
    declaration order of the s3, minio and onedata groups, in that order.
    """

    model_config = ConfigDict(frozen=True)

    storage_providers: dict[str, StorageProviderConfig] = {}
    outputs: list[OutputRule] = []

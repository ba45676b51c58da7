"""Routing configuration loader.

Reads the JSON configuration document (storage providers grouped by type,
plus the output rule list) into a ``RoutingConfig``.  Each provider's
``type`` is stamped from the group it was declared in, and providers are
keyed by name.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from multiout.models.config import (
    RawRoutingConfig,
    RoutingConfig,
    StorageProviderConfig,
)

logger = logging.getLogger(__name__)


class InvalidConfigError(ValueError):
    """Raised when the configuration document is unreadable or malformed."""


def _index_providers(raw: RawRoutingConfig) -> dict[str, StorageProviderConfig]:
    providers: dict[str, StorageProviderConfig] = {}
    groups = (
        ("s3", raw.storages.s3),
        ("minio", raw.storages.minio),
        ("onedata", raw.storages.onedata),
    )
    for provider_type, declared in groups:
        for provider in declared:
            if provider.name in providers:
                logger.warning(
                    "Storage provider %r declared more than once; "
                    "the %s declaration replaces the earlier one",
                    provider.name,
                    provider_type,
                )
            providers[provider.name] = provider.model_copy(update={"type": provider_type})
    return providers


def read_config(source: bytes | str) -> RoutingConfig:
    """Parse a configuration document.

    Raises
    ------
    InvalidConfigError
        If the document is not JSON, not an object, or does not match the
        configuration schema.
    """
    if isinstance(source, bytes):
        try:
            source = source.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidConfigError(f"Config is not UTF-8: {exc}") from exc

    try:
        data = json.loads(source)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise InvalidConfigError(f"Invalid config format: {exc}") from exc

    if not isinstance(data, dict):
        raise InvalidConfigError(
            f"Config must be a JSON object, got {type(data).__name__}"
        )

    try:
        raw = RawRoutingConfig.model_validate(data)
    except ValidationError as exc:
        raise InvalidConfigError(f"Invalid config format: {exc}") from exc

    return RoutingConfig(
        storage_providers=_index_providers(raw),
        outputs=list(raw.output),
    )


def load_config_file(path: Path | str) -> RoutingConfig:
    """Read and parse the configuration document at *path*."""
    path = Path(path)
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise InvalidConfigError(f"Error loading config file {path}: {exc}") from exc

    config = read_config(content)
    logger.debug(
        "Loaded %d storage provider(s) and %d output rule(s) from %s",
        len(config.storage_providers),
        len(config.outputs),
        path,
    )
    return config

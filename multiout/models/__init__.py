"""multiout data models — all Pydantic v2, all frozen (immutable)."""

from multiout.models.config import (
    AuthConfig,
    OutputRule,
    RawRoutingConfig,
    RoutingConfig,
    StorageGroups,
    StorageProviderConfig,
)
from multiout.models.events import (
    DIALECT_TYPE_MAP,
    Event,
    EventSource,
    OneTriggerDialect,
    RawDialect,
    S3Dialect,
)
from multiout.models.routing import RoutingDecision, TransferReport

__all__ = [
    # events
    "Event",
    "EventSource",
    "OneTriggerDialect",
    "S3Dialect",
    "RawDialect",
    "DIALECT_TYPE_MAP",
    # config
    "AuthConfig",
    "StorageProviderConfig",
    "OutputRule",
    "StorageGroups",
    "RawRoutingConfig",
    "RoutingConfig",
    # routing
    "RoutingDecision",
    "TransferReport",
]

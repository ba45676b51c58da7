"""Canonical storage event and the provider dialects it is parsed from.

Every notification, whatever backend emitted it, is reduced to one frozen
``Event``.  Each supported provider payload shape (a *dialect*) is a typed
Pydantic schema with a pure ``to_event()`` mapping.  ``DIALECT_TYPE_MAP``
selects the schema from the ``eventSource`` tag of the first record.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Literal, Union
from urllib.parse import unquote_plus

from pydantic import BaseModel, ConfigDict, Field, StrictStr

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class EventSource(str, Enum):
    """Canonical provider tags an event can originate from."""

    S3 = "s3"
    MINIO = "minio"
    ONEDATA = "onedata"


class Event(BaseModel):
    """Provider-agnostic record of one changed object.

    ``path`` is ``<container>/<key>`` for bucket-style sources and the
    space-relative path reported by Onedata otherwise.  ``event_time`` is
    kept exactly as the origin reported it.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    object_key: str
    event_time: str
    event_source: EventSource


def unescape_key(key: str) -> str:
    """URL-unescape an object key with query semantics (``+`` is a space).

    Raises ``ValueError`` for malformed ``%`` escapes or escapes that do
    not decode to UTF-8.
    """
    if _BAD_ESCAPE.search(key):
        raise ValueError(f"Malformed escape sequence in key: {key!r}")
    try:
        return unquote_plus(key, errors="strict")
    except UnicodeDecodeError as exc:
        raise ValueError(f"Key is not valid UTF-8 once unescaped: {key!r}") from exc


# ---------------------------------------------------------------------------
# OneTrigger (Onedata) dialect
# ---------------------------------------------------------------------------


class OneTriggerRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    eventSource: Literal["OneTrigger"]
    objectKey: StrictStr
    eventTime: StrictStr


class OneTriggerDialect(BaseModel):
    """OneTrigger notification: ``Key`` at top level, details in the record."""

    model_config = ConfigDict(frozen=True)

    Key: StrictStr
    record: OneTriggerRecord

    def to_event(self) -> Event:
        return Event(
            path=self.Key,
            object_key=self.record.objectKey,
            event_time=self.record.eventTime,
            event_source=EventSource.ONEDATA,
        )


# ---------------------------------------------------------------------------
# S3-style dialect (AWS S3 and MinIO)
# ---------------------------------------------------------------------------


class S3Bucket(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: StrictStr


class S3Object(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: StrictStr


class S3Entity(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    bucket: S3Bucket
    s3_object: S3Object = Field(alias="object")


class S3Record(BaseModel):
    model_config = ConfigDict(frozen=True)

    eventSource: Literal["aws:s3", "minio:s3"]
    eventTime: StrictStr
    s3: S3Entity


_S3_SOURCES: dict[str, EventSource] = {
    "aws:s3": EventSource.S3,
    "minio:s3": EventSource.MINIO,
}


class S3Dialect(BaseModel):
    """S3 ``Records`` notification as sent by AWS S3 and MinIO."""

    model_config = ConfigDict(frozen=True)

    record: S3Record

    def to_event(self) -> Event:
        """Map to the canonical event.

        Raises ``ValueError`` if the object key cannot be unescaped.
        """
        key = unescape_key(self.record.s3.s3_object.key)
        return Event(
            path=f"{self.record.s3.bucket.name}/{key}",
            object_key=key,
            event_time=self.record.eventTime,
            event_source=_S3_SOURCES[self.record.eventSource],
        )


RawDialect = Union[OneTriggerDialect, S3Dialect]

# Registry for dialect selection by the first record's eventSource tag
DIALECT_TYPE_MAP: dict[str, type[RawDialect]] = {
    "OneTrigger": OneTriggerDialect,
    "aws:s3": S3Dialect,
    "minio:s3": S3Dialect,
}

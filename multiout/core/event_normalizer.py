"""Event normalizer — turns raw provider notifications into canonical events.

The payload is parsed as generic JSON first; the ``eventSource`` tag of the
first record then selects a typed dialect schema which is validated strictly
and mapped to an ``Event``.  Only the first record of a ``Records`` batch is
consulted; any further records are ignored.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from multiout.models.events import DIALECT_TYPE_MAP, Event, RawDialect


class InvalidEventError(ValueError):
    """Raised when a payload is malformed, incomplete, or of an unknown dialect."""


def _first_record(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise InvalidEventError(
            f"Event must be a JSON object, got {type(data).__name__}"
        )

    records = data.get("Records")
    if not isinstance(records, list):
        raise InvalidEventError("Missing or non-array Records field")
    if not records:
        raise InvalidEventError("Records field is empty")

    record = records[0]
    if not isinstance(record, dict):
        raise InvalidEventError(
            f"First record must be a JSON object, got {type(record).__name__}"
        )
    return record


def parse_dialect(raw_payload: bytes | str) -> RawDialect:
    """Parse a raw payload into its typed dialect variant.

    Raises
    ------
    InvalidEventError
        If the payload is not JSON, has no usable first record, carries an
        unrecognized ``eventSource``, or fails the dialect schema.
    """
    if isinstance(raw_payload, bytes):
        try:
            raw_payload = raw_payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidEventError(f"Event is not UTF-8: {exc}") from exc

    try:
        data = json.loads(raw_payload)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise InvalidEventError(f"Invalid JSON: {exc}") from exc

    record = _first_record(data)

    source = record.get("eventSource")
    model_cls = DIALECT_TYPE_MAP.get(source) if isinstance(source, str) else None
    if model_cls is None:
        raise InvalidEventError(f"Unsupported eventSource: {source!r}")

    try:
        return model_cls.model_validate({"Key": data.get("Key"), "record": record})
    except ValidationError as exc:
        raise InvalidEventError(
            f"Invalid {source} event: {exc.error_count()} validation error(s): {exc}"
        ) from exc


def normalize(raw_payload: bytes | str) -> Event:
    """Parse a raw notification payload into the canonical ``Event``.

    Pure function of its input.  No partial event is ever returned.

    Raises
    ------
    InvalidEventError
        On any malformed, incomplete, or unrecognized payload, including
        object keys whose URL escaping cannot be decoded.
    """
    dialect = parse_dialect(raw_payload)
    try:
        return dialect.to_event()
    except ValueError as exc:
        raise InvalidEventError(str(exc)) from exc

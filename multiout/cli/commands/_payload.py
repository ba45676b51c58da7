"""Shared payload reading for CLI commands."""

from __future__ import annotations

import sys
from pathlib import Path

import typer


def read_payload(source: str) -> bytes:
    """Read an event payload from a file, or from stdin when *source* is ``-``."""
    if source == "-":
        return sys.stdin.buffer.read()
    try:
        return Path(source).read_bytes()
    except OSError as exc:
        raise typer.BadParameter(f"Cannot read payload {source!r}: {exc}") from exc

"""Logging setup shared by the function handler and the CLI."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO", *, debug: bool = False, rich: bool = False) -> None:
    """Install a root handler once and set the ``multiout`` logger level.

    The function runtime collects plain stderr lines; the CLI gets Rich
    formatting.  Handlers already installed by the host are left alone.
    """
    resolved = logging.DEBUG if debug else logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        if rich:
            handler: logging.Handler = RichHandler(show_path=False, rich_tracebacks=True)
            handler.setFormatter(logging.Formatter("%(message)s"))
        else:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(resolved)

    logging.getLogger("multiout").setLevel(resolved)

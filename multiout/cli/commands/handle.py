"""``multiout handle PAYLOAD`` — run the function handler on a saved event.

Equivalent to one invocation by the hosting runtime: the configuration is
read from ``--config`` (or from the location given by the environment), the
event is routed, and the object is transferred.  Outcomes are logged.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from multiout.cli.commands._payload import read_payload
from multiout.config import Settings
from multiout.handler import handle
from multiout.observability import configure_logging


def handle_cmd(
    payload: str = typer.Argument(
        ...,
        help="Path to the event payload JSON, or '-' for stdin.",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Routing configuration document (defaults to $MULTIOUT_SECRETS_DIR/$CONFIG_FILE).",
    ),
    workers: int = typer.Option(
        1,
        "--workers",
        "-w",
        min=1,
        help="Number of concurrent uploads.",
    ),
) -> None:
    """Route and transfer the object named by an event payload."""
    overrides: dict = {"max_upload_workers": workers}
    if config_path is not None:
        overrides["secrets_dir"] = config_path.parent
        overrides["config_file"] = config_path.name
    settings = Settings(**overrides)
    configure_logging(settings.log_level, debug=settings.debug, rich=True)
    handle(read_payload(payload), settings=settings)

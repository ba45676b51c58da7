"""Function entry point — one raw event in, an empty string out.

``handle`` is what the hosting runtime calls.  It never raises.  The
expected failure modes (bad settings, bad event, bad configuration, no
source provider, failed download) are logged and the invocation ends
cleanly; anything else is logged with its traceback.
Per-destination upload failures are logged by the orchestrator.
"""

from __future__ import annotations

import functools
import logging

from pydantic import ValidationError

from multiout.clients import DownloadError
from multiout.clients.factory import get_client
from multiout.config import Settings
from multiout.core.config_loader import InvalidConfigError, load_config_file
from multiout.core.event_normalizer import InvalidEventError, normalize
from multiout.core.orchestrator import NoSourceProviderError, TransferOrchestrator
from multiout.core.router import compute_destinations
from multiout.models.config import RoutingConfig
from multiout.models.routing import TransferReport
from multiout.observability import configure_logging

logger = logging.getLogger(__name__)


def build_orchestrator(settings: Settings) -> TransferOrchestrator:
    """Create an orchestrator wired to the real storage clients."""
    return TransferOrchestrator(
        functools.partial(get_client, region=settings.minio_region),
        max_workers=settings.max_upload_workers,
        work_dir=settings.work_dir,
    )


def process_event(
    raw_event: bytes | str,
    config: RoutingConfig,
    *,
    orchestrator: TransferOrchestrator | None = None,
) -> TransferReport | None:
    """Normalize, route, and transfer one event.

    Returns ``None`` when no output rule matches the event.

    Raises
    ------
    InvalidEventError, NoSourceProviderError, DownloadError
    """
    event = normalize(raw_event)
    logger.info(
        "Received %s event from file '%s'", event.event_source.value, event.object_key
    )

    destinations = compute_destinations(event, config.outputs)
    if not destinations:
        logger.info(
            "The file '%s' does not match any output rule",
            event.object_key,
        )
        return None

    orchestrator = orchestrator or TransferOrchestrator()
    return orchestrator.process(event, config.storage_providers, destinations)


def handle(
    req: bytes | str,
    *,
    settings: Settings | None = None,
    config: RoutingConfig | None = None,
    orchestrator: TransferOrchestrator | None = None,
) -> str:
    """Handle one serverless invocation.  Always returns ``""``."""
    try:
        settings = settings or Settings()
    except ValidationError as exc:
        configure_logging()
        logger.error("Invalid settings: %s", exc)
        return ""
    configure_logging(settings.log_level, debug=settings.debug)

    try:
        if config is None:
            config = load_config_file(settings.config_path)
        process_event(
            req,
            config,
            orchestrator=orchestrator or build_orchestrator(settings),
        )
    except InvalidConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
    except InvalidEventError as exc:
        logger.error("Invalid event: %s", exc)
    except NoSourceProviderError as exc:
        logger.error("Event cannot be delivered: %s", exc)
    except DownloadError as exc:
        logger.error("The file cannot be downloaded from any storage provider: %s", exc)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error while handling event: %s", exc)

    return ""

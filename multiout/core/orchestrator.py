"""Transfer orchestrator — one download, then one upload per destination.

The source object is fetched once from the first configured provider whose
type matches the event's origin.  The local copy is then uploaded to every
matched destination.  A failed destination is logged and recorded but does
not stop the remaining uploads; a failed download aborts the transfer before
any upload is attempted.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from multiout.clients import DownloadError, StorageClient, UploadError
from multiout.clients.factory import ClientFactory, get_client
from multiout.models.config import StorageProviderConfig
from multiout.models.events import Event
from multiout.models.routing import RoutingDecision, TransferReport

logger = logging.getLogger(__name__)


class NoSourceProviderError(LookupError):
    """Raised when no configured provider matches the event's origin type."""


class TransferOrchestrator:
    """Drives the download-then-fan-out transfer for one event.

    Parameters
    ----------
    client_factory:
        Builds a ``StorageClient`` for a provider, or returns ``None`` when
        the provider type has no client.  Defaults to ``get_client``.
    max_workers:
        Number of uploads run concurrently.  ``1`` uploads sequentially.
    work_dir:
        Parent directory for the temporary working directory.  The system
        temporary directory is used when ``None``.

    Usage
    -----
    >>> orchestrator = TransferOrchestrator()
    >>> report = orchestrator.process(event, config.storage_providers, destinations)
    """

    def __init__(
        self,
        client_factory: ClientFactory | None = None,
        *,
        max_workers: int = 1,
        work_dir: Path | str | None = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._client_factory = client_factory or get_client
        self._max_workers = max_workers
        self._work_dir = Path(work_dir) if work_dir else None

    # ------------------------------------------------------------------
    # Source
    # ------------------------------------------------------------------

    @staticmethod
    def find_source_provider(
        event: Event, providers: Mapping[str, StorageProviderConfig]
    ) -> StorageProviderConfig:
        """Return the first provider whose type equals the event source."""
        for provider in providers.values():
            if provider.type == event.event_source.value:
                return provider
        raise NoSourceProviderError(
            f"No storage provider of type '{event.event_source.value}' is configured "
            f"to download '{event.object_key}'"
        )

    def _download(
        self, event: Event, provider: StorageProviderConfig, work_dir: str
    ) -> tuple[StorageClient, str]:
        try:
            client = self._client_factory(provider)
        except Exception as exc:  # noqa: BLE001
            raise DownloadError(
                f"Cannot create storage client for provider '{provider.name}': {exc}"
            ) from exc
        if client is None:
            raise DownloadError(
                f"No storage client available for provider '{provider.name}' "
                f"of type '{provider.type}'"
            )
        try:
            file_name = client.download(work_dir, event.path)
        except Exception as exc:  # noqa: BLE001
            self._close_clients([client])
            if isinstance(exc, DownloadError):
                raise
            raise DownloadError(
                f"Error downloading '{event.path}' from '{provider.name}': {exc}"
            ) from exc
        logger.info(
            "File '%s' successfully downloaded from storage provider '%s'",
            event.object_key,
            provider.name,
        )
        return client, file_name

    # ------------------------------------------------------------------
    # Destinations
    # ------------------------------------------------------------------

    def _resolve_clients(
        self,
        destinations: RoutingDecision,
        providers: Mapping[str, StorageProviderConfig],
        source: StorageProviderConfig,
        source_client: StorageClient,
    ) -> dict[str, StorageClient | UploadError]:
        """Map each destination to a client, or to the error that prevents one."""
        cache: dict[str, StorageClient] = {source.name: source_client}
        resolved: dict[str, StorageClient | UploadError] = {}
        for name in destinations:
            if name in cache:
                resolved[name] = cache[name]
                continue
            provider = providers.get(name)
            if provider is None:
                resolved[name] = UploadError(f"Storage provider '{name}' is not configured")
                continue
            try:
                client = self._client_factory(provider)
            except Exception as exc:  # noqa: BLE001
                resolved[name] = UploadError(
                    f"Cannot create storage client for provider '{name}': {exc}"
                )
                continue
            if client is None:
                resolved[name] = UploadError(
                    f"No storage client available for provider '{name}' "
                    f"of type '{provider.type}'"
                )
                continue
            cache[name] = client
            resolved[name] = client
        return resolved

    @staticmethod
    def _close_clients(clients: list[StorageClient]) -> None:
        """Close every distinct client that holds resources."""
        seen: set[int] = set()
        for client in clients:
            close = getattr(client, "close", None)
            if id(client) in seen or not callable(close):
                continue
            seen.add(id(client))
            try:
                close()
            except Exception as exc:  # noqa: BLE001
                logger.warning("Error closing storage client: %s", exc)

    @staticmethod
    def _upload(
        target: StorageClient | UploadError,
        file_name: str,
        upload_path: str,
    ) -> UploadError | None:
        """Attempt one upload.  Returns the failure instead of raising."""
        if isinstance(target, UploadError):
            return target
        try:
            target.upload(file_name, upload_path)
        except UploadError as exc:
            return exc
        except Exception as exc:  # noqa: BLE001
            return UploadError(f"Error uploading to '{upload_path}': {exc}")
        return None

    # ------------------------------------------------------------------
    # Process
    # ------------------------------------------------------------------

    def process(
        self,
        event: Event,
        providers: Mapping[str, StorageProviderConfig],
        destinations: RoutingDecision,
    ) -> TransferReport:
        """Download the event's object and upload it to every destination.

        Every destination gets exactly one upload attempt regardless of how
        the others fare.  The working directory is removed on every exit
        path, after all attempts have finished, and clients that hold
        resources are closed.

        Raises
        ------
        NoSourceProviderError
            If no provider matches the event's origin type.
        DownloadError
            If the working directory cannot be created, the source client
            cannot be built, or the download fails.
        """
        source = self.find_source_provider(event, providers)

        try:
            scratch = tempfile.TemporaryDirectory(dir=self._work_dir)
        except OSError as exc:
            raise DownloadError(
                f"Cannot create working directory under '{self._work_dir}': {exc}"
            ) from exc

        with scratch as work_dir:
            source_client, file_name = self._download(event, source, work_dir)
            base_name = Path(file_name).name

            targets = self._resolve_clients(destinations, providers, source, source_client)
            clients = [source_client]
            clients.extend(t for t in targets.values() if not isinstance(t, UploadError))
            jobs = [
                (name, targets[name], f"{path}/{base_name}")
                for name, path in destinations.items()
            ]

            try:
                if self._max_workers > 1 and len(jobs) > 1:
                    with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                        futures = [
                            executor.submit(self._upload, target, file_name, upload_path)
                            for name, target, upload_path in jobs
                        ]
                        outcomes = [future.result() for future in futures]
                else:
                    outcomes = [
                        self._upload(target, file_name, upload_path)
                        for name, target, upload_path in jobs
                    ]
            finally:
                self._close_clients(clients)

        succeeded: list[str] = []
        failed: dict[str, str] = {}
        for (name, _, upload_path), error in zip(jobs, outcomes):
            if error is None:
                logger.info(
                    "File '%s' successfully uploaded to storage provider '%s' at '%s'",
                    base_name,
                    name,
                    upload_path,
                )
                succeeded.append(name)
            else:
                logger.error(
                    "Error uploading file '%s' to storage provider '%s': %s",
                    base_name,
                    name,
                    error,
                )
                failed[name] = str(error)

        if failed:
            logger.warning(
                "File '%s': %d/%d destinations succeeded, %d failed",
                event.object_key,
                len(succeeded),
                len(jobs),
                len(failed),
            )

        return TransferReport(
            source_provider=source.name,
            file_name=base_name,
            succeeded=succeeded,
            failed=failed,
        )

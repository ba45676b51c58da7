"""Routing decision and transfer outcome models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# Destination provider name -> destination path prefix
RoutingDecision = dict[str, str]


class TransferReport(BaseModel):
    """Outcome of one download-then-fan-out transfer.

    ``failed`` maps each destination provider name that could not be
    written to the cause of the failure.
    """

    model_config = ConfigDict(frozen=True)

    source_provider: str
    file_name: str
    succeeded: list[str] = []
    failed: dict[str, str] = {}

    @property
    def attempted(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def complete(self) -> bool:
        """Whether every destination received the file."""
        return not self.failed

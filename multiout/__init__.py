"""multiout: event-triggered multi-output file router.

A storage notification (S3, MinIO, or Onedata OneTrigger) is normalized into
a canonical event, matched against the configured output rules, and the
changed object is downloaded once and uploaded to every matching output.
One destination failing never stops the others.
"""

__version__ = "0.1.0"
__description__ = "Event-triggered file router for object storage outputs"

from multiout.core.event_normalizer import normalize
from multiout.core.orchestrator import TransferOrchestrator
from multiout.core.router import compute_destinations
from multiout.handler import handle

__all__ = ["handle", "normalize", "compute_destinations", "TransferOrchestrator", "__version__"]

"""DuraCloud DuraStore REST client."""

from duratools.config import DuraStoreSettings
from duratools.durastore.client import CONTENT_CHECKSUM, DuraStoreClient
from duratools.durastore.models import SnapshotDetails, SnapshotSummary, StorageAccount


def connect(settings: DuraStoreSettings) -> DuraStoreClient:
    """Open a client, resolving the primary store when no store id is configured."""
    client = DuraStoreClient(settings)
    if not client.store_id:
        try:
            client.store_id = client.primary_store_id()
        except Exception:
            client.close()
            raise
    return client


__all__ = [
    "CONTENT_CHECKSUM",
    "DuraStoreClient",
    "SnapshotDetails",
    "SnapshotSummary",
    "StorageAccount",
    "connect",
]

"""DuraStore response models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class StorageAccount:
    store_id: str
    provider_type: str
    is_primary: bool = False


@dataclass(frozen=True)
class SnapshotSummary:
    snapshot_id: str
    description: str = ""
    status: str = ""

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "SnapshotSummary":
        return cls(
            snapshot_id=str(raw.get("snapshotId") or ""),
            description=str(raw.get("description") or ""),
            status=str(raw.get("status") or ""),
        )


@dataclass(frozen=True)
class SnapshotDetails:
    snapshot_id: str
    total_size_bytes: int
    content_item_count: int = 0
    status: str = ""

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "SnapshotDetails":
        return cls(
            snapshot_id=str(raw.get("snapshotId") or ""),
            total_size_bytes=int(raw.get("totalSizeInBytes") or 0),
            content_item_count=int(raw.get("contentItemCount") or 0),
            status=str(raw.get("status") or ""),
        )

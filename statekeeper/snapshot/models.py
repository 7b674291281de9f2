"""Envelope persisted around a snapshot."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ..contracts import Snapshot

FORMAT_VERSION = 1


class SnapshotMeta(BaseModel):
    """Bookkeeping stored next to the snapshot; not part of snapshot equality."""

    event: Optional[str] = None
    revision: int = 0


class StoredSnapshot(BaseModel):
    """What actually sits in the store under an instance key."""

    version: int = FORMAT_VERSION
    snapshot: Snapshot
    meta: SnapshotMeta = Field(default_factory=SnapshotMeta)

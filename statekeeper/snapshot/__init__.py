"""Snapshot encoding for the store."""

from __future__ import annotations

from .deserializer import SnapshotDeserializer
from .models import FORMAT_VERSION, SnapshotMeta, StoredSnapshot
from .serializer import SnapshotSerializer

__all__ = [
    "FORMAT_VERSION",
    "SnapshotDeserializer",
    "SnapshotMeta",
    "SnapshotSerializer",
    "StoredSnapshot",
]

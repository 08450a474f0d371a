"""Snapshot capture, canonical encoding and file storage."""

from .codec import SnapshotCodec, compute_hash, format_timestamp
from .loader import load_manifest
from .models import SNAPSHOT_SCHEMA_URI, Snapshot
from .store import SnapshotStore, SnapshotStoreOptions

__all__ = [
    "SNAPSHOT_SCHEMA_URI",
    "Snapshot",
    "SnapshotCodec",
    "SnapshotStore",
    "SnapshotStoreOptions",
    "compute_hash",
    "format_timestamp",
    "load_manifest",
]

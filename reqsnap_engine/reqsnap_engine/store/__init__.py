"""Snapshot identity and file-backed storage."""

from reqsnap_engine.store.keys import derive_key, snapshot_filename
from reqsnap_engine.store.snapshot_store import (
    SnapshotStore,
    deserialize_snapshot,
    serialize_snapshot,
)

__all__ = [
    "SnapshotStore",
    "derive_key",
    "deserialize_snapshot",
    "serialize_snapshot",
    "snapshot_filename",
]

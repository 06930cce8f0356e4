"""Domain models for the reqsnap engine."""

from reqsnap_engine.models.diff import DiffItem, DiffKind
from reqsnap_engine.models.json_value import JsonKind, json_kind
from reqsnap_engine.models.report import CheckReport, Verdict
from reqsnap_engine.models.snapshot import SnapshotRecord, SnapshotSummary, utc_timestamp

__all__ = [
    "CheckReport",
    "DiffItem",
    "DiffKind",
    "JsonKind",
    "SnapshotRecord",
    "SnapshotSummary",
    "Verdict",
    "json_kind",
    "utc_timestamp",
]

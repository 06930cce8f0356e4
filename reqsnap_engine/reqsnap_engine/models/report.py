"""Check report model: the outcome of comparing a snapshot with a live response."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from reqsnap_engine.models.diff import DiffItem


class Verdict(str, Enum):
    """Overall result of a check."""

    IDENTICAL = "identical"
    CHANGED = "changed"
    BREAKING = "breaking"


class CheckReport(BaseModel):
    """Status, header and body differences for one check, in that order.

    Counts and the verdict are derived from ``diffs`` on access; the report
    holds no other state.
    """

    url: str
    method: str
    snapshot_timestamp: str = Field(default="", description="Capture time of the stored snapshot.")
    current_timestamp: str = Field(default="", description="Capture time of the live response.")
    diffs: list[DiffItem] = Field(default_factory=list)

    @property
    def breaking_count(self) -> int:
        return sum(1 for d in self.diffs if d.breaking)

    @property
    def total_count(self) -> int:
        return len(self.diffs)

    @property
    def identical(self) -> bool:
        return not self.diffs

    @property
    def verdict(self) -> Verdict:
        if self.breaking_count > 0:
            return Verdict.BREAKING
        if self.total_count > 0:
            return Verdict.CHANGED
        return Verdict.IDENTICAL

    @property
    def breaking_diffs(self) -> list[DiffItem]:
        return [d for d in self.diffs if d.breaking]

    @property
    def non_breaking_diffs(self) -> list[DiffItem]:
        return [d for d in self.diffs if not d.breaking]

    def to_dict(self) -> dict[str, Any]:
        """Machine-readable form used by ``reqsnap --json check``."""
        return {
            "url": self.url,
            "method": self.method,
            "snapshot_timestamp": self.snapshot_timestamp,
            "current_timestamp": self.current_timestamp,
            "identical": self.identical,
            "verdict": self.verdict.value,
            "breaking_changes": self.breaking_count,
            "total_changes": self.total_count,
            "diffs": [d.to_dict() for d in self.diffs],
        }

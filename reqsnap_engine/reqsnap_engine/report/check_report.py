"""Assemble a :class:`CheckReport` from a stored snapshot and a live response."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from reqsnap_engine.diff.structural_diff import diff_values
from reqsnap_engine.models.diff import DiffItem, DiffKind
from reqsnap_engine.models.report import CheckReport
from reqsnap_engine.models.snapshot import SnapshotRecord

logger = logging.getLogger(__name__)


def build_check_report(
    saved: SnapshotRecord,
    current: SnapshotRecord,
    ignored_fields: Iterable[str] = (),
    *,
    compare_headers: bool = True,
) -> CheckReport:
    """Compare *current* against *saved* and collect every difference.

    Diffs are ordered status first, then headers (prefix ``headers``), then
    body (prefix ``body``).  A status change is always breaking and is
    decided by direct equality, outside the structural diff.  The same
    ``ignored_fields`` apply to headers and body.
    """
    ignored = list(ignored_fields)
    diffs: list[DiffItem] = []

    if saved.status != current.status:
        diffs.append(
            DiffItem(
                path="status",
                kind=DiffKind.CHANGED,
                old_value=saved.status,
                new_value=current.status,
                breaking=True,
            )
        )

    if compare_headers:
        diffs.extend(diff_values(saved.headers, current.headers, "headers", ignored))

    diffs.extend(diff_values(saved.body, current.body, "body", ignored))

    report = CheckReport(
        url=saved.url,
        method=saved.method,
        snapshot_timestamp=saved.timestamp,
        current_timestamp=current.timestamp,
        diffs=diffs,
    )
    logger.debug(
        "Checked %s %s: %d change(s), %d breaking",
        report.method,
        report.url,
        report.total_count,
        report.breaking_count,
    )
    return report

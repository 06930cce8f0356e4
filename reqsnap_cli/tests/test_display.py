"""Tests for reqsnap_cli/display.py -- Rich output formatting.

Rendered output is captured via a Console writing to a StringIO buffer
rather than stderr.
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from reqsnap_cli.display import (
    _coloured_status,
    _diff_colour,
    display_check_report,
    display_saved,
    display_snapshot,
    display_snapshot_list,
    format_value,
)
from reqsnap_engine.models.diff import DiffItem, DiffKind
from reqsnap_engine.models.report import CheckReport
from reqsnap_engine.models.snapshot import SnapshotRecord, SnapshotSummary

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _capture_console() -> tuple[Console, io.StringIO]:
    """Create a Console that writes plain text to a StringIO buffer."""
    buf = io.StringIO()
    console = Console(file=buf, no_color=True, highlight=False, width=120)
    return console, buf


def _report(diffs: list[DiffItem]) -> CheckReport:
    return CheckReport(
        url="https://api.example.com/users",
        method="GET",
        snapshot_timestamp="2025-01-01T00:00:00.000Z",
        current_timestamp="2025-01-02T00:00:00.000Z",
        diffs=diffs,
    )


def _record(body: object = None, headers: dict[str, str] | None = None) -> SnapshotRecord:
    return SnapshotRecord(
        url="https://api.example.com/users",
        status=200,
        headers={"content-type": "application/json"} if headers is None else headers,
        body={"id": 1} if body is None else body,
        timestamp="2025-01-01T00:00:00.000Z",
    )


# ---------------------------------------------------------------------------
# Small helpers
# ---------------------------------------------------------------------------


class TestFormatValue:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(None, "null"), (True, "true"), (3, "3"), ("x", '"x"'), ([1, 2], "[1, 2]"), ({"a": 1}, '{"a": 1}')],
    )
    def test_json_rendering(self, value, expected):
        assert format_value(value) == expected

    def test_non_ascii_kept(self):
        assert format_value("héllo") == '"héllo"'


class TestColours:
    @pytest.mark.parametrize(("status", "colour"), [(200, "green"), (301, "cyan"), (404, "yellow"), (503, "red")])
    def test_status_colours(self, status, colour):
        assert _coloured_status(status) == f"[{colour}]{status}[/{colour}]"

    def test_diff_colours(self):
        assert _diff_colour(DiffItem(path="a", kind=DiffKind.REMOVED, old_value=1, breaking=True)) == "red"
        assert _diff_colour(DiffItem(path="a", kind=DiffKind.ADDED, new_value=1, breaking=False)) == "green"
        assert (
            _diff_colour(DiffItem(path="a", kind=DiffKind.CHANGED, old_value=1, new_value=2, breaking=False))
            == "yellow"
        )


# ---------------------------------------------------------------------------
# display_saved
# ---------------------------------------------------------------------------


class TestDisplaySaved:
    def test_json_body(self):
        console, buf = _capture_console()
        display_saved(console, _record(), Path(".reqsnap/api_example_com_abc.json"))
        out = buf.getvalue()
        assert "Snapshot saved" in out
        assert "200" in out
        assert "1 fields" in out
        assert "JSON" in out
        assert "api_example_com_abc.json" in out

    def test_text_body(self):
        console, buf = _capture_console()
        display_saved(console, _record(body="plain"), Path("x.json"))
        assert "text" in buf.getvalue()


# ---------------------------------------------------------------------------
# display_check_report
# ---------------------------------------------------------------------------


class TestDisplayCheckReport:
    def test_identical(self):
        console, buf = _capture_console()
        display_check_report(console, _report([]))
        out = buf.getvalue()
        assert "Snapshot from: 2025-01-01T00:00:00.000Z" in out
        assert "Current check: 2025-01-02T00:00:00.000Z" in out
        assert "No differences found" in out
        assert "Result: No changes. API response matches snapshot." in out

    def test_breaking_and_non_breaking_groups(self):
        console, buf = _capture_console()
        display_check_report(
            console,
            _report(
                [
                    DiffItem(path="body.name", kind=DiffKind.REMOVED, old_value="Ann", breaking=True),
                    DiffItem(path="body.age", kind=DiffKind.ADDED, new_value=30, breaking=False),
                ]
            ),
        )
        out = buf.getvalue()
        assert "BREAKING CHANGES (1)" in out
        assert "- body.name" in out
        assert 'was: "Ann"' in out
        assert "Changes (1)" in out
        assert "+ body.age" in out
        assert "now: 30" in out
        assert "Result: BREAKING CHANGES DETECTED" in out
        assert out.index("body.name") < out.index("body.age")

    def test_non_breaking_only(self):
        console, buf = _capture_console()
        display_check_report(
            console,
            _report([DiffItem(path="body.n", kind=DiffKind.CHANGED, old_value=1, new_value=2, breaking=False)]),
        )
        out = buf.getvalue()
        assert "BREAKING CHANGES (" not in out
        assert "~ body.n" in out
        assert "was: 1" in out
        assert "now: 2" in out
        assert "Result: Changes detected (non-breaking)" in out

    def test_explicit_null_is_shown(self):
        console, buf = _capture_console()
        display_check_report(
            console,
            _report([DiffItem(path="body.x", kind=DiffKind.CHANGED, old_value=None, new_value={}, breaking=False)]),
        )
        out = buf.getvalue()
        assert "was: null" in out
        assert "now: {}" in out

    def test_markup_in_values_is_escaped(self):
        console, buf = _capture_console()
        display_check_report(
            console,
            _report([DiffItem(path="body.tag", kind=DiffKind.ADDED, new_value="[bold]x[/bold]", breaking=False)]),
        )
        assert '"[bold]x[/bold]"' in buf.getvalue()


# ---------------------------------------------------------------------------
# display_snapshot_list
# ---------------------------------------------------------------------------


class TestDisplaySnapshotList:
    def test_empty(self):
        console, buf = _capture_console()
        display_snapshot_list(console, [])
        assert "No snapshots found" in buf.getvalue()

    def test_table(self):
        console, buf = _capture_console()
        display_snapshot_list(
            console,
            [
                SnapshotSummary(
                    file="api_example_com_abc.json",
                    url="https://api.example.com/users",
                    method="GET",
                    status=200,
                    timestamp="2025-01-01T00:00:00.000Z",
                ),
                SnapshotSummary(
                    file="api_example_com_def.json",
                    url="https://api.example.com/orders",
                    method="POST",
                    status=201,
                    timestamp="2025-01-02T00:00:00.000Z",
                ),
            ],
        )
        out = buf.getvalue()
        assert "Saved snapshots (2)" in out
        for text in ("Method", "URL", "Status", "POST", "201", "https://api.example.com/orders"):
            assert text in out


# ---------------------------------------------------------------------------
# display_snapshot
# ---------------------------------------------------------------------------


class TestDisplaySnapshot:
    def test_json_body(self):
        console, buf = _capture_console()
        display_snapshot(console, _record(body={"id": 7}))
        out = buf.getvalue()
        assert "https://api.example.com/users" in out
        assert "content-type" in out
        assert "application/json" in out
        assert "Body:" in out
        assert '"id": 7' in out

    def test_text_body(self):
        console, buf = _capture_console()
        display_snapshot(console, _record(body="<html>hi</html>", headers={}))
        out = buf.getvalue()
        assert "No headers recorded." in out
        assert "<html>hi</html>" in out

    def test_empty_text_body(self):
        console, buf = _capture_console()
        display_snapshot(console, _record(body=""))
        assert "(empty)" in buf.getvalue()

"""reqsnap CLI application -- Typer-based interface to the snapshot engine.

Provides commands to save a response snapshot, check a live response
against it, and list, show or delete stored snapshots.  Human-readable
output goes to *stderr* via Rich; ``--json`` output goes to *stdout* so
that CI pipelines can consume it directly.

Exit codes: ``0`` on success (for ``check``: no breaking changes), ``1``
when breaking changes are detected or the command fails.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

import typer
from rich.console import Console
from rich.markup import escape

from reqsnap_cli.display import (
    display_check_report,
    display_saved,
    display_snapshot,
    display_snapshot_list,
)
from reqsnap_engine.config import DEFAULT_TIMEOUT_MS, Settings, load_settings
from reqsnap_engine.errors import FetchError, SnapshotFormatError, SnapshotNotFoundError
from reqsnap_engine.logging_config import configure_logging
from reqsnap_engine.store import SnapshotStore

if TYPE_CHECKING:
    from reqsnap_engine.models.snapshot import SnapshotRecord

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App & global state
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="reqsnap",
    help="reqsnap - API response snapshot & diff",
    no_args_is_help=True,
)
console = Console(stderr=True)

# Mutable global options populated by the Typer callback.
_json_output: bool = False
_metrics_file: Path | None = None
_settings: Settings | None = None
_snapshot_dir: Path | None = None


# ---------------------------------------------------------------------------
# Callback -- global options
# ---------------------------------------------------------------------------


@app.callback()
def _global_options(
    json_mode: bool = typer.Option(
        False,
        "--json/--no-json",
        help="Emit structured JSON to stdout instead of human-readable output.",
    ),
    snapshot_dir: Path | None = typer.Option(
        None,
        "--dir",
        help="Snapshot directory (default: .reqsnap, or REQSNAP_SNAPSHOT_DIR).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log requests and storage operations to stderr.",
    ),
    metrics_file: Path | None = typer.Option(
        None,
        "--metrics-file",
        help="Append metrics events to this file (JSONL).",
        envvar="REQSNAP_METRICS_FILE",
    ),
) -> None:
    """Global options applied to every command."""
    global _json_output, _metrics_file, _settings, _snapshot_dir  # noqa: PLW0603
    _settings = load_settings()
    _json_output = json_mode
    _metrics_file = metrics_file
    _snapshot_dir = snapshot_dir if snapshot_dir is not None else _settings.snapshot_dir
    configure_logging(verbose=verbose or _settings.debug, structured=_settings.structured_logging)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_settings() -> Settings:
    return _settings if _settings is not None else load_settings()


def _emit_metrics(event: str, data: dict[str, Any]) -> None:
    """Append a timestamped metrics event to the metrics file, if configured.

    Failures are logged but never propagate -- metrics emission must never
    break the main command execution.
    """
    if _metrics_file is None:
        return
    record = {
        "event": event,
        "timestamp": datetime.now(UTC).isoformat(),
        "data": data,
    }
    try:
        with _metrics_file.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(record, sort_keys=True, default=str) + "\n")
    except OSError as exc:
        logger.warning("Could not write metrics event to %s: %s", _metrics_file, exc)


def _write_json(data: Any) -> None:
    sys.stdout.write(json.dumps(data, indent=2, ensure_ascii=False) + "\n")


def _fail(message: str) -> typer.Exit:
    """Print *message* as an error and return the exit to raise."""
    console.print(f"[red]Error: {escape(message)}[/red]")
    return typer.Exit(code=1)


def parse_headers(values: list[str] | None) -> dict[str, str]:
    """Parse repeated ``KEY:VALUE`` options into a header mapping.

    Entries without a ``:`` or with an empty name are ignored with a
    warning.  Later entries replace earlier ones with the same name.
    """
    headers: dict[str, str] = {}
    for raw in values or []:
        name, sep, value = raw.partition(":")
        name = name.strip()
        if not sep or not name:
            logger.warning("Ignoring malformed header %r (expected 'Name: value')", raw)
            continue
        headers[name] = value.strip()
    return headers


def parse_timeout(value: str | None, default: int = DEFAULT_TIMEOUT_MS) -> int:
    """Parse a ``--timeout`` value in milliseconds.

    Non-numeric and non-positive values fall back to *default*.
    """
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        logger.warning("Invalid timeout %r, using %dms", value, default)
        return default
    if parsed <= 0:
        logger.warning("Non-positive timeout %r, using %dms", value, default)
        return default
    return parsed


def parse_ignore_fields(value: str | None) -> list[str]:
    """Split a comma-separated ``--ignore-fields`` value, dropping blanks."""
    if not value:
        return []
    return [field.strip() for field in value.split(",") if field.strip()]


def _apply_command_options(json_mode: bool, snapshot_dir: Path | None) -> None:
    """Apply ``--json`` and ``--dir`` given after the subcommand name."""
    global _json_output, _snapshot_dir  # noqa: PLW0603
    if json_mode:
        _json_output = True
    if snapshot_dir is not None:
        _snapshot_dir = snapshot_dir


def _resolve_method(method: str | None) -> str:
    return (method or _get_settings().default_method).strip().upper()


def _open_store(url: str, method: str) -> SnapshotStore:
    """Return the configured store after validating that *url* can be keyed."""
    store = SnapshotStore(_snapshot_dir if _snapshot_dir is not None else _get_settings().snapshot_dir)
    try:
        store.path_for(url, method)
    except ValueError as exc:
        raise _fail(str(exc)) from exc
    return store


def _load_required(store: SnapshotStore, url: str, method: str) -> SnapshotRecord:
    try:
        record = store.load(url, method)
    except (SnapshotFormatError, OSError) as exc:
        raise _fail(str(exc)) from exc
    if record is None:
        raise SnapshotNotFoundError(url, method)
    return record


def _fetch(
    url: str,
    method: str,
    header: list[str] | None,
    body: str | None,
    timeout: str | None,
) -> SnapshotRecord:
    """Fetch the live response, turning network failures into exit code 1."""
    from reqsnap_engine.fetch import fetch_response

    settings = _get_settings()
    timeout_ms = parse_timeout(timeout, settings.timeout_ms)
    try:
        return fetch_response(
            url,
            method,
            parse_headers(header),
            body,
            timeout_ms,
            user_agent=settings.user_agent,
        )
    except FetchError as exc:
        _emit_metrics("fetch_error", {"url": url, "method": method, "error": str(exc)})
        raise _fail(str(exc)) from exc


# Shared option declarations.
_URL_ARGUMENT = typer.Argument(..., help="Absolute URL of the endpoint.")
_METHOD_OPTION = typer.Option(None, "--method", "-m", help="HTTP method (default: GET).")
_HEADER_OPTION = typer.Option(None, "--header", "-H", help="Request header 'Name: value' (repeatable).")
_BODY_OPTION = typer.Option(None, "--body", "-d", help="Request body for POST/PUT.")
_TIMEOUT_OPTION = typer.Option(None, "--timeout", "-t", help="Request timeout in milliseconds (default: 10000).")
_JSON_OPTION = typer.Option(False, "--json", help="Emit structured JSON to stdout.")
_DIR_OPTION = typer.Option(None, "--dir", help="Snapshot directory for this command.")


# ---------------------------------------------------------------------------
# save
# ---------------------------------------------------------------------------


@app.command()
def save(
    url: str = _URL_ARGUMENT,
    method: str | None = _METHOD_OPTION,
    header: list[str] | None = _HEADER_OPTION,
    body: str | None = _BODY_OPTION,
    timeout: str | None = _TIMEOUT_OPTION,
    json_mode: bool = _JSON_OPTION,
    snapshot_dir: Path | None = _DIR_OPTION,
) -> None:
    """Save a snapshot of the API response."""
    _apply_command_options(json_mode, snapshot_dir)
    method = _resolve_method(method)
    store = _open_store(url, method)

    if not _json_output:
        console.print(f"[cyan]Fetching[/cyan] {escape(method)} {escape(url)}...")

    record = _fetch(url, method, header, body, timeout)
    try:
        path = store.save(record)
    except OSError as exc:
        raise _fail(f"Could not write snapshot: {exc}") from exc

    _emit_metrics("snapshot_saved", {"url": url, "method": method, "status": record.status})

    if _json_output:
        _write_json({"saved": True, "path": str(path), "snapshot": record.model_dump(mode="json")})
    else:
        display_saved(console, record, path)


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


@app.command()
def check(
    url: str = _URL_ARGUMENT,
    method: str | None = _METHOD_OPTION,
    header: list[str] | None = _HEADER_OPTION,
    body: str | None = _BODY_OPTION,
    timeout: str | None = _TIMEOUT_OPTION,
    ignore_fields: str | None = typer.Option(
        None,
        "--ignore-fields",
        help="Comma-separated field names to ignore in header and body diffs.",
    ),
    ignore_headers: bool = typer.Option(
        False,
        "--ignore-headers",
        help="Don't diff response headers.",
    ),
    json_mode: bool = _JSON_OPTION,
    snapshot_dir: Path | None = _DIR_OPTION,
) -> None:
    """Check the current response against the saved snapshot.

    Exits with code 1 when breaking changes are detected.

    Examples::

        reqsnap check https://api.example.com/users
        reqsnap check https://api.example.com/users --ignore-fields timestamp,updatedAt
        reqsnap --json check https://api.example.com/users --ignore-headers
    """
    from reqsnap_engine.report import build_check_report

    _apply_command_options(json_mode, snapshot_dir)
    method = _resolve_method(method)
    store = _open_store(url, method)

    try:
        saved = _load_required(store, url, method)
    except SnapshotNotFoundError as exc:
        raise _fail(f"{exc}. Run 'reqsnap save {url}' first.") from exc

    if not _json_output:
        console.print(f"[cyan]Checking[/cyan] {escape(method)} {escape(url)} against snapshot...")

    current = _fetch(url, method, header, body, timeout)
    report = build_check_report(
        saved,
        current,
        parse_ignore_fields(ignore_fields),
        compare_headers=not ignore_headers,
    )

    _emit_metrics(
        "check_complete",
        {
            "url": url,
            "method": method,
            "verdict": report.verdict.value,
            "breaking_changes": report.breaking_count,
            "total_changes": report.total_count,
        },
    )

    if _json_output:
        _write_json(report.to_dict())
    else:
        display_check_report(console, report)

    if report.breaking_count > 0:
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


@app.command("list")
def list_snapshots(
    json_mode: bool = _JSON_OPTION,
    snapshot_dir: Path | None = _DIR_OPTION,
) -> None:
    """List all saved snapshots."""
    _apply_command_options(json_mode, snapshot_dir)
    store = SnapshotStore(_snapshot_dir if _snapshot_dir is not None else _get_settings().snapshot_dir)
    try:
        summaries = store.list()
    except OSError as exc:
        raise _fail(f"Could not read snapshot directory: {exc}") from exc

    if _json_output:
        _write_json([s.model_dump(mode="json") for s in summaries])
    else:
        display_snapshot_list(console, summaries)


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@app.command()
def show(
    url: str = _URL_ARGUMENT,
    method: str | None = _METHOD_OPTION,
    json_mode: bool = _JSON_OPTION,
    snapshot_dir: Path | None = _DIR_OPTION,
) -> None:
    """Show a saved snapshot."""
    _apply_command_options(json_mode, snapshot_dir)
    method = _resolve_method(method)
    store = _open_store(url, method)

    try:
        record = _load_required(store, url, method)
    except SnapshotNotFoundError as exc:
        raise _fail(str(exc)) from exc

    if _json_output:
        _write_json(record.model_dump(mode="json"))
    else:
        display_snapshot(console, record)


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------


@app.command()
def delete(
    url: str = _URL_ARGUMENT,
    method: str | None = _METHOD_OPTION,
    json_mode: bool = _JSON_OPTION,
    snapshot_dir: Path | None = _DIR_OPTION,
) -> None:
    """Delete a saved snapshot."""
    _apply_command_options(json_mode, snapshot_dir)
    method = _resolve_method(method)
    store = _open_store(url, method)

    try:
        deleted = store.delete(url, method)
    except OSError as exc:
        raise _fail(f"Could not delete snapshot: {exc}") from exc
    if not deleted:
        raise _fail(str(SnapshotNotFoundError(url, method)))

    _emit_metrics("snapshot_deleted", {"url": url, "method": method})

    if _json_output:
        _write_json({"deleted": True, "url": url, "method": method})
    else:
        console.print(f"[green]Snapshot deleted for {escape(method)} {escape(url)}[/green]")

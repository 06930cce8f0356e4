"""File-backed snapshot store.

One pretty-printed JSON file per snapshot, named by
:func:`~reqsnap_engine.store.keys.snapshot_filename`, directly under the
store root.  Saving the same ``(method, url)`` again overwrites the file.

"No snapshots yet" is a normal state: :meth:`SnapshotStore.load` returns
``None``, :meth:`SnapshotStore.delete` returns ``False`` and
:meth:`SnapshotStore.list` returns an empty list.  Filesystem failures
(permissions, disk full) propagate as :class:`OSError`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from reqsnap_engine.config import DEFAULT_SNAPSHOT_DIR
from reqsnap_engine.errors import SnapshotFormatError
from reqsnap_engine.models.snapshot import SnapshotRecord, SnapshotSummary
from reqsnap_engine.store.keys import SNAPSHOT_SUFFIX, snapshot_filename

logger = logging.getLogger(__name__)


def serialize_snapshot(record: SnapshotRecord) -> str:
    """Serialise a record to the on-disk JSON form (2-space indent)."""
    return json.dumps(record.model_dump(mode="json"), indent=2, ensure_ascii=False)


def deserialize_snapshot(json_str: str | bytes, *, source: Path | None = None) -> SnapshotRecord:
    """Parse the on-disk JSON form back into a record.

    Raises
    ------
    SnapshotFormatError
        If the data is not UTF-8 JSON or does not match the record schema.
        Raw bytes are accepted so that bad encodings are reported the same way.
    """
    try:
        return SnapshotRecord.model_validate_json(json_str)
    except ValidationError as exc:
        where = f" in {source}" if source is not None else ""
        raise SnapshotFormatError(f"Invalid snapshot{where}: {exc.error_count()} validation error(s)") from exc


class SnapshotStore:
    """Create, read, enumerate and delete snapshots under ``root``."""

    def __init__(self, root: Path | str = DEFAULT_SNAPSHOT_DIR) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, url: str, method: str = "GET") -> Path:
        """Return the file a snapshot for ``(method, url)`` lives in."""
        return self._root / snapshot_filename(method, url)

    def save(self, record: SnapshotRecord) -> Path:
        """Write *record* to disk, replacing any earlier snapshot for the same key."""
        self._root.mkdir(parents=True, exist_ok=True)
        path = self.path_for(record.url, record.method)
        path.write_text(serialize_snapshot(record), encoding="utf-8")
        logger.debug("Saved snapshot %s %s -> %s", record.method, record.url, path)
        return path

    def load(self, url: str, method: str = "GET") -> SnapshotRecord | None:
        """Return the stored snapshot, or ``None`` when none was saved."""
        path = self.path_for(url, method)
        if not path.is_file():
            logger.debug("No snapshot for %s %s at %s", method, url, path)
            return None
        return deserialize_snapshot(path.read_bytes(), source=path)

    def list(self) -> list[SnapshotSummary]:
        """Summarise every snapshot in the store, sorted by file name.

        Files that do not decode as snapshots are skipped with a warning.
        """
        if not self._root.is_dir():
            return []

        summaries: list[SnapshotSummary] = []
        for path in sorted(self._root.glob(f"*{SNAPSHOT_SUFFIX}")):
            if not path.is_file():
                continue
            try:
                record = deserialize_snapshot(path.read_bytes(), source=path)
            except SnapshotFormatError as exc:
                logger.warning("Skipping unreadable snapshot file %s: %s", path, exc)
                continue
            summaries.append(
                SnapshotSummary(
                    file=path.name,
                    url=record.url,
                    method=record.method,
                    status=record.status,
                    timestamp=record.timestamp,
                )
            )
        return summaries

    def delete(self, url: str, method: str = "GET") -> bool:
        """Remove the snapshot for ``(method, url)``; ``False`` if there was none."""
        path = self.path_for(url, method)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.debug("Deleted snapshot %s %s (%s)", method, url, path)
        return True

"""Deterministic storage keys for snapshots.

A key is ``<hostname>_<digest>`` where ``hostname`` is the URL host with
every non-alphanumeric character replaced by ``_`` (for discoverability
when browsing the snapshot directory) and ``digest`` is the first 12 hex
characters of the MD5 of ``"{METHOD}:{url}"``.  The method is upper-cased
first so ``get`` and ``GET`` share a key.
"""

from __future__ import annotations

import hashlib
import re
from urllib.parse import urlsplit

_DIGEST_LENGTH = 12
_UNSAFE_HOST_CHARS_RE = re.compile(r"[^a-zA-Z0-9]")

SNAPSHOT_SUFFIX = ".json"


def _hostname(url: str) -> str:
    """Return the hostname of an absolute URL.

    Raises
    ------
    ValueError
        If *url* has no scheme or host.
    """
    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        raise ValueError(f"Invalid URL {url!r}: an absolute URL such as 'https://host/path' is required")
    return parts.hostname


def derive_key(method: str, url: str) -> str:
    """Return the stable storage key for a ``(method, url)`` pair."""
    host = _UNSAFE_HOST_CHARS_RE.sub("_", _hostname(url))
    identity = f"{method.strip().upper()}:{url}"
    # MD5 is used as a content address, not for security.
    digest = hashlib.md5(identity.encode("utf-8"), usedforsecurity=False).hexdigest()
    return f"{host}_{digest[:_DIGEST_LENGTH]}"


def snapshot_filename(method: str, url: str) -> str:
    """Return the snapshot file name for a ``(method, url)`` pair."""
    return derive_key(method, url) + SNAPSHOT_SUFFIX

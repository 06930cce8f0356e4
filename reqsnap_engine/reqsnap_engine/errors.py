"""Exception hierarchy shared by the reqsnap engine and CLI.

Absence of a snapshot is *not* an error at the store level
(:meth:`SnapshotStore.load` returns ``None``); callers that require a
snapshot raise :class:`SnapshotNotFoundError` themselves.  Filesystem
failures are left as the original :class:`OSError`.
"""

from __future__ import annotations


class ReqsnapError(Exception):
    """Base class for all reqsnap errors."""


class SnapshotNotFoundError(ReqsnapError):
    """Raised when a command needs a snapshot that has not been saved."""

    def __init__(self, url: str, method: str = "GET") -> None:
        self.url = url
        self.method = method
        super().__init__(f"No snapshot found for {method} {url}")


class SnapshotFormatError(ReqsnapError, ValueError):
    """Raised when a snapshot file exists but does not decode as a snapshot."""


class FetchError(ReqsnapError):
    """Raised when the HTTP request fails (connection refused, DNS, protocol)."""


class FetchTimeoutError(FetchError):
    """Raised when the HTTP request does not complete within the timeout."""

    def __init__(self, timeout_ms: int) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(f"Timeout after {timeout_ms}ms")

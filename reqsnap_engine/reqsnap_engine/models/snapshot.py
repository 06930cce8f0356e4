"""Snapshot models for capturing one HTTP response at a point in time.

A snapshot is keyed by ``(method, url)`` and records the response status,
normalised headers and decoded body.  ``timestamp`` is stored for human
inspection and is never part of the diff.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_timestamp() -> str:
    """Return the current UTC time as ISO-8601 with milliseconds and ``Z``."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SnapshotRecord(BaseModel):
    """Immutable record of one HTTP response.

    ``body`` is the decoded JSON payload when the response parsed as JSON,
    otherwise the raw response text.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., min_length=1, description="Absolute request URL.")
    method: str = Field(default="GET", description="HTTP method, upper-cased.")
    status: int = Field(..., description="HTTP status code of the response.")
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Response headers with lower-cased names.",
    )
    body: Any = Field(default=None, description="Decoded JSON body, or the raw text.")
    timestamp: str = Field(
        default_factory=utc_timestamp,
        description="ISO-8601 capture time (UTC).",
    )

    @field_validator("method", mode="before")
    @classmethod
    def normalise_method(cls, v: str) -> str:
        return str(v).strip().upper()

    @field_validator("headers", mode="before")
    @classmethod
    def normalise_header_names(cls, v: dict[str, str] | None) -> dict[str, str]:
        if not v:
            return {}
        return {str(name).lower(): value for name, value in v.items()}

    @property
    def body_is_json(self) -> bool:
        """True when the body decoded to a JSON object or array."""
        return isinstance(self.body, (dict, list))


class SnapshotSummary(BaseModel):
    """Lightweight listing entry for a stored snapshot."""

    file: str = Field(..., description="Snapshot file name inside the store root.")
    url: str
    method: str
    status: int
    timestamp: str

"""Diff models produced by comparing a stored snapshot with a live response."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DiffKind(str, Enum):
    """Classification of a single difference."""

    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"


class DiffItem(BaseModel):
    """One difference located by a dotted/bracketed path from the root.

    ``old_value`` and ``new_value`` are optional, and an *absent* value is
    distinct from a JSON ``null``: added items carry only ``new_value``,
    removed items only ``old_value``.  Absence is read from pydantic's
    ``model_fields_set``, so construct items by passing only the values
    that exist.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Locator such as 'body.users[0].name' or '(root)'.")
    kind: DiffKind = Field(..., description="Whether the value was added, removed or changed.")
    old_value: Any = Field(default=None, description="Value in the stored snapshot, when present.")
    new_value: Any = Field(default=None, description="Value in the live response, when present.")
    breaking: bool = Field(..., description="True for structural changes presumed incompatible.")

    @property
    def has_old_value(self) -> bool:
        return "old_value" in self.model_fields_set

    @property
    def has_new_value(self) -> bool:
        return "new_value" in self.model_fields_set

    def to_dict(self) -> dict[str, Any]:
        """Serialise for JSON output, omitting absent old/new values."""
        data: dict[str, Any] = {"path": self.path, "kind": self.kind.value}
        if self.has_old_value:
            data["old_value"] = self.old_value
        if self.has_new_value:
            data["new_value"] = self.new_value
        data["breaking"] = self.breaking
        return data

"""Tagged-variant view of decoded JSON values.

Response bodies and headers arrive as plain Python objects produced by
:func:`json.loads` (or as raw strings when the payload is not JSON).  The
diff engine never probes those objects directly; it classifies each value
into a :class:`JsonKind` and dispatches on pairs of kinds.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any


class JsonKind(str, Enum):
    """The six JSON value variants."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def json_kind(value: Any) -> JsonKind:
    """Classify a decoded JSON value.

    ``bool`` is tested before numbers because it subclasses ``int``: ``True``
    and ``1`` are different JSON kinds.

    Raises
    ------
    TypeError
        If *value* is not something :func:`json.loads` could have produced.
    """
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, (list, tuple)):
        return JsonKind.ARRAY
    if isinstance(value, Mapping):
        return JsonKind.OBJECT
    raise TypeError(f"Not a JSON value: {type(value).__name__}")

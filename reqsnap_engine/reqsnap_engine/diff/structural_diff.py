"""Recursive structural diff of two decoded JSON values.

Walks a stored value and a live value side by side and emits one
:class:`DiffItem` per difference, classified as breaking or not:

* **type change** (kinds differ, including object vs. array) -- breaking,
  reported once at the point of divergence without descending further;
* **removed** object key or array index -- breaking;
* **added** object key or array index -- non-breaking;
* **scalar value change** -- non-breaking.

``null`` on either side is compared by value, never as a type change: a
field that goes from ``null`` to an object is a non-breaking change.

Object keys are visited in sorted order and array indices in ascending
order, so identical inputs always produce the same list in the same order.
Ignored field names are matched against object keys at any depth; they do
not apply to array indices or to the root value.

Recursion depth equals the nesting depth of the documents.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from reqsnap_engine.models.diff import DiffItem, DiffKind
from reqsnap_engine.models.json_value import JsonKind, json_kind

ROOT_PATH = "(root)"


def diff_values(
    old: Any,
    new: Any,
    path_prefix: str = "",
    ignored_fields: Iterable[str] = (),
) -> list[DiffItem]:
    """Compare two JSON values and return the ordered list of differences.

    Parameters
    ----------
    old:
        Value from the stored snapshot.
    new:
        Value from the live response.
    path_prefix:
        Locator of ``old``/``new`` inside the enclosing document, e.g.
        ``"body"``.  Empty for a bare comparison, in which case a change at
        the top level is reported at ``"(root)"``.
    ignored_fields:
        Object keys to skip wherever they occur.

    Returns
    -------
    list[DiffItem]
        Empty when the values are structurally and scalar-wise equal.
    """
    diffs: list[DiffItem] = []
    _walk(old, new, path_prefix, frozenset(ignored_fields), diffs)
    return diffs


def _walk(
    old: Any,
    new: Any,
    path: str,
    ignored: frozenset[str],
    out: list[DiffItem],
) -> None:
    old_kind = json_kind(old)
    new_kind = json_kind(new)
    here = path or ROOT_PATH

    if old_kind is JsonKind.NULL or new_kind is JsonKind.NULL:
        if old_kind is not new_kind:
            out.append(DiffItem(path=here, kind=DiffKind.CHANGED, old_value=old, new_value=new, breaking=False))
        return

    if old_kind is not new_kind:
        out.append(
            DiffItem(
                path=here,
                kind=DiffKind.CHANGED,
                old_value=old_kind.value,
                new_value=new_kind.value,
                breaking=True,
            )
        )
        return

    if old_kind is JsonKind.ARRAY:
        _walk_array(old, new, path, ignored, out)
    elif old_kind is JsonKind.OBJECT:
        _walk_object(old, new, path, ignored, out)
    elif old != new:
        out.append(DiffItem(path=here, kind=DiffKind.CHANGED, old_value=old, new_value=new, breaking=False))


def _walk_array(
    old: Sequence[Any],
    new: Sequence[Any],
    path: str,
    ignored: frozenset[str],
    out: list[DiffItem],
) -> None:
    for index in range(max(len(old), len(new))):
        item_path = f"{path}[{index}]"
        if index >= len(old):
            out.append(DiffItem(path=item_path, kind=DiffKind.ADDED, new_value=new[index], breaking=False))
        elif index >= len(new):
            out.append(DiffItem(path=item_path, kind=DiffKind.REMOVED, old_value=old[index], breaking=True))
        else:
            _walk(old[index], new[index], item_path, ignored, out)


def _walk_object(
    old: Mapping[str, Any],
    new: Mapping[str, Any],
    path: str,
    ignored: frozenset[str],
    out: list[DiffItem],
) -> None:
    for key in sorted(set(old) | set(new)):
        if key in ignored:
            continue
        key_path = f"{path}.{key}" if path else key
        if key not in old:
            out.append(DiffItem(path=key_path, kind=DiffKind.ADDED, new_value=new[key], breaking=False))
        elif key not in new:
            out.append(DiffItem(path=key_path, kind=DiffKind.REMOVED, old_value=old[key], breaking=True))
        else:
            _walk(old[key], new[key], key_path, ignored, out)

"""Structural diff of JSON-like trees.

Arrays are compared index by index: reordering an array reports a
modification per shifted index, not a move. Objects are compared over the
union of their keys in insertion order (``from`` keys first), so the same
inputs always produce the same lines.
"""

from __future__ import annotations

import json
from collections import Counter
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from content_versions.models.diff import DiffLine, DiffType

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from content_versions.models.element import Element

MAX_DISPLAY_LENGTH = 100


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return _plain(value.model_dump(mode="json"))
    if isinstance(value, float) and value.is_integer():
        # JSON numbers: 1.0 and 1 are the same value
        return int(value)
    if isinstance(value, list | tuple):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    return value


def _serialize(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


def _child_path(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def compute_diff(from_value: Any, to_value: Any) -> list[DiffLine]:
    """Return the ordered diff lines turning ``from_value`` into ``to_value``.

    Pydantic models are compared through their JSON dump.
    """
    return _diff(_plain(from_value), _plain(to_value), "", 0)


def _diff(from_value: Any, to_value: Any, path: str, indent: int) -> list[DiffLine]:
    if from_value is None:
        if to_value is None:
            return []
        return _flatten(to_value, path, indent, DiffType.ADDED)
    if to_value is None:
        return _flatten(from_value, path, indent, DiffType.REMOVED)

    lines: list[DiffLine] = []

    if isinstance(from_value, list) and isinstance(to_value, list):
        for index in range(max(len(from_value), len(to_value))):
            item_path = f"{path}[{index}]"
            if index >= len(from_value):
                lines.extend(_flatten(to_value[index], item_path, indent, DiffType.ADDED))
            elif index >= len(to_value):
                lines.extend(_flatten(from_value[index], item_path, indent, DiffType.REMOVED))
            else:
                lines.extend(_diff(from_value[index], to_value[index], item_path, indent))
        return lines

    if isinstance(from_value, dict) and isinstance(to_value, dict):
        keys = list(from_value) + [key for key in to_value if key not in from_value]
        for key in keys:
            key_path = _child_path(path, str(key))
            if key not in from_value:
                lines.extend(_flatten(to_value[key], key_path, indent, DiffType.ADDED))
            elif key not in to_value:
                lines.extend(_flatten(from_value[key], key_path, indent, DiffType.REMOVED))
            else:
                lines.extend(_diff(from_value[key], to_value[key], key_path, indent))
        return lines

    # Primitives, and containers of different shapes, compare by serialized value
    from_text = _serialize(from_value)
    to_text = _serialize(to_value)
    if from_text != to_text:
        lines.append(
            DiffLine(
                type=DiffType.MODIFIED,
                path=path,
                from_value=from_text,
                to_value=to_text,
                indent=indent,
            )
        )
    return lines


def _one_sided(
    diff_type: DiffType, path: str, indent: int, value: str
) -> DiffLine:
    return DiffLine(
        type=diff_type,
        path=path,
        from_value=value if diff_type == DiffType.REMOVED else None,
        to_value=value if diff_type == DiffType.ADDED else None,
        indent=indent,
    )


def _flatten(value: Any, path: str, indent: int, diff_type: DiffType) -> list[DiffLine]:
    """Emit a subtree present on one side only, one line per leaf or empty container."""
    if value is None:
        return []

    lines: list[DiffLine] = []
    if isinstance(value, list):
        lines.append(_one_sided(diff_type, path, indent, f"Array({len(value)})"))
        for index, item in enumerate(value):
            lines.extend(_flatten(item, f"{path}[{index}]", indent + 1, diff_type))
    elif isinstance(value, dict):
        if not value:
            lines.append(_one_sided(diff_type, path, indent, "{}"))
        for key, item in value.items():
            key_path = _child_path(path, str(key))
            if isinstance(item, dict | list):
                lines.extend(_flatten(item, key_path, indent, diff_type))
            else:
                # A null member is a leaf; only a null root or array item is skipped
                lines.append(_one_sided(diff_type, key_path, indent, _serialize(item)))
    else:
        lines.append(_one_sided(diff_type, path, indent, _serialize(value)))
    return lines


def format_value(value: str | None, max_length: int = MAX_DISPLAY_LENGTH) -> str | None:
    """Truncate a serialized value for display."""
    if value is None or len(value) <= max_length:
        return value
    return value[:max_length] + "..."


def diff_stats(lines: Iterable[DiffLine]) -> dict[str, int]:
    """Count lines per change type."""
    counts = Counter(line.type for line in lines)
    return {
        DiffType.ADDED.value: counts[DiffType.ADDED],
        DiffType.REMOVED.value: counts[DiffType.REMOVED],
        DiffType.MODIFIED.value: counts[DiffType.MODIFIED],
    }


def element_changes(
    from_elements: Sequence[Element], to_elements: Sequence[Element]
) -> tuple[list[Element], list[Element], list[tuple[Element, Element]]]:
    """Compare top-level elements by id.

    Returns the added elements, the removed elements and the
    ``(from, to)`` pairs whose content differs.
    """
    from_by_id = {element.id: element for element in from_elements}
    to_by_id = {element.id: element for element in to_elements}

    added = [element for element_id, element in to_by_id.items() if element_id not in from_by_id]
    removed = [element for element_id, element in from_by_id.items() if element_id not in to_by_id]
    modified = [
        (from_by_id[element_id], element)
        for element_id, element in to_by_id.items()
        if element_id in from_by_id and from_by_id[element_id] != element
    ]
    return added, removed, modified

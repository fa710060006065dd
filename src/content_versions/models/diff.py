"""Diff line model produced by the structural diff engine."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class DiffType(StrEnum):
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


class DiffLine(BaseModel):
    """One row of a structural diff; values are JSON-serialized for display."""

    type: DiffType
    path: str
    from_value: str | None = None
    to_value: str | None = None
    indent: int = 0

"""Version document model: immutable numbered snapshots of a content item."""

from __future__ import annotations

from pydantic import BaseModel

from content_versions.models.base import DocumentBase
from content_versions.models.content import Snapshot
from content_versions.models.diff import DiffLine


def version_document_id(content_id: str, version_number: int) -> str:
    """Return the deterministic document id of a content item's version."""
    return f"{content_id}:{version_number}"


class ContentVersion(DocumentBase):
    """One entry of a content item's append-only version log."""

    content_id: str
    version_number: int
    snapshot: Snapshot
    change_note: str | None = None
    release: str | None = None
    is_release_end: bool = False
    created_by: str | None = None


class DiffSummary(BaseModel):
    """Element-level change counts between a version and its predecessor."""

    added: int = 0
    removed: int = 0
    modified: int = 0
    title_changed: bool = False


class VersionHistoryEntry(BaseModel):
    version: ContentVersion
    diff_summary: DiffSummary


class VersionComparison(BaseModel):
    """Two versions of a content item and the line diff between their snapshots."""

    from_version: ContentVersion
    to_version: ContentVersion
    lines: list[DiffLine]

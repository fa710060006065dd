"""Data models for Cosmos DB document types."""

from content_versions.models.base import DocumentBase
from content_versions.models.collection import Collection, Release
from content_versions.models.content import Content, ContentStatus, Snapshot
from content_versions.models.diff import DiffLine, DiffType
from content_versions.models.element import Element, ElementType
from content_versions.models.version import (
    ContentVersion,
    DiffSummary,
    VersionComparison,
    VersionHistoryEntry,
    version_document_id,
)

__all__ = [
    "Collection",
    "Content",
    "ContentStatus",
    "ContentVersion",
    "DiffLine",
    "DiffSummary",
    "DiffType",
    "DocumentBase",
    "Element",
    "ElementType",
    "Release",
    "Snapshot",
    "VersionComparison",
    "VersionHistoryEntry",
    "version_document_id",
]

"""Content document model and the immutable snapshot captured from it."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from content_versions.models.base import DocumentBase
from content_versions.models.element import Element


class ContentStatus(StrEnum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class Content(DocumentBase):
    """A content item of a collection, holding the live element tree."""

    collection_id: str
    title: str
    slug: str = ""
    status: ContentStatus = ContentStatus.DRAFT
    metadata: dict[str, Any] = Field(default_factory=dict)
    elements: list[Element] = Field(default_factory=list)
    editions: list[str] = Field(default_factory=list)
    current_version: int = 0
    published_version_id: str | None = None


class Snapshot(BaseModel):
    """Point-in-time copy of a content item's versioned fields."""

    title: str
    slug: str = ""
    status: ContentStatus = ContentStatus.DRAFT
    metadata: dict[str, Any] = Field(default_factory=dict)
    elements: list[Element] = Field(default_factory=list)

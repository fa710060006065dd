"""Collection document model and its ordered release checkpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from content_versions.models.base import DocumentBase, _utcnow


class Release(BaseModel):
    """A named checkpoint across every content item of a collection."""

    name: str
    created_at: datetime = Field(default_factory=_utcnow)
    created_by: str | None = None


class Collection(DocumentBase):
    """A named grouping of content items; owns the release sequence."""

    name: str
    slug: str = ""
    releases: list[Release] = Field(default_factory=list)
    current_release: str | None = None

    def release_names(self) -> list[str]:
        return [release.name for release in self.releases]

"""Content business logic: every write to a content item appends a version."""

from __future__ import annotations

import logging
import re
import unicodedata
from typing import TYPE_CHECKING, Any

from content_versions import snapshots, tree
from content_versions.models.content import Content, ContentStatus

if TYPE_CHECKING:
    from collections.abc import Sequence

    from content_versions.database.repositories.collections import CollectionRepository
    from content_versions.database.repositories.contents import ContentRepository
    from content_versions.models.collection import Collection
    from content_versions.models.element import Element
    from content_versions.services.versions import VersionService

logger = logging.getLogger(__name__)


def slugify(value: str) -> str:
    """Normalize a title into a URL slug."""
    if not value:
        return ""
    value = unicodedata.normalize("NFKD", value)
    value = value.encode("ascii", "ignore").decode("ascii")
    value = re.sub(r"[^\w\s-]", "", value).strip().lower()
    return re.sub(r"[-_\s]+", "-", value)


class ContentService:
    """Create and edit content items, recording a version for each change."""

    def __init__(
        self,
        contents_repo: ContentRepository,
        collections_repo: CollectionRepository,
        version_service: VersionService,
    ) -> None:
        self._contents_repo = contents_repo
        self._collections_repo = collections_repo
        self._versions = version_service

    async def _active_release(self, collection_id: str) -> str | None:
        collection = await self._collections_repo.get(collection_id, collection_id)
        return collection.current_release if collection else None

    async def _record(
        self, content: Content, change_note: str, created_by: str | None
    ) -> Content:
        version = await self._versions.append(
            content.id,
            snapshots.capture(content),
            change_note=change_note,
            created_by=created_by,
            release=await self._active_release(content.collection_id),
        )
        content.current_version = version.version_number
        return content

    async def _commit(
        self, content: Content, change_note: str, created_by: str | None
    ) -> Content:
        await self._record(content, change_note, created_by)
        return await self._contents_repo.update(content, content.collection_id)

    async def create(
        self,
        collection: Collection,
        title: str,
        *,
        slug: str | None = None,
        metadata: dict[str, Any] | None = None,
        elements: Sequence[Element] = (),
        editions: Sequence[str] = (),
        created_by: str | None = None,
    ) -> Content:
        """Create a draft content item with its initial version."""
        content = Content(
            collection_id=collection.id,
            title=title,
            slug=slug or slugify(title),
            metadata=metadata or {},
            elements=[element.model_copy(deep=True) for element in elements],
            editions=list(editions),
        )
        await self._record(content, "Initial version", created_by)
        await self._contents_repo.create(content)
        logger.info("Created content %s in collection %s", content.id, collection.id)
        return content

    async def update(
        self,
        content: Content,
        *,
        title: str | None = None,
        slug: str | None = None,
        metadata: dict[str, Any] | None = None,
        elements: Sequence[Element] | None = None,
        editions: Sequence[str] | None = None,
        change_note: str | None = None,
        created_by: str | None = None,
    ) -> Content:
        """Apply the given fields; nothing is written when no field is given."""
        changes: dict[str, Any] = {}
        if title is not None:
            changes["title"] = title
        if slug is not None:
            changes["slug"] = slug
        if metadata is not None:
            changes["metadata"] = metadata
        if elements is not None:
            changes["elements"] = list(elements)
        if editions is not None:
            changes["editions"] = list(editions)
        if not changes:
            return content

        updated = content.model_copy(update=changes, deep=True)
        return await self._commit(updated, change_note or "Content updated", created_by)

    async def publish(self, content: Content, *, created_by: str | None = None) -> Content:
        latest = await self._versions.latest(content.id)
        updated = content.model_copy(
            update={
                "status": ContentStatus.PUBLISHED,
                "published_version_id": latest.id if latest else None,
            },
            deep=True,
        )
        return await self._commit(updated, "Published", created_by)

    async def unpublish(self, content: Content, *, created_by: str | None = None) -> Content:
        updated = content.model_copy(
            update={"status": ContentStatus.DRAFT, "published_version_id": None}, deep=True
        )
        return await self._commit(updated, "Unpublished", created_by)

    async def archive(self, content: Content, *, created_by: str | None = None) -> Content:
        updated = content.model_copy(update={"status": ContentStatus.ARCHIVED}, deep=True)
        return await self._commit(updated, "Archived", created_by)

    async def add_element(
        self,
        content: Content,
        element: Element,
        *,
        parent_id: str | None = None,
        created_by: str | None = None,
    ) -> Content:
        elements = tree.insert(content.elements, element, parent_id)
        updated = content.model_copy(update={"elements": elements}, deep=True)
        return await self._commit(updated, "Element added", created_by)

    async def update_element(
        self,
        content: Content,
        element_id: str,
        *,
        created_by: str | None = None,
        **changes: Any,
    ) -> Content:
        elements = tree.update(content.elements, element_id, **changes)
        updated = content.model_copy(update={"elements": elements}, deep=True)
        return await self._commit(updated, "Element updated", created_by)

    async def delete_element(
        self, content: Content, element_id: str, *, created_by: str | None = None
    ) -> Content:
        """Remove an element together with its children."""
        elements = tree.remove(content.elements, element_id)
        updated = content.model_copy(update={"elements": elements}, deep=True)
        return await self._commit(updated, "Element deleted", created_by)

    async def move_element(
        self,
        content: Content,
        element_id: str,
        new_parent_id: str | None,
        new_order: int,
        *,
        created_by: str | None = None,
    ) -> Content:
        """Relocate an element; rejected moves leave content and history untouched."""
        elements = tree.move(content.elements, element_id, new_parent_id, new_order)
        updated = content.model_copy(update={"elements": elements}, deep=True)
        return await self._commit(updated, "Element moved", created_by)

    async def restore(
        self, content: Content, version_number: int, *, created_by: str | None = None
    ) -> Content:
        """Restore a past version as a new version of ``content``."""
        return await self._versions.restore(
            content,
            version_number,
            created_by=created_by,
            release=await self._active_release(content.collection_id),
        )

    async def delete(self, content: Content) -> int:
        """Delete a content item and its whole history. Returns versions deleted."""
        deleted = await self._versions.delete_history(content.id)
        await self._contents_repo.delete(content.id, content.collection_id)
        logger.info("Deleted content %s with %d versions", content.id, deleted)
        return deleted

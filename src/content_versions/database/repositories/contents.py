"""Repository for the contents container (partitioned by /collection_id)."""

from __future__ import annotations

from content_versions.database.repositories.base import BaseRepository
from content_versions.models.content import Content


class ContentRepository(BaseRepository[Content]):
    container_name = "contents"
    model_class = Content

    async def list_by_collection(self, collection_id: str) -> list[Content]:
        """Fetch all active content items of a collection."""
        return await self.query(
            "SELECT * FROM c WHERE c.collection_id = @collection_id"
            " AND NOT IS_DEFINED(c.deleted_at)"
            " ORDER BY c.created_at ASC",
            [{"name": "@collection_id", "value": collection_id}],
            partition_key=collection_id,
        )

    async def get_by_slug(self, collection_id: str, slug: str) -> Content | None:
        """Fetch a content item by its slug within a collection."""
        results = await self.query(
            "SELECT * FROM c WHERE c.collection_id = @collection_id"
            " AND c.slug = @slug"
            " AND NOT IS_DEFINED(c.deleted_at)",
            [
                {"name": "@collection_id", "value": collection_id},
                {"name": "@slug", "value": slug},
            ],
            partition_key=collection_id,
        )
        return results[0] if results else None

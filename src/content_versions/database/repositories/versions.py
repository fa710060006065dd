"""Repository for the versions container (partitioned by /content_id)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from azure.cosmos.exceptions import CosmosResourceExistsError

from content_versions.database.repositories.base import BaseRepository
from content_versions.errors import VersionConflictError
from content_versions.models.version import ContentVersion, version_document_id

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

# Transactional batches are limited to 100 operations per partition
_MAX_BATCH_OPERATIONS = 100

_PURGEABLE_FILTER = (
    " WHERE c.content_id = @content_id"
    " AND c.id != @latest_id"
    " AND (NOT IS_DEFINED(c.is_release_end) OR c.is_release_end != true)"
)


class VersionRepository(BaseRepository[ContentVersion]):
    """Append-only version log; one partition per content item."""

    container_name = "versions"
    model_class = ContentVersion

    async def create(self, item: ContentVersion) -> ContentVersion:
        """Insert a version; the deterministic id rejects a second writer of the same number."""
        try:
            return await super().create(item)
        except CosmosResourceExistsError as exc:
            logger.warning(
                "Version %d of content %s was written concurrently",
                item.version_number,
                item.content_id,
            )
            raise VersionConflictError(
                f"Version {item.version_number} of content '{item.content_id}' already exists"
            ) from exc

    async def get_by_number(self, content_id: str, version_number: int) -> ContentVersion | None:
        """Point lookup of one version."""
        return await self.get(version_document_id(content_id, version_number), content_id)

    async def get_latest(self, content_id: str) -> ContentVersion | None:
        """Fetch the version with the highest number, if any."""
        results = await self.query(
            "SELECT TOP 1 * FROM c WHERE c.content_id = @content_id"
            " ORDER BY c.version_number DESC",
            [{"name": "@content_id", "value": content_id}],
            partition_key=content_id,
        )
        return results[0] if results else None

    async def list_by_content(
        self, content_id: str, limit: int | None = None
    ) -> list[ContentVersion]:
        """Fetch versions newest first, optionally capped at ``limit``."""
        parameters: list[dict[str, Any]] = [{"name": "@content_id", "value": content_id}]
        top = ""
        if limit is not None:
            top = "TOP @limit "
            parameters.append({"name": "@limit", "value": limit})
        return await self.query(
            f"SELECT {top}* FROM c WHERE c.content_id = @content_id"
            " ORDER BY c.version_number DESC",
            parameters,
            partition_key=content_id,
        )

    async def list_purgeable_ids(self, content_id: str, latest_id: str) -> list[str]:
        """Ids of versions that are neither the latest nor a release end."""
        ids: list[str] = []
        async for item in self._container.query_items(
            query="SELECT VALUE c.id FROM c" + _PURGEABLE_FILTER,
            parameters=[
                {"name": "@content_id", "value": content_id},
                {"name": "@latest_id", "value": latest_id},
            ],
            partition_key=content_id,
        ):
            ids.append(item)
        return ids

    async def count_purgeable(self, content_id: str, latest_id: str) -> int:
        """Count the versions :meth:`list_purgeable_ids` would return."""
        total = await self.scalar(
            "SELECT VALUE COUNT(1) FROM c" + _PURGEABLE_FILTER,
            [
                {"name": "@content_id", "value": content_id},
                {"name": "@latest_id", "value": latest_id},
            ],
            partition_key=content_id,
        )
        return int(total or 0)

    async def delete_many(self, content_id: str, version_ids: Sequence[str]) -> int:
        """Delete versions of one content item in transactional batches.

        Each batch of up to 100 deletes commits or fails as a whole. A larger
        delete set spans several batches and is not atomic overall: a failure
        part way leaves earlier batches deleted. Callers only pass unprotected
        versions, so a partial purge can be repeated.
        """
        deleted = 0
        for start in range(0, len(version_ids), _MAX_BATCH_OPERATIONS):
            chunk = version_ids[start : start + _MAX_BATCH_OPERATIONS]
            await self._container.execute_item_batch(
                batch_operations=[("delete", (version_id,)) for version_id in chunk],
                partition_key=content_id,
            )
            deleted += len(chunk)
        return deleted

    async def delete_all(self, content_id: str) -> int:
        """Delete a content item's entire history."""
        ids = [version.id for version in await self.list_by_content(content_id)]
        return await self.delete_many(content_id, ids)

    async def mark_release_end(self, version: ContentVersion) -> ContentVersion:
        """Flag a version as the end of its release; re-marking is a no-op."""
        if version.is_release_end:
            return version
        version.is_release_end = True
        return await self.update(version, version.content_id)

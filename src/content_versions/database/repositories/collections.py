"""Repository for the collections container (partitioned by /id)."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast

from azure.core import MatchConditions
from azure.cosmos.exceptions import CosmosHttpResponseError, CosmosResourceNotFoundError

from content_versions.database.repositories.base import BaseRepository
from content_versions.errors import DuplicateReleaseError, NotFoundError, VersionConflictError
from content_versions.models.collection import Collection

if TYPE_CHECKING:
    from content_versions.models.collection import Release

logger = logging.getLogger(__name__)

_HTTP_PRECONDITION_FAILED = 412


class CollectionRepository(BaseRepository[Collection]):
    container_name = "collections"
    model_class = Collection

    async def list_all(self) -> list[Collection]:
        """Fetch all active collections."""
        return await self.query(
            "SELECT * FROM c WHERE NOT IS_DEFINED(c.deleted_at) ORDER BY c.name ASC",
        )

    async def add_release(self, collection_id: str, release: Release) -> Collection:
        """Append a release and make it current, guarded by the document etag.

        Raises :class:`DuplicateReleaseError` if the name is taken and
        :class:`VersionConflictError` if the collection changed since it was read.
        """
        try:
            data = cast(
                "dict[str, Any]",
                await self._container.read_item(item=collection_id, partition_key=collection_id),
            )
        except CosmosResourceNotFoundError as exc:
            raise NotFoundError(f"Collection '{collection_id}' does not exist") from exc

        collection = self.model_class.model_validate(data)
        if release.name in collection.release_names():
            raise DuplicateReleaseError(release.name)

        collection.releases.append(release)
        collection.current_release = release.name
        collection.updated_at = datetime.now(UTC)

        try:
            await self._container.replace_item(
                item=collection.id,
                body=self._body(collection),
                etag=data.get("_etag"),
                match_condition=MatchConditions.IfNotModified,
            )
        except CosmosHttpResponseError as exc:
            if exc.status_code == _HTTP_PRECONDITION_FAILED:
                logger.warning("Collection %s changed while adding release", collection_id)
                raise VersionConflictError(
                    f"Collection '{collection_id}' was modified concurrently"
                ) from exc
            raise

        return collection

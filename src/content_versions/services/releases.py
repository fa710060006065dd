"""Release business logic: create checkpoints and resolve content as of a release.

A release names the editing period that starts when it is created. Versions
written during that period carry the release name; creating the next release
flags each content item's latest version as the end of the period. Versions
written before the first release carry no release and belong to the implicit
"Basis" period.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel

from content_versions.errors import DuplicateReleaseError, NotFoundError
from content_versions.events import RELEASE_CREATED, NullPublisher
from content_versions.models.collection import Release
from content_versions.models.content import Content
from content_versions.models.version import ContentVersion

if TYPE_CHECKING:
    from content_versions.database.repositories.collections import CollectionRepository
    from content_versions.database.repositories.contents import ContentRepository
    from content_versions.events import EventPublisher
    from content_versions.models.collection import Collection
    from content_versions.services.versions import VersionService

logger = logging.getLogger(__name__)

DEFAULT_RELEASE = "Basis"
_BASIS_RANK = -1


class ReleaseContent(BaseModel):
    """A content item paired with the version it had in a release."""

    content: Content
    version: ContentVersion


def release_ranks(collection: Collection) -> dict[str | None, int]:
    """Map each release name to its position; untagged versions rank before all."""
    ranks: dict[str | None, int] = {None: _BASIS_RANK, DEFAULT_RELEASE: _BASIS_RANK}
    for position, name in enumerate(collection.release_names()):
        ranks[name] = position
    return ranks


def resolve_version(
    versions: list[ContentVersion], ranks: dict[str | None, int], release: str
) -> ContentVersion | None:
    """Pick the version a content item had in ``release`` from its newest-first history.

    The newest version tagged ``release`` wins; failing that, the newest
    version of an earlier release. Versions tagged with a release the
    collection no longer lists are ignored.
    """
    target = ranks.get(release)
    if target is None:
        return None
    for version in versions:
        rank = ranks.get(version.release)
        if rank is not None and rank <= target:
            return version
    return None


class ReleaseService:
    """Create releases for a collection and read content as of a release."""

    def __init__(
        self,
        collections_repo: CollectionRepository,
        contents_repo: ContentRepository,
        version_service: VersionService,
        events: EventPublisher | None = None,
    ) -> None:
        self._collections_repo = collections_repo
        self._contents_repo = contents_repo
        self._versions = version_service
        self._events = events or NullPublisher()

    @staticmethod
    def release_exists(collection: Collection, name: str) -> bool:
        return name in collection.release_names()

    @staticmethod
    def current_release(collection: Collection) -> str:
        """Display name of the active release period."""
        return collection.current_release or DEFAULT_RELEASE

    async def create_release(
        self,
        collection: Collection,
        name: str,
        *,
        copy_contents: bool = False,
        created_by: str | None = None,
    ) -> Release:
        """Close the current release period and open ``name``.

        Every content item's latest version is flagged as a release end. The
        sweep is idempotent, so an interrupted call can be repeated. With
        ``copy_contents`` each item also gets a copy of its latest snapshot
        tagged with the new release.
        """
        if name == DEFAULT_RELEASE or self.release_exists(collection, name):
            raise DuplicateReleaseError(name)

        contents = await self._contents_repo.list_by_collection(collection.id)
        for content in contents:
            await self._versions.mark_release_end(content.id)

        release = Release(name=name, created_by=created_by)
        updated = await self._collections_repo.add_release(collection.id, release)
        collection.releases = updated.releases
        collection.current_release = updated.current_release
        logger.info(
            "Created release %s in collection %s (%d contents)",
            name,
            collection.id,
            len(contents),
        )

        if copy_contents:
            await self._copy_contents(contents, name, created_by)

        await self._events.publish(
            RELEASE_CREATED,
            {
                "collection_id": collection.id,
                "release": name,
                "copy_contents": copy_contents,
            },
        )
        return release

    async def _copy_contents(
        self, contents: list[Content], release: str, created_by: str | None
    ) -> None:
        for content in contents:
            latest = await self._versions.latest(content.id)
            if latest is None:
                continue
            version = await self._versions.append(
                content.id,
                latest.snapshot,
                change_note=f"Copied to release: {release}",
                created_by=created_by,
                release=release,
            )
            content.current_version = version.version_number
            await self._contents_repo.update(content, content.collection_id)

    async def _load_collection(self, collection_id: str) -> Collection:
        collection = await self._collections_repo.get(collection_id, collection_id)
        if collection is None:
            raise NotFoundError(f"Collection '{collection_id}' does not exist")
        return collection

    async def get_content_for_release(
        self,
        content: Content,
        release: str,
        *,
        collection: Collection | None = None,
    ) -> ContentVersion | None:
        """Return the version ``content`` had in ``release``, or None if it was absent."""
        if collection is None:
            collection = await self._load_collection(content.collection_id)
        versions = await self._versions.history(content.id)
        return resolve_version(versions, release_ranks(collection), release)

    async def get_contents_for_release(
        self, collection: Collection, release: str
    ) -> list[ReleaseContent]:
        """Resolve every content item of ``collection``; items absent from the release are skipped."""
        results: list[ReleaseContent] = []
        for content in await self._contents_repo.list_by_collection(collection.id):
            version = await self.get_content_for_release(
                content, release, collection=collection
            )
            if version is not None:
                results.append(ReleaseContent(content=content, version=version))
        return results

    async def purge_collection(self, collection: Collection) -> int:
        """Purge intermediate versions of every content item in ``collection``."""
        total = 0
        for content in await self._contents_repo.list_by_collection(collection.id):
            total += await self._versions.purge_intermediate(content.id)
        return total

    async def count_collection_purgeable(self, collection: Collection) -> int:
        total = 0
        for content in await self._contents_repo.list_by_collection(collection.id):
            total += await self._versions.count_purgeable(content.id)
        return total

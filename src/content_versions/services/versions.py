"""Version log business logic: append, lookup, restore, compare and purge."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from content_versions import snapshots
from content_versions.diff import compute_diff, element_changes
from content_versions.errors import NotFoundError
from content_versions.events import VERSION_CREATED, VERSIONS_PURGED, NullPublisher
from content_versions.models.version import (
    ContentVersion,
    DiffSummary,
    VersionComparison,
    VersionHistoryEntry,
    version_document_id,
)

if TYPE_CHECKING:
    from content_versions.database.repositories.contents import ContentRepository
    from content_versions.database.repositories.versions import VersionRepository
    from content_versions.events import EventPublisher
    from content_versions.models.content import Content, Snapshot

logger = logging.getLogger(__name__)


class VersionService:
    """Append-only version history per content item."""

    def __init__(
        self,
        versions_repo: VersionRepository,
        contents_repo: ContentRepository,
        events: EventPublisher | None = None,
    ) -> None:
        self._versions_repo = versions_repo
        self._contents_repo = contents_repo
        self._events = events or NullPublisher()

    async def append(
        self,
        content_id: str,
        snapshot: Snapshot,
        *,
        change_note: str | None = None,
        created_by: str | None = None,
        release: str | None = None,
    ) -> ContentVersion:
        """Record ``snapshot`` as the next version of ``content_id``.

        The new number is the current latest plus one. If another writer
        stored that number first, :class:`VersionConflictError` propagates
        and the caller decides whether to retry.
        """
        latest = await self._versions_repo.get_latest(content_id)
        version_number = latest.version_number + 1 if latest else 1
        version = ContentVersion(
            id=version_document_id(content_id, version_number),
            content_id=content_id,
            version_number=version_number,
            snapshot=snapshot.model_copy(deep=True),
            change_note=change_note,
            release=release,
            created_by=created_by,
        )
        await self._versions_repo.create(version)
        logger.info("Created version %d of content %s", version_number, content_id)
        await self._events.publish(
            VERSION_CREATED,
            {
                "content_id": content_id,
                "version_number": version_number,
                "release": release,
                "change_note": change_note,
            },
        )
        return version

    async def mark_release_end(self, content_id: str) -> ContentVersion | None:
        """Flag the latest version as a release boundary; None when there is no version."""
        latest = await self._versions_repo.get_latest(content_id)
        if latest is None:
            return None
        return await self._versions_repo.mark_release_end(latest)

    async def get(self, content_id: str, version_number: int) -> ContentVersion | None:
        return await self._versions_repo.get_by_number(content_id, version_number)

    async def latest(self, content_id: str) -> ContentVersion | None:
        return await self._versions_repo.get_latest(content_id)

    async def history(self, content_id: str, limit: int | None = None) -> list[ContentVersion]:
        """Return versions newest first."""
        return await self._versions_repo.list_by_content(content_id, limit)

    async def count_purgeable(self, content_id: str) -> int:
        """Number of versions :meth:`purge_intermediate` would delete."""
        latest = await self._versions_repo.get_latest(content_id)
        if latest is None:
            return 0
        return await self._versions_repo.count_purgeable(content_id, latest.id)

    async def purge_intermediate(self, content_id: str) -> int:
        """Delete every version except the latest and the release ends.

        The protected versions are excluded from the delete set itself, so an
        interrupted purge never removes them.
        """
        latest = await self._versions_repo.get_latest(content_id)
        if latest is None:
            return 0
        purgeable = await self._versions_repo.list_purgeable_ids(content_id, latest.id)
        if not purgeable:
            return 0
        deleted = await self._versions_repo.delete_many(content_id, purgeable)
        logger.info("Purged %d versions of content %s", deleted, content_id)
        await self._events.publish(
            VERSIONS_PURGED, {"content_id": content_id, "deleted": deleted}
        )
        return deleted

    async def delete_history(self, content_id: str) -> int:
        """Remove every version of a content item being deleted."""
        return await self._versions_repo.delete_all(content_id)

    async def restore(
        self,
        content: Content,
        version_number: int,
        *,
        created_by: str | None = None,
        release: str | None = None,
    ) -> Content:
        """Apply a past version to ``content`` and record the result as a new version."""
        version = await self.get(content.id, version_number)
        if version is None:
            raise NotFoundError(
                f"Version {version_number} of content '{content.id}' does not exist"
            )

        restored = snapshots.apply(content, version.snapshot)
        new_version = await self.append(
            restored.id,
            snapshots.capture(restored),
            change_note=f"Restored to version {version_number}",
            created_by=created_by,
            release=release,
        )
        restored.current_version = new_version.version_number
        return await self._contents_repo.update(restored, restored.collection_id)

    async def compare(
        self, content_id: str, from_number: int, to_number: int
    ) -> VersionComparison | None:
        """Diff the snapshots of two versions; None if either is missing."""
        from_version = await self.get(content_id, from_number)
        to_version = await self.get(content_id, to_number)
        if from_version is None or to_version is None:
            return None
        return VersionComparison(
            from_version=from_version,
            to_version=to_version,
            lines=compute_diff(from_version.snapshot, to_version.snapshot),
        )

    @staticmethod
    def diff_summary(
        version: ContentVersion, previous: ContentVersion | None = None
    ) -> DiffSummary:
        """Summarize element changes of ``version`` relative to ``previous``."""
        if previous is None:
            return DiffSummary(added=len(version.snapshot.elements))
        added, removed, modified = element_changes(
            previous.snapshot.elements, version.snapshot.elements
        )
        return DiffSummary(
            added=len(added),
            removed=len(removed),
            modified=len(modified),
            title_changed=previous.snapshot.title != version.snapshot.title,
        )

    async def history_with_summaries(self, content_id: str) -> list[VersionHistoryEntry]:
        """Return versions newest first, each with a summary against the one before it."""
        versions = await self.history(content_id)
        entries: list[VersionHistoryEntry] = []
        previous: ContentVersion | None = None
        for version in reversed(versions):
            entries.append(
                VersionHistoryEntry(
                    version=version, diff_summary=self.diff_summary(version, previous)
                )
            )
            previous = version
        entries.reverse()
        return entries

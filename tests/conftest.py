"""Shared fixtures: in-memory repositories and a small element tree."""

from __future__ import annotations

import pytest

from content_versions.errors import DuplicateReleaseError, NotFoundError, VersionConflictError
from content_versions.events import NullPublisher
from content_versions.models import Collection, Content, ContentVersion, Element, Release
from content_versions.services import ContentService, ReleaseService, VersionService


class InMemoryVersionRepository:
    """Dict-backed stand-in for VersionRepository."""

    def __init__(self) -> None:
        self.items: dict[str, ContentVersion] = {}

    async def create(self, item: ContentVersion) -> ContentVersion:
        if item.id in self.items:
            raise VersionConflictError(f"Version {item.version_number} already exists")
        self.items[item.id] = item.model_copy(deep=True)
        return item

    def _for(self, content_id: str) -> list[ContentVersion]:
        versions = [v for v in self.items.values() if v.content_id == content_id]
        return sorted(versions, key=lambda v: v.version_number, reverse=True)

    async def get_by_number(self, content_id: str, version_number: int) -> ContentVersion | None:
        for version in self._for(content_id):
            if version.version_number == version_number:
                return version.model_copy(deep=True)
        return None

    async def get_latest(self, content_id: str) -> ContentVersion | None:
        versions = self._for(content_id)
        return versions[0].model_copy(deep=True) if versions else None

    async def list_by_content(
        self, content_id: str, limit: int | None = None
    ) -> list[ContentVersion]:
        versions = [v.model_copy(deep=True) for v in self._for(content_id)]
        return versions[:limit] if limit is not None else versions

    async def list_purgeable_ids(self, content_id: str, latest_id: str) -> list[str]:
        return [
            v.id
            for v in self._for(content_id)
            if v.id != latest_id and not v.is_release_end
        ]

    async def count_purgeable(self, content_id: str, latest_id: str) -> int:
        return len(await self.list_purgeable_ids(content_id, latest_id))

    async def delete_many(self, content_id: str, version_ids: list[str]) -> int:
        for version_id in version_ids:
            del self.items[version_id]
        return len(version_ids)

    async def delete_all(self, content_id: str) -> int:
        ids = [v.id for v in self._for(content_id)]
        return await self.delete_many(content_id, ids)

    async def mark_release_end(self, version: ContentVersion) -> ContentVersion:
        stored = self.items[version.id]
        stored.is_release_end = True
        return stored.model_copy(deep=True)


class InMemoryContentRepository:
    """Dict-backed stand-in for ContentRepository."""

    def __init__(self) -> None:
        self.items: dict[str, Content] = {}

    async def create(self, item: Content) -> Content:
        self.items[item.id] = item.model_copy(deep=True)
        return item

    async def get(self, item_id: str, partition_key: str) -> Content | None:
        content = self.items.get(item_id)
        return content.model_copy(deep=True) if content else None

    async def update(self, item: Content, partition_key: str) -> Content:
        self.items[item.id] = item.model_copy(deep=True)
        return item

    async def delete(self, item_id: str, partition_key: str) -> None:
        del self.items[item_id]

    async def list_by_collection(self, collection_id: str) -> list[Content]:
        return [
            c.model_copy(deep=True)
            for c in self.items.values()
            if c.collection_id == collection_id
        ]


class InMemoryCollectionRepository:
    """Dict-backed stand-in for CollectionRepository."""

    def __init__(self) -> None:
        self.items: dict[str, Collection] = {}

    async def create(self, item: Collection) -> Collection:
        self.items[item.id] = item.model_copy(deep=True)
        return item

    async def get(self, item_id: str, partition_key: str) -> Collection | None:
        collection = self.items.get(item_id)
        return collection.model_copy(deep=True) if collection else None

    async def add_release(self, collection_id: str, release: Release) -> Collection:
        collection = self.items.get(collection_id)
        if collection is None:
            raise NotFoundError(f"Collection '{collection_id}' does not exist")
        if release.name in collection.release_names():
            raise DuplicateReleaseError(release.name)
        collection.releases.append(release)
        collection.current_release = release.name
        return collection.model_copy(deep=True)


@pytest.fixture
def versions_repo() -> InMemoryVersionRepository:
    return InMemoryVersionRepository()


@pytest.fixture
def contents_repo() -> InMemoryContentRepository:
    return InMemoryContentRepository()


@pytest.fixture
def collections_repo() -> InMemoryCollectionRepository:
    return InMemoryCollectionRepository()


@pytest.fixture
def version_service(versions_repo, contents_repo) -> VersionService:
    return VersionService(versions_repo, contents_repo, NullPublisher())


@pytest.fixture
def release_service(collections_repo, contents_repo, version_service) -> ReleaseService:
    return ReleaseService(collections_repo, contents_repo, version_service)


@pytest.fixture
def content_service(contents_repo, collections_repo, version_service) -> ContentService:
    return ContentService(contents_repo, collections_repo, version_service)


@pytest.fixture
async def collection(collections_repo) -> Collection:
    collection = Collection(id="col-1", name="Articles", slug="articles")
    await collections_repo.create(collection)
    return collection


@pytest.fixture
def sample_tree() -> list[Element]:
    """Root: a(text), w1(wrapper: b(text), w2(wrapper: c(media))), r(reference)."""
    return [
        Element(id="a", type="text", order=0, data={"content": "Intro"}),
        Element(
            id="w1",
            type="wrapper",
            order=1,
            children=[
                Element(id="b", type="text", order=0, data={"content": "Body"}),
                Element(
                    id="w2",
                    type="wrapper",
                    order=1,
                    children=[Element(id="c", type="media", order=0, data={"alt": "Photo"})],
                ),
            ],
        ),
        Element(id="r", type="reference", order=2, data={"display_title": "Other"}),
    ]

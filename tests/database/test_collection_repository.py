"""Tests for CollectionRepository and ContentRepository query methods."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from azure.core import MatchConditions
from azure.cosmos.exceptions import CosmosHttpResponseError, CosmosResourceNotFoundError

from content_versions.database.repositories.collections import CollectionRepository
from content_versions.database.repositories.contents import ContentRepository
from content_versions.errors import DuplicateReleaseError, NotFoundError, VersionConflictError
from content_versions.models import Collection, Content, Release


def _mock_db() -> MagicMock:
    mock_db = MagicMock()
    mock_db.get_container_client.return_value = AsyncMock()
    return mock_db


class TestCollectionRepository:
    """Test the Collection Repository."""

    @pytest.fixture
    def repo(self) -> CollectionRepository:
        repo = CollectionRepository(_mock_db())
        repo._container.read_item.return_value = {
            **Collection(id="col-1", name="Articles", releases=[Release(name="2024-Q1")]).model_dump(
                mode="json"
            ),
            "_etag": "etag-1",
        }
        return repo

    async def test_add_release_uses_etag_match(self, repo: CollectionRepository) -> None:
        """Verify release appends use optimistic concurrency."""
        result = await repo.add_release("col-1", Release(name="2024-Q2"))

        assert result.release_names() == ["2024-Q1", "2024-Q2"]
        assert result.current_release == "2024-Q2"
        kwargs = repo._container.replace_item.call_args.kwargs
        assert kwargs["etag"] == "etag-1"
        assert kwargs["match_condition"] is MatchConditions.IfNotModified
        assert kwargs["body"]["current_release"] == "2024-Q2"

    async def test_add_release_duplicate_rejected_before_write(
        self, repo: CollectionRepository
    ) -> None:
        with pytest.raises(DuplicateReleaseError):
            await repo.add_release("col-1", Release(name="2024-Q1"))
        repo._container.replace_item.assert_not_called()

    async def test_add_release_precondition_failed(self, repo: CollectionRepository) -> None:
        """Verify a concurrent collection write surfaces as a version conflict."""
        error = CosmosHttpResponseError(status_code=412, message="Precondition failed")
        repo._container.replace_item.side_effect = error

        with pytest.raises(VersionConflictError):
            await repo.add_release("col-1", Release(name="2024-Q2"))

    async def test_add_release_other_errors_propagate(self, repo: CollectionRepository) -> None:
        error = CosmosHttpResponseError(status_code=503, message="Server error")
        repo._container.replace_item.side_effect = error

        with pytest.raises(CosmosHttpResponseError):
            await repo.add_release("col-1", Release(name="2024-Q2"))

    async def test_add_release_missing_collection(self, repo: CollectionRepository) -> None:
        repo._container.read_item.side_effect = CosmosResourceNotFoundError(message="Missing")

        with pytest.raises(NotFoundError):
            await repo.add_release("col-9", Release(name="2024-Q2"))


class TestContentRepository:
    """Test the Content Repository."""

    @pytest.fixture
    def repo(self) -> ContentRepository:
        return ContentRepository(_mock_db())

    async def test_list_by_collection(self, repo: ContentRepository) -> None:
        content = Content(id="c-1", collection_id="col-1", title="Article")
        repo.query = AsyncMock(return_value=[content])

        result = await repo.list_by_collection("col-1")

        assert result == [content]
        query_str, params = repo.query.call_args[0]
        assert "@collection_id" in query_str
        assert "NOT IS_DEFINED(c.deleted_at)" in query_str
        assert params == [{"name": "@collection_id", "value": "col-1"}]
        assert repo.query.call_args.kwargs["partition_key"] == "col-1"

    async def test_get_by_slug_empty(self, repo: ContentRepository) -> None:
        repo.query = AsyncMock(return_value=[])

        assert await repo.get_by_slug("col-1", "missing") is None

    async def test_get_skips_soft_deleted(self, repo: ContentRepository) -> None:
        repo._container.read_item.return_value = {
            **Content(id="c-1", collection_id="col-1", title="Gone").model_dump(mode="json"),
            "deleted_at": "2026-01-01T00:00:00+00:00",
        }

        assert await repo.get("c-1", "col-1") is None

    async def test_query_validates_results(self, repo: ContentRepository) -> None:
        async def query_items(**kwargs):
            yield Content(id="c-1", collection_id="col-1", title="A").model_dump(mode="json")

        repo._container.query_items = query_items

        result = await repo.query("SELECT * FROM c", partition_key="col-1")

        assert isinstance(result[0], Content)
        assert result[0].title == "A"

"""Tests for ContentService edits and the versions they record."""

import pytest

from content_versions.errors import InvalidMoveError, MalformedTreeError
from content_versions.models import ContentStatus, Element
from content_versions.services.contents import slugify


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Hello World", "hello-world"),
        ("  Café au lait!  ", "cafe-au-lait"),
        ("snake_case and-dash", "snake-case-and-dash"),
        ("", ""),
    ],
)
def test_slugify(title: str, expected: str) -> None:
    assert slugify(title) == expected


class TestCreate:
    async def test_create_records_initial_version(
        self, content_service, version_service, contents_repo, collection, sample_tree
    ) -> None:
        content = await content_service.create(
            collection, "Hello World", elements=sample_tree, created_by="u-1"
        )

        assert content.slug == "hello-world"
        assert content.status == ContentStatus.DRAFT
        assert content.current_version == 1
        assert contents_repo.items[content.id].current_version == 1
        version = await version_service.latest(content.id)
        assert version.change_note == "Initial version"
        assert version.created_by == "u-1"
        assert version.release is None
        assert version.snapshot.elements == content.elements

    async def test_create_copies_elements(
        self, content_service, collection, sample_tree
    ) -> None:
        content = await content_service.create(collection, "Article", elements=sample_tree)

        sample_tree[0].data["content"] = "changed"

        assert content.elements[0].data == {"content": "Intro"}

    async def test_versions_are_tagged_with_current_release(
        self, content_service, release_service, version_service, collection
    ) -> None:
        await release_service.create_release(collection, "2024-Q1")

        content = await content_service.create(collection, "Article")

        assert (await version_service.latest(content.id)).release == "2024-Q1"


class TestUpdate:
    async def test_update_appends_version(
        self, content_service, version_service, collection
    ) -> None:
        content = await content_service.create(collection, "Article")

        updated = await content_service.update(
            content, title="Renamed", metadata={"seo": {"description": "x"}}
        )

        assert updated.title == "Renamed"
        assert updated.current_version == 2
        latest = await version_service.latest(content.id)
        assert latest.change_note == "Content updated"
        assert latest.snapshot.metadata == {"seo": {"description": "x"}}
        assert content.title == "Article"

    async def test_update_without_changes_writes_nothing(
        self, content_service, version_service, collection
    ) -> None:
        content = await content_service.create(collection, "Article")

        result = await content_service.update(content)

        assert result is content
        assert len(await version_service.history(content.id)) == 1

    async def test_custom_change_note(self, content_service, version_service, collection) -> None:
        content = await content_service.create(collection, "Article")

        await content_service.update(content, slug="new-slug", change_note="Fix slug")

        assert (await version_service.latest(content.id)).change_note == "Fix slug"


class TestStatus:
    async def test_publish_points_at_latest_version(
        self, content_service, version_service, collection
    ) -> None:
        content = await content_service.create(collection, "Article")

        published = await content_service.publish(content)

        assert published.status == ContentStatus.PUBLISHED
        assert published.published_version_id == f"{content.id}:1"
        assert (await version_service.latest(content.id)).snapshot.status == ContentStatus.PUBLISHED

    async def test_unpublish_and_archive(self, content_service, collection) -> None:
        content = await content_service.create(collection, "Article")
        content = await content_service.publish(content)

        content = await content_service.unpublish(content)
        assert content.status == ContentStatus.DRAFT
        assert content.published_version_id is None

        content = await content_service.archive(content)
        assert content.status == ContentStatus.ARCHIVED
        assert content.current_version == 4


class TestElements:
    async def test_add_element_to_wrapper(
        self, content_service, collection, sample_tree
    ) -> None:
        content = await content_service.create(collection, "Article", elements=sample_tree)

        content = await content_service.add_element(
            content, Element(id="d", type="html"), parent_id="w1"
        )

        children = content.elements[1].children
        assert [child.id for child in children] == ["b", "w2", "d"]
        assert children[-1].order == 2
        assert content.current_version == 2

    async def test_update_element(
        self, content_service, version_service, collection, sample_tree
    ) -> None:
        content = await content_service.create(collection, "Article", elements=sample_tree)

        content = await content_service.update_element(
            content, "c", data={"alt": "Landscape"}
        )

        latest = await version_service.latest(content.id)
        assert latest.change_note == "Element updated"
        assert latest.snapshot.elements[1].children[1].children[0].data == {"alt": "Landscape"}

    async def test_delete_element_removes_subtree(
        self, content_service, collection, sample_tree
    ) -> None:
        content = await content_service.create(collection, "Article", elements=sample_tree)

        content = await content_service.delete_element(content, "w1")

        assert [e.id for e in content.elements] == ["a", "r"]
        assert [e.order for e in content.elements] == [0, 1]

    async def test_move_element(self, content_service, collection, sample_tree) -> None:
        content = await content_service.create(collection, "Article", elements=sample_tree)

        content = await content_service.move_element(content, "a", "w2", 0)

        assert [e.id for e in content.elements] == ["w1", "r"]
        w2 = content.elements[0].children[1]
        assert [e.id for e in w2.children] == ["a", "c"]

    async def test_rejected_move_writes_nothing(
        self, content_service, version_service, contents_repo, collection, sample_tree
    ) -> None:
        content = await content_service.create(collection, "Article", elements=sample_tree)

        with pytest.raises(InvalidMoveError):
            await content_service.move_element(content, "w1", "w2", 0)
        with pytest.raises(InvalidMoveError):
            await content_service.move_element(content, "b", "a", 0)
        with pytest.raises(MalformedTreeError):
            await content_service.move_element(content, "missing", None, 0)

        assert len(await version_service.history(content.id)) == 1
        assert contents_repo.items[content.id].elements == sample_tree


class TestRestoreAndDelete:
    async def test_restore_uses_current_release(
        self, content_service, release_service, version_service, collection
    ) -> None:
        content = await content_service.create(collection, "First")
        content = await content_service.update(content, title="Second")
        await release_service.create_release(collection, "2024-Q1")

        content = await content_service.restore(content, 1)

        assert content.title == "First"
        latest = await version_service.latest(content.id)
        assert latest.version_number == 3
        assert latest.release == "2024-Q1"

    async def test_restore_keeps_status(self, content_service, collection) -> None:
        content = await content_service.create(collection, "First")
        content = await content_service.publish(content)

        content = await content_service.restore(content, 1)

        assert content.status == ContentStatus.PUBLISHED

    async def test_delete_removes_history(
        self, content_service, versions_repo, contents_repo, collection
    ) -> None:
        content = await content_service.create(collection, "Article")
        content = await content_service.update(content, title="Two")

        deleted = await content_service.delete(content)

        assert deleted == 2
        assert versions_repo.items == {}
        assert content.id not in contents_repo.items

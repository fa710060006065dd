"""Generic repository over one Cosmos DB container."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar, cast

from azure.cosmos.exceptions import CosmosResourceNotFoundError

from content_versions.models.base import DocumentBase

if TYPE_CHECKING:
    from azure.cosmos.aio import DatabaseProxy


T = TypeVar("T", bound=DocumentBase)


class BaseRepository(Generic[T]):  # noqa: UP046
    """CRUD and query helpers shared by every container repository."""

    container_name: ClassVar[str]
    model_class: type[T]

    def __init__(self, database: DatabaseProxy) -> None:
        self._container = database.get_container_client(self.container_name)

    def _body(self, item: T) -> dict[str, Any]:
        return item.model_dump(mode="json", exclude_none=True)

    async def create(self, item: T) -> T:
        """Insert a new document."""
        await self._container.create_item(body=self._body(item))
        return item

    async def get(self, item_id: str, partition_key: str) -> T | None:
        """Read a document by id, ignoring soft-deleted documents."""
        try:
            data = cast(
                "dict[str, Any]",
                await self._container.read_item(item=item_id, partition_key=partition_key),
            )
        except CosmosResourceNotFoundError:
            return None
        if data.get("deleted_at") is not None:
            return None
        return self.model_class.model_validate(data)

    async def update(self, item: T, partition_key: str) -> T:  # noqa: ARG002
        """Replace a document, bumping ``updated_at``."""
        item.updated_at = datetime.now(UTC)
        await self._container.replace_item(item=item.id, body=self._body(item))
        return item

    async def soft_delete(self, item: T, partition_key: str) -> T:
        """Mark a document deleted without removing it."""
        item.deleted_at = datetime.now(UTC)
        return await self.update(item, partition_key)

    async def delete(self, item_id: str, partition_key: str) -> None:
        """Remove a document permanently."""
        await self._container.delete_item(item=item_id, partition_key=partition_key)

    async def query(
        self,
        sql: str,
        parameters: list[dict[str, Any]] | None = None,
        *,
        partition_key: str | None = None,
    ) -> list[T]:
        """Run a SQL query and validate each result into the model class."""
        kwargs: dict[str, Any] = {"query": sql, "parameters": parameters or []}
        if partition_key is not None:
            kwargs["partition_key"] = partition_key
        return [
            self.model_class.model_validate(item)
            async for item in self._container.query_items(**kwargs)
        ]

    async def scalar(
        self,
        sql: str,
        parameters: list[dict[str, Any]] | None = None,
        *,
        partition_key: str | None = None,
    ) -> Any:
        """Run a ``SELECT VALUE`` query and return its last value."""
        kwargs: dict[str, Any] = {"query": sql, "parameters": parameters or []}
        if partition_key is not None:
            kwargs["partition_key"] = partition_key
        result = None
        async for item in self._container.query_items(**kwargs):
            result = item
        return result

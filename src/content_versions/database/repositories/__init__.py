"""Repository modules for each Cosmos DB container."""

from content_versions.database.repositories.collections import CollectionRepository
from content_versions.database.repositories.contents import ContentRepository
from content_versions.database.repositories.versions import VersionRepository

__all__ = [
    "CollectionRepository",
    "ContentRepository",
    "VersionRepository",
]

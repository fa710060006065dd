"""Services wiring repositories into versioning operations."""

from content_versions.services.contents import ContentService
from content_versions.services.releases import DEFAULT_RELEASE, ReleaseContent, ReleaseService
from content_versions.services.versions import VersionService

__all__ = [
    "DEFAULT_RELEASE",
    "ContentService",
    "ReleaseContent",
    "ReleaseService",
    "VersionService",
]

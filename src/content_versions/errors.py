"""Error kinds raised by the versioning core.

Lookups (``get``, ``latest``, release resolution) report a miss as ``None``;
the exceptions below are for rejected operations. ``http_status`` is the
status the HTTP layer is expected to map each kind to.
"""

from __future__ import annotations


class ContentVersionsError(Exception):
    """Base class for all library errors."""

    http_status = 500

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class NotFoundError(ContentVersionsError):
    """A content item, version or release required by a write does not exist."""

    http_status = 404


class InvalidMoveError(ContentVersionsError):
    """A move targets a non-wrapper or would place an element inside itself."""

    http_status = 422


class DuplicateReleaseError(ContentVersionsError):
    """A release with the same name already exists in the collection."""

    http_status = 422

    def __init__(self, name: str) -> None:
        super().__init__(f"Release '{name}' already exists")
        self.name = name


class VersionConflictError(ContentVersionsError):
    """Another writer claimed the version number (or document revision) first."""

    http_status = 422


class MalformedTreeError(ContentVersionsError):
    """An element tree violates a structural invariant."""

    http_status = 500

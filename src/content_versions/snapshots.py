"""Capture and re-apply point-in-time copies of content items."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING

from content_versions.models.content import Snapshot

if TYPE_CHECKING:
    from content_versions.models.content import Content


def capture(content: Content) -> Snapshot:
    """Deep-copy the versioned fields of ``content`` into a new snapshot."""
    return Snapshot(
        title=content.title,
        slug=content.slug,
        status=content.status,
        metadata=copy.deepcopy(content.metadata),
        elements=[element.model_copy(deep=True) for element in content.elements],
    )


def apply(content: Content, snapshot: Snapshot) -> Content:
    """Return a copy of ``content`` carrying the fields recorded in ``snapshot``.

    Status is not restored: publishing state belongs to the live item.
    """
    restored = snapshot.model_copy(deep=True)
    return content.model_copy(
        update={
            "title": restored.title,
            "slug": restored.slug,
            "metadata": restored.metadata,
            "elements": restored.elements,
        },
        deep=True,
    )

"""Edition visibility rules for content items and their elements.

An empty edition list means "visible in every edition". Content-level
visibility is decided by the caller before element trees are filtered.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from content_versions.models.element import Element


def is_content_visible(content_editions: Sequence[str], edition: str) -> bool:
    """Return True if a content item restricted to ``content_editions`` shows in ``edition``."""
    return not content_editions or edition in content_editions


def is_element_visible(
    element_editions: Sequence[str],
    edition: str,
    content_editions: Sequence[str] = (),
) -> bool:
    """Return True if an element is visible; content visibility takes precedence."""
    if not is_content_visible(content_editions, edition):
        return False
    return not element_editions or edition in element_editions


def filter_for_edition(
    elements: Sequence[Element],
    content_editions: Sequence[str],
    edition: str,
) -> list[Element]:
    """Return a copy of ``elements`` without the elements hidden in ``edition``.

    A hidden element is dropped with its whole subtree. Remaining siblings keep
    their relative position and their ``order`` values.
    """
    visible: list[Element] = []
    for element in elements:
        if not is_element_visible(element.editions, edition, content_editions):
            continue
        if element.children:
            children = filter_for_edition(element.children, content_editions, edition)
            visible.append(element.model_copy(update={"children": children}, deep=True))
        else:
            visible.append(element.model_copy(deep=True))
    return visible

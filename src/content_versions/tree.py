"""Element tree operations: lookup, structural edits, moves and flattening.

Trees are lists of :class:`Element`; wrappers own their children by value.
Every edit returns a new tree and leaves its input untouched.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, cast

from pydantic import BaseModel

from content_versions.errors import InvalidMoveError, MalformedTreeError
from content_versions.models.element import Element, ElementType

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_TAGS = re.compile(r"<[^>]+>")


class FlatElement(BaseModel):
    """One row of a flattened tree, as listed by reference pickers."""

    id: str
    type: str
    depth: int
    parent_id: str | None = None
    order: int
    has_children: bool = False
    preview: str = ""


class FlatTree:
    """Restartable pre-order view of a tree that skips reference elements.

    Each iteration walks the tree afresh, so the view is lazy and can be
    consumed any number of times.
    """

    def __init__(self, tree: Sequence[Element]) -> None:
        self._tree = tree

    def __iter__(self) -> Iterator[FlatElement]:
        return _walk(self._tree, depth=0, parent_id=None)


def _walk(
    elements: Sequence[Element], *, depth: int, parent_id: str | None
) -> Iterator[FlatElement]:
    for element in elements:
        # References are never followed; expanding them could loop across contents
        if element.is_reference:
            continue
        children = element.children or []
        yield FlatElement(
            id=element.id,
            type=element.type,
            depth=depth,
            parent_id=parent_id,
            order=element.order,
            has_children=bool(children),
            preview=preview(element),
        )
        yield from _walk(children, depth=depth + 1, parent_id=element.id)


def flatten(tree: Sequence[Element]) -> FlatTree:
    """Return a lazy, restartable pre-order traversal of ``tree``."""
    return FlatTree(tree)


def _truncate(text: str, max_length: int) -> str:
    text = _WHITESPACE.sub(" ", text).strip()
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def preview(element: Element) -> str:
    """Return a short label describing an element for pickers and logs."""
    data: dict[str, Any] = element.data
    match element.type:
        case ElementType.TEXT:
            label = _truncate(str(data.get("content", "")), 50)
        case ElementType.MEDIA:
            label = data.get("alt") or data.get("caption") or "Media"
        case ElementType.HTML:
            label = _truncate(_TAGS.sub("", str(data.get("content", ""))), 50)
        case ElementType.WRAPPER:
            label = f"Wrapper ({len(element.children or [])} children)"
        case ElementType.KATEX:
            label = _truncate(str(data.get("formula", "")), 30)
        case ElementType.JSON:
            label = "JSON Data"
        case ElementType.XML:
            label = "XML Content"
        case ElementType.SVG:
            label = data.get("title") or "SVG"
        case ElementType.REFERENCE:
            label = data.get("display_title") or "Reference"
        case _:
            label = element.type.capitalize()
    return f"[{element.type}] {label}"


def find_by_id(tree: Sequence[Element], element_id: str) -> Element | None:
    """Depth-first search for an element, descending into wrapper children."""
    for element in tree:
        if element.id == element_id:
            return element
        if element.children:
            found = find_by_id(element.children, element_id)
            if found is not None:
                return found
    return None


def is_descendant(tree: Sequence[Element], candidate_id: str, ancestor_id: str) -> bool:
    """Return True if ``candidate_id`` is ``ancestor_id`` or lies inside its subtree."""
    ancestor = find_by_id(tree, ancestor_id)
    if ancestor is None:
        return False
    return find_by_id([ancestor], candidate_id) is not None


def _copy(tree: Sequence[Element]) -> list[Element]:
    return [element.model_copy(deep=True) for element in tree]


def _locate(
    siblings: list[Element], element_id: str
) -> tuple[list[Element], int] | None:
    """Return the list holding ``element_id`` and its index within it."""
    for index, element in enumerate(siblings):
        if element.id == element_id:
            return siblings, index
        if element.children:
            found = _locate(element.children, element_id)
            if found is not None:
                return found
    return None


def _ids(elements: Sequence[Element]) -> Iterator[str]:
    for element in elements:
        yield element.id
        if element.children:
            yield from _ids(element.children)


def _check_unique_ids(tree: Sequence[Element]) -> None:
    """Raise :class:`MalformedTreeError` if any id occurs twice, references included."""
    seen: set[str] = set()
    for element_id in _ids(tree):
        if element_id in seen:
            logger.error("Duplicate element id %s", element_id)
            raise MalformedTreeError(f"Element '{element_id}' already exists")
        seen.add(element_id)


def _renumber(siblings: list[Element]) -> None:
    siblings.sort(key=lambda element: element.order)
    for order, element in enumerate(siblings):
        element.order = order


def _children_of(tree: list[Element], parent_id: str | None) -> list[Element]:
    if parent_id is None:
        return tree
    parent = find_by_id(tree, parent_id)
    if parent is None:
        logger.error("Parent element %s does not exist", parent_id)
        raise MalformedTreeError(f"Parent element '{parent_id}' does not exist")
    if not parent.is_wrapper:
        raise InvalidMoveError("Elements can only be placed inside wrapper elements")
    return cast("list[Element]", parent.children)


def move(
    tree: Sequence[Element],
    element_id: str,
    new_parent_id: str | None,
    new_order: int,
) -> list[Element]:
    """Return a copy of ``tree`` with ``element_id`` relocated.

    ``new_parent_id`` of None moves the element to the tree root. Sibling
    orders in the old and new parent are renumbered ``0..n-1`` with the
    moved element at position ``new_order`` (clamped to the sibling count).
    Every check runs before the copy is modified.
    """
    if find_by_id(tree, element_id) is None:
        logger.error("Cannot move missing element %s", element_id)
        raise MalformedTreeError(f"Element '{element_id}' does not exist")

    if new_parent_id is not None:
        parent = find_by_id(tree, new_parent_id)
        if parent is None:
            logger.error("Cannot move %s into missing parent %s", element_id, new_parent_id)
            raise MalformedTreeError(f"Parent element '{new_parent_id}' does not exist")
        if not parent.is_wrapper:
            raise InvalidMoveError("Elements can only be moved into wrapper elements")
        if is_descendant(tree, new_parent_id, element_id):
            raise InvalidMoveError("Cannot move an element into itself or its descendants")

    result = _copy(tree)
    located = _locate(result, element_id)
    if located is None:
        raise MalformedTreeError(f"Element '{element_id}' does not exist")
    old_siblings, index = located
    element = old_siblings.pop(index)
    _renumber(old_siblings)

    new_siblings = _children_of(result, new_parent_id)
    _renumber(new_siblings)
    position = max(0, min(new_order, len(new_siblings)))
    new_siblings.insert(position, element)
    for order, sibling in enumerate(new_siblings):
        sibling.order = order
    return result


def insert(
    tree: Sequence[Element], element: Element, parent_id: str | None = None
) -> list[Element]:
    """Return a copy of ``tree`` with ``element`` placed after the last sibling under ``parent_id``.

    Every id in the inserted subtree must be new to the tree.
    """
    result = _copy(tree)
    siblings = _children_of(result, parent_id)
    next_order = max((sibling.order for sibling in siblings), default=-1) + 1
    new_element = element.model_copy(deep=True)
    new_element.order = next_order
    siblings.append(new_element)
    _check_unique_ids(result)
    return result


def update(tree: Sequence[Element], element_id: str, **changes: Any) -> list[Element]:
    """Return a copy of ``tree`` with fields of ``element_id`` replaced.

    Changes are validated through :class:`Element`, so turning a wrapper
    with children into a leaf type raises :class:`MalformedTreeError`, as do
    replacement children reusing ids found elsewhere in the tree.
    """
    result = _copy(tree)
    located = _locate(result, element_id)
    if located is None:
        logger.error("Cannot update missing element %s", element_id)
        raise MalformedTreeError(f"Element '{element_id}' does not exist")
    siblings, index = located
    current = siblings[index].model_dump()
    current.update(changes)
    current["id"] = element_id
    siblings[index] = Element.model_validate(current)
    _check_unique_ids(result)
    return result


def remove(tree: Sequence[Element], element_id: str) -> list[Element]:
    """Return a copy of ``tree`` without ``element_id`` and its subtree."""
    result = _copy(tree)
    located = _locate(result, element_id)
    if located is None:
        logger.error("Cannot remove missing element %s", element_id)
        raise MalformedTreeError(f"Element '{element_id}' does not exist")
    siblings, index = located
    del siblings[index]
    _renumber(siblings)
    return result

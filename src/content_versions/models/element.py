"""Element model: one node of a content item's block tree."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, model_validator

from content_versions.errors import MalformedTreeError

logger = logging.getLogger(__name__)


class ElementType(StrEnum):
    """Built-in element types. Any other tag is a custom element type."""

    TEXT = "text"
    MEDIA = "media"
    HTML = "html"
    JSON = "json"
    XML = "xml"
    SVG = "svg"
    KATEX = "katex"
    WRAPPER = "wrapper"
    REFERENCE = "reference"


class Element(BaseModel):
    """A block element. Only wrappers own children, held by value."""

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    type: str
    order: int = 0
    data: dict[str, Any] = Field(default_factory=dict)
    children: list[Element] | None = None
    editions: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_children(self) -> Element:
        if self.is_wrapper:
            if self.children is None:
                self.children = []
        elif self.children:
            logger.error("Non-wrapper element %s (%s) carries children", self.id, self.type)
            raise MalformedTreeError(
                f"Element '{self.id}' of type '{self.type}' cannot have children"
            )
        else:
            self.children = None
        return self

    @property
    def is_wrapper(self) -> bool:
        return self.type == ElementType.WRAPPER

    @property
    def is_reference(self) -> bool:
        return self.type == ElementType.REFERENCE

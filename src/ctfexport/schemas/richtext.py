"""Contentful rich-text document model."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class BLOCKS:
    """Block node kinds."""

    DOCUMENT = "document"
    PARAGRAPH = "paragraph"
    HEADING_1 = "heading-1"
    HEADING_2 = "heading-2"
    HEADING_3 = "heading-3"
    HEADING_4 = "heading-4"
    HEADING_5 = "heading-5"
    HEADING_6 = "heading-6"
    OL_LIST = "ordered-list"
    UL_LIST = "unordered-list"
    LIST_ITEM = "list-item"
    HR = "hr"
    QUOTE = "blockquote"
    EMBEDDED_ENTRY = "embedded-entry-block"
    EMBEDDED_ASSET = "embedded-asset-block"
    TABLE = "table"
    TABLE_ROW = "table-row"
    TABLE_CELL = "table-cell"
    TABLE_HEADER_CELL = "table-header-cell"


HEADINGS = {
    BLOCKS.HEADING_1: 1,
    BLOCKS.HEADING_2: 2,
    BLOCKS.HEADING_3: 3,
    BLOCKS.HEADING_4: 4,
    BLOCKS.HEADING_5: 5,
    BLOCKS.HEADING_6: 6,
}


class INLINES:
    """Inline node kinds."""

    HYPERLINK = "hyperlink"
    ENTRY_HYPERLINK = "entry-hyperlink"
    ASSET_HYPERLINK = "asset-hyperlink"
    EMBEDDED_ENTRY = "embedded-entry-inline"


class MARKS:
    """Mark kinds applied to text nodes."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    CODE = "code"
    SUPERSCRIPT = "superscript"
    SUBSCRIPT = "subscript"


class Mark(BaseModel):
    """Inline formatting annotation on a text node."""

    type: str


class Text(BaseModel):
    """Leaf node carrying a raw string and its marks."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    node_type: Literal["text"] = Field(default="text", alias="nodeType")
    value: str = ""
    marks: list[Mark] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)


# Text first: a payload that validates as a text node is one.
Node = Annotated[Union[Text, "Block"], Field(union_mode="left_to_right")]


class Block(BaseModel):
    """Container node: every kind other than ``text``.

    Unknown ``nodeType`` values are accepted so that newer documents still
    parse; the renderers drop kinds they have no handler for.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    node_type: str = Field(alias="nodeType")
    content: list[Node] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def target_id(self) -> str:
        """Identifier of the entity a link or embed node points at."""
        target = self.data.get("target")
        if isinstance(target, str):
            return target
        if isinstance(target, dict):
            sys = target.get("sys")
            if isinstance(sys, dict) and isinstance(sys.get("id"), str):
                return sys["id"]
        return ""


Block.model_rebuild()


def text(value: str, *marks: str) -> Text:
    """Build a text node with the given mark kinds."""
    return Text(value=value, marks=[Mark(type=mark) for mark in marks])


def block(node_type: str, *content: Node, **data: Any) -> Block:
    """Build a container node."""
    return Block(node_type=node_type, content=list(content), data=data)

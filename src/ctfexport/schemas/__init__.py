"""Shared schemas for ctfexport."""

from ctfexport.schemas.contentful import (
    Asset,
    ContentType,
    ContentTypeField,
    Entry,
    Environment,
    Link,
    Space,
    Sys,
    User,
)
from ctfexport.schemas.richtext import BLOCKS, INLINES, MARKS, Block, Mark, Node, Text

__all__ = [
    "BLOCKS",
    "INLINES",
    "MARKS",
    "Asset",
    "Block",
    "ContentType",
    "ContentTypeField",
    "Entry",
    "Environment",
    "Link",
    "Mark",
    "Node",
    "Space",
    "Sys",
    "Text",
    "User",
]

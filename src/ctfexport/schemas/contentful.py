"""Contentful Management API payload models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Sys(_Payload):
    """The ``sys`` block shared by every Contentful resource and link."""

    id: str = ""
    type: str = ""
    link_type: str | None = Field(default=None, alias="linkType")
    content_type: Link | None = Field(default=None, alias="contentType")


class Link(_Payload):
    """A reference to another entity (``{"sys": {"type": "Link", ...}}``)."""

    sys: Sys


class Tags(_Payload):
    tags: list[Link] = Field(default_factory=list)


class Entry(_Payload):
    """A content entry; ``fields`` maps field id to locale to value."""

    sys: Sys
    fields: dict[str, dict[str, Any]] = Field(default_factory=dict)
    metadata: Tags | None = None

    @property
    def content_type_id(self) -> str:
        if self.sys.content_type is None:
            return ""
        return self.sys.content_type.sys.id

    @property
    def tag_ids(self) -> list[str]:
        if self.metadata is None:
            return []
        return [tag.sys.id for tag in self.metadata.tags]


class Asset(_Payload):
    sys: Sys
    fields: dict[str, dict[str, Any]] = Field(default_factory=dict)


class ContentTypeField(_Payload):
    """Field definition of a content type."""

    id: str
    name: str = ""
    type: str
    link_type: str | None = Field(default=None, alias="linkType")
    items: dict[str, Any] | None = None


class ContentType(_Payload):
    """Content model describing the fields of its entries."""

    sys: Sys
    name: str = ""
    display_field: str | None = Field(default=None, alias="displayField")
    fields: list[ContentTypeField] = Field(default_factory=list)


class Space(_Payload):
    sys: Sys
    name: str = ""


class Environment(_Payload):
    sys: Sys
    name: str = ""


class User(_Payload):
    sys: Sys
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    email: str = ""


Sys.model_rebuild()
Link.model_rebuild()

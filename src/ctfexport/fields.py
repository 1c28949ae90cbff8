"""Format Contentful field values as prefixed spreadsheet cell strings."""

from __future__ import annotations

import json
from typing import Any, Literal

from ctfexport.markdown import rich_text_to_markdown
from ctfexport.richtext import rich_text_to_html

RichTextFormat = Literal["json", "markdown", "html"]
RICH_TEXT_FORMATS: tuple[RichTextFormat, ...] = ("json", "markdown", "html")


def _json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _link_id(value: Any) -> str | None:
    if isinstance(value, dict) and isinstance(value.get("sys"), dict):
        return value["sys"].get("id") or None
    return None


def format_rich_text(value: Any, rich_text: RichTextFormat = "json") -> str:
    """Prefix and serialize a rich-text document in the requested format."""
    if rich_text == "markdown":
        return f"markdown:{rich_text_to_markdown(value)}"
    if rich_text == "html":
        return f"html:{rich_text_to_html(value)}"
    return f"json:{_json(value)}"


def format_field_value(value: Any, field_type: str, *, rich_text: RichTextFormat = "json") -> str | None:
    """Convert a raw field value to the cell text written to the workbook.

    The prefix (``number:``, ``link:``, ``json:``...) tells the importer how
    to turn the cell back into a field value.

    Args:
        value: Field value for one locale.
        field_type: Contentful field type (``Text``, ``RichText``, ``Link``...).
        rich_text: Serialization used for ``RichText`` fields.

    Returns:
        The cell text, or None when there is no value.
    """
    if value is None:
        return None

    if field_type in ("Text", "Symbol"):
        return value if isinstance(value, str) else str(value)
    if field_type in ("Integer", "Number"):
        return f"number:{_number(value)}"
    if field_type == "Boolean":
        return f"bool:{'true' if value is True else 'false'}"
    if field_type == "RichText":
        return format_rich_text(value, rich_text)
    if field_type in ("Object", "Array"):
        return _format_collection(value)
    if field_type == "Link":
        link_id = _link_id(value)
        if link_id is None:
            return f"json:{_json(value)}"
        if value["sys"].get("linkType") == "Asset":
            return f"asset:{link_id}"
        return f"link:{link_id}"

    if isinstance(value, (dict, list)):
        return f"json:{_json(value)}"
    return value if isinstance(value, str) else str(value)


def _format_collection(value: Any) -> str:
    if not isinstance(value, list) or not value:
        return f"json:{_json(value)}"

    first = value[0]
    if _link_id(first):
        ids = ",".join(_link_id(item) or "" for item in value)
        if first["sys"].get("linkType", "Entry") == "Asset":
            return f"assets:{ids}"
        return f"links:{ids}"
    if isinstance(first, str):
        return f"array:{','.join(str(item) for item in value)}"
    return f"json:{_json(value)}"

"""Render Contentful rich-text documents to HTML.

Rendering is table driven: a node table maps node kinds to
``(node, next) -> str`` handlers and a mark table maps mark kinds to
``str -> str`` transforms. ``next`` renders a node's children with the same
tables. Text is emitted without HTML escaping; entry content is trusted and
exported for round-tripping, not for display.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from functools import reduce
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from ctfexport.schemas.richtext import BLOCKS, HEADINGS, INLINES, MARKS, Block, Node, Text

Next = Callable[[Sequence[Node]], str]
NodeRenderer = Callable[[Block, Next], str]
MarkRenderer = Callable[[str], str]

# Characters encodeURIComponent leaves alone besides letters, digits and "_.-~".
_URI_COMPONENT_SAFE = "!*'()"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderOptions:
    """The node and mark tables of one output profile."""

    render_node: Mapping[str, NodeRenderer] = field(default_factory=dict)
    render_mark: Mapping[str, MarkRenderer] = field(default_factory=dict)


def build_options(
    defaults: RenderOptions,
    *,
    render_node: Mapping[str, NodeRenderer] | None = None,
    render_mark: Mapping[str, MarkRenderer] | None = None,
) -> RenderOptions:
    """Merge partial tables over ``defaults``; overrides win per kind."""
    return RenderOptions(
        render_node={**defaults.render_node, **(render_node or {})},
        render_mark={**defaults.render_mark, **(render_mark or {})},
    )


def render_nodes(nodes: Sequence[Node], options: RenderOptions) -> str:
    """Render a sequence of sibling nodes and concatenate the results."""
    return "".join(render_node(node, options) for node in nodes)


def render_node(node: Node, options: RenderOptions) -> str:
    """Render a single node.

    Text nodes fold their value through their marks in order, skipping marks
    with no renderer. Other nodes go to their node table entry; kinds with no
    entry render to an empty string.
    """
    if isinstance(node, Text):
        return reduce(
            lambda value, mark: options.render_mark.get(mark.type, _unchanged)(value),
            node.marks,
            node.value,
        )

    renderer = options.render_node.get(node.node_type)
    if renderer is None:
        return ""

    def next_nodes(children: Sequence[Node]) -> str:
        return render_nodes(children, options)

    return renderer(node, next_nodes)


def render_document(document: Block | Mapping[str, Any] | None, options: RenderOptions) -> str:
    """Render a whole document, given as a model or as the raw JSON payload.

    The document node itself is dispatched through ``options`` so that a
    profile can decorate the full output. A raw payload that does not
    validate as a node tree renders as the empty string.
    """
    if not document:
        return ""
    if isinstance(document, Block):
        root = document
    else:
        if not isinstance(document.get("content"), list):
            return ""
        try:
            root = Block.model_validate(document)
        except ValidationError as exc:
            logger.debug("Skipping malformed rich text document: %s", exc)
            return ""
    return render_node(root, options)


def _unchanged(text: str) -> str:
    return text


def _attribute_value(value: str) -> str:
    return '"' + value.replace('"', "&quot;") + '"'


def _encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def _default_inline(node_type: str) -> NodeRenderer:
    def render(node: Block, next_nodes: Next) -> str:
        return (
            f"<span>type: {_encode_uri_component(node_type)} "
            f"id: {_encode_uri_component(node.target_id)}</span>"
        )

    return render


def _wrap(tag: str) -> NodeRenderer:
    def render(node: Block, next_nodes: Next) -> str:
        return f"<{tag}>{next_nodes(node.content)}</{tag}>"

    return render


def _render_hyperlink(node: Block, next_nodes: Next) -> str:
    uri = node.data.get("uri")
    href = uri if isinstance(uri, str) else ""
    return f"<a href={_attribute_value(href)}>{next_nodes(node.content)}</a>"


def _mark(tag: str) -> MarkRenderer:
    def render(text: str) -> str:
        return f"<{tag}>{text}</{tag}>"

    return render


DEFAULT_NODE_RENDERERS: dict[str, NodeRenderer] = {
    BLOCKS.DOCUMENT: lambda node, next_nodes: next_nodes(node.content),
    BLOCKS.PARAGRAPH: _wrap("p"),
    **{kind: _wrap(f"h{level}") for kind, level in HEADINGS.items()},
    BLOCKS.EMBEDDED_ENTRY: _wrap("div"),
    BLOCKS.UL_LIST: _wrap("ul"),
    BLOCKS.OL_LIST: _wrap("ol"),
    BLOCKS.LIST_ITEM: _wrap("li"),
    BLOCKS.QUOTE: _wrap("blockquote"),
    BLOCKS.HR: lambda node, next_nodes: "<hr/>",
    BLOCKS.TABLE: _wrap("table"),
    BLOCKS.TABLE_ROW: _wrap("tr"),
    BLOCKS.TABLE_HEADER_CELL: _wrap("th"),
    BLOCKS.TABLE_CELL: _wrap("td"),
    INLINES.ASSET_HYPERLINK: _default_inline(INLINES.ASSET_HYPERLINK),
    INLINES.ENTRY_HYPERLINK: _default_inline(INLINES.ENTRY_HYPERLINK),
    INLINES.EMBEDDED_ENTRY: _default_inline(INLINES.EMBEDDED_ENTRY),
    INLINES.HYPERLINK: _render_hyperlink,
}

DEFAULT_MARK_RENDERERS: dict[str, MarkRenderer] = {
    MARKS.BOLD: _mark("b"),
    MARKS.ITALIC: _mark("i"),
    MARKS.UNDERLINE: _mark("u"),
    MARKS.CODE: _mark("code"),
    MARKS.SUPERSCRIPT: _mark("sup"),
    MARKS.SUBSCRIPT: _mark("sub"),
}

HTML_OPTIONS = RenderOptions(render_node=DEFAULT_NODE_RENDERERS, render_mark=DEFAULT_MARK_RENDERERS)


def rich_text_to_html(
    document: Block | Mapping[str, Any] | None,
    *,
    render_node: Mapping[str, NodeRenderer] | None = None,
    render_mark: Mapping[str, MarkRenderer] | None = None,
) -> str:
    """Serialize a rich-text document to an HTML string.

    Args:
        document: Rich-text document as a model or raw JSON payload.
        render_node: Node handlers replacing the defaults per kind.
        render_mark: Mark handlers replacing the defaults per kind.

    Returns:
        The HTML markup. Text values are inserted verbatim.
    """
    options = build_options(HTML_OPTIONS, render_node=render_node, render_mark=render_mark)
    return render_document(document, options)

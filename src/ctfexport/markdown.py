"""Convert Contentful rich-text documents to Markdown for easier translation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from ctfexport.richtext import (
    HTML_OPTIONS,
    MarkRenderer,
    Next,
    NodeRenderer,
    RenderOptions,
    build_options,
    render_document,
)
from ctfexport.schemas.richtext import BLOCKS, HEADINGS, MARKS, Block

HORIZONTAL_RULE = "----------\n"


@dataclass
class MarkdownContext:
    """Ancestor state shared by the handlers of one render call."""

    list_kind: Literal["ordered", "unordered"] | None = None
    list_counter: int = 1
    in_table: bool = False
    in_table_header: bool = False
    table_column_count: int = 0


class _MarkdownRenderer:
    """Node handlers closing over a single ``MarkdownContext``."""

    def __init__(self) -> None:
        self.context = MarkdownContext()

    def node_renderers(self) -> dict[str, NodeRenderer]:
        renderers: dict[str, NodeRenderer] = {
            BLOCKS.DOCUMENT: self.document,
            BLOCKS.PARAGRAPH: self.paragraph,
            BLOCKS.OL_LIST: self.ordered_list,
            BLOCKS.UL_LIST: self.unordered_list,
            BLOCKS.LIST_ITEM: self.list_item,
            BLOCKS.HR: self.horizontal_rule,
            BLOCKS.QUOTE: self.blockquote,
            BLOCKS.EMBEDDED_ENTRY: self.embedded_block,
            BLOCKS.EMBEDDED_ASSET: self.embedded_block,
            BLOCKS.TABLE: self.table,
            BLOCKS.TABLE_ROW: self.table_row,
            BLOCKS.TABLE_CELL: self.table_cell,
            BLOCKS.TABLE_HEADER_CELL: self.table_cell,
        }
        for kind in HEADINGS:
            renderers[kind] = self.heading
        return renderers

    def document(self, node: Block, next_nodes: Next) -> str:
        return f"{next_nodes(node.content)}\n"

    def paragraph(self, node: Block, next_nodes: Next) -> str:
        if self.context.in_table:
            return f"{next_nodes(node.content)}<br/>"
        return f"{next_nodes(node.content)}\n\n"

    def heading(self, node: Block, next_nodes: Next) -> str:
        return f"{'#' * HEADINGS[node.node_type]} {next_nodes(node.content)}\n"

    def ordered_list(self, node: Block, next_nodes: Next) -> str:
        ctx = self.context
        outer = ctx.list_kind, ctx.list_counter
        ctx.list_kind, ctx.list_counter = "ordered", 1
        try:
            return f"{next_nodes(node.content)}\n"
        finally:
            ctx.list_kind, ctx.list_counter = outer

    def unordered_list(self, node: Block, next_nodes: Next) -> str:
        ctx = self.context
        outer = ctx.list_kind
        ctx.list_kind = "unordered"
        try:
            return f"{next_nodes(node.content)}\n"
        finally:
            ctx.list_kind = outer

    def list_item(self, node: Block, next_nodes: Next) -> str:
        ctx = self.context
        if ctx.list_kind != "ordered":
            return f" * {next_nodes(node.content)}"
        # The counter belongs to this list; nested lists restore it on exit.
        counter = ctx.list_counter
        result = f"{counter}. {next_nodes(node.content)}"
        ctx.list_counter = counter + 1
        return result

    def horizontal_rule(self, node: Block, next_nodes: Next) -> str:
        return HORIZONTAL_RULE

    def blockquote(self, node: Block, next_nodes: Next) -> str:
        out = next_nodes(node.content)
        quoted = "\n".join(f"> {line}" for line in out.split("\n"))
        return f"{quoted}\n"

    def embedded_block(self, node: Block, next_nodes: Next) -> str:
        return f"![{node.node_type}]({node.target_id})"

    def table(self, node: Block, next_nodes: Next) -> str:
        rows = node.content
        if not rows:
            return ""
        ctx = self.context
        outer = ctx.in_table, ctx.in_table_header, ctx.table_column_count
        header_row = rows[0]
        ctx.in_table = True
        ctx.table_column_count = len(header_row.content) if isinstance(header_row, Block) else 0
        try:
            ctx.in_table_header = True
            header = next_nodes([header_row])
            ctx.in_table_header = False
            separator = "|" + "--|" * ctx.table_column_count + "\n"
            body = next_nodes(rows[1:])
        finally:
            ctx.in_table, ctx.in_table_header, ctx.table_column_count = outer
        return f"{header}{separator}{body}\n"

    def table_row(self, node: Block, next_nodes: Next) -> str:
        return f"| {next_nodes(node.content)}\n"

    def table_cell(self, node: Block, next_nodes: Next) -> str:
        # Header cells stay on one line so the separator row lines up.
        line_break = "" if self.context.in_table_header else "<br/>"
        text = next_nodes(node.content).replace("\n", line_break)
        return f" {text} |"


def _trimmed(prefix: str, suffix: str) -> MarkRenderer:
    def render(text: str) -> str:
        stripped = text.strip()
        return f"{prefix}{stripped}{suffix}" if stripped else ""

    return render


def _wrapped(prefix: str, suffix: str) -> MarkRenderer:
    def render(text: str) -> str:
        return f"{prefix}{text}{suffix}"

    return render


MARKDOWN_MARK_RENDERERS: dict[str, MarkRenderer] = {
    MARKS.BOLD: _trimmed("**", "**"),
    MARKS.ITALIC: _trimmed("_", "_"),
    MARKS.UNDERLINE: _wrapped("<u>", "</u>"),
    MARKS.CODE: _wrapped("`", "`"),
    MARKS.SUPERSCRIPT: _wrapped("<sup>", "</sup>"),
    MARKS.SUBSCRIPT: _wrapped("<sub>", "</sub>"),
}


def markdown_options(
    *,
    render_node: Mapping[str, NodeRenderer] | None = None,
    render_mark: Mapping[str, MarkRenderer] | None = None,
) -> RenderOptions:
    """Build the Markdown tables bound to a fresh ``MarkdownContext``.

    Each call returns independent state, so the result must not be shared
    between documents rendered concurrently.
    """
    renderer = _MarkdownRenderer()
    profile = build_options(
        HTML_OPTIONS,
        render_node=renderer.node_renderers(),
        render_mark=MARKDOWN_MARK_RENDERERS,
    )
    return build_options(profile, render_node=render_node, render_mark=render_mark)


def rich_text_to_markdown(
    document: Block | Mapping[str, Any] | None,
    *,
    render_node: Mapping[str, NodeRenderer] | None = None,
    render_mark: Mapping[str, MarkRenderer] | None = None,
) -> str:
    """Convert a rich-text document to Markdown.

    Node and mark kinds without a Markdown handler fall back to their HTML
    rendering (hyperlinks, for example, stay ``<a>`` tags).

    Args:
        document: Rich-text document as a model or raw JSON payload.
        render_node: Node handlers replacing the Markdown ones per kind.
        render_mark: Mark handlers replacing the Markdown ones per kind.

    Returns:
        The Markdown text.
    """
    options = markdown_options(render_node=render_node, render_mark=render_mark)
    return render_document(document, options)

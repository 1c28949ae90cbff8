"""Tests for the rich text tree walker and HTML profile."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from ctfexport.markdown import rich_text_to_markdown
from ctfexport.richtext import (
    HTML_OPTIONS,
    RenderOptions,
    build_options,
    render_document,
    render_nodes,
    rich_text_to_html,
)
from ctfexport.schemas.richtext import BLOCKS, INLINES, MARKS, Block, Text, block, text


class TestDocumentModel:
    """Tests for parsing rich text payloads."""

    def test_parses_text_and_blocks(self, rich_text_document: dict) -> None:
        """Text payloads become Text nodes, everything else Block nodes."""
        document = Block.model_validate(rich_text_document)

        heading, paragraph, embed = document.content
        assert isinstance(heading, Block)
        assert isinstance(heading.content[0], Text)
        assert paragraph.content[1].node_type == INLINES.HYPERLINK
        assert paragraph.content[1].content[0].marks[0].type == MARKS.BOLD
        assert embed.target_id == "asset-1"

    def test_accepts_unknown_node_type(self) -> None:
        """Unknown kinds still parse as containers."""
        node = Block.model_validate({"nodeType": "embedded-resource-block", "content": []})
        assert node.node_type == "embedded-resource-block"
        assert node.content == []

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ({"target": {"sys": {"id": "abc"}}}, "abc"),
            ({"target": "plain-id"}, "plain-id"),
            ({"target": {"sys": {}}}, ""),
            ({}, ""),
        ],
    )
    def test_target_id(self, data: dict, expected: str) -> None:
        assert Block(node_type=INLINES.ENTRY_HYPERLINK, data=data).target_id == expected


class TestTreeWalker:
    """Tests for render_nodes dispatch."""

    def test_text_without_marks_is_verbatim(self) -> None:
        """Raw text is emitted unchanged and unescaped."""
        value = "<script>alert('x')</script> & \"quotes\""
        assert render_nodes([text(value)], HTML_OPTIONS) == value

    def test_marks_fold_in_order(self) -> None:
        """Each mark receives the output of the previous one."""
        options = RenderOptions(
            render_mark={
                MARKS.BOLD: lambda value: f"B({value})",
                MARKS.ITALIC: lambda value: f"I({value})",
            }
        )
        assert render_nodes([text("x", MARKS.BOLD, MARKS.ITALIC)], options) == "I(B(x))"
        assert render_nodes([text("x", MARKS.ITALIC, MARKS.BOLD)], options) == "B(I(x))"

    def test_unknown_mark_passes_through(self) -> None:
        node = text("plain", "strikethrough", MARKS.BOLD)
        assert render_nodes([node], HTML_OPTIONS) == "<b>plain</b>"

    def test_unknown_node_renders_empty(self) -> None:
        """Kinds without a handler are dropped silently."""
        nodes = [
            block("made-up-kind", text("hidden")),
            block(BLOCKS.PARAGRAPH, text("shown")),
        ]
        assert render_nodes(nodes, HTML_OPTIONS) == "<p>shown</p>"

    def test_unknown_node_in_empty_tables(self) -> None:
        assert render_nodes([block(BLOCKS.PARAGRAPH, text("x"))], RenderOptions()) == ""

    def test_next_renders_children_with_same_tables(self) -> None:
        """Handlers receive a continuation bound to the active tables."""
        seen: list[str] = []

        def paragraph(node, next_nodes):
            seen.append(node.node_type)
            return "[" + next_nodes(node.content) + "]"

        options = RenderOptions(
            render_node={BLOCKS.PARAGRAPH: paragraph, BLOCKS.QUOTE: lambda n, nxt: nxt(n.content)},
            render_mark={MARKS.CODE: lambda value: f"`{value}`"},
        )
        quote = block(BLOCKS.QUOTE, block(BLOCKS.PARAGRAPH, text("a", MARKS.CODE)))

        assert render_nodes([quote], options) == "[`a`]"
        assert seen == [BLOCKS.PARAGRAPH]

    def test_children_keep_reading_order(self) -> None:
        paragraph = block(BLOCKS.PARAGRAPH, text("one "), text("two "), text("three"))
        assert render_nodes([paragraph], HTML_OPTIONS) == "<p>one two three</p>"


class TestBuildOptions:
    """Tests for merging partial tables over defaults."""

    def test_override_wins_per_kind(self) -> None:
        options = build_options(
            HTML_OPTIONS,
            render_node={BLOCKS.PARAGRAPH: lambda node, next_nodes: f"P:{next_nodes(node.content)}"},
            render_mark={MARKS.BOLD: str.upper},
        )
        document = block(
            BLOCKS.DOCUMENT,
            block(BLOCKS.PARAGRAPH, text("hi", MARKS.BOLD)),
            block(BLOCKS.HEADING_1, text("title", MARKS.ITALIC)),
        )

        assert render_document(document, options) == "P:HI<h1><i>title</i></h1>"

    def test_defaults_are_not_modified(self) -> None:
        build_options(HTML_OPTIONS, render_node={BLOCKS.PARAGRAPH: lambda node, next_nodes: ""})
        assert render_nodes([block(BLOCKS.PARAGRAPH, text("x"))], HTML_OPTIONS) == "<p>x</p>"


class TestRenderDocument:
    """Tests for the top-level entry point."""

    @pytest.mark.parametrize("document", [None, {}, {"nodeType": "document"}])
    def test_missing_content_renders_empty(self, document: dict | None) -> None:
        assert rich_text_to_html(document) == ""

    @pytest.mark.parametrize(
        "document",
        [
            {"content": [{"nodeType": "paragraph", "content": [], "data": {}}]},
            {"nodeType": "document", "content": [{"nodeType": "hyperlink", "data": None, "content": []}]},
            {"nodeType": "document", "content": ["not a node"]},
        ],
    )
    def test_malformed_payload_renders_empty(self, document: dict) -> None:
        assert rich_text_to_html(document) == ""
        assert rich_text_to_markdown(document) == ""

    def test_accepts_raw_payload(self, rich_text_document: dict) -> None:
        assert rich_text_to_html(rich_text_document) == (
            '<h2>Welcome</h2><p>Read <a href="https://example.com"><b>the docs</b></a>.</p>'
        )


class TestHtmlProfile:
    """Tests for the default HTML tables."""

    @pytest.mark.parametrize(
        ("node_type", "tag"),
        [
            (BLOCKS.PARAGRAPH, "p"),
            (BLOCKS.HEADING_1, "h1"),
            (BLOCKS.HEADING_4, "h4"),
            (BLOCKS.HEADING_6, "h6"),
            (BLOCKS.UL_LIST, "ul"),
            (BLOCKS.OL_LIST, "ol"),
            (BLOCKS.LIST_ITEM, "li"),
            (BLOCKS.QUOTE, "blockquote"),
            (BLOCKS.EMBEDDED_ENTRY, "div"),
            (BLOCKS.TABLE, "table"),
            (BLOCKS.TABLE_ROW, "tr"),
            (BLOCKS.TABLE_HEADER_CELL, "th"),
            (BLOCKS.TABLE_CELL, "td"),
        ],
    )
    def test_block_tags(self, node_type: str, tag: str) -> None:
        html = rich_text_to_html(block(BLOCKS.DOCUMENT, block(node_type, text("body"))))
        assert html == f"<{tag}>body</{tag}>"

    @pytest.mark.parametrize(
        ("mark", "tag"),
        [
            (MARKS.BOLD, "b"),
            (MARKS.ITALIC, "i"),
            (MARKS.UNDERLINE, "u"),
            (MARKS.CODE, "code"),
            (MARKS.SUPERSCRIPT, "sup"),
            (MARKS.SUBSCRIPT, "sub"),
        ],
    )
    def test_mark_tags(self, mark: str, tag: str) -> None:
        assert render_nodes([text("x", mark)], HTML_OPTIONS) == f"<{tag}>x</{tag}>"

    def test_horizontal_rule_ignores_children(self) -> None:
        assert render_nodes([block(BLOCKS.HR, text("ignored"))], HTML_OPTIONS) == "<hr/>"

    def test_hyperlink_quotes_href(self) -> None:
        link = block(INLINES.HYPERLINK, text("go"), uri='https://example.com/?q="x"')
        assert render_nodes([link], HTML_OPTIONS) == (
            '<a href="https://example.com/?q=&quot;x&quot;">go</a>'
        )

    @pytest.mark.parametrize("uri", [None, 42, {"href": "x"}])
    def test_hyperlink_with_malformed_uri(self, uri: object) -> None:
        """Non-string URIs give an empty href instead of raising."""
        link = Block(node_type=INLINES.HYPERLINK, content=[text("go")], data={"uri": uri})
        assert render_nodes([link], HTML_OPTIONS) == '<a href="">go</a>'

    @pytest.mark.parametrize(
        "node_type",
        [INLINES.ENTRY_HYPERLINK, INLINES.ASSET_HYPERLINK, INLINES.EMBEDDED_ENTRY],
    )
    def test_reference_placeholder(self, node_type: str) -> None:
        node = block(node_type, text("label"), target={"sys": {"id": "id with/slash"}})
        assert render_nodes([node], HTML_OPTIONS) == (
            f"<span>type: {node_type} id: id%20with%2Fslash</span>"
        )

    def test_nested_structure_is_well_formed(self) -> None:
        document = block(
            BLOCKS.DOCUMENT,
            block(
                BLOCKS.TABLE,
                block(
                    BLOCKS.TABLE_ROW,
                    block(BLOCKS.TABLE_HEADER_CELL, block(BLOCKS.PARAGRAPH, text("Name"))),
                    block(BLOCKS.TABLE_HEADER_CELL, block(BLOCKS.PARAGRAPH, text("Role"))),
                ),
                block(
                    BLOCKS.TABLE_ROW,
                    block(BLOCKS.TABLE_CELL, block(BLOCKS.PARAGRAPH, text("Ada"))),
                    block(BLOCKS.TABLE_CELL, block(BLOCKS.PARAGRAPH, text("Engineer", MARKS.BOLD))),
                ),
            ),
            block(
                BLOCKS.UL_LIST,
                block(BLOCKS.LIST_ITEM, block(BLOCKS.PARAGRAPH, text("first"))),
                block(BLOCKS.LIST_ITEM, block(BLOCKS.PARAGRAPH, text("second"))),
            ),
        )

        soup = BeautifulSoup(rich_text_to_html(document), "lxml")

        assert [th.get_text() for th in soup.find_all("th")] == ["Name", "Role"]
        assert [td.get_text() for td in soup.find_all("td")] == ["Ada", "Engineer"]
        assert soup.find("td").find_next("td").find("b").get_text() == "Engineer"
        assert [li.get_text() for li in soup.select("ul > li")] == ["first", "second"]

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/integration/test_round_trip.py
"""Integration tests for MDX text to Slate and back.

Tests cover:
- Stability of deserialize/serialize round trips for every node type
- Exact Slate output for representative documents
- Editing JSX component props in Slate and printing them back
- Output options passed through the top-level API

"""

from __future__ import annotations

import copy

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from mdxslate import (
    DEFAULT_RULES,
    MarkdownSerializer,
    SerializerOptions,
    UnknownNodeError,
    deserialize,
    serialize,
)
from mdxslate.slate import make_block, make_leaf, make_value


def _document_nodes(value: dict) -> list:
    return value["document"]["nodes"]


def _plain_text(text: str) -> dict:
    return {"object": "text", "leaves": [{"object": "leaf", "text": text, "marks": []}]}


def assert_stable(text: str) -> dict:
    """Assert that one serialize/deserialize cycle leaves the Slate value unchanged."""
    value = deserialize(text)
    assert deserialize(serialize(value)) == value
    return value


@pytest.mark.integration
class TestRoundTrip:
    """Round trips through MDX text."""

    def test_sample_document(self, sample_mdx: str) -> None:
        """Test that a document using every node type is stable."""
        value = assert_stable(sample_mdx)
        types = [node["type"] for node in _document_nodes(value)]
        assert types == [
            "heading-one",
            "paragraph",
            "heading-two",
            "bulleted-list",
            "numbered-list",
            "block-quote",
            "pre",
            "horizontal-rule",
            "jsx-void",
            "jsx",
            "paragraph",
        ]

    @pytest.mark.parametrize(
        "text",
        [
            "# One\n\n## Two\n\n### Three\n\n#### Four\n\n##### Five\n\n###### Six\n",
            "Some *em*, **strong**, `code` and ***both***.\n",
            "A [link](https://example.com/a_b?x=1&y=2 \"Title\") here.\n",
            "![alt text](image.png)\n",
            "Line one\\\nline two\nline three\n",
            "> quote\n>\n> > nested quote\n",
            "* a\n* b\n\n- c\n",
            "3. three\n4. four\n",
            "1. a\n   * nested\n     1. deeper\n",
            "```js title=\"x\"\nconst a = `b`;\n```\n",
            "    indented code\n",
            "before\n\n---\n\nafter\n",
            "Escapes: \\* \\_ \\# \\[x\\] AT&amp;T 1 \\< 2\n",
            '<Chart data={[1,2]} title="Sales" />\n',
            "<Outer>\n\n<Inner>\n\nText\n\n</Inner>\n\n</Outer>\n",
            "Text with <abbr>inline</abbr> JSX.\n",
            "* first para\n\n  second para\n* next\n",
            "* a\n\n  3. b\n",
            "2. one\n\n   more\n3. two\n   * nested\n",
            "**_both_**\n",
            "*__both__*\n",
            "**a _b_** and *c*\n",
            "Wow\\![x](https://e.com)\n",
            "Hi!**bold**, (*em*) and \"`code`\".\n",
            "![*a* b](u.png)\n",
        ],
    )
    def test_node_types_stable(self, text: str) -> None:
        """Test round-trip stability per construct."""
        assert_stable(text)

    def test_canonical_text_reproduced(self) -> None:
        """Test that already-canonical MDX prints back identically."""
        text = (
            "# Title\n\n"
            "Para with **bold** and *italic*.\n\n"
            "* one\n* two\n\n"
            "```py\nprint(1)\n```\n\n"
            '<MyWidget id="42" />\n'
        )
        assert serialize(deserialize(text)) == text

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("* first para\n\n  second para\n* next\n", "* first para\n\n  second para\n\n* next\n"),
            ("* a\n\n  3. b\n", "* a\n\n  3. b\n"),
            ("* a\n\n  * b\n", "* a\n  * b\n"),
        ],
    )
    def test_list_spacing(self, text: str, expected: str) -> None:
        """Test that lists print loose only when an item's blocks would otherwise merge."""
        assert serialize(deserialize(text)) == expected


_WORDS = st.from_regex(r"[a-z]{1,6}", fullmatch=True)
_PHRASES = st.lists(_WORDS, min_size=1, max_size=3).map(" ".join)
_INLINES = st.one_of(
    _WORDS,
    _PHRASES.map(lambda phrase: f"*{phrase}*"),
    _PHRASES.map(lambda phrase: f"**{phrase}**"),
    _PHRASES.map(lambda phrase: f"**_{phrase}_**"),
    _PHRASES.map(lambda phrase: f"***{phrase}***"),
    _PHRASES.map(lambda phrase: f"`{phrase}`"),
    _PHRASES.map(lambda phrase: f"[{phrase}](https://example.com/{phrase.replace(' ', '-')})"),
)
_PARAGRAPHS = st.lists(_INLINES, min_size=1, max_size=4).map(" ".join)
_ITEMS = st.lists(_PARAGRAPHS, min_size=1, max_size=2)


def _list_text(items: list[list[str]], start: int | None) -> str:
    lines = []
    for index, paragraphs in enumerate(items):
        marker = "* " if start is None else f"{start + index}. "
        indent = "\n\n" + " " * len(marker)
        lines.append(marker + indent.join(paragraphs))
    return "\n".join(lines)


_BLOCKS = st.one_of(
    _PARAGRAPHS,
    st.builds(_list_text, st.lists(_ITEMS, min_size=1, max_size=3), st.none()),
    st.builds(_list_text, st.lists(_ITEMS, min_size=1, max_size=3), st.integers(min_value=1, max_value=9)),
)


@pytest.mark.integration
@pytest.mark.fuzzing
class TestRoundTripProperties:
    """Property-based round trips over generated documents."""

    @settings(deadline=None)
    @given(st.lists(_BLOCKS, min_size=1, max_size=4).map("\n\n".join))
    def test_generated_documents_stable(self, text: str) -> None:
        """Test that documents of paragraphs, marks, links and lists survive a round trip."""
        assert_stable(text + "\n")


@pytest.mark.integration
class TestSlateShapes:
    """Exact Slate output for small documents."""

    def test_heading_and_paragraph(self, heading_scenario: str) -> None:
        """Test a heading holding a bold mark followed by a paragraph."""
        heading, paragraph = _document_nodes(deserialize(heading_scenario))
        assert heading == {
            "object": "block",
            "type": "heading-one",
            "nodes": [
                _plain_text("Hello, "),
                {"object": "mark", "type": "bold", "nodes": [_plain_text("world!")]},
            ],
        }
        assert paragraph == {"object": "block", "type": "paragraph", "nodes": [_plain_text("Para one.")]}

    def test_void_component(self) -> None:
        """Test a self-closing component becomes a void block with its props."""
        (block,) = _document_nodes(deserialize('<MyWidget id="42" />'))
        assert block == {
            "object": "block",
            "type": "jsx-void",
            "nodes": [_plain_text('<MyWidget id="42" />')],
            "data": {"type": "MyWidget", "props": {"id": "42"}},
            "isVoid": True,
        }

    def test_list_nesting(self) -> None:
        """Test list items and their paragraph children."""
        (outer,) = _document_nodes(deserialize("* a\n  1. b\n"))
        assert outer["type"] == "bulleted-list"
        (item,) = outer["nodes"]
        assert item["type"] == "list-item"
        assert [child["type"] for child in item["nodes"]] == ["list-item-child", "numbered-list"]
        inner_item = item["nodes"][1]["nodes"][0]
        assert inner_item["nodes"][0] == {"object": "block", "type": "list-item-child", "nodes": [_plain_text("b")]}

    def test_numbered_list_start_kept(self) -> None:
        """Test that a list start other than one is carried in block data."""
        (block,) = _document_nodes(deserialize("7. seven\n"))
        assert block["data"] == {"start": 7}

    def test_code_block_language(self) -> None:
        """Test that the fence info string is carried in block data."""
        (block,) = _document_nodes(deserialize("```py linenos\nx\n```\n"))
        assert block["type"] == "pre"
        assert block["data"] == {"language": "py", "meta": "linenos"}
        assert block["nodes"] == [_plain_text("x")]

    def test_container_component(self) -> None:
        """Test a component wrapping Markdown becomes a jsx block."""
        (block,) = _document_nodes(deserialize('<Note kind="info">\n\n## Inside\n\n</Note>\n'))
        assert block["type"] == "jsx"
        assert block["data"] == {"type": "Note", "props": {"kind": "info"}}
        assert [child["type"] for child in block["nodes"]] == ["heading-two"]


@pytest.mark.integration
class TestSlateEdits:
    """Printing values edited on the Slate side."""

    def test_edited_void_props(self) -> None:
        """Test that edited props are written into the stored fragment."""
        value = deserialize('<MyWidget id="42" />')
        edited = copy.deepcopy(value)
        _document_nodes(edited)[0]["data"]["props"] = {"id": "43", "size": "lg"}
        assert serialize(edited) == '<MyWidget id="43" size="lg" />\n'

    def test_edit_keeps_expression_attributes(self) -> None:
        """Test that attributes the editor cannot read are preserved."""
        value = deserialize('<Chart data={[1,2]} title="Sales" />')
        _document_nodes(value)[0]["data"]["props"]["title"] = "Costs"
        assert serialize(value) == '<Chart data={[1,2]} title="Costs" />\n'

    def test_removed_prop_rebuilds_tag(self) -> None:
        """Test that dropping a prop writes a fresh tag."""
        value = deserialize('<Video id="1" autoplay="yes" />')
        _document_nodes(value)[0]["data"]["props"] = {"id": "1"}
        assert serialize(value) == '<Video id="1" />\n'

    def test_editor_authored_value(self) -> None:
        """Test printing a value built with leaf marks."""
        paragraph = make_block(
            "paragraph",
            [{"object": "text", "leaves": [make_leaf("plain "), make_leaf("both", ["bold", "italic"])]}],
        )
        widget = make_block("jsx-void", [], data={"type": "Video", "props": {"id": "9"}}, is_void=True)
        assert serialize(make_value([paragraph, widget])) == 'plain **_both_**\n\n<Video id="9" />\n'

    def test_serialize_does_not_mutate_value(self, sample_mdx: str) -> None:
        """Test that serialization leaves its input untouched."""
        value = deserialize(sample_mdx)
        snapshot = copy.deepcopy(value)
        serialize(value)
        assert value == snapshot


@pytest.mark.integration
class TestApiOptions:
    """Options passed through the top-level functions."""

    def test_bullet_override(self) -> None:
        """Test that a keyword override reaches the printer."""
        assert serialize(deserialize("* a\n* b\n"), bullet="-") == "- a\n- b\n"

    def test_unknown_keyword_ignored(self) -> None:
        """Test that keywords the printer does not know are skipped."""
        assert serialize(deserialize("text\n"), not_an_option=True) == "text\n"

    def test_fences_override(self) -> None:
        """Test printing indented code through the API."""
        assert serialize(deserialize("```\ncode\n```\n"), fences=False) == "    code\n"

    def test_strict_serializer(self) -> None:
        """Test a serializer that refuses unknown nodes."""
        strict = MarkdownSerializer(DEFAULT_RULES, SerializerOptions(unknown_node_policy="raise"))
        value = make_value([make_block("table", [])])
        with pytest.raises(UnknownNodeError) as exc_info:
            serialize(value, serializer=strict)
        assert exc_info.value.node_type == "block:table"

    def test_default_serializer_drops_unknown_nodes(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that unknown nodes are dropped with a warning by default."""
        value = make_value([make_block("table", []), make_block("paragraph", [_plain_text("kept")])])
        assert serialize(value) == "kept\n"
        assert any("block:table" in record.getMessage() for record in caplog.records)

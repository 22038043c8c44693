#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_serializer.py
"""Unit tests for the rule table and the tree serializer.

Tests cover:
- First-match rule precedence with overlapping predicates
- Rules implementing a single direction
- Child visiting, list splicing and None results
- Unknown node policy (drop with warning, raise)
- Error wrapping of failing rules
- Input trees are never mutated

"""

import copy
import logging

import pytest

from mdxslate.exceptions import ConversionError, InvalidOptionsError, UnknownNodeError
from mdxslate.options import MdxRendererOptions, SerializerOptions
from mdxslate.rules import DEFAULT_RULES
from mdxslate.serializer import ConversionContext, MarkdownSerializer, Rule, RuleTable
from mdxslate.slate import make_block, make_text, make_value


def _is_type(node_type):
    return lambda node, index, parent: node.get("type") == node_type


def _paragraph_in_list_item(node, index, parent):
    return node.get("type") == "paragraph" and parent is not None and parent.get("type") == "listItem"


SPECIFIC = Rule(
    name="specific",
    match_mdast=_paragraph_in_list_item,
    from_mdast=lambda node, index, parent, context: make_block("specific", context.visit_children(node)),
)
GENERAL = Rule(
    name="general",
    match_mdast=_is_type("paragraph"),
    from_mdast=lambda node, index, parent, context: make_block("general", context.visit_children(node)),
)
LIST_ITEM = Rule(
    name="list_item",
    match_mdast=_is_type("listItem"),
    from_mdast=lambda node, index, parent, context: make_block("item", context.visit_children(node)),
)
TEXT = Rule(
    name="text",
    match_mdast=_is_type("text"),
    from_mdast=lambda node, index, parent, context: make_text(node["value"]),
)


def _item_with_paragraph() -> dict:
    return {
        "type": "root",
        "children": [
            {
                "type": "listItem",
                "children": [{"type": "paragraph", "children": [{"type": "text", "value": "x"}]}],
            }
        ],
    }


@pytest.mark.unit
class TestRuleTable:
    """Tests for ordered rule lookup."""

    def test_earlier_rule_wins(self) -> None:
        """Test that the first declared accepting rule converts the node."""
        serializer = MarkdownSerializer([LIST_ITEM, SPECIFIC, GENERAL, TEXT])
        value = serializer.deserialize(_item_with_paragraph())
        item = value["document"]["nodes"][0]
        assert item["nodes"][0]["type"] == "specific"

    def test_order_is_data_driven(self) -> None:
        """Test that swapping declarations swaps the winner."""
        serializer = MarkdownSerializer([LIST_ITEM, GENERAL, SPECIFIC, TEXT])
        value = serializer.deserialize(_item_with_paragraph())
        assert value["document"]["nodes"][0]["nodes"][0]["type"] == "general"

    def test_rule_for_returns_first_match(self) -> None:
        """Test rule lookup in isolation."""
        table = RuleTable([SPECIFIC, GENERAL])
        paragraph = {"type": "paragraph", "children": []}
        assert table.rule_for("deserialize", paragraph, 0, {"type": "listItem"}) is SPECIFIC
        assert table.rule_for("deserialize", paragraph, 0, {"type": "root"}) is GENERAL
        assert table.rule_for("deserialize", {"type": "heading"}) is None

    def test_rule_without_direction_is_skipped(self) -> None:
        """Test that a rule lacking a direction's converter is never selected for it."""
        table = RuleTable([SPECIFIC, GENERAL])
        assert table.rule_for("serialize", make_block("general", [])) is None
        assert not GENERAL.handles("serialize")
        assert GENERAL.handles("deserialize")

    def test_table_is_immutable_sequence(self) -> None:
        """Test that the table snapshots its rules."""
        rules = [SPECIFIC, GENERAL]
        table = RuleTable(rules)
        rules.append(TEXT)
        assert len(table) == 2
        assert table.names == ["specific", "general"]
        assert list(table) == [SPECIFIC, GENERAL]

    def test_converter_for_missing_direction_raises(self) -> None:
        """Test requesting a converter the rule does not have."""
        with pytest.raises(ValueError, match="no serialize converter"):
            GENERAL.converter("serialize")

    def test_default_rule_order(self) -> None:
        """Test the declared precedence of the default rules."""
        names = RuleTable(DEFAULT_RULES).names
        assert names.index("list_item_child") < names.index("paragraph")
        assert names.index("jsx_mark") < names.index("jsx_block")
        assert names[-1] == "text"
        assert names[-7:-1] == [
            "heading-one",
            "heading-two",
            "heading-three",
            "heading-four",
            "heading-five",
            "heading-six",
        ]


@pytest.mark.unit
class TestVisitChildren:
    """Tests for recursion and result flattening."""

    def test_list_results_are_spliced(self) -> None:
        """Test that a converter returning a list contributes several siblings."""
        split = Rule(
            name="split",
            match_mdast=_is_type("text"),
            from_mdast=lambda node, index, parent, context: [make_text(part) for part in node["value"].split(",")],
        )
        serializer = MarkdownSerializer([GENERAL, split])
        value = serializer.deserialize(
            {"type": "root", "children": [{"type": "paragraph", "children": [{"type": "text", "value": "a,b"}]}]}
        )
        texts = value["document"]["nodes"][0]["nodes"]
        assert [text["leaves"][0]["text"] for text in texts] == ["a", "b"]

    def test_none_results_are_dropped(self) -> None:
        """Test that a converter returning None emits nothing."""
        skip = Rule(name="skip", match_mdast=_is_type("comment"), from_mdast=lambda node, index, parent, context: None)
        serializer = MarkdownSerializer([skip, GENERAL, TEXT])
        value = serializer.deserialize(
            {"type": "root", "children": [{"type": "comment"}, {"type": "paragraph", "children": []}]}
        )
        assert [node["type"] for node in value["document"]["nodes"]] == ["general"]

    def test_index_and_parent_passed_to_rules(self) -> None:
        """Test that predicates and converters see sibling index and parent."""
        seen = []

        def record(node, index, parent, context):
            seen.append((node["value"], index, parent["type"]))
            assert isinstance(context, ConversionContext)
            assert context.direction == "deserialize"
            return make_text(node["value"])

        serializer = MarkdownSerializer([GENERAL, Rule(name="text", match_mdast=_is_type("text"), from_mdast=record)])
        serializer.deserialize(
            {
                "type": "root",
                "children": [
                    {"type": "paragraph", "children": [{"type": "text", "value": "a"}, {"type": "text", "value": "b"}]}
                ],
            }
        )
        assert seen == [("a", 0, "paragraph"), ("b", 1, "paragraph")]

    def test_serialize_accepts_bare_document(self) -> None:
        """Test that serialize takes a document as well as a value."""
        serializer = MarkdownSerializer(DEFAULT_RULES)
        value = make_value([make_block("paragraph", [make_text("x")])])
        assert serializer.serialize(value) == serializer.serialize(value["document"])

    def test_serialize_rejects_other_objects(self) -> None:
        """Test that serialize requires a value or document."""
        with pytest.raises(ValueError):
            MarkdownSerializer(DEFAULT_RULES).serialize({"object": "block", "type": "paragraph", "nodes": []})


@pytest.mark.unit
class TestUnknownNodePolicy:
    """Tests for nodes no rule converts."""

    def test_drop_is_default_and_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that unmatched nodes are dropped with a warning by default."""
        serializer = MarkdownSerializer(DEFAULT_RULES)
        root = {"type": "root", "children": [{"type": "table", "children": []}, {"type": "thematicBreak"}]}
        with caplog.at_level(logging.WARNING, logger="mdxslate.serializer"):
            value = serializer.deserialize(root)
        assert [node["type"] for node in value["document"]["nodes"]] == ["horizontal-rule"]
        assert "table" in caplog.text
        assert "deserialize" in caplog.text

    def test_raise_policy(self) -> None:
        """Test that the raise policy surfaces unmatched nodes."""
        serializer = MarkdownSerializer(DEFAULT_RULES, SerializerOptions(unknown_node_policy="raise"))
        with pytest.raises(UnknownNodeError) as exc_info:
            serializer.deserialize({"type": "root", "children": [{"type": "table"}]})
        assert exc_info.value.node_type == "table"
        assert exc_info.value.direction == "deserialize"

    def test_raise_policy_serialize_names_object_kind(self) -> None:
        """Test the node type reported for an unmatched Slate node."""
        serializer = MarkdownSerializer(DEFAULT_RULES, SerializerOptions(unknown_node_policy="raise"))
        with pytest.raises(UnknownNodeError) as exc_info:
            serializer.serialize(make_value([make_block("table", [])]))
        assert exc_info.value.node_type == "block:table"
        assert exc_info.value.direction == "serialize"

    def test_invalid_policy_rejected(self) -> None:
        """Test option validation."""
        with pytest.raises(ValueError, match="unknown_node_policy"):
            SerializerOptions(unknown_node_policy="ignore")

    def test_wrong_options_class_rejected(self) -> None:
        """Test that passing renderer options to the serializer fails."""
        with pytest.raises(InvalidOptionsError):
            MarkdownSerializer(DEFAULT_RULES, MdxRendererOptions())  # type: ignore[arg-type]


@pytest.mark.unit
class TestErrorWrapping:
    """Tests for failures inside rules."""

    def test_converter_failure_wrapped(self) -> None:
        """Test that a failing converter is reported with node type and direction."""

        def boom(node, index, parent, context):
            raise KeyError("missing")

        serializer = MarkdownSerializer([Rule(name="boom", match_mdast=_is_type("paragraph"), from_mdast=boom)])
        with pytest.raises(ConversionError) as exc_info:
            serializer.deserialize({"type": "root", "children": [{"type": "paragraph", "children": []}]})
        assert exc_info.value.node_type == "paragraph"
        assert exc_info.value.direction == "deserialize"
        assert isinstance(exc_info.value.original_error, KeyError)
        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_innermost_failure_is_reported(self) -> None:
        """Test that a nested failure is not re-wrapped by its ancestors."""

        def boom(node, index, parent, context):
            raise RuntimeError("bad text")

        serializer = MarkdownSerializer([GENERAL, Rule(name="text", match_mdast=_is_type("text"), from_mdast=boom)])
        root = {"type": "root", "children": [{"type": "paragraph", "children": [{"type": "text", "value": "x"}]}]}
        with pytest.raises(ConversionError) as exc_info:
            serializer.deserialize(root)
        assert exc_info.value.node_type == "text"
        assert isinstance(exc_info.value.original_error, RuntimeError)

    def test_predicate_failure_wrapped(self) -> None:
        """Test that a failing predicate is reported as a conversion error."""

        def bad_match(node, index, parent):
            raise TypeError("bad predicate")

        serializer = MarkdownSerializer([Rule(name="bad", match_mdast=bad_match, from_mdast=lambda *args: None)])
        with pytest.raises(ConversionError) as exc_info:
            serializer.deserialize({"type": "root", "children": [{"type": "paragraph"}]})
        assert exc_info.value.node_type == "paragraph"

    def test_unknown_node_error_not_rewrapped(self) -> None:
        """Test that an unknown nested node raises UnknownNodeError itself."""
        serializer = MarkdownSerializer(DEFAULT_RULES, SerializerOptions(unknown_node_policy="raise"))
        root = {"type": "root", "children": [{"type": "paragraph", "children": [{"type": "footnoteReference"}]}]}
        with pytest.raises(UnknownNodeError):
            serializer.deserialize(root)


@pytest.mark.unit
class TestPurity:
    """Tests that conversion leaves its input untouched."""

    def test_deserialize_does_not_mutate_input(self) -> None:
        """Test that the mdast input, including grouped JSX, is unchanged."""
        root = {
            "type": "root",
            "children": [
                {
                    "type": "jsx",
                    "children": [
                        {"type": "jsx", "value": '<Note kind="info">'},
                        {"type": "paragraph", "children": [{"type": "text", "value": "Body"}]},
                        {"type": "jsx", "value": "</Note>"},
                    ],
                },
                {"type": "list", "ordered": True, "children": [{"type": "listItem", "children": []}]},
            ],
        }
        snapshot = copy.deepcopy(root)
        MarkdownSerializer(DEFAULT_RULES).deserialize(root)
        assert root == snapshot

    def test_serialize_does_not_mutate_input(self) -> None:
        """Test that the Slate input is unchanged."""
        serializer = MarkdownSerializer(DEFAULT_RULES)
        value = serializer.deserialize(
            {
                "type": "root",
                "children": [
                    {"type": "heading", "depth": 2, "children": [{"type": "text", "value": "Title"}]},
                    {"type": "jsx", "value": '<Video id="1" />'},
                ],
            }
        )
        snapshot = copy.deepcopy(value)
        serializer.serialize(value)
        assert value == snapshot

    def test_repeated_calls_are_independent(self) -> None:
        """Test that one serializer gives identical results across calls."""
        serializer = MarkdownSerializer(DEFAULT_RULES)
        root = {"type": "root", "children": [{"type": "paragraph", "children": [{"type": "text", "value": "x"}]}]}
        assert serializer.deserialize(root) == serializer.deserialize(root)

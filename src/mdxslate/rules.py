#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxslate/rules.py
"""Node-type rules mapping mdast nodes to Slate nodes and back.

Each rule pairs an mdast node type with a Slate block, inline, mark or text
node. :data:`DEFAULT_RULES` lists them in precedence order; the first rule
whose predicate accepts a node converts it, so the order below matters:

- ``list_item_child`` precedes ``paragraph`` so that a paragraph directly
  inside a list item becomes a ``list-item-child`` block.
- ``jsx_mark`` and ``jsx_block`` split ``jsx`` nodes by position: JSX
  directly in the document root (or in a JSX container) is a component
  block, anywhere else it is an inline mark.

JSX blocks come in two shapes. A *container* groups an opening tag, the
Markdown between, and the closing tag; it deserializes to a ``jsx`` block
whose children are the converted Markdown. A *void* component is a single
fragment such as ``<Video id="1" />``; it deserializes to a ``jsx-void``
block that keeps the raw fragment as its text. Both carry
``data = {"type": component, "props": {...}}``. A fragment with no
recognisable element has ``data["type"] = None`` and serializes back to its
raw text unchanged.

"""

from __future__ import annotations

import logging
from typing import Any, Optional

from mdxslate.constants import (
    BLOCK_BULLETED_LIST,
    BLOCK_CODE,
    BLOCK_HORIZONTAL_RULE,
    BLOCK_IMAGE,
    BLOCK_JSX,
    BLOCK_JSX_VOID,
    BLOCK_LIST_ITEM,
    BLOCK_LIST_ITEM_CHILD,
    BLOCK_NUMBERED_LIST,
    BLOCK_PARAGRAPH,
    BLOCK_QUOTE,
    HEADING_BLOCK_TYPES,
    INLINE_LINK,
    JSX_BLOCK_PARENT_TYPES,
    LEAF_MARK_MDAST_TYPES,
    MARK_BOLD,
    MARK_CODE,
    MARK_ITALIC,
    MARK_JSX,
    OBJECT_BLOCK,
    OBJECT_INLINE,
    OBJECT_MARK,
    OBJECT_TEXT,
)
from mdxslate.jsx import apply_props, parse_tag, to_opening_tag
from mdxslate.serializer import ConversionContext, Node, Rule
from mdxslate.slate import (
    is_object,
    leaf_marks,
    make_block,
    make_inline,
    make_mark,
    make_text,
    node_text,
)

logger = logging.getLogger(__name__)


def _is_type(node: Optional[Node], node_type: str) -> bool:
    return bool(node) and node.get("type") == node_type


def _mdast_text(nodes: list[Node]) -> str:
    return "".join(node.get("value", "") for node in nodes)


# =============================================================================
# Blocks
# =============================================================================


def _container_rule(name: str, mdast_type: str, block_type: str) -> Rule:
    """Build a rule for a block that maps 1:1 onto an mdast parent node."""

    def from_mdast(node: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Node:
        return make_block(block_type, context.visit_children(node))

    def to_mdast(block: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Node:
        return {"type": mdast_type, "children": context.visit_children(block)}

    return Rule(
        name=name,
        match=lambda node, index, parent: is_object(node, OBJECT_BLOCK, block_type),
        match_mdast=lambda node, index, parent: _is_type(node, mdast_type),
        from_mdast=from_mdast,
        to_mdast=to_mdast,
    )


list_item_child = Rule(
    name="list_item_child",
    match=lambda node, index, parent: is_object(node, OBJECT_BLOCK, BLOCK_LIST_ITEM_CHILD),
    match_mdast=lambda node, index, parent: _is_type(node, "paragraph") and _is_type(parent, "listItem"),
    from_mdast=lambda node, index, parent, context: make_block(BLOCK_LIST_ITEM_CHILD, context.visit_children(node)),
    to_mdast=lambda block, index, parent, context: {"type": "paragraph", "children": context.visit_children(block)},
)

paragraph = _container_rule("paragraph", "paragraph", BLOCK_PARAGRAPH)
block_quote = _container_rule("block_quote", "blockquote", BLOCK_QUOTE)
list_item = _container_rule("list_item", "listItem", BLOCK_LIST_ITEM)


def _heading_rule(depth: int, block_type: str) -> Rule:
    def from_mdast(node: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Node:
        return make_block(block_type, context.visit_children(node))

    def to_mdast(block: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Node:
        return {"type": "heading", "depth": depth, "children": context.visit_children(block)}

    return Rule(
        name=block_type,
        match=lambda node, index, parent: is_object(node, OBJECT_BLOCK, block_type),
        match_mdast=lambda node, index, parent: _is_type(node, "heading") and node.get("depth") == depth,
        from_mdast=from_mdast,
        to_mdast=to_mdast,
    )


headings = [_heading_rule(depth, block_type) for depth, block_type in enumerate(HEADING_BLOCK_TYPES, start=1)]


def _interrupts_paragraph(node: Node) -> bool:
    """Whether a nested list printed straight after a paragraph starts a new list."""
    if not _is_type(node, "list"):
        return False
    items = node.get("children") or []
    if not items or not items[0].get("children"):
        return False
    return not node.get("ordered") or node.get("start", 1) == 1


def _is_spread(items: list[Node]) -> bool:
    """Whether list items must be separated by blank lines to keep their blocks apart.

    A single block, or a paragraph followed by a list that can interrupt it,
    prints tight. Any other item with several blocks makes the list loose.
    """
    for item in items:
        blocks = item.get("children") or []
        if len(blocks) < 2:
            continue
        if len(blocks) == 2 and _is_type(blocks[0], "paragraph") and _interrupts_paragraph(blocks[1]):
            continue
        return True
    return False


def _bulleted_list_from_mdast(node: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Node:
    return make_block(BLOCK_BULLETED_LIST, context.visit_children(node))


def _bulleted_list_to_mdast(block: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Node:
    items = context.visit_children(block)
    return {"type": "list", "ordered": False, "spread": _is_spread(items), "children": items}


bulleted_list = Rule(
    name="bulleted_list",
    match=lambda node, index, parent: is_object(node, OBJECT_BLOCK, BLOCK_BULLETED_LIST),
    match_mdast=lambda node, index, parent: _is_type(node, "list") and not node.get("ordered"),
    from_mdast=_bulleted_list_from_mdast,
    to_mdast=_bulleted_list_to_mdast,
)


def _numbered_list_from_mdast(node: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Node:
    start = node.get("start")
    data = {"start": start} if start is not None and start != 1 else None
    return make_block(BLOCK_NUMBERED_LIST, context.visit_children(node), data=data)


def _numbered_list_to_mdast(block: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Node:
    start = (block.get("data") or {}).get("start", 1)
    items = context.visit_children(block)
    return {"type": "list", "ordered": True, "start": start, "spread": _is_spread(items), "children": items}


numbered_list = Rule(
    name="numbered_list",
    match=lambda node, index, parent: is_object(node, OBJECT_BLOCK, BLOCK_NUMBERED_LIST),
    match_mdast=lambda node, index, parent: _is_type(node, "list") and bool(node.get("ordered")),
    from_mdast=_numbered_list_from_mdast,
    to_mdast=_numbered_list_to_mdast,
)


def _code_block_from_mdast(node: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Node:
    data = None
    if node.get("lang"):
        data = {"language": node["lang"]}
        if node.get("meta"):
            data["meta"] = node["meta"]
    return make_block(BLOCK_CODE, [make_text(node.get("value", ""))], data=data)


def _code_block_to_mdast(block: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Node:
    values = [child.get("value", "") for child in context.visit_children(block)]
    code: Node = {"type": "code", "value": "\n".join(value for value in values if value)}
    data = block.get("data") or {}
    if data.get("language"):
        code["lang"] = data["language"]
        if data.get("meta"):
            code["meta"] = data["meta"]
    return code


code_block = Rule(
    name="code_block",
    match=lambda node, index, parent: is_object(node, OBJECT_BLOCK, BLOCK_CODE),
    match_mdast=lambda node, index, parent: _is_type(node, "code"),
    from_mdast=_code_block_from_mdast,
    to_mdast=_code_block_to_mdast,
)


def _image_from_mdast(node: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Node:
    data = {"alt": node.get("alt"), "src": node.get("url"), "title": node.get("title")}
    return make_block(BLOCK_IMAGE, [], data=data, is_void=True)


def _image_to_mdast(block: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Node:
    data = block.get("data") or {}
    return {"type": "image", "url": data.get("src"), "alt": data.get("alt"), "title": data.get("title")}


image = Rule(
    name="image",
    match=lambda node, index, parent: is_object(node, OBJECT_BLOCK, BLOCK_IMAGE),
    match_mdast=lambda node, index, parent: _is_type(node, "image"),
    from_mdast=_image_from_mdast,
    to_mdast=_image_to_mdast,
)

thematic_break = Rule(
    name="thematic_break",
    match=lambda node, index, parent: is_object(node, OBJECT_BLOCK, BLOCK_HORIZONTAL_RULE),
    match_mdast=lambda node, index, parent: _is_type(node, "thematicBreak"),
    from_mdast=lambda node, index, parent, context: make_block(BLOCK_HORIZONTAL_RULE, [], is_void=True),
    to_mdast=lambda block, index, parent, context: {"type": "thematicBreak"},
)


# =============================================================================
# JSX
# =============================================================================


def _is_block_level(parent: Optional[Node]) -> bool:
    return bool(parent) and parent.get("type") in JSX_BLOCK_PARENT_TYPES


def _jsx_block_from_mdast(node: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Any:
    children = node.get("children")
    if children:
        tag = parse_tag(children[0].get("value", ""))
        if tag.type is None:
            logger.debug("JSX container opening tag is not an element; flattening its children")
            return context.visit_children(node)
        # Build a trimmed copy rather than slicing the caller's node in place
        inner = {**node, "children": children[1:-1]}
        return make_block(BLOCK_JSX, context.visit_children(inner), data=tag.to_data())

    raw = node.get("value", "")
    tag = parse_tag(raw)
    if tag.type is None:
        logger.debug("Keeping unparsed JSX fragment as opaque text: %r", raw[:80])
    return make_block(BLOCK_JSX_VOID, [make_text(raw)], data=tag.to_data(), is_void=True)


def _void_fragment(component: str, props: dict[str, Any], raw: str) -> str:
    """Rebuild a void component's source, editing the stored fragment when possible.

    The stored fragment is reused when it still names ``component`` and none of
    its string props has been removed, so expression attributes and formatting
    survive; otherwise a fresh self-closing tag is written.
    """
    if raw:
        existing = parse_tag(raw)
        if existing.type == component and set(existing.props) <= set(props):
            return apply_props(raw, props)
    return apply_props(f"<{component} />", props)


def _jsx_block_to_mdast(block: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Any:
    data = block.get("data") or {}
    component = data.get("type")
    props = dict(data.get("props") or {})

    if not component:
        return {"type": "jsx", "value": node_text(block)}

    if block.get("type") == BLOCK_JSX_VOID:
        return {"type": "jsx", "value": _void_fragment(component, props, node_text(block))}

    opening = to_opening_tag(apply_props(f"<{component} />", props))
    return [
        {"type": "jsx", "value": opening},
        *context.visit_children(block),
        {"type": "jsx", "value": f"</{component}>"},
    ]


jsx_block = Rule(
    name="jsx_block",
    match=lambda node, index, parent: is_object(node, OBJECT_BLOCK) and node.get("type") in (BLOCK_JSX, BLOCK_JSX_VOID),
    match_mdast=lambda node, index, parent: _is_type(node, "jsx") and _is_block_level(parent),
    from_mdast=_jsx_block_from_mdast,
    to_mdast=_jsx_block_to_mdast,
)

# Inline JSX is carried through as raw text; the editor has no inline
# component layout, so "<span>" and "</span>" become separate marks.
jsx_mark = Rule(
    name="jsx_mark",
    match=lambda node, index, parent: is_object(node, OBJECT_MARK, MARK_JSX),
    match_mdast=lambda node, index, parent: _is_type(node, "jsx") and not _is_block_level(parent),
    from_mdast=lambda node, index, parent, context: make_mark(MARK_JSX, [make_text(node.get("value", ""))]),
    to_mdast=lambda mark, index, parent, context: {"type": "jsx", "value": node_text(mark)},
)


# =============================================================================
# Inlines and marks
# =============================================================================


def _mark_rule(name: str, mdast_type: str, mark_type: str) -> Rule:
    def from_mdast(node: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Node:
        return make_mark(mark_type, context.visit_children(node))

    def to_mdast(mark: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Node:
        return {"type": mdast_type, "children": context.visit_children(mark)}

    return Rule(
        name=name,
        match=lambda node, index, parent: is_object(node, OBJECT_MARK, mark_type),
        match_mdast=lambda node, index, parent: _is_type(node, mdast_type),
        from_mdast=from_mdast,
        to_mdast=to_mdast,
    )


bold = _mark_rule("bold", "strong", MARK_BOLD)
italic = _mark_rule("italic", "emphasis", MARK_ITALIC)

code = Rule(
    name="code",
    match=lambda node, index, parent: is_object(node, OBJECT_MARK, MARK_CODE),
    match_mdast=lambda node, index, parent: _is_type(node, "inlineCode"),
    from_mdast=lambda node, index, parent, context: make_mark(MARK_CODE, [make_text(node.get("value", ""))]),
    to_mdast=lambda mark, index, parent, context: {
        "type": "inlineCode",
        "value": _mdast_text(context.visit_children(mark)),
    },
)


def _link_from_mdast(node: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Node:
    data = {"href": node.get("url"), "target": node.get("target"), "title": node.get("title")}
    return make_inline(INLINE_LINK, context.visit_children(node), data=data)


def _link_to_mdast(inline: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Node:
    data = inline.get("data") or {}
    return {
        "type": "link",
        "url": data.get("href"),
        "title": data.get("title"),
        "target": data.get("target"),
        "children": context.visit_children(inline),
    }


link = Rule(
    name="link",
    match=lambda node, index, parent: is_object(node, OBJECT_INLINE, INLINE_LINK),
    match_mdast=lambda node, index, parent: _is_type(node, "link"),
    from_mdast=_link_from_mdast,
    to_mdast=_link_to_mdast,
)

line_break = Rule(
    name="line_break",
    match_mdast=lambda node, index, parent: _is_type(node, "break"),
    from_mdast=lambda node, index, parent, context: make_text("\n"),
)


# =============================================================================
# Text
# =============================================================================


def _wrap_leaf(text: str, marks: list[str]) -> Node:
    """Wrap leaf text in the mdast nodes for its marks, outermost mark first."""
    node: Node
    if MARK_CODE in marks:
        node = {"type": "inlineCode", "value": text}
    else:
        node = {"type": "text", "value": text}
    for mark in reversed(marks):
        mdast_type = LEAF_MARK_MDAST_TYPES.get(mark)
        if mdast_type is None:
            logger.debug("Ignoring leaf mark without a Markdown form: %s", mark)
        elif mdast_type != "inlineCode":
            node = {"type": mdast_type, "children": [node]}
    return node


def _text_to_mdast(text_node: Node, index: int, parent: Optional[Node], context: ConversionContext) -> Any:
    runs: list[tuple[list[str], str]] = []
    for leaf in text_node.get("leaves") or ():
        marks = leaf_marks(leaf)
        if runs and runs[-1][0] == marks:
            runs[-1] = (marks, runs[-1][1] + leaf.get("text", ""))
        else:
            runs.append((marks, leaf.get("text", "")))

    converted = [_wrap_leaf(text, marks) for marks, text in runs if text]
    if not converted:
        return {"type": "text", "value": ""}
    return converted[0] if len(converted) == 1 else converted


text = Rule(
    name="text",
    match=lambda node, index, parent: is_object(node, OBJECT_TEXT),
    match_mdast=lambda node, index, parent: _is_type(node, "text"),
    from_mdast=lambda node, index, parent, context: make_text(node.get("value", "")),
    to_mdast=_text_to_mdast,
)


DEFAULT_RULES: tuple[Rule, ...] = (
    list_item_child,  # must precede paragraph
    paragraph,
    line_break,
    bold,
    code,
    italic,
    jsx_mark,
    block_quote,
    jsx_block,
    code_block,
    image,
    link,
    thematic_break,
    bulleted_list,
    numbered_list,
    list_item,
    *headings,
    text,
)

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxslate/slate.py
"""Builders and accessors for Slate document JSON.

The target tree is plain JSON-compatible dicts in the Slate document model:
every node has an ``object`` kind (``value``, ``document``, ``block``,
``inline``, ``mark``, ``text`` or ``leaf``) and, except for text and leaves,
a ``type`` naming the variant. Blocks, inlines and marks own ``nodes``; text
nodes own ``leaves``; a leaf owns its ``text`` and the ``marks`` active on it.

Examples
--------
    >>> block = make_block("paragraph", [make_text("Hello")])
    >>> block["nodes"][0]["leaves"][0]["text"]
    'Hello'

"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from mdxslate.constants import (
    OBJECT_BLOCK,
    OBJECT_DOCUMENT,
    OBJECT_INLINE,
    OBJECT_LEAF,
    OBJECT_MARK,
    OBJECT_TEXT,
    OBJECT_VALUE,
)

SlateNode = dict[str, Any]


def make_leaf(text: str, marks: Optional[Iterable[str]] = None) -> SlateNode:
    """Build a leaf holding ``text`` with the given mark types applied."""
    return {
        "object": OBJECT_LEAF,
        "text": text,
        "marks": [{"object": OBJECT_MARK, "type": mark} for mark in marks or ()],
    }


def make_text(text: str) -> SlateNode:
    """Build a text node with a single unmarked leaf."""
    return {"object": OBJECT_TEXT, "leaves": [make_leaf(text)]}


def make_block(
    block_type: str,
    nodes: list[SlateNode],
    data: Optional[dict[str, Any]] = None,
    is_void: bool = False,
) -> SlateNode:
    """Build a block node.

    Parameters
    ----------
    block_type : str
        Block variant, e.g. ``"paragraph"`` or ``"heading-one"``
    nodes : list of dict
        Child nodes
    data : dict, optional
        Block payload; omitted from the node when None
    is_void : bool, default False
        Mark the block as void (no editable content)

    Returns
    -------
    dict
        The block node

    """
    block: SlateNode = {"object": OBJECT_BLOCK, "type": block_type, "nodes": nodes}
    if data is not None:
        block["data"] = data
    if is_void:
        block["isVoid"] = True
    return block


def make_inline(inline_type: str, nodes: list[SlateNode], data: Optional[dict[str, Any]] = None) -> SlateNode:
    """Build an inline node such as a link."""
    inline: SlateNode = {"object": OBJECT_INLINE, "type": inline_type, "nodes": nodes}
    if data is not None:
        inline["data"] = data
    return inline


def make_mark(mark_type: str, nodes: list[SlateNode]) -> SlateNode:
    """Build a mark node wrapping its formatted children."""
    return {"object": OBJECT_MARK, "type": mark_type, "nodes": nodes}


def make_value(nodes: list[SlateNode]) -> SlateNode:
    """Wrap top-level blocks in a Slate value/document pair."""
    return {
        "object": OBJECT_VALUE,
        "document": {"object": OBJECT_DOCUMENT, "data": {}, "nodes": nodes},
    }


def get_document(value: SlateNode) -> SlateNode:
    """Return the document of a Slate value, or ``value`` itself if it is a document.

    Raises
    ------
    ValueError
        If ``value`` is neither a value nor a document.

    """
    kind = value.get("object")
    if kind == OBJECT_VALUE:
        return value["document"]
    if kind == OBJECT_DOCUMENT:
        return value
    raise ValueError(f"Expected a Slate value or document, got object={kind!r}")


def leaf_marks(leaf: SlateNode) -> list[str]:
    """Return the mark types applied to a leaf, in order."""
    marks = []
    for mark in leaf.get("marks") or ():
        mark_type = mark.get("type") if isinstance(mark, dict) else mark
        if mark_type:
            marks.append(mark_type)
    return marks


def node_text(node: SlateNode) -> str:
    """Concatenate the text of every leaf below ``node``."""
    if node.get("object") == OBJECT_TEXT:
        return "".join(leaf.get("text", "") for leaf in node.get("leaves") or ())
    return "".join(node_text(child) for child in node.get("nodes") or ())


def is_object(node: Optional[SlateNode], kind: str, node_type: Optional[str] = None) -> bool:
    """Check a node's ``object`` kind and, optionally, its ``type``."""
    if not node or node.get("object") != kind:
        return False
    return node_type is None or node.get("type") == node_type

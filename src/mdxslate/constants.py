#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the mdxslate library.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Conversion Behavior - transducer defaults
3. Markdown Output - printer defaults
4. Slate Vocabulary - target node kinds and block/mark type names
5. Dependencies - package requirements checked at runtime
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

ConversionDirection = Literal["deserialize", "serialize"]
UnknownNodePolicy = Literal["drop", "raise"]
BulletSymbol = Literal["*", "-", "+"]

# =============================================================================
# Conversion Behavior
# =============================================================================

DIRECTION_DESERIALIZE: ConversionDirection = "deserialize"
DIRECTION_SERIALIZE: ConversionDirection = "serialize"
UNKNOWN_NODE_POLICIES = ("drop", "raise")
DEFAULT_UNKNOWN_NODE_POLICY: UnknownNodePolicy = "drop"

# =============================================================================
# Markdown Output
# =============================================================================

BULLET_SYMBOLS = ("*", "-", "+")
DEFAULT_BULLET: BulletSymbol = "*"
DEFAULT_FENCES = True
DEFAULT_CODE_FENCE_MIN = 3
INDENTED_CODE_PREFIX = "    "
THEMATIC_BREAK = "***"

# =============================================================================
# Slate Vocabulary
# =============================================================================

OBJECT_VALUE = "value"
OBJECT_DOCUMENT = "document"
OBJECT_BLOCK = "block"
OBJECT_INLINE = "inline"
OBJECT_MARK = "mark"
OBJECT_TEXT = "text"
OBJECT_LEAF = "leaf"

BLOCK_PARAGRAPH = "paragraph"
BLOCK_LIST_ITEM_CHILD = "list-item-child"
BLOCK_QUOTE = "block-quote"
BLOCK_BULLETED_LIST = "bulleted-list"
BLOCK_NUMBERED_LIST = "numbered-list"
BLOCK_LIST_ITEM = "list-item"
BLOCK_CODE = "pre"
BLOCK_IMAGE = "image"
BLOCK_HORIZONTAL_RULE = "horizontal-rule"
BLOCK_JSX = "jsx"
BLOCK_JSX_VOID = "jsx-void"
HEADING_BLOCK_TYPES = (
    "heading-one",
    "heading-two",
    "heading-three",
    "heading-four",
    "heading-five",
    "heading-six",
)

INLINE_LINK = "link"

MARK_BOLD = "bold"
MARK_ITALIC = "italic"
MARK_CODE = "code"
MARK_JSX = "jsx"

# Leaf marks that wrap serialized text in an mdast node of this type
LEAF_MARK_MDAST_TYPES = {
    MARK_BOLD: "strong",
    MARK_ITALIC: "emphasis",
    MARK_CODE: "inlineCode",
}

# mdast parents whose direct jsx children are block-level components
JSX_BLOCK_PARENT_TYPES = ("root", "jsx")

# =============================================================================
# Dependencies
# =============================================================================

DEPS_MDX = [("mistune", "mistune", ">=3.0.0")]

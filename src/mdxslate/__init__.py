"""mdxslate - Convert MDX documents to Slate editor values and back.

mdxslate parses MDX (Markdown with embedded JSX components) into an mdast
tree, converts that tree into the Slate rich-text document model with an
ordered table of node-type rules, and performs the reverse conversion when
the edited document is saved.

JSX components written on their own lines become Slate blocks carrying
``data = {"type": <component>, "props": {...}}``; only static string
attributes are exposed as props. Components that wrap Markdown keep their
content as editable child blocks.

Requirements
------------
- Python 3.10+
- mistune 3 for tokenizing Markdown

Examples
--------
Round-tripping a document:

    >>> from mdxslate import deserialize, serialize
    >>> value = deserialize('<YouTube id="1234" />\\n')
    >>> block = value["document"]["nodes"][0]
    >>> block["type"], block["data"]
    ('jsx-void', {'type': 'YouTube', 'props': {'id': '1234'}})
    >>> serialize(value)
    '<YouTube id="1234" />\\n'

Reading and editing component props:

    >>> from mdxslate import apply_props, parse_tag
    >>> parse_tag('<Note kind="info">').props
    {'kind': 'info'}
    >>> apply_props('<Note kind="info" />', {"kind": "warning"})
    '<Note kind="warning" />'

See Also
--------
mdxslate.rules : Node-type rule definitions
mdxslate.serializer : Rule-driven tree conversion

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "mdxslate requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from mdxslate.api import default_serializer, deserialize, serialize
from mdxslate.exceptions import (
    ConversionError,
    DependencyError,
    InvalidOptionsError,
    MarkupSyntaxError,
    MdxSlateError,
    ParsingError,
    RenderingError,
    UnknownNodeError,
    ValidationError,
)
from mdxslate.jsx import ParsedTag, apply_props, parse_tag
from mdxslate.logging_utils import configure_logging
from mdxslate.options import MdxRendererOptions, SerializerOptions
from mdxslate.parsers.mdx import parse_mdx
from mdxslate.renderers.mdx import stringify_mdx
from mdxslate.rules import DEFAULT_RULES
from mdxslate.serializer import ConversionContext, MarkdownSerializer, Rule, RuleTable

__all__ = [
    "__version__",
    "deserialize",
    "serialize",
    "default_serializer",
    "parse_mdx",
    "stringify_mdx",
    "parse_tag",
    "apply_props",
    "ParsedTag",
    "MarkdownSerializer",
    "Rule",
    "RuleTable",
    "ConversionContext",
    "DEFAULT_RULES",
    "MdxRendererOptions",
    "SerializerOptions",
    "MdxSlateError",
    "ConversionError",
    "UnknownNodeError",
    "ParsingError",
    "MarkupSyntaxError",
    "RenderingError",
    "DependencyError",
    "ValidationError",
    "InvalidOptionsError",
    "configure_logging",
]

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxslate/api.py
"""Document-level conversion between MDX text and Slate values.

This module ties the pieces together: MDX text is parsed to mdast, the rule
table converts mdast to a Slate value, and the reverse path converts a Slate
value to mdast and prints it as MDX.

Examples
--------
    >>> from mdxslate import deserialize, serialize
    >>> value = deserialize("# Hello\\n")
    >>> value["document"]["nodes"][0]["type"]
    'heading-one'
    >>> serialize(value)
    '# Hello\\n'

"""

from __future__ import annotations

import logging
from typing import Any, Optional

from mdxslate.options.mdx import MdxRendererOptions
from mdxslate.parsers.mdx import parse_mdx
from mdxslate.renderers.mdx import stringify_mdx
from mdxslate.rules import DEFAULT_RULES
from mdxslate.serializer import MarkdownSerializer, Node
from mdxslate.utils.decorators import debug_timer

logger = logging.getLogger(__name__)

#: Shared serializer over the default rules. It holds no per-call state.
default_serializer = MarkdownSerializer(DEFAULT_RULES)
serializer = default_serializer


def deserialize(text: str, serializer: Optional[MarkdownSerializer] = None) -> Node:
    """Convert MDX text into a Slate value.

    Parameters
    ----------
    text : str
        MDX source
    serializer : MarkdownSerializer, optional
        Serializer to use; defaults to the shared serializer over
        :data:`~mdxslate.rules.DEFAULT_RULES`

    Returns
    -------
    dict
        Slate value

    Raises
    ------
    DependencyError
        If mistune is not installed
    ConversionError
        If a rule fails on a node

    """
    active = serializer or default_serializer

    with debug_timer(logger, "Parsing (mdx)") as stats:
        root = parse_mdx(text)
        stats["characters"] = len(text)
    with debug_timer(logger, "Deserializing (mdast to slate)") as stats:
        value = active.deserialize(root)
        stats["blocks"] = len(value["document"]["nodes"])
    return value


def serialize(
    value: Node,
    serializer: Optional[MarkdownSerializer] = None,
    options: Optional[MdxRendererOptions] = None,
    **kwargs: Any,
) -> str:
    """Convert a Slate value into MDX text.

    Parameters
    ----------
    value : dict
        Slate value or document
    serializer : MarkdownSerializer, optional
        Serializer to use; defaults to the shared serializer
    options : MdxRendererOptions, optional
        Output formatting options
    **kwargs
        Individual :class:`MdxRendererOptions` fields (``bullet``,
        ``fences``) overriding ``options``

    Returns
    -------
    str
        MDX text

    Raises
    ------
    ConversionError
        If a rule fails on a node
    RenderingError
        If the converted tree holds a node the printer does not support

    Examples
    --------
        >>> serialize(value, bullet="-")

    """
    active = serializer or default_serializer
    render_options = (options or MdxRendererOptions()).with_known_overrides(**kwargs)

    with debug_timer(logger, "Serializing (slate to mdast)") as stats:
        root = active.serialize(value)
        stats["blocks"] = len(root["children"])
    with debug_timer(logger, "Rendering (mdx)") as stats:
        text = stringify_mdx(root, render_options)
        stats["characters"] = len(text)
    return text


__all__ = [
    "default_serializer",
    "deserialize",
    "parse_mdx",
    "serialize",
    "serializer",
    "stringify_mdx",
]

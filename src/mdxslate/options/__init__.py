#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for mdxslate components.

Options are frozen dataclasses; derive variants with ``create_updated``.
"""

from __future__ import annotations

from mdxslate.options.base import CloneFrozenMixin
from mdxslate.options.mdx import MdxRendererOptions
from mdxslate.options.serializer import SerializerOptions

__all__ = [
    "CloneFrozenMixin",
    "MdxRendererOptions",
    "SerializerOptions",
]

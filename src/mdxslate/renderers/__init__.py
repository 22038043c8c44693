#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxslate/renderers/__init__.py
"""Renderers printing mdast trees as MDX text."""

from mdxslate.renderers.mdx import MdxRenderer, stringify_mdx

__all__ = ["MdxRenderer", "stringify_mdx"]

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxslate/parsers/__init__.py
"""Parsers turning MDX text into mdast trees."""

from mdxslate.parsers.mdx import MdxParser, parse_mdx

__all__ = ["MdxParser", "parse_mdx"]

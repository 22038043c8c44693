#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Shared helpers for mdxslate parsers, renderers and the conversion facade."""

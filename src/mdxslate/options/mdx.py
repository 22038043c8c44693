#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for printing mdast trees as MDX text."""
# src/mdxslate/options/mdx.py

from __future__ import annotations

from dataclasses import dataclass, field

from mdxslate.constants import BULLET_SYMBOLS, DEFAULT_BULLET, DEFAULT_FENCES, BulletSymbol
from mdxslate.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class MdxRendererOptions(CloneFrozenMixin):
    """Configuration options for mdast-to-MDX rendering.

    Parameters
    ----------
    bullet : {"*", "-", "+"}, default "*"
        Marker used for unordered list items.
    fences : bool, default True
        Emit fenced code blocks. When False, code blocks without a language
        are indented by four spaces instead.

    """

    bullet: BulletSymbol = field(
        default=DEFAULT_BULLET,
        metadata={"help": "Marker for unordered list items", "choices": list(BULLET_SYMBOLS)},
    )
    fences: bool = field(
        default=DEFAULT_FENCES,
        metadata={"help": "Use fenced code blocks"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If the bullet marker is not a Markdown list marker.

        """
        if self.bullet not in BULLET_SYMBOLS:
            raise ValueError(f"bullet must be one of {BULLET_SYMBOLS}, got {self.bullet!r}")

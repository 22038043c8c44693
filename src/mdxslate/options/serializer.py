#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for the mdast/Slate tree serializer."""
# src/mdxslate/options/serializer.py

from __future__ import annotations

from dataclasses import dataclass, field

from mdxslate.constants import DEFAULT_UNKNOWN_NODE_POLICY, UNKNOWN_NODE_POLICIES, UnknownNodePolicy
from mdxslate.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class SerializerOptions(CloneFrozenMixin):
    """Configuration options for :class:`mdxslate.serializer.MarkdownSerializer`.

    Parameters
    ----------
    unknown_node_policy : {"drop", "raise"}, default "drop"
        What to do with a node no rule converts. ``"drop"`` omits it from the
        output and logs a warning; ``"raise"`` aborts the conversion with
        :class:`mdxslate.exceptions.UnknownNodeError`.

    """

    unknown_node_policy: UnknownNodePolicy = field(
        default=DEFAULT_UNKNOWN_NODE_POLICY,
        metadata={"help": "Handling of nodes no rule converts", "choices": list(UNKNOWN_NODE_POLICIES)},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If the policy is not one of the supported values.

        """
        if self.unknown_node_policy not in UNKNOWN_NODE_POLICIES:
            raise ValueError(
                f"unknown_node_policy must be one of {UNKNOWN_NODE_POLICIES}, got {self.unknown_node_policy!r}"
            )

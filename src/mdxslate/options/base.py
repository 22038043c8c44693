#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Base class for mdxslate option dataclasses.

Options are frozen so that one configured renderer or serializer can be
shared by concurrent conversions. Variants are derived with
:meth:`CloneFrozenMixin.create_updated`, which rejects unknown field names,
or with :meth:`CloneFrozenMixin.with_known_overrides`, which skips them (the
top-level ``serialize`` call accepts loose keyword arguments this way).
"""
# src/mdxslate/options/base.py

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from mdxslate.exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing checked cloning for frozen option dataclasses."""

    @classmethod
    def option_names(cls) -> frozenset[str]:
        """Return the names of the option fields."""
        return frozenset(option.name for option in fields(cls))

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated; field validation runs
            again on the new instance

        Raises
        ------
        ValidationError
            If a keyword is not a field of this options class

        """
        unknown = sorted(set(kwargs) - self.option_names())
        if unknown:
            raise ValidationError(
                f"{type(self).__name__} has no option(s) {', '.join(unknown)}",
                parameter_name=unknown[0],
                parameter_value=kwargs[unknown[0]],
            )
        return replace(self, **kwargs)

    def with_known_overrides(self, **kwargs: Any) -> Self:
        """Apply the keywords naming fields of this class and skip the rest.

        Returns ``self`` unchanged when no keyword applies.
        """
        known = {key: value for key, value in kwargs.items() if key in self.option_names()}
        skipped = sorted(set(kwargs) - set(known))
        if skipped:
            logger.debug(f"Skipping unknown {type(self).__name__} fields: {skipped}")
        return self.create_updated(**known) if known else self

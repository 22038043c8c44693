#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxslate/utils/decorators.py
"""Decorators and context managers shared by the parser and the facade.

:func:`requires_dependencies` guards methods that import optional packages
lazily; :func:`debug_timer` reports how long each conversion stage took,
together with whatever size counters the stage records.

"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, Iterable

from mdxslate.utils.dependencies import Requirement, check_requirements


def requires_dependencies(component: str, requirements: Iterable[Requirement]) -> Callable:
    """Check required packages before the decorated method runs.

    Parameters
    ----------
    component : str
        Name of the component (e.g., "mdx"). This appears in error messages.
    requirements : iterable of Requirement
        Packages the method imports

    Returns
    -------
    Callable
        Decorated method that checks dependencies before execution

    Raises
    ------
    DependencyError
        If any required package is missing or has an incompatible version.

    Examples
    --------
        >>> @requires_dependencies("mdx", [Requirement("mistune", "mistune", ">=3.0.0")])
        ... def parse(self, text):
        ...     import mistune
        ...     # parsing logic here

    """
    requirements = tuple(requirements)

    def decorator(method: Callable) -> Callable:
        @wraps(method)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            check_requirements(component, requirements)
            return method(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[dict[str, Any], None, None]:
    """Time a block and log the result at DEBUG level.

    Parameters
    ----------
    logger : logging.Logger
        Logger instance to use for DEBUG messages
    operation : str
        Description of the stage being timed (e.g., "Parsing (mdx)")

    Yields
    ------
    dict
        Counters the block may fill in (e.g., ``stats["blocks"] = 12``);
        they are appended to the log message

    Notes
    -----
    Only measures time when logger has DEBUG level enabled. Nothing is
    logged when the block raises.

    """
    stats: dict[str, Any] = {}
    if not logger.isEnabledFor(logging.DEBUG):
        yield stats
        return

    start_time = time.perf_counter()
    yield stats
    elapsed = time.perf_counter() - start_time
    details = ", ".join(f"{key}={value}" for key, value in stats.items())
    logger.debug(f"{operation} completed in {elapsed:.4f}s" + (f" ({details})" if details else ""))

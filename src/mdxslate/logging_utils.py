#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Logging setup for applications embedding mdxslate.

Every mdxslate module logs through ``logging.getLogger(__name__)``, so all
records land below the ``mdxslate`` package logger. Conversions report dropped
nodes at WARNING, and JSX fallbacks, skipped tokens and stage timings at
DEBUG. :func:`configure_logging` attaches handlers to the package logger only,
leaving the host application's root logger alone.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "mdxslate"
_HANDLER_TAG = "_mdxslate_handler"


def _resolve_level(log_level: int | str) -> int:
    if isinstance(log_level, int):
        return log_level
    return getattr(logging, str(log_level).upper(), logging.INFO)


def configure_logging(
    log_level: int | str = logging.WARNING,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    propagate: bool = False,
) -> logging.Logger:
    """Send mdxslate diagnostics to stderr and, optionally, a file.

    Calling this again replaces the handlers installed by the previous call.
    Handlers attached to the logger by the host application are left alone.

    Parameters
    ----------
    log_level : int | str, default logging.WARNING
        Numeric logging level or string name (e.g., "DEBUG"). Unknown names
        fall back to INFO.
    log_file : str, optional
        Optional path to a log file for teeing log output.
    trace_mode : bool, default False
        When true, emit timestamps and logger names for debugging traces.
    propagate : bool, default False
        Also pass records on to the root logger's handlers.

    Returns
    -------
    logging.Logger
        The configured ``mdxslate`` logger.

    """
    resolved_level = _resolve_level(log_level)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(resolved_level)
    package_logger.propagate = propagate
    for handler in list(package_logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            package_logger.removeHandler(handler)
            handler.close()

    format_str = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s" if trace_mode else "%(levelname)s: %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S" if trace_mode else None
    formatter = logging.Formatter(format_str, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(resolved_level)
    console_handler.setFormatter(formatter)
    setattr(console_handler, _HANDLER_TAG, True)
    package_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            package_logger.warning("Could not create log file %s: %s", log_file, exc)
        else:
            file_handler.setLevel(resolved_level)
            file_handler.setFormatter(formatter)
            setattr(file_handler, _HANDLER_TAG, True)
            package_logger.addHandler(file_handler)
            package_logger.debug("Logging to file: %s", log_file)

    return package_logger

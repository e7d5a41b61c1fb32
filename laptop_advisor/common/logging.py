"""Logging configuration for Laptop Advisor.

Modules only ever call ``logging.getLogger(__name__)``; records propagate to
the ``laptop_advisor`` package logger, which entry points configure once
with setup_logging.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks the handler setup_logging owns, so repeated calls reuse it
_HANDLER_NAME = "laptop_advisor.console"


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(
    level: int | str = logging.INFO,
    module_name: str = "laptop_advisor",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure and return a logger with the advisor's format.

    Calling again with the same ``module_name`` reuses the existing handler,
    updating its level and stream instead of stacking a second one.

    Args:
        level: Logging level as an int or a name such as "DEBUG".
        module_name: Logger to configure. The package logger covers every
            module underneath it.
        stream: Output stream. Defaults to stderr so JSON written to stdout
            by the CLI stays parseable.

    Returns:
        The configured logger.

    Raises:
        ValueError: If ``level`` is an unknown level name.
    """
    level = _resolve_level(level)
    stream = stream or sys.stderr
    logger = logging.getLogger(module_name)
    logger.setLevel(level)

    handler = next((h for h in logger.handlers if h.get_name() == _HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(stream)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    else:
        handler.setStream(stream)

    handler.setLevel(level)
    return logger

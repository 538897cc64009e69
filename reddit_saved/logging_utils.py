"""
Process-wide logging setup.

Diagnostics go to stderr so that stdout carries nothing but the archive.
Verbosity comes from the number of `-v` flags:

    0 -> WARNING, 1 -> INFO, 2 -> DEBUG, 3+ -> TRACE
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

# Below DEBUG; used for raw response bodies
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_FORMAT = "%(asctime)s [%(threadName)s] %(message)s"

_VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def level_for_verbosity(verbosity: int) -> int:
    if verbosity < 0:
        verbosity = 0
    if verbosity >= len(_VERBOSITY_LEVELS):
        return TRACE
    return _VERBOSITY_LEVELS[verbosity]


def setup_logging(verbosity: int = 0, stream: Optional[TextIO] = None) -> int:
    """
    Configure the root logger once, at program start.

    Args:
        verbosity: count of repeated -v flags
        stream: where to write; defaults to sys.stderr

    Returns:
        The numeric level that was applied.
    """
    level = level_for_verbosity(verbosity)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        stream=stream or sys.stderr,
        force=True,
    )
    return level

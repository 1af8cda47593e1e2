"""
Logging setup for command-line entry points.

Library modules only create ``logging.getLogger(__name__)`` loggers;
handlers are installed here, once, by whatever runs the program.
"""
from __future__ import annotations

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def configure_logging(level: int = logging.INFO, fmt: Optional[str] = None) -> None:
    """
    Configure the root logger with a single stream handler.

    Args:
        level: Root log level.
        fmt: Format string (defaults to LOG_FORMAT).
    """
    logging.basicConfig(level=level, format=fmt or LOG_FORMAT, force=True)
    # Keep HTTP client chatter out of INFO output
    logging.getLogger("urllib3").setLevel(max(level, logging.WARNING))


def verbosity_to_level(verbose: int) -> int:
    """Map a -v count to a log level (0 -> INFO, 1+ -> DEBUG)."""
    return logging.DEBUG if verbose > 0 else logging.INFO

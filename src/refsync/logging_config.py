"""Logging setup for the refsync command line."""

import logging
import sys

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.INFO, format_string: str | None = None) -> None:
    """
    Send refsync log records to stderr.

    Args:
        level: Logging level for the ``refsync`` logger
        format_string: Optional custom format string
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))

    logger = logging.getLogger("refsync")
    logger.handlers[:] = [handler]
    logger.setLevel(level)
    logger.propagate = False


def level_for(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO

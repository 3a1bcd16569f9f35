"""
Logging setup for keyspace commands.

Verbosity maps to levels: 0 PROGRESS, 1 INFO, 2 DEBUG, 3+ TRACE.
PROGRESS sits between INFO and WARNING so scan progress is shown by default.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import logging
import sys

TRACE = 5
logging.addLevelName(TRACE, "TRACE")
PROGRESS = 25
logging.addLevelName(PROGRESS, "PROGRESS")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"

_THIRD_PARTY_LOGGERS = ("redis",)


def _level_for(verbose: int) -> int:
    if verbose >= 3:
        return TRACE
    if verbose == 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return PROGRESS


def setup_logging(verbose: int = 0) -> None:
    """
    Configure root logging to stderr.

    Args:
        verbose: Number of -v flags given on the command line
    """
    level = _level_for(verbose)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)

    # Library chatter only at TRACE
    for name in _THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= TRACE else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger."""
    return logging.getLogger(name)

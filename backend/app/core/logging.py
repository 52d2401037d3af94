"""Logging setup for the service process."""
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Send application logs to stdout at the given level.

    Safe to call more than once; the root handler is replaced rather than
    duplicated.
    """

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level.upper())

    # SQL echo is controlled by the engine, keep the driver quiet otherwise
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

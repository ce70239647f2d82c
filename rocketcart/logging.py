"""Logging setup shared by all rocketcart modules."""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Longest product id fragment written to a log line
MAX_LOGGED_ID = 16


def _configure_root_logger() -> None:
    root = logging.getLogger()
    if root.handlers:
        # Host application already configured logging
        return

    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)

    # One request per inventory lookup
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


_configure_root_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    """Logger for a rocketcart module (pass __name__)."""
    return logging.getLogger(name)


def sanitize_id_for_logging(id_value: object) -> str:
    """
    Render a product id for a log line.

    Ids come from request paths and bodies, so control characters are
    escaped before truncation. Missing ids render as "N/A".
    """
    if id_value is None or id_value == "":
        return "N/A"
    text = str(id_value).replace("\x00", "")
    text = text.replace("\r", "\\r").replace("\n", "\\n").replace("\t", "\\t")
    return text[:MAX_LOGGED_ID]


__all__ = ["LOG_FORMAT", "get_logger", "sanitize_id_for_logging"]

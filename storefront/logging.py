"""
Logging setup for the storefront.

The root logger is configured on first import unless the host process
(uvicorn, pytest) already installed handlers:

    from storefront.logging import get_logger
    logger = get_logger(__name__)

Anything that came from a cookie, header or query string goes through the
sanitize helpers before it is logged.
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
# Vercel prefixes its own timestamp
LOG_FORMAT_VERCEL = "[%(levelname)s] %(name)s: %(message)s"

# Loggers that report every PostgREST / Auth HTTP call at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "hpack")


def _configure() -> None:
    root = logging.getLogger()
    if root.handlers:
        return

    level = logging.getLevelName(os.environ.get("LOG_LEVEL", "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(LOG_FORMAT_VERCEL if os.environ.get("VERCEL") == "1" else LOG_FORMAT)
    )
    root.addHandler(handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_configure()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


_CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})


def _clip(value: str | None, limit: int, suffix: str = "") -> str:
    # Escaped so a crafted value cannot forge extra log lines
    if not value:
        return "N/A"
    text = str(value).translate(_CONTROL_CHARS)
    return text if len(text) <= limit else text[:limit] + suffix


def sanitize_id_for_logging(id_value: str | None) -> str:
    """First 8 characters of a token or id: enough to correlate, never the full secret."""
    return _clip(id_value, 8)


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """Free text (titles, search queries) escaped and truncated."""
    return _clip(value, max_length, "...")

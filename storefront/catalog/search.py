"""Search query helpers.

Queries end up inside PostgREST `or=(...)` filters, so characters with
meaning there are stripped before the database sees them.
"""
import math
import re

DEFAULT_LIMIT = 5
MAX_LIMIT = 10

_RESERVED = re.compile(r"[,%()]")
_WHITESPACE = re.compile(r"\s+")


def normalize_query(value: str | None) -> str:
    if not value:
        return ""
    return _WHITESPACE.sub(" ", _RESERVED.sub(" ", value)).strip()


def clamp_limit(value) -> int:
    """Clamp a user-supplied limit to 1..MAX_LIMIT.

    Missing, unparseable or non-finite values give DEFAULT_LIMIT; a blank
    string counts as zero and so clamps to 1.
    """
    if value is None:
        return DEFAULT_LIMIT
    if isinstance(value, str) and not value.strip():
        return 1
    try:
        limit = float(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_LIMIT
    if not math.isfinite(limit):
        return DEFAULT_LIMIT
    return min(max(1, math.floor(limit)), MAX_LIMIT)

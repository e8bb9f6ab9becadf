"""Catalog helpers: format pricing, cart drafts and search normalization."""
from .pricing import book_draft, price_for_format, select_format, service_draft
from .search import clamp_limit, normalize_query

__all__ = [
    "book_draft",
    "clamp_limit",
    "normalize_query",
    "price_for_format",
    "select_format",
    "service_draft",
]

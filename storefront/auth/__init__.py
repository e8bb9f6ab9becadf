"""Authentication package."""
from .dependencies import get_cart_store
from .session import get_optional_user_id, parse_bearer

__all__ = [
    "get_cart_store",
    "get_optional_user_id",
    "parse_bearer",
]

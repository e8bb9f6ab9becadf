"""Cart package: models, identity, store and consumer surfaces."""
from .controls import AddToCartControl, AddToCartStatus, CartPageView
from .identity import IdentityResolver
from .models import Cart, CartItem, CartItemDraft, CartOwner, ItemType
from .storage import CART_SESSION_KEY, CookieTokenStorage, FileTokenStorage, MemoryTokenStorage
from .store import CartStore
from .totals import cart_count, line_total, total_price

__all__ = [
    "AddToCartControl",
    "AddToCartStatus",
    "CART_SESSION_KEY",
    "Cart",
    "CartItem",
    "CartItemDraft",
    "CartOwner",
    "CartPageView",
    "CartStore",
    "CookieTokenStorage",
    "FileTokenStorage",
    "IdentityResolver",
    "ItemType",
    "MemoryTokenStorage",
    "cart_count",
    "line_total",
    "total_price",
]

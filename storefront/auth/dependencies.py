"""FastAPI dependencies for cart context.

Each request gets its own CartStore bound to the caller's identity; the
anonymous token travels in the cart_session_id cookie.
"""
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response

from storefront.cart import CartStore, CookieTokenStorage, IdentityResolver
from storefront.errors import ERROR_CART_UNAVAILABLE, CartError
from storefront.logging import get_logger
from storefront.services.database import get_database

from .session import get_optional_user_id

logger = get_logger(__name__)


async def get_cart_store(
    request: Request,
    response: Response,
    user_id: Optional[str] = Depends(get_optional_user_id),
) -> CartStore:
    """Build the request's CartStore and load its items.

    Usage:
        @router.get("/cart")
        async def get_cart(store: CartStore = Depends(get_cart_store)):
            return store.snapshot()
    """
    db = get_database()
    storage = CookieTokenStorage(request, response, secure=request.url.scheme == "https")
    store = CartStore(db.carts, IdentityResolver(storage, user_id=user_id))
    try:
        await store.load()
    except CartError as e:
        logger.error(f"Failed to load cart: {e}")
        raise HTTPException(status_code=503, detail=ERROR_CART_UNAVAILABLE)
    return store

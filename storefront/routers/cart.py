"""
Cart Router

Shopping cart endpoints. Every response carries the cart snapshot:
items, cart_count and total_price as computed by the store.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from storefront.auth import get_cart_store
from storefront.cart import CartItemDraft, CartPageView, CartStore
from storefront.catalog import book_draft, service_draft
from storefront.errors import (
    ERROR_BOOK_NOT_FOUND,
    ERROR_CART_UNAVAILABLE,
    ERROR_SERVICE_NOT_FOUND,
    CartError,
    CartUnavailable,
)
from storefront.logging import get_logger
from storefront.services.database import get_database

from .models import AddBookRequest, AddServiceRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(tags=["cart"])


def _to_http(e: CartError) -> HTTPException:
    if isinstance(e, CartUnavailable):
        return HTTPException(status_code=503, detail=ERROR_CART_UNAVAILABLE)
    return HTTPException(status_code=400, detail=str(e))


async def _add(store: CartStore, draft: CartItemDraft) -> dict:
    try:
        item = await store.add_item(draft)
    except CartError as e:
        logger.error(f"Failed to add to cart: {e}")
        raise _to_http(e)
    return {"item": item.to_dict() if item else None, **store.snapshot()}


@router.get("/cart")
async def get_cart(store: CartStore = Depends(get_cart_store)):
    """Current cart: items, loading, cart_count, total_price."""
    return store.snapshot()


@router.get("/cart/page")
async def get_cart_page(store: CartStore = Depends(get_cart_store)):
    """Cart page model: rows with display prices, empty state, totals."""
    return CartPageView(store).render()


@router.post("/cart/books/{slug}")
async def add_book(
    slug: str,
    request: Optional[AddBookRequest] = None,
    store: CartStore = Depends(get_cart_store),
):
    """Add a book in the requested (or preferred) format, priced server-side."""
    request = request or AddBookRequest()
    db = get_database()
    book = await db.catalog.get_book_by_slug(slug)
    if not book:
        raise HTTPException(status_code=404, detail=ERROR_BOOK_NOT_FOUND)
    return await _add(store, book_draft(book, request.format, request.quantity))


@router.post("/cart/services/{service_id}")
async def add_service(
    service_id: str,
    request: Optional[AddServiceRequest] = None,
    store: CartStore = Depends(get_cart_store),
):
    request = request or AddServiceRequest()
    db = get_database()
    service = await db.catalog.get_service_by_id(service_id)
    if not service:
        raise HTTPException(status_code=404, detail=ERROR_SERVICE_NOT_FOUND)
    return await _add(store, service_draft(service, request.quantity))


@router.patch("/cart/items/{item_id}")
async def update_cart_item(
    item_id: str,
    request: UpdateCartItemRequest,
    store: CartStore = Depends(get_cart_store),
):
    """Set item quantity (below 1 = remove)."""
    try:
        await store.update_quantity(item_id, request.quantity)
    except CartError as e:
        logger.error(f"Failed to update cart item: {e}")
        raise _to_http(e)
    return store.snapshot()


@router.delete("/cart/items/{item_id}")
async def remove_cart_item(item_id: str, store: CartStore = Depends(get_cart_store)):
    try:
        await store.remove_item(item_id)
    except CartError as e:
        logger.error(f"Failed to remove cart item: {e}")
        raise _to_http(e)
    return store.snapshot()


@router.delete("/cart")
async def clear_cart(store: CartStore = Depends(get_cart_store)):
    try:
        await store.clear_cart()
    except CartError as e:
        logger.error(f"Failed to clear cart: {e}")
        raise _to_http(e)
    return store.snapshot()


@router.post("/cart/refresh")
async def refresh_cart(store: CartStore = Depends(get_cart_store)):
    try:
        await store.refresh_cart()
    except CartError as e:
        logger.error(f"Failed to refresh cart: {e}")
        raise _to_http(e)
    return store.snapshot()

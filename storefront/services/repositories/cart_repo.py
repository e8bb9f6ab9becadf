"""Cart Repository - carts and cart_items operations.

All methods use async/await with supabase-py v2. Backend failures are
translated into the cart error taxonomy; "no row matched" on update/delete
is a failure too, so callers never mutate local state for a phantom row.
"""

import httpx
from postgrest.exceptions import APIError

from storefront.cart.models import Cart, CartItem, CartItemDraft, CartOwner
from storefront.db import Tables
from storefront.errors import (
    ERROR_CART_CREATE_FAILED,
    ERROR_CART_UNAVAILABLE,
    ERROR_ITEM_NOT_FOUND,
    ERROR_ITEM_PERSISTENCE,
    ERROR_ITEMS_LOAD_FAILED,
    CartUnavailable,
    ItemPersistenceFailure,
)
from storefront.logging import get_logger, sanitize_id_for_logging

from .base import BaseRepository

logger = get_logger(__name__)

BACKEND_ERRORS = (APIError, httpx.HTTPError)


class CartRepository(BaseRepository):
    """Cart database operations."""

    # ==================== CARTS ====================

    async def find_cart(self, owner: CartOwner) -> Cart | None:
        """Find the cart owned by a user or an anonymous session."""
        try:
            result = (
                await self.client.table(Tables.CARTS)
                .select("*")
                .eq(owner.column, owner.value)
                .limit(1)
                .execute()
            )
        except BACKEND_ERRORS as e:
            logger.error(f"Failed to look up cart: {e}")
            raise CartUnavailable(ERROR_CART_UNAVAILABLE) from e
        return Cart.from_row(result.data[0]) if result.data else None

    async def locate_or_create(self, owner: CartOwner) -> Cart:
        """Return the owner's cart, creating it if absent.

        Creation is an insert-if-absent upsert on the owner column, which is
        unique, so two concurrent callers end up with the same cart.
        """
        existing = await self.find_cart(owner)
        if existing:
            return existing

        try:
            result = (
                await self.client.table(Tables.CARTS)
                .upsert(owner.to_row(), on_conflict=owner.column, ignore_duplicates=True)
                .execute()
            )
        except BACKEND_ERRORS as e:
            logger.error(f"Failed to create cart: {e}")
            raise CartUnavailable(ERROR_CART_CREATE_FAILED) from e

        if result.data:
            cart = Cart.from_row(result.data[0])
            logger.info(
                f"Created cart {sanitize_id_for_logging(cart.id)} "
                f"for {owner.column} {sanitize_id_for_logging(owner.value)}"
            )
            return cart

        # Lost the race: the conflicting row was ignored, read the winner
        cart = await self.find_cart(owner)
        if cart is None:
            raise CartUnavailable(ERROR_CART_CREATE_FAILED)
        return cart

    # ==================== CART ITEMS ====================

    async def list_items(self, cart_id: str) -> list[CartItem]:
        """Items of a cart, most recently added first."""
        try:
            result = (
                await self.client.table(Tables.CART_ITEMS)
                .select("*")
                .eq("cart_id", cart_id)
                .order("created_at", desc=True)
                .execute()
            )
        except BACKEND_ERRORS as e:
            logger.error(f"Failed to load cart items: {e}")
            raise ItemPersistenceFailure(ERROR_ITEMS_LOAD_FAILED) from e
        return [CartItem.from_row(row) for row in result.data or []]

    async def insert_item(self, cart_id: str, draft: CartItemDraft) -> CartItem:
        try:
            result = (
                await self.client.table(Tables.CART_ITEMS)
                .insert(draft.to_row(cart_id))
                .execute()
            )
        except BACKEND_ERRORS as e:
            logger.error(f"Failed to insert cart item: {e}")
            raise ItemPersistenceFailure(ERROR_ITEM_PERSISTENCE) from e
        if not result.data:
            raise ItemPersistenceFailure(ERROR_ITEM_PERSISTENCE)
        return CartItem.from_row(result.data[0])

    async def update_quantity(self, cart_id: str, item_id: str, quantity: int) -> CartItem:
        try:
            result = (
                await self.client.table(Tables.CART_ITEMS)
                .update({"quantity": quantity})
                .eq("id", item_id)
                .eq("cart_id", cart_id)
                .execute()
            )
        except BACKEND_ERRORS as e:
            logger.error(f"Failed to update cart item quantity: {e}")
            raise ItemPersistenceFailure(ERROR_ITEM_PERSISTENCE) from e
        if not result.data:
            raise ItemPersistenceFailure(ERROR_ITEM_NOT_FOUND)
        return CartItem.from_row(result.data[0])

    async def delete_item(self, cart_id: str, item_id: str) -> None:
        try:
            result = (
                await self.client.table(Tables.CART_ITEMS)
                .delete()
                .eq("id", item_id)
                .eq("cart_id", cart_id)
                .execute()
            )
        except BACKEND_ERRORS as e:
            logger.error(f"Failed to delete cart item: {e}")
            raise ItemPersistenceFailure(ERROR_ITEM_PERSISTENCE) from e
        if not result.data:
            raise ItemPersistenceFailure(ERROR_ITEM_NOT_FOUND)

    async def delete_items(self, cart_id: str) -> int:
        """Delete every item of a cart, return how many rows went."""
        try:
            result = (
                await self.client.table(Tables.CART_ITEMS)
                .delete()
                .eq("cart_id", cart_id)
                .execute()
            )
        except BACKEND_ERRORS as e:
            logger.error(f"Failed to clear cart: {e}")
            raise ItemPersistenceFailure(ERROR_ITEM_PERSISTENCE) from e
        return len(result.data or [])

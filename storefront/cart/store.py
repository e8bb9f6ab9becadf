"""Observable cart store shared by every cart surface of a page load / request."""
from dataclasses import replace
from decimal import Decimal
from typing import TYPE_CHECKING, Callable, Optional

from storefront.errors import ERROR_INVALID_QUANTITY, ERROR_ITEM_NOT_FOUND, ItemPersistenceFailure
from storefront.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from storefront.services.money import to_float

from .identity import IdentityResolver
from .models import CartItem, CartItemDraft
from .totals import cart_count, total_price

if TYPE_CHECKING:
    from storefront.services.repositories import CartRepository

logger = get_logger(__name__)

Listener = Callable[["CartStore"], None]


class CartStore:
    """
    In-memory view of one identity's cart, kept in step with Supabase.

    Features:
    - Lazy: the item list is fetched once on first use; the cart row itself
      is only created by the first mutation
    - Merge-on-add by (item_type, item_id, format)
    - Every mutation applies the row returned by the backend to local state;
      refresh_cart() reconciles with changes made elsewhere
    - Failed calls leave local state untouched
    - subscribe() listeners run after every state change
    """

    def __init__(self, repo: "CartRepository", identity: IdentityResolver):
        self.repo = repo
        self.identity = identity
        self.loading = False
        self._items: list[CartItem] = []
        self._cart_id: Optional[str] = None
        self._loaded = False
        self._listeners: list[Listener] = []

    # ==================== OBSERVERS ====================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                # A broken view must not undo a persisted mutation
                logger.warning(f"Cart listener failed: {e}", exc_info=True)

    # ==================== STATE ====================

    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    @property
    def cart_id(self) -> Optional[str]:
        return self._cart_id

    @property
    def cart_count(self) -> int:
        return cart_count(self._items)

    @property
    def total_price(self) -> Decimal:
        return total_price(self._items)

    def get_item(self, item_id: str) -> Optional[CartItem]:
        return next((item for item in self._items if item.id == item_id), None)

    def snapshot(self) -> dict:
        """Consumer contract as a JSON-ready dict."""
        return {
            "cart_id": self._cart_id,
            "items": [item.to_dict() for item in self._items],
            "loading": self.loading,
            "cart_count": self.cart_count,
            "total_price": to_float(self.total_price),
        }

    # ==================== LOADING ====================

    async def load(self) -> None:
        """Fetch the item list once; later calls are no-ops."""
        if self._loaded:
            return
        await self._reload()

    async def refresh_cart(self) -> None:
        """Unconditionally reload the item list from the backend."""
        await self._reload()

    async def _reload(self) -> None:
        self.loading = True
        self._notify()
        try:
            if self._cart_id is None:
                cart = await self.repo.find_cart(self.identity.resolve())
                if cart:
                    self._cart_id = cart.id
            items = await self.repo.list_items(self._cart_id) if self._cart_id else []
            self._items = items
            self._loaded = True
        finally:
            self.loading = False
            self._notify()

    async def _ensure_cart(self) -> str:
        if self._cart_id is None:
            cart = await self.repo.locate_or_create(self.identity.resolve())
            self._cart_id = cart.id
        return self._cart_id

    def _require_cart(self) -> str:
        # Without a cart there is nothing an item id could refer to
        if self._cart_id is None:
            raise ItemPersistenceFailure(ERROR_ITEM_NOT_FOUND)
        return self._cart_id

    # ==================== COMMANDS ====================

    async def add_item(self, draft: CartItemDraft) -> CartItem:
        """Add a draft, merging into an existing line with the same key."""
        await self.load()
        cart_id = await self._ensure_cart()

        existing = next((item for item in self._items if item.merge_key == draft.merge_key), None)
        if existing:
            try:
                return await self.update_quantity(
                    existing.id, existing.quantity + draft.requested_quantity
                )
            except ItemPersistenceFailure as e:
                if str(e) != ERROR_ITEM_NOT_FOUND:
                    raise
                # Line was deleted elsewhere; forget it and insert a fresh one
                logger.warning(
                    f"Merge target {sanitize_id_for_logging(existing.id)} is gone, inserting a new line"
                )
                self._items = [item for item in self._items if item.id != existing.id]

        item = await self.repo.insert_item(cart_id, draft)
        self._items = [item] + self._items
        logger.info(
            f"Added {item.item_type.value} {sanitize_string_for_logging(item.title)} "
            f"to cart {sanitize_id_for_logging(cart_id)}"
        )
        self._notify()
        return item

    async def update_quantity(self, item_id: str, quantity: int) -> Optional[CartItem]:
        """Set a line's quantity; anything below 1 removes the line.

        Returns the updated item, or None when the line was removed.
        """
        if not isinstance(quantity, int) or isinstance(quantity, bool):
            raise ValueError(ERROR_INVALID_QUANTITY)
        if quantity < 1:
            await self.remove_item(item_id)
            return None

        await self.load()
        cart_id = self._require_cart()
        updated = await self.repo.update_quantity(cart_id, item_id, quantity)

        current = self.get_item(item_id)
        if current is not None:
            updated = replace(current, quantity=updated.quantity)
            self._items = [updated if item.id == item_id else item for item in self._items]
        self._notify()
        return updated

    async def remove_item(self, item_id: str) -> None:
        await self.load()
        cart_id = self._require_cart()
        await self.repo.delete_item(cart_id, item_id)
        self._items = [item for item in self._items if item.id != item_id]
        self._notify()

    async def clear_cart(self) -> None:
        """Delete every line; no-op when no cart exists yet."""
        await self.load()
        if self._cart_id is None:
            return
        removed = await self.repo.delete_items(self._cart_id)
        self._items = []
        logger.info(f"Cleared {removed} items from cart {sanitize_id_for_logging(self._cart_id)}")
        self._notify()

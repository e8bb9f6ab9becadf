"""Cart consumer surfaces: add-to-cart control and cart page view.

Both talk to a shared CartStore and catch CartError at the point of
invocation: the failure is logged and shown as a transient state.
"""
import asyncio
from enum import Enum
from typing import Optional

from storefront.errors import CartError
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.services.money import format_money, to_float

from .models import CartItemDraft
from .store import CartStore
from .totals import line_total

logger = get_logger(__name__)

ADDED_RESET_SECONDS = 2.5
ERROR_RESET_SECONDS = 3.0

ADD_TO_CART_ERROR = "Could not add book to your cart. Please try again."
ADDED_MESSAGE = "Book added to your cart."


class AddToCartStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ADDED = "added"
    ERROR = "error"


STATUS_LABELS = {
    AddToCartStatus.IDLE: "Add to Cart",
    AddToCartStatus.LOADING: "Adding...",
    AddToCartStatus.ADDED: "Added",
    AddToCartStatus.ERROR: "Try Again",
}


class AddToCartControl:
    """
    Add-to-cart button state machine.

    idle -> loading -> added | error -> (delay) -> idle

    Invocations while loading are ignored. A fresh invocation from
    added/error cancels the pending revert so it cannot reset the new attempt.
    """

    def __init__(
        self,
        store: CartStore,
        draft: CartItemDraft,
        added_delay: float = ADDED_RESET_SECONDS,
        error_delay: float = ERROR_RESET_SECONDS,
    ):
        self.store = store
        self.draft = draft
        self.added_delay = added_delay
        self.error_delay = error_delay
        self.status = AddToCartStatus.IDLE
        self.error: Optional[str] = None
        self._revert_task: Optional[asyncio.Task] = None

    @property
    def label(self) -> str:
        return STATUS_LABELS[self.status]

    @property
    def disabled(self) -> bool:
        return self.status is AddToCartStatus.LOADING

    @property
    def message(self) -> Optional[str]:
        if self.status is AddToCartStatus.ADDED:
            return ADDED_MESSAGE
        return self.error

    async def invoke(self) -> AddToCartStatus:
        if self.status is AddToCartStatus.LOADING:
            return self.status

        self._cancel_revert()
        self.status = AddToCartStatus.LOADING
        self.error = None
        try:
            await self.store.add_item(self.draft)
        except CartError as e:
            logger.error(f"Add to cart failed for {sanitize_id_for_logging(self.draft.item_id)}: {e}")
            self.error = ADD_TO_CART_ERROR
            self.status = AddToCartStatus.ERROR
            self._schedule_revert(self.error_delay)
        else:
            self.status = AddToCartStatus.ADDED
            self._schedule_revert(self.added_delay)
        return self.status

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "label": self.label,
            "disabled": self.disabled,
            "message": self.message,
        }

    def _schedule_revert(self, delay: float) -> None:
        self._revert_task = asyncio.get_running_loop().create_task(self._revert_after(delay))

    def _cancel_revert(self) -> None:
        if self._revert_task is not None and not self._revert_task.done():
            self._revert_task.cancel()
        self._revert_task = None

    async def _revert_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        self.status = AddToCartStatus.IDLE
        self.error = None


class CartPageView:
    """Cart page: item rows with steppers, remove action and totals."""

    EMPTY_TITLE = "Your cart is empty"
    EMPTY_MESSAGE = "Start shopping to add items to your cart."
    EMPTY_LINKS = (
        {"label": "Discover Books", "href": "/discover"},
        {"label": "Browse Services", "href": "/services"},
    )

    def __init__(self, store: CartStore, currency: str = "USD"):
        self.store = store
        self.currency = currency
        self.removing_id: Optional[str] = None

    async def remove(self, item_id: str) -> None:
        self.removing_id = item_id
        try:
            await self.store.remove_item(item_id)
        except CartError as e:
            logger.error(f"Failed to remove item {sanitize_id_for_logging(item_id)}: {e}")
        finally:
            self.removing_id = None

    async def change_quantity(self, item_id: str, quantity: int) -> None:
        try:
            await self.store.update_quantity(item_id, quantity)
        except CartError as e:
            logger.error(f"Failed to update quantity for {sanitize_id_for_logging(item_id)}: {e}")

    async def increment(self, item_id: str) -> None:
        item = self.store.get_item(item_id)
        if item:
            await self.change_quantity(item_id, item.quantity + 1)

    async def decrement(self, item_id: str) -> None:
        """Step down; stepping below 1 removes the line."""
        item = self.store.get_item(item_id)
        if item:
            await self.change_quantity(item_id, item.quantity - 1)

    def render(self) -> dict:
        if self.store.loading:
            return {"state": "loading", "message": "Loading your cart..."}

        items = self.store.items
        if not items:
            return {
                "state": "empty",
                "title": self.EMPTY_TITLE,
                "message": self.EMPTY_MESSAGE,
                "links": list(self.EMPTY_LINKS),
            }

        count = self.store.cart_count
        total = self.store.total_price
        return {
            "state": "items",
            "count_label": f"{count} {'item' if count == 1 else 'items'} in your cart",
            "items": [
                {
                    **item.to_dict(),
                    "subtitle": f"{item.item_type.value} • {item.format}" if item.format else item.item_type.value,
                    "unit_price_display": f"{format_money(item.price, self.currency)} each",
                    "line_total": to_float(line_total(item)),
                    "line_total_display": format_money(line_total(item), self.currency),
                    "removing": self.removing_id == item.id,
                }
                for item in items
            ],
            "subtotal": to_float(total),
            "subtotal_display": format_money(total, self.currency),
            "shipping_display": "Free",
            "total": to_float(total),
            "total_display": format_money(total, self.currency),
        }

"""Derived cart aggregates.

Recomputed from the current item list on every call; sums are taken in
cents so 0.1 + 0.2 style drift never reaches the total.
"""
from decimal import Decimal
from typing import Iterable

from storefront.services.money import from_minor_units, to_minor_units

from .models import CartItem


def cart_count(items: Iterable[CartItem]) -> int:
    """Total number of units in the cart."""
    return sum(item.quantity for item in items)


def line_total(item: CartItem) -> Decimal:
    """Unit price times quantity for a single line."""
    return from_minor_units(to_minor_units(item.price) * item.quantity)


def total_price(items: Iterable[CartItem]) -> Decimal:
    """Sum of price x quantity across all lines."""
    return from_minor_units(sum(to_minor_units(item.price) * item.quantity for item in items))

"""Book format selection and pricing, and cart drafts built from catalog rows."""
from decimal import Decimal
from typing import Optional

from storefront.cart.models import CartItemDraft, ItemType
from storefront.services.models import Book, Service

# Formats with a list price
KNOWN_FORMATS = ("Hardcover", "Paperback", "eBook", "Audiobook")

FORMAT_PRICES = {
    "Hardcover": Decimal("28.00"),
    "Paperback": Decimal("22.00"),
    "eBook": Decimal("14.00"),
    "Audiobook": Decimal("18.00"),
}

DEFAULT_BOOK_PRICE = Decimal("20.00")

FALLBACK_COVER_URL = (
    "https://images.unsplash.com/photo-1481627834876-b7833e8f5570?auto=format&fit=crop&w=600&q=80"
)


def select_format(formats: list[str], requested: Optional[str] = None) -> Optional[str]:
    """Pick the format to sell.

    A requested format wins if the book offers it; otherwise the first
    listed format that is a known one, otherwise whatever is listed first.
    """
    if requested and requested in formats:
        return requested
    return next((f for f in formats if f in KNOWN_FORMATS), formats[0] if formats else None)


def price_for_format(book_format: Optional[str]) -> Decimal:
    if not book_format:
        return DEFAULT_BOOK_PRICE
    return FORMAT_PRICES.get(book_format, DEFAULT_BOOK_PRICE)


def book_draft(book: Book, requested_format: Optional[str] = None, quantity: Optional[int] = None) -> CartItemDraft:
    selected = select_format(book.formats, requested_format)
    return CartItemDraft(
        item_type=ItemType.BOOK,
        item_id=book.id,
        title=book.title,
        price=price_for_format(selected),
        image_url=book.cover_url or FALLBACK_COVER_URL,
        description=book.description,
        quantity=quantity,
        format=selected,
    )


def service_draft(service: Service, quantity: Optional[int] = None) -> CartItemDraft:
    return CartItemDraft(
        item_type=ItemType.SERVICE,
        item_id=service.id,
        title=service.name,
        price=service.price,
        image_url=service.icon_url,
        description=service.short_description or service.description,
        quantity=quantity,
    )

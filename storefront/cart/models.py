"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional

from storefront.errors import ERROR_INVALID_QUANTITY
from storefront.services.money import to_decimal, to_float


class ItemType(str, Enum):
    """Kinds of purchasable line items."""
    BOOK = "book"
    SERVICE = "service"


MergeKey = tuple[str, str, Optional[str]]


def _normalize_format(value: Optional[str]) -> Optional[str]:
    # Forms post "" for "no format"
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class CartOwner:
    """Owner reference of a cart: an authenticated user or an anonymous session."""
    user_id: Optional[str] = None
    session_id: Optional[str] = None

    def __post_init__(self):
        if bool(self.user_id) == bool(self.session_id):
            raise ValueError("exactly one of user_id or session_id must be set")

    @classmethod
    def for_user(cls, user_id: str) -> "CartOwner":
        return cls(user_id=user_id)

    @classmethod
    def for_session(cls, session_id: str) -> "CartOwner":
        return cls(session_id=session_id)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def column(self) -> str:
        """Owner column on the carts table."""
        return "user_id" if self.is_authenticated else "session_id"

    @property
    def value(self) -> str:
        return self.user_id if self.is_authenticated else self.session_id

    def to_row(self) -> dict:
        """Row for carts insert; the other owner column is explicitly null."""
        return {"user_id": self.user_id, "session_id": self.session_id}


@dataclass
class Cart:
    """Row of the carts table."""
    id: str
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "Cart":
        return cls(
            id=str(row["id"]),
            user_id=row.get("user_id"),
            session_id=row.get("session_id"),
            created_at=row.get("created_at"),
        )


@dataclass
class CartItemDraft:
    """Item the user wants to add; quantity defaults to 1 when omitted."""
    item_type: ItemType
    item_id: str
    title: str
    price: Decimal
    image_url: Optional[str] = None
    description: Optional[str] = None
    quantity: Optional[int] = None
    format: Optional[str] = None

    def __post_init__(self):
        self.item_type = ItemType(self.item_type)
        if not self.item_id or not isinstance(self.item_id, str):
            raise ValueError("item_id must be a non-empty string")
        if not self.title or not isinstance(self.title, str):
            raise ValueError("title must be a non-empty string")
        self.price = to_decimal(self.price)
        if self.price < 0:
            raise ValueError("price must be a non-negative number")
        if self.quantity is not None and (
            not isinstance(self.quantity, int) or isinstance(self.quantity, bool) or self.quantity < 1
        ):
            raise ValueError(ERROR_INVALID_QUANTITY)
        self.format = _normalize_format(self.format)

    @property
    def requested_quantity(self) -> int:
        return self.quantity if self.quantity is not None else 1

    @property
    def merge_key(self) -> MergeKey:
        return (self.item_type.value, self.item_id, self.format)

    def to_row(self, cart_id: str) -> dict:
        """Row for cart_items insert."""
        return {
            "cart_id": cart_id,
            "item_type": self.item_type.value,
            "item_id": self.item_id,
            "title": self.title,
            "price": str(self.price),
            "image_url": self.image_url,
            "description": self.description,
            "quantity": self.requested_quantity,
            "format": self.format,
        }


@dataclass
class CartItem:
    """Persisted line item."""
    id: str
    cart_id: str
    item_type: ItemType
    item_id: str
    title: str
    price: Decimal
    quantity: int
    image_url: Optional[str] = None
    description: Optional[str] = None
    format: Optional[str] = None
    created_at: str = field(default="")

    def __post_init__(self):
        self.item_type = ItemType(self.item_type)
        self.price = to_decimal(self.price)
        self.quantity = int(self.quantity)
        self.format = _normalize_format(self.format)

    @property
    def merge_key(self) -> MergeKey:
        return (self.item_type.value, self.item_id, self.format)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON responses."""
        return {
            "id": self.id,
            "cart_id": self.cart_id,
            "item_type": self.item_type.value,
            "item_id": self.item_id,
            "title": self.title,
            "price": to_float(self.price),
            "image_url": self.image_url,
            "description": self.description,
            "quantity": self.quantity,
            "format": self.format,
            "created_at": self.created_at,
        }

    @classmethod
    def from_row(cls, row: dict) -> "CartItem":
        """Create from a cart_items row."""
        return cls(
            id=str(row["id"]),
            cart_id=str(row["cart_id"]),
            item_type=row["item_type"],
            item_id=str(row["item_id"]),
            title=row["title"],
            price=to_decimal(row["price"]),
            quantity=int(row["quantity"]),
            image_url=row.get("image_url"),
            description=row.get("description"),
            format=row.get("format"),
            created_at=row.get("created_at") or "",
        )

"""Pytest configuration and fixtures"""
import os
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest

# Set test environment variables
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test_key")

from storefront.cart import (  # noqa: E402
    Cart,
    CartItem,
    CartItemDraft,
    CartStore,
    IdentityResolver,
    ItemType,
    MemoryTokenStorage,
)
from storefront.errors import (  # noqa: E402
    ERROR_CART_CREATE_FAILED,
    ERROR_ITEM_NOT_FOUND,
    ERROR_ITEM_PERSISTENCE,
    CartUnavailable,
    ItemPersistenceFailure,
)


class FakeCartRepository:
    """
    In-memory CartRepository.

    One instance plays the role of the database, so several stores built on
    it behave like several browser tabs sharing a backend.
    """

    def __init__(self):
        self.carts: dict[str, Cart] = {}
        self.rows: dict[str, dict] = {}
        self.fail_on: set[str] = set()
        self.calls: list[str] = []
        self._seq = 0

    def _next(self, prefix: str) -> tuple[str, str]:
        self._seq += 1
        return f"{prefix}-{self._seq}", f"2026-01-01T00:00:00.{self._seq:06d}+00:00"

    def _enter(self, name: str, error: Exception) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise error

    def items_for(self, cart_id: str) -> list[dict]:
        return [row for row in self.rows.values() if row["cart_id"] == cart_id]

    async def find_cart(self, owner):
        self._enter("find_cart", CartUnavailable(ERROR_CART_CREATE_FAILED))
        return next(
            (cart for cart in self.carts.values() if getattr(cart, owner.column) == owner.value),
            None,
        )

    async def locate_or_create(self, owner):
        existing = await self.find_cart(owner)
        if existing:
            return existing
        self._enter("create_cart", CartUnavailable(ERROR_CART_CREATE_FAILED))
        cart_id, created_at = self._next("cart")
        cart = Cart(id=cart_id, created_at=created_at, **owner.to_row())
        self.carts[cart_id] = cart
        return cart

    async def list_items(self, cart_id):
        self._enter("list_items", ItemPersistenceFailure(ERROR_ITEM_PERSISTENCE))
        rows = sorted(self.items_for(cart_id), key=lambda row: row["created_at"], reverse=True)
        return [CartItem.from_row(row) for row in rows]

    async def insert_item(self, cart_id, draft):
        self._enter("insert_item", ItemPersistenceFailure(ERROR_ITEM_PERSISTENCE))
        item_id, created_at = self._next("item")
        row = {**draft.to_row(cart_id), "id": item_id, "created_at": created_at}
        self.rows[item_id] = row
        return CartItem.from_row(row)

    async def update_quantity(self, cart_id, item_id, quantity):
        self._enter("update_quantity", ItemPersistenceFailure(ERROR_ITEM_PERSISTENCE))
        row = self.rows.get(item_id)
        if not row or row["cart_id"] != cart_id:
            raise ItemPersistenceFailure(ERROR_ITEM_NOT_FOUND)
        row["quantity"] = quantity
        return CartItem.from_row(row)

    async def delete_item(self, cart_id, item_id):
        self._enter("delete_item", ItemPersistenceFailure(ERROR_ITEM_PERSISTENCE))
        row = self.rows.get(item_id)
        if not row or row["cart_id"] != cart_id:
            raise ItemPersistenceFailure(ERROR_ITEM_NOT_FOUND)
        del self.rows[item_id]

    async def delete_items(self, cart_id):
        self._enter("delete_items", ItemPersistenceFailure(ERROR_ITEM_PERSISTENCE))
        doomed = [row["id"] for row in self.items_for(cart_id)]
        for item_id in doomed:
            del self.rows[item_id]
        return len(doomed)


@pytest.fixture
def fake_repo():
    return FakeCartRepository()


@pytest.fixture
def token_storage():
    return MemoryTokenStorage()


@pytest.fixture
def make_store(fake_repo):
    """Factory for stores sharing fake_repo (one per 'tab')."""
    def _make(storage=None, user_id=None):
        resolver = IdentityResolver(storage if storage is not None else MemoryTokenStorage(), user_id=user_id)
        return CartStore(fake_repo, resolver)
    return _make


@pytest.fixture
def store(make_store, token_storage):
    return make_store(token_storage)


@pytest.fixture
def wolf_draft():
    """Paperback book draft priced 22.00."""
    return CartItemDraft(
        item_type=ItemType.BOOK,
        item_id="b1",
        title="Wolf So Grim",
        price=Decimal("22.00"),
        image_url="https://cdn.example.com/wolf.jpg",
        description="A tale of winter and teeth",
        format="Paperback",
    )


@pytest.fixture
def ebook_draft():
    """eBook draft priced 14.00."""
    return CartItemDraft(
        item_type=ItemType.BOOK,
        item_id="b2",
        title="The Quiet Harbor",
        price=Decimal("14.00"),
        format="eBook",
    )


@pytest.fixture
def sample_item_row():
    """cart_items row as PostgREST returns it"""
    return {
        "id": "item-123",
        "cart_id": "cart-123",
        "item_type": "book",
        "item_id": "b1",
        "title": "Wolf So Grim",
        "price": 22.0,
        "image_url": None,
        "description": None,
        "quantity": 1,
        "format": "Paperback",
        "created_at": "2026-01-01T00:00:00+00:00",
    }


@pytest.fixture
def sample_book():
    """books row"""
    return {
        "id": "b1",
        "slug": "wolf-so-grim",
        "title": "Wolf So Grim",
        "subtitle": None,
        "description": "A tale of winter and teeth",
        "cover_url": None,
        "pub_date": "2025-10-01",
        "formats": ["Paperback", "eBook"],
        "keywords": ["winter"],
        "tags": None,
        "is_published": True,
    }


@pytest.fixture
def sample_service():
    """services row"""
    return {
        "id": "svc-1",
        "name": "Developmental Edit",
        "slug": "developmental-edit",
        "short_description": "Structure and pacing notes",
        "description": "Full manuscript review",
        "icon_url": None,
        "price": 499.0,
        "is_active": True,
        "display_order": 1,
    }


@pytest.fixture
def mock_supabase_client():
    """Mock async Supabase client: builder methods chain, execute() is awaited"""
    client = Mock()

    table_mock = Mock()
    table_mock.select.return_value = table_mock
    table_mock.insert.return_value = table_mock
    table_mock.update.return_value = table_mock
    table_mock.delete.return_value = table_mock
    table_mock.upsert.return_value = table_mock
    table_mock.eq.return_value = table_mock
    table_mock.or_.return_value = table_mock
    table_mock.ilike.return_value = table_mock
    table_mock.limit.return_value = table_mock
    table_mock.order.return_value = table_mock
    table_mock.execute = AsyncMock(return_value=Mock(data=[]))

    client.table.return_value = table_mock
    client.auth = Mock()
    client.auth.get_user = AsyncMock()

    return client

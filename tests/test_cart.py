"""
Tests for cart models
"""
from decimal import Decimal

import pytest

from storefront.cart import Cart, CartItem, CartItemDraft, CartOwner, ItemType


class TestCartOwner:
    """Tests for the owner reference invariant."""

    def test_for_user(self):
        owner = CartOwner.for_user("user-1")
        assert owner.is_authenticated
        assert owner.column == "user_id"
        assert owner.value == "user-1"
        assert owner.to_row() == {"user_id": "user-1", "session_id": None}

    def test_for_session(self):
        owner = CartOwner.for_session("tok-1")
        assert not owner.is_authenticated
        assert owner.column == "session_id"
        assert owner.value == "tok-1"

    def test_both_owners_rejected(self):
        with pytest.raises(ValueError):
            CartOwner(user_id="user-1", session_id="tok-1")

    def test_no_owner_rejected(self):
        with pytest.raises(ValueError):
            CartOwner()

    def test_empty_strings_count_as_absent(self):
        with pytest.raises(ValueError):
            CartOwner(user_id="", session_id="")


class TestCartItemDraft:
    """Tests for draft validation."""

    def test_defaults(self, wolf_draft):
        assert wolf_draft.quantity is None
        assert wolf_draft.requested_quantity == 1
        assert wolf_draft.merge_key == ("book", "b1", "Paperback")

    def test_item_type_from_string(self):
        draft = CartItemDraft(item_type="service", item_id="svc-1", title="Edit", price=10)
        assert draft.item_type is ItemType.SERVICE
        assert draft.price == Decimal("10")

    def test_float_price_kept_exact(self):
        draft = CartItemDraft(item_type="book", item_id="b1", title="T", price=22.1)
        assert draft.price == Decimal("22.1")

    def test_blank_format_is_no_format(self):
        draft = CartItemDraft(item_type="book", item_id="b1", title="T", price=1, format="  ")
        assert draft.format is None
        assert draft.merge_key == ("book", "b1", None)

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, True, "2"])
    def test_invalid_quantity(self, quantity):
        with pytest.raises(ValueError):
            CartItemDraft(item_type="book", item_id="b1", title="T", price=1, quantity=quantity)

    def test_negative_price(self):
        with pytest.raises(ValueError):
            CartItemDraft(item_type="book", item_id="b1", title="T", price=-1)

    def test_missing_title(self):
        with pytest.raises(ValueError):
            CartItemDraft(item_type="book", item_id="b1", title="", price=1)

    def test_unknown_item_type(self):
        with pytest.raises(ValueError):
            CartItemDraft(item_type="gift-card", item_id="g1", title="T", price=1)

    def test_to_row(self, wolf_draft):
        row = wolf_draft.to_row("cart-1")
        assert row["cart_id"] == "cart-1"
        assert row["item_type"] == "book"
        assert row["price"] == "22.00"
        assert row["quantity"] == 1
        assert row["format"] == "Paperback"
        assert "id" not in row


class TestCartItem:
    """Tests for persisted items."""

    def test_from_row(self, sample_item_row):
        item = CartItem.from_row(sample_item_row)
        assert item.id == "item-123"
        assert item.item_type is ItemType.BOOK
        assert item.price == Decimal("22.0")
        assert item.quantity == 1
        assert item.merge_key == ("book", "b1", "Paperback")

    def test_from_row_string_price(self, sample_item_row):
        sample_item_row["price"] = "14.99"
        assert CartItem.from_row(sample_item_row).price == Decimal("14.99")

    def test_to_dict(self, sample_item_row):
        data = CartItem.from_row(sample_item_row).to_dict()
        assert data["price"] == 22.0
        assert data["item_type"] == "book"
        assert data["created_at"] == "2026-01-01T00:00:00+00:00"

    def test_same_book_different_format_is_different_key(self, sample_item_row):
        paperback = CartItem.from_row(sample_item_row)
        ebook = CartItem.from_row({**sample_item_row, "id": "item-2", "format": "eBook"})
        assert paperback.merge_key != ebook.merge_key


def test_cart_from_row():
    cart = Cart.from_row({"id": "c1", "session_id": "tok", "user_id": None, "created_at": "x"})
    assert cart.id == "c1"
    assert cart.session_id == "tok"
    assert cart.user_id is None

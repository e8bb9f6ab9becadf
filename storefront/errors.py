"""
Common Error Constants and Cart Exceptions

Centralized error messages to avoid string duplication, plus the cart
error taxonomy raised by the repository and the store.
"""

# Identity errors
ERROR_IDENTITY_STORAGE = "Client storage unavailable"
ERROR_INVALID_SESSION = "Invalid session token"

# Cart errors
ERROR_CART_UNAVAILABLE = "Cart unavailable"
ERROR_CART_CREATE_FAILED = "Could not create cart"
ERROR_ITEM_NOT_FOUND = "Cart item not found"
ERROR_ITEM_PERSISTENCE = "Cart item could not be saved"
ERROR_ITEMS_LOAD_FAILED = "Cart items could not be loaded"
ERROR_INVALID_QUANTITY = "quantity must be a positive integer"

# Catalog errors
ERROR_BOOK_NOT_FOUND = "Book not found"
ERROR_SERVICE_NOT_FOUND = "Service not found"
ERROR_SEARCH_FAILED = "Search failed"

# Generic errors
ERROR_INVALID_REQUEST = "Invalid request"
ERROR_INTERNAL = "Internal server error"


class CartError(Exception):
    """Base class for cart failures surfaced to callers."""


class IdentityUnavailable(CartError):
    """Client-local storage cannot read or persist the anonymous token."""


class CartUnavailable(CartError):
    """Locating or creating the cart failed against the backend."""


class ItemPersistenceFailure(CartError):
    """Listing, inserting, updating or deleting cart items failed."""

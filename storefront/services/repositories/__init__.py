"""
Repository Pattern for Database Operations

- CartRepository: carts and cart items
- CatalogRepository: books, services, authors, genres
"""
from .cart_repo import CartRepository
from .catalog_repo import CatalogRepository

__all__ = [
    "CartRepository",
    "CatalogRepository",
]

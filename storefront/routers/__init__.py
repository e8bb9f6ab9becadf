"""
FastAPI Routers Package

All routers are included in api/index.py under the /api prefix.
"""

from storefront.routers.cart import router as cart_router
from storefront.routers.catalog import router as catalog_router

__all__ = [
    "cart_router",
    "catalog_router",
]

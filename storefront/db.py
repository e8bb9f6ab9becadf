"""
Database Module - Supabase client factory

Provides:
- Async Supabase client factory for PostgreSQL operations
- Table names used by the repositories
"""

import os

from supabase._async.client import AsyncClient
from supabase._async.client import create_client as acreate_client

SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY = os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "")


def _credentials() -> tuple[str, str]:
    # Re-read so tests and the CLI can set env (or load .env) after import
    url = os.environ.get("SUPABASE_URL", SUPABASE_URL)
    key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY", SUPABASE_SERVICE_ROLE_KEY)
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
    return url, key


async def create_supabase() -> AsyncClient:
    """
    Create a new async Supabase client.

    The app keeps exactly one, owned by the Database singleton
    (see storefront.services.database.init_database).
    """
    url, key = _credentials()
    return await acreate_client(url, key)


class Tables:
    """Table names used by the storefront."""

    CARTS = "carts"
    CART_ITEMS = "cart_items"
    BOOKS = "books"
    SERVICES = "services"
    AUTHORS = "authors"
    GENRES = "genres"

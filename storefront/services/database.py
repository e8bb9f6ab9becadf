"""
Storefront database access.

`Database` bundles the async Supabase client with the cart and catalog
repositories. One instance lives per process:

    # FastAPI lifespan
    await init_database()

    # request handlers
    db = get_database()
    book = await db.catalog.get_book_by_slug("wolf-so-grim")

    # CLI / scripts (no lifespan)
    db = await get_database_async()
"""

import asyncio
from typing import Optional

from supabase import AuthError
from supabase._async.client import AsyncClient

from storefront.db import create_supabase
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.services.repositories import CartRepository, CatalogRepository

logger = get_logger(__name__)


class Database:
    """Supabase client plus repositories. Build with `await Database.create()`."""

    def __init__(self, client: AsyncClient):
        self.client = client
        self.carts = CartRepository(client)
        self.catalog = CatalogRepository(client)

    @classmethod
    async def create(cls) -> "Database":
        return cls(await create_supabase())

    async def get_user_id_for_token(self, access_token: str) -> str | None:
        """Id of the Supabase Auth user owning `access_token`, None if the token is rejected."""
        try:
            response = await self.client.auth.get_user(access_token)
        except AuthError as e:
            logger.info(f"Access token rejected by Supabase Auth: {e}")
            return None
        user = response.user if response else None
        if user is None:
            return None
        logger.debug(f"Resolved access token to user {sanitize_id_for_logging(str(user.id))}")
        return str(user.id)

    async def aclose(self) -> None:
        """Close the PostgREST HTTP session."""
        await self.client.postgrest.aclose()


# ==================== PROCESS-WIDE INSTANCE ====================

_db: Database | None = None
_init_lock: Optional[asyncio.Lock] = None


def _lock() -> asyncio.Lock:
    # Created lazily: an asyncio.Lock must be made inside the running loop
    global _init_lock
    if _init_lock is None:
        _init_lock = asyncio.Lock()
    return _init_lock


async def init_database() -> Database:
    """Create the shared Database once; concurrent callers wait for the first."""
    global _db
    if _db is None:
        async with _lock():
            if _db is None:
                _db = await Database.create()
                logger.info("Supabase client ready")
    return _db


async def close_database() -> None:
    global _db
    if _db is None:
        return
    db, _db = _db, None
    try:
        await db.aclose()
    except Exception as e:
        # Shutdown continues regardless
        logger.warning(f"Supabase client did not close cleanly: {e}")
    logger.info("Supabase client closed")


async def get_database_async() -> Database:
    """Shared Database, created on first use (CLI and scripts)."""
    return _db if _db is not None else await init_database()


def get_database() -> Database:
    """Shared Database for request handlers.

    Raises:
        RuntimeError: init_database() has not run (app lifespan not started)
    """
    if _db is None:
        raise RuntimeError("Database not initialized: await init_database() at startup")
    return _db

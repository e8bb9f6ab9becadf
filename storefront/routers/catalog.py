"""Catalog Router - genres listing and header search autocomplete."""
from typing import Optional

import httpx
from fastapi import APIRouter, HTTPException, Query
from postgrest.exceptions import APIError

from storefront.catalog import clamp_limit, normalize_query
from storefront.errors import ERROR_SEARCH_FAILED
from storefront.logging import get_logger, sanitize_string_for_logging
from storefront.services.database import get_database

logger = get_logger(__name__)

router = APIRouter(tags=["catalog"])


@router.get("/genres")
async def list_genres():
    """All genres ordered by label."""
    db = get_database()
    try:
        genres = await db.catalog.list_genres()
    except (APIError, httpx.HTTPError) as e:
        logger.error(f"Failed to load genres: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return [genre.model_dump() for genre in genres]


@router.get("/search")
async def search(q: Optional[str] = Query(None), limit: Optional[str] = Query(None)):
    """Substring search across books, authors and genres."""
    query = normalize_query(q)
    if not query:
        return {"books": [], "authors": [], "genres": []}

    db = get_database()
    try:
        results = await db.catalog.search(query, clamp_limit(limit))
    except (APIError, httpx.HTTPError) as e:
        logger.error(f"Search failed for {sanitize_string_for_logging(query)}: {e}")
        raise HTTPException(status_code=500, detail=ERROR_SEARCH_FAILED)
    return results.model_dump()

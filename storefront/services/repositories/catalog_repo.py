"""Catalog Repository - books, services, authors and genres lookups."""
import asyncio
from typing import Any, Optional

from storefront.db import Tables
from storefront.services.models import Author, Book, BookHit, Genre, SearchResults, Service

from .base import BaseRepository

BOOK_HIT_COLUMNS = """
    id,
    slug,
    title,
    books_authors (
        position,
        authors:author_id ( display_name )
    )
"""


def _first_author(book_row: dict[str, Any]) -> Optional[str]:
    """Display name of the lowest-positioned author of an embedded book row."""
    links = book_row.get("books_authors") or []
    links = sorted(links, key=lambda link: (link.get("position") is None, link.get("position") or 0))
    for link in links:
        author = link.get("authors")
        if isinstance(author, list):
            author = author[0] if author else None
        if author and author.get("display_name"):
            return author["display_name"]
    return None


class CatalogRepository(BaseRepository):
    """Read-only catalog operations."""

    async def get_book_by_slug(self, slug: str) -> Book | None:
        result = (
            await self.client.table(Tables.BOOKS)
            .select("*")
            .eq("slug", slug)
            .eq("is_published", True)
            .limit(1)
            .execute()
        )
        return Book(**result.data[0]) if result.data else None

    async def get_service_by_id(self, service_id: str) -> Service | None:
        """Get an active service offering."""
        result = (
            await self.client.table(Tables.SERVICES)
            .select("*")
            .eq("id", service_id)
            .eq("is_active", True)
            .execute()
        )
        return Service(**result.data[0]) if result.data else None

    async def list_genres(self) -> list[Genre]:
        result = (
            await self.client.table(Tables.GENRES)
            .select("id, slug, label")
            .order("label")
            .execute()
        )
        return [Genre(**row) for row in result.data or []]

    async def search(self, query: str, limit: int) -> SearchResults:
        """Substring search over book titles, author names and genres.

        `query` must already be normalized (see storefront.catalog.search).
        """
        wildcard = f"%{query}%"

        books_res, authors_res, genres_res = await asyncio.gather(
            self.client.table(Tables.BOOKS)
            .select(BOOK_HIT_COLUMNS)
            .eq("is_published", True)
            .ilike("title", wildcard)
            .order("pub_date", desc=True)
            .limit(limit)
            .execute(),
            self.client.table(Tables.AUTHORS)
            .select("id, slug, display_name")
            .ilike("display_name", wildcard)
            .order("display_name")
            .limit(limit)
            .execute(),
            self.client.table(Tables.GENRES)
            .select("id, slug, label")
            .or_(f"label.ilike.{wildcard},slug.ilike.{wildcard}")
            .order("label")
            .limit(limit)
            .execute(),
        )

        return SearchResults(
            books=[
                BookHit(id=row["id"], slug=row["slug"], title=row["title"], author=_first_author(row))
                for row in books_res.data or []
            ],
            authors=[Author(**row) for row in authors_res.data or []],
            genres=[Genre(**row) for row in genres_res.data or []],
        )

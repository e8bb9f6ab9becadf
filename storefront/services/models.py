"""Database Models - Pydantic models for catalog entities."""
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, field_validator

from storefront.services.money import to_decimal as _to_decimal


class Book(BaseModel):
    """Published book."""
    id: str
    slug: str
    title: str
    subtitle: Optional[str] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None
    pub_date: Optional[date] = None
    formats: list[str] = []  # Hardcover, Paperback, eBook, Audiobook
    keywords: list[str] = []
    tags: list[str] = []
    is_published: bool = True

    class Config:
        extra = "ignore"  # Ignore embedded relations and unknown columns

    @field_validator("formats", "keywords", "tags", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v or []


class Service(BaseModel):
    """Publishing service offering (editing, design, marketing...)."""
    id: str
    name: str
    slug: str
    short_description: Optional[str] = None
    description: Optional[str] = None
    icon_url: Optional[str] = None
    price: Decimal
    original_price: Optional[Decimal] = None
    is_active: bool = True
    display_order: int = 0

    class Config:
        extra = "ignore"

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return _to_decimal(v)

    @field_validator("original_price", mode="before")
    @classmethod
    def convert_original_price(cls, v):
        return _to_decimal(v) if v is not None else None


class Genre(BaseModel):
    id: str
    slug: str
    label: str

    class Config:
        extra = "ignore"


class Author(BaseModel):
    id: str
    slug: str
    display_name: str

    class Config:
        extra = "ignore"


class BookHit(BaseModel):
    """Book entry in search results."""
    id: str
    slug: str
    title: str
    author: Optional[str] = None


class SearchResults(BaseModel):
    books: list[BookHit] = []
    authors: list[Author] = []
    genres: list[Genre] = []

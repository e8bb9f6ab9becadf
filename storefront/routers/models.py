"""
API Pydantic Models

Request bodies shared by the cart endpoints.
"""
from typing import Optional

from pydantic import BaseModel, Field


class AddBookRequest(BaseModel):
    format: Optional[str] = None  # Hardcover, Paperback, eBook, Audiobook
    quantity: Optional[int] = Field(default=None, ge=1)


class AddServiceRequest(BaseModel):
    quantity: Optional[int] = Field(default=None, ge=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int  # below 1 removes the item

"""Supabase Auth bearer token verification."""
from typing import Optional

from fastapi import Header, HTTPException

from storefront.errors import ERROR_INVALID_SESSION
from storefront.logging import get_logger
from storefront.services.database import get_database

logger = get_logger(__name__)


def parse_bearer(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from `Authorization: Bearer <token>`, None if malformed."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1]:
        return parts[1]
    return None


async def get_optional_user_id(
    authorization: str = Header(None, alias="Authorization"),
) -> Optional[str]:
    """
    Resolve the signed-in user, if any.

    - No Authorization header: anonymous (None)
    - Valid Supabase access token: the user's id
    - Anything else: 401, so a stale login never silently becomes a guest cart
    """
    if not authorization:
        return None

    token = parse_bearer(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Invalid authorization header")

    db = get_database()
    user_id = await db.get_user_id_for_token(token)
    if not user_id:
        raise HTTPException(status_code=401, detail=ERROR_INVALID_SESSION)
    return user_id

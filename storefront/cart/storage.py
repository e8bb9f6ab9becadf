"""Client-local token storage for anonymous cart identity.

A storage is anything with ``read(key)`` and ``write(key, value)``.
Implementations raise IdentityUnavailable when the medium cannot be used.
"""
import json
import os
from pathlib import Path
from typing import Optional, Protocol

from fastapi import Request, Response

from storefront.errors import ERROR_IDENTITY_STORAGE, IdentityUnavailable
from storefront.logging import get_logger

logger = get_logger(__name__)

# Key under which the anonymous token lives (cookie name / file entry)
CART_SESSION_KEY = "cart_session_id"

# One year
CART_SESSION_MAX_AGE = int(os.environ.get("CART_SESSION_MAX_AGE", 365 * 24 * 3600))


class TokenStorage(Protocol):
    def read(self, key: str) -> Optional[str]: ...

    def write(self, key: str, value: str) -> None: ...


class MemoryTokenStorage:
    """Dict-backed storage (tests, single-process tools)."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value

    def clear(self) -> None:
        self._data.clear()


class CookieTokenStorage:
    """
    Cookie-backed storage for one HTTP request.

    Reads come from the request cookies; writes are set on the outgoing
    response and also remembered, so a second read within the same request
    sees the freshly generated token.
    """

    def __init__(
        self,
        request: Request,
        response: Response,
        max_age: int = CART_SESSION_MAX_AGE,
        secure: bool = False,
    ) -> None:
        self.request = request
        self.response = response
        self.max_age = max_age
        self.secure = secure
        self._written: dict[str, str] = {}

    def read(self, key: str) -> Optional[str]:
        if key in self._written:
            return self._written[key]
        return self.request.cookies.get(key) or None

    def write(self, key: str, value: str) -> None:
        self.response.set_cookie(
            key,
            value,
            max_age=self.max_age,
            httponly=True,
            samesite="lax",
            secure=self.secure,
        )
        self._written[key] = value


class FileTokenStorage:
    """JSON file storage, the CLI's equivalent of a browser profile."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Token file {self.path} unreadable: {e}")
            raise IdentityUnavailable(ERROR_IDENTITY_STORAGE) from e
        return data if isinstance(data, dict) else {}

    def read(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return str(value) if value else None

    def write(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Token file {self.path} not writable: {e}")
            raise IdentityUnavailable(ERROR_IDENTITY_STORAGE) from e

"""Cart identity resolution: authenticated user or anonymous session token."""
import uuid
from typing import Callable, Optional

from storefront.errors import IdentityUnavailable
from storefront.logging import get_logger, sanitize_id_for_logging

from .models import CartOwner
from .storage import CART_SESSION_KEY, TokenStorage

logger = get_logger(__name__)


def _new_token() -> str:
    return str(uuid.uuid4())


class IdentityResolver:
    """
    Produces the owner reference for the current actor.

    - Authenticated: the user id wins; any anonymous token is ignored.
    - Anonymous: the token is read from storage, or generated and persisted
      on first use.
    - Storage failures fall back to a volatile token kept on this resolver,
      so the page load (or request) still gets a consistent cart.
    """

    def __init__(
        self,
        storage: TokenStorage,
        user_id: Optional[str] = None,
        token_factory: Callable[[], str] = _new_token,
        key: str = CART_SESSION_KEY,
    ) -> None:
        self.storage = storage
        self.user_id = user_id
        self.token_factory = token_factory
        self.key = key
        self._volatile_token: Optional[str] = None

    def resolve(self) -> CartOwner:
        if self.user_id:
            return CartOwner.for_user(self.user_id)
        return CartOwner.for_session(self.session_token())

    def session_token(self) -> str:
        """Read or create the anonymous token."""
        if self._volatile_token is not None:
            return self._volatile_token

        try:
            token = self.storage.read(self.key)
        except IdentityUnavailable:
            return self._fallback()

        if token:
            return token

        token = self.token_factory()
        try:
            self.storage.write(self.key, token)
        except IdentityUnavailable:
            return self._fallback(token)

        logger.info(f"Created anonymous cart session {sanitize_id_for_logging(token)}")
        return token

    def _fallback(self, token: Optional[str] = None) -> str:
        self._volatile_token = token or self.token_factory()
        logger.warning(
            f"Token storage unavailable, using volatile session "
            f"{sanitize_id_for_logging(self._volatile_token)}"
        )
        return self._volatile_token

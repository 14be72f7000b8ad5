"""Session tokens: TTL-keyed token to user id mapping."""

from typing import Optional

from common.constants import SESSION_KEY_PREFIX
from common.logging_config import get_logger
from files_manager.auth import generate_token
from files_manager.config import SESSION_TTL_SECONDS
from files_manager.database import parse_id
from files_manager.kv_store import KeyValueStore

logger = get_logger(__name__)


class SessionStore:
    """
    Issues, resolves and revokes session tokens.

    The key-value store is the only record of which tokens are valid.
    A user may hold any number of tokens at once.
    """

    def __init__(self, kv_store: KeyValueStore, ttl_seconds: int = SESSION_TTL_SECONDS):
        self.kv_store = kv_store
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def _key(token: str) -> str:
        return f"{SESSION_KEY_PREFIX}{token}"

    async def issue(self, user_id: int, ttl_seconds: Optional[int] = None) -> str:
        token = generate_token()
        ttl = ttl_seconds if ttl_seconds is not None else self.ttl_seconds
        await self.kv_store.set(self._key(token), str(user_id), ttl)
        logger.info(f"Session issued [user_id={user_id}] ttl={ttl}s")
        return token

    async def resolve(self, token: Optional[str]) -> Optional[int]:
        """
        Look up the user id behind a token.

        Returns:
            The user id, or None when the token is absent, unknown or expired
        """
        if not token:
            return None
        value = await self.kv_store.get(self._key(token))
        if value is None:
            return None
        return parse_id(value)

    async def revoke(self, token: Optional[str]) -> None:
        if not token:
            return
        await self.kv_store.delete(self._key(token))
        logger.info("Session revoked")

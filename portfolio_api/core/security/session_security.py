"""
Session management for the admin panel.

Sessions are opaque random tokens stored in the key-value store under
``sessions:<token>`` with a 24h TTL. The store's own expiry removes them;
verification re-checks ``expiresAt`` against this service's clock as a
best-effort guard against TTL sweep latency or clock skew.
"""

import logging
import secrets
import time
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from portfolio_api.core.exceptions import StoreError
from portfolio_api.services.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

SESSION_KEY_PREFIX = "sessions:"
SESSION_TTL_SECONDS = 24 * 60 * 60
TOKEN_BYTES = 32


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds"""
    return int(time.time() * 1000)


def session_key(token: str) -> str:
    return f"{SESSION_KEY_PREFIX}{token}"


class Session(BaseModel):
    """
    Stored session record.

    Serialized with camelCase keys. Never mutated after creation.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    token: str
    user_id: str = Field(alias="userId")
    created_at: int = Field(alias="createdAt")
    expires_at: int = Field(alias="expiresAt")

    def is_expired(self, now: int) -> bool:
        return now > self.expires_at


class SessionStore:
    """
    Issues, validates and revokes admin session tokens.

    Args:
        store: Key-value store holding the session records
        clock: Returns the current time in epoch milliseconds
    """

    def __init__(self, store: KeyValueStore, clock: Callable[[], int] = now_ms):
        self._store = store
        self._clock = clock

    async def create_session(self, user_id: str) -> str:
        """
        Create a new session and return its token.

        The token is 32 random bytes, hex-encoded (64 characters).
        """
        token = secrets.token_hex(TOKEN_BYTES)
        now = self._clock()

        session = Session(
            token=token,
            user_id=user_id,
            created_at=now,
            expires_at=now + SESSION_TTL_SECONDS * 1000,
        )

        await self._store.write(
            session_key(token),
            session.model_dump(by_alias=True),
            ttl_seconds=SESSION_TTL_SECONDS,
        )

        logger.info(f"🔐 Created session {token[:8]}... for {user_id}")
        return token

    async def get_session(self, token: str) -> Optional[Session]:
        """Load the session record for token, or None if absent or unreadable"""
        if not token:
            return None

        data = await self._store.read(session_key(token))
        if data is None:
            return None

        try:
            return Session.model_validate(data)
        except PydanticValidationError:
            logger.warning(f"Malformed session record for {token[:8]}...")
            return None

    async def verify_session(self, token: str) -> bool:
        """
        Check whether token names an active session.

        A store failure on this read path counts as "no session".
        """
        if not token:
            return False

        try:
            session = await self.get_session(token)
        except StoreError as e:
            logger.error(f"Session lookup failed, treating as absent: {e.message}")
            return False

        if session is None:
            logger.debug(f"Session {token[:8]}... not found")
            return False

        if session.is_expired(self._clock()):
            logger.info(f"⏰ Session {token[:8]}... expired")
            try:
                await self._store.delete(session_key(token))
            except StoreError as e:
                logger.warning(f"Could not remove expired session: {e.message}")
            return False

        return True

    async def clear_session(self, token: str) -> None:
        """Revoke a session. No-op for an empty token."""
        if not token:
            return

        await self._store.delete(session_key(token))
        logger.debug(f"🗑️ Cleared session {token[:8]}...")

"""Redis-backed session store shared by HTTP requests and Socket.IO."""

import secrets

import redis.asyncio as redis
import structlog
from pydantic import ValidationError as PydanticValidationError

from forum.core.clock import utc_now
from forum.core.config import settings
from forum.schemas.session_schema import SessionData

logger = structlog.get_logger()

SESSION_PREFIX = "session:"


def new_session_token() -> str:
    """Opaque, unguessable session identifier."""
    return secrets.token_urlsafe(32)


class SessionStore:
    """Session persistence keyed by an opaque token.

    Both transports resolve the same token, taken from the session cookie, so
    a session written by a login request is visible to the realtime gateway
    and vice versa. Writes are last-write-wins per token.
    """

    def __init__(
        self,
        redis_client: redis.Redis,  # type: ignore[type-arg]
        ttl_seconds: int | None = None,
    ) -> None:
        self._redis = redis_client
        self._ttl = ttl_seconds or settings.session.ttl_seconds

    @staticmethod
    def _key(token: str) -> str:
        return f"{SESSION_PREFIX}{token}"

    async def get(self, token: str) -> SessionData | None:
        """Resolve a token; unknown, expired or corrupt entries are absent."""
        if not token:
            return None
        raw = await self._redis.get(self._key(token))
        if raw is None:
            return None
        try:
            return SessionData.model_validate_json(raw)
        except PydanticValidationError:
            logger.warning("Discarding unreadable session", token_prefix=token[:6])
            await self.destroy(token)
            return None

    async def set(self, token: str, session: SessionData) -> None:
        """Store a session and restart its expiry window."""
        await self._redis.set(self._key(token), session.model_dump_json(), ex=self._ttl)

    async def touch(self, token: str, session: SessionData) -> bool:
        """Update a session only while its key still exists.

        Returns False when the session was destroyed in the meantime, so a
        late write from an in-flight request cannot bring it back.
        """
        stored = await self._redis.set(
            self._key(token), session.model_dump_json(), ex=self._ttl, xx=True
        )
        return bool(stored)

    async def destroy(self, token: str) -> None:
        await self._redis.delete(self._key(token))

    async def create(self, user_id: int, username: str) -> tuple[str, SessionData]:
        """Issue a fresh logged-in session for a user."""
        token = new_session_token()
        session = SessionData(
            user_id=user_id,
            username=username,
            is_logged_in=True,
            login_time=utc_now(),
            visit_count=0,
        )
        await self.set(token, session)
        return token, session

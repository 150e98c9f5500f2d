"""Failed login tracking for per-username lockout."""

import redis.asyncio as redis

from forum.core.config import settings

LOGIN_ATTEMPTS_PREFIX = "login_attempts:"


class LoginAttemptTracker:
    """Count failed logins per username in Redis with a sliding lockout."""

    def __init__(self, redis_client: redis.Redis) -> None:  # type: ignore[type-arg]
        self._redis = redis_client
        self.max_attempts = settings.auth.max_login_attempts
        self.lockout_seconds = settings.auth.lockout_seconds

    @staticmethod
    def _key(username: str) -> str:
        return f"{LOGIN_ATTEMPTS_PREFIX}{username.lower()}"

    async def record_failure(self, username: str) -> int:
        """Record a failed login attempt, return total count."""
        key = self._key(username)
        count = await self._redis.incr(key)
        if count == 1:
            await self._redis.expire(key, self.lockout_seconds)
        return int(count)

    async def reset(self, username: str) -> None:
        """Clear failed login attempts after successful login."""
        await self._redis.delete(self._key(username))

    async def count(self, username: str) -> int:
        result = await self._redis.get(self._key(username))
        return int(result) if result else 0

    async def is_locked(self, username: str) -> bool:
        return await self.count(username) >= self.max_attempts

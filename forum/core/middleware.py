"""ASGI session middleware."""

import json
from http.cookies import CookieError, SimpleCookie

import structlog
from redis.exceptions import RedisError
from starlette.types import ASGIApp, Receive, Scope, Send

from forum.core.config import settings
from forum.core.redis import get_redis
from forum.services.session_store import SessionStore

logger = structlog.get_logger()

PUBLIC_PATHS: set[str] = {
    "/",
    "/health",
    "/docs",
    "/openapi.json",
    "/redoc",
    "/auth/register",
    "/auth/login",
}

PUBLIC_READ_PATHS: set[str] = {
    "/comments",
}


def read_cookie(header: str, name: str) -> str | None:
    """Value of cookie ``name`` from a raw ``Cookie`` header, if present."""
    if not header:
        return None
    cookies = SimpleCookie()
    try:
        cookies.load(header)
    except CookieError:
        return None
    morsel = cookies.get(name)
    return morsel.value if morsel is not None and morsel.value else None


def is_public(method: str, path: str) -> bool:
    normalized = path.rstrip("/") or "/"
    if normalized in PUBLIC_PATHS or path.startswith(("/docs", "/redoc")):
        return True
    return method in ("GET", "HEAD") and normalized in PUBLIC_READ_PATHS


class SessionMiddleware:
    """Pure ASGI middleware resolving the session cookie.

    The resolved session and its token are placed on ``scope["state"]`` and the
    visit counter is bumped for every authenticated request. Non-public paths
    are rejected with 401 when no logged-in session resolves.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "")
        if method == "OPTIONS":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        cookie_header = headers.get(b"cookie", b"").decode("latin-1")
        token = read_cookie(cookie_header, settings.session.cookie_name)

        session = None
        if token:
            store = SessionStore(get_redis())
            try:
                session = await store.get(token)
                if session is not None and session.is_logged_in:
                    session = session.visited()
                    if not await store.touch(token, session):
                        session = None
            except RedisError:
                logger.exception("Session store unavailable", path=scope["path"])
                await self._send_error(send, 503, "Session store unavailable")
                return

        if session is not None and not session.is_logged_in:
            session = None

        scope.setdefault("state", {})
        scope["state"]["session"] = session
        scope["state"]["session_token"] = token if session is not None else None

        if session is None and not is_public(method, scope["path"]):
            await self._send_error(send, 401, "Authentication required")
            return

        await self.app(scope, receive, send)

    @staticmethod
    async def _send_error(send: Send, status: int, message: str) -> None:
        """Send a JSON error response directly."""
        body = json.dumps({"success": False, "error": message}).encode()

        await send(
            {
                "type": "http.response.start",
                "status": status,
                "headers": [
                    [b"content-type", b"application/json"],
                    [b"content-length", str(len(body)).encode()],
                ],
            }
        )
        await send({"type": "http.response.body", "body": body})

"""Socket.IO chat gateway.

Connections authenticate with the same session token as HTTP requests (the
session cookie, or ``auth={"token": ...}`` for clients that cannot send
cookies) and are resolved through the shared Redis session store.

Events:

- ``connected``: sent once after a successful handshake.
- ``getUserInfo`` -> ``userInfo``: identity bound to the connection.
- ``sendMessage`` -> ``message``: broadcast to every bound connection.
- ``error``: sent before a refused handshake and for rejected messages.

The identity is captured once at connect time and never re-read, so a member
renamed mid-connection keeps the old name on that connection until they
reconnect.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, NoReturn

import socketio
import structlog
from redis.exceptions import RedisError
from socketio import exceptions as sio_exceptions
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from forum.core.clock import to_iso8601, utc_now
from forum.core.middleware import read_cookie
from forum.repositories.chat_repo import ChatRepository
from forum.repositories.user_repo import UserRepository
from forum.services.chat_service import ChatService
from forum.services.session_store import SessionStore

logger = structlog.get_logger()

CHAT_ROOM = "town_square"

LOGIN_REQUIRED_MESSAGE = "Please log in to use the chat"
EMPTY_MESSAGE_ERROR = "Message text is required"
LONG_MESSAGE_ERROR = "Message is too long"


@dataclass(frozen=True)
class ConnectionIdentity:
    """Who a connection speaks for, fixed for the connection's lifetime."""

    user_id: int
    username: str
    display_name: str
    name_color: str | None
    login_time: str


def extract_session_token(
    environ: dict[str, Any], auth: Any | None, cookie_name: str
) -> str | None:
    """Session token from the handshake cookie, falling back to ``auth.token``."""
    token = read_cookie(environ.get("HTTP_COOKIE", ""), cookie_name)
    if token:
        return token

    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    return None


class ChatGateway:
    """Binds authenticated Socket.IO connections and fans out chat messages."""

    def __init__(
        self,
        sio: socketio.AsyncServer,
        session_store_provider: Callable[[], SessionStore],
        db_session_factory: async_sessionmaker[AsyncSession],
        *,
        cookie_name: str,
        max_message_length: int,
        persist_messages: bool = True,
    ) -> None:
        self._sio = sio
        self._session_store_provider = session_store_provider
        self._db_session_factory = db_session_factory
        self._cookie_name = cookie_name
        self._max_message_length = max_message_length
        self._persist_messages = persist_messages
        self._bindings: dict[str, ConnectionIdentity] = {}

    def register(self) -> None:
        """Attach the event handlers to the Socket.IO server."""
        self._sio.on("connect", self.on_connect)
        self._sio.on("disconnect", self.on_disconnect)
        self._sio.on("getUserInfo", self.on_get_user_info)
        self._sio.on("sendMessage", self.on_send_message)

    def identity_for(self, sid: str) -> ConnectionIdentity | None:
        return self._bindings.get(sid)

    @property
    def connection_count(self) -> int:
        return len(self._bindings)

    async def _resolve_identity(self, token: str) -> ConnectionIdentity | None:
        session = await self._session_store_provider().get(token)
        if session is None or not session.is_logged_in:
            return None

        async with self._db_session_factory() as db:
            user = await UserRepository(db).find_by_id(session.user_id)
        if user is None:
            return None

        return ConnectionIdentity(
            user_id=session.user_id,
            username=session.username,
            display_name=user.display_name,
            name_color=user.name_color,
            login_time=to_iso8601(session.login_time),
        )

    async def _refuse(self, sid: str, reason: str) -> NoReturn:
        await self._sio.emit("error", {"message": LOGIN_REQUIRED_MESSAGE}, to=sid)
        logger.info("Realtime connection refused", sid=sid, reason=reason)
        raise sio_exceptions.ConnectionRefusedError(LOGIN_REQUIRED_MESSAGE)

    async def on_connect(
        self, sid: str, environ: dict[str, Any], auth: Any | None = None
    ) -> None:
        token = extract_session_token(environ, auth, self._cookie_name)
        if not token:
            await self._refuse(sid, "missing_token")

        try:
            identity = await self._resolve_identity(token)  # type: ignore[arg-type]
        except (RedisError, SQLAlchemyError):
            logger.exception("Session resolution failed", sid=sid)
            await self._refuse(sid, "store_error")

        if identity is None:
            await self._refuse(sid, "invalid_session")

        self._bindings[sid] = identity
        await self._sio.enter_room(sid, CHAT_ROOM)
        logger.info(
            "User connected via Socket.IO",
            sid=sid,
            username=identity.username,
            user_id=identity.user_id,
        )

        await self._sio.emit(
            "connected",
            {
                "message": f"Welcome {identity.username}!",
                "userId": identity.user_id,
                "loginTime": identity.login_time,
            },
            to=sid,
        )

    async def on_get_user_info(self, sid: str, *_: Any) -> None:
        identity = self._bindings.get(sid)
        if identity is None:
            return
        await self._sio.emit(
            "userInfo",
            {
                "username": identity.username,
                "userId": identity.user_id,
                "displayName": identity.display_name,
                "loginTime": identity.login_time,
            },
            to=sid,
        )

    async def on_send_message(self, sid: str, data: Any = None) -> None:
        identity = self._bindings.get(sid)
        if identity is None:
            return

        text = data.get("message") if isinstance(data, dict) else None
        if not isinstance(text, str) or not text.strip():
            await self._sio.emit("error", {"message": EMPTY_MESSAGE_ERROR}, to=sid)
            return
        if len(text) > self._max_message_length:
            await self._sio.emit("error", {"message": LONG_MESSAGE_ERROR}, to=sid)
            return

        sent_at = utc_now()
        if self._persist_messages:
            await self._persist(identity, text, sent_at)

        await self._sio.emit(
            "message",
            {
                "username": identity.username,
                "userId": identity.user_id,
                "displayName": identity.display_name,
                "nameColor": identity.name_color,
                "message": text,
                "timestamp": to_iso8601(sent_at),
            },
            room=CHAT_ROOM,
        )

    async def _persist(
        self, identity: ConnectionIdentity, text: str, sent_at: datetime
    ) -> None:
        """Best-effort write to chat history; broadcast proceeds on failure."""
        try:
            async with self._db_session_factory() as db:
                await ChatService(ChatRepository(db)).record_message(
                    user_id=identity.user_id, message=text, created_at=sent_at
                )
                await db.commit()
        except SQLAlchemyError:
            logger.exception(
                "Failed to persist chat message", user_id=identity.user_id
            )

    async def on_disconnect(self, sid: str, reason: Any = None) -> None:
        identity = self._bindings.pop(sid, None)
        logger.info(
            "User disconnected",
            sid=sid,
            username=identity.username if identity else None,
            reason=reason,
        )

"""Socket.IO server for the chat room.

``always_connect`` makes the server accept the transport before running the
connect handler, so the ``error`` event of a refused handshake reaches the
client ahead of the disconnect.
"""

import socketio

from forum.core.config import settings
from forum.core.database import async_session_factory
from forum.core.redis import get_redis
from forum.realtime.gateway import ChatGateway
from forum.services.session_store import SessionStore

sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=settings.app.cors_origins,
    always_connect=True,
    logger=False,
    engineio_logger=False,
)

gateway = ChatGateway(
    sio,
    session_store_provider=lambda: SessionStore(get_redis()),
    db_session_factory=async_session_factory,
    cookie_name=settings.session.cookie_name,
    max_message_length=settings.chat.max_message_length,
    persist_messages=settings.chat.persist_realtime_messages,
)
gateway.register()

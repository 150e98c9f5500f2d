"""Pytest configuration and fixtures."""

import os

# Must be set before forum.core.config builds the settings singleton.
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncGenerator  # noqa: E402
from http.cookies import SimpleCookie  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402

import fakeredis.aioredis  # noqa: E402
import pytest  # noqa: E402
import socketio  # noqa: E402
from httpx import ASGITransport, AsyncClient, Response  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from forum.core.config import settings  # noqa: E402
from forum.core.database import Base  # noqa: E402
from forum.core.security import hash_password  # noqa: E402
from forum.models.chat_message import ChatMessage  # noqa: E402, F401
from forum.models.comment import Comment  # noqa: E402, F401
from forum.models.user import User  # noqa: E402
from forum.realtime.gateway import ChatGateway  # noqa: E402
from forum.services.session_store import SessionStore  # noqa: E402

DEFAULT_PASSWORD = "Holliday123!"

# --- Test DB (SQLite in-memory) ---

test_engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
test_session_factory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


@pytest.fixture(autouse=True)
async def setup_db() -> AsyncGenerator[None, None]:
    """Create all tables before each test, drop after."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a test database session."""
    async with test_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a test database session for unit tests."""
    async with test_session_factory() as session:
        yield session


# --- Test Redis (fakeredis) ---


@pytest.fixture
def fake_redis() -> fakeredis.aioredis.FakeRedis:
    """Create a fresh fake Redis client."""
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


@pytest.fixture(autouse=True)
def patch_redis(
    fake_redis: fakeredis.aioredis.FakeRedis, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Patch the global redis_client used by the middleware and get_redis()."""
    monkeypatch.setattr("forum.core.redis.redis_client", fake_redis)


@pytest.fixture
def session_store(fake_redis: fakeredis.aioredis.FakeRedis) -> SessionStore:
    """SessionStore over the same fake Redis the app sees."""
    return SessionStore(fake_redis)


# --- Data helpers ---


async def seed_user(
    username: str = "Doc",
    password: str = DEFAULT_PASSWORD,
    display_name: str | None = None,
    email: str | None = None,
    session: AsyncSession | None = None,
) -> User:
    """Insert a member with a real bcrypt hash and return it.

    With ``session`` the row is only flushed into that session's transaction;
    otherwise it is committed on its own.
    """
    user = User(
        username=username,
        display_name=display_name or username,
        email=email or f"{username.lower()}@example.com",
        password_hash=await hash_password(password),
    )
    if session is not None:
        session.add(user)
        await session.flush()
        return user

    async with test_session_factory() as own_session:
        own_session.add(user)
        await own_session.commit()
    return user


def session_cookie(token: str) -> dict[str, str]:
    """Cookie header carrying a session token."""
    return {"Cookie": f"{settings.session.cookie_name}={token}"}


@pytest.fixture
async def doc_user() -> User:
    return await seed_user()


# --- App override & client fixtures ---


def _get_app():  # type: ignore[no-untyped-def]
    """Import app lazily and apply overrides."""
    from forum.core.database import get_async_session as original_dep
    from forum.main import app

    app.dependency_overrides[original_dep] = override_get_async_session
    return app


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client without a session."""
    application = _get_app()
    transport = ASGITransport(app=application)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def session_token(doc_user: User, session_store: SessionStore) -> str:
    """A logged-in session for ``doc_user``."""
    token, _ = await session_store.create(doc_user.id, doc_user.username)
    return token


@pytest.fixture
async def authed_client(session_token: str) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client carrying doc_user's session cookie."""
    application = _get_app()
    transport = ASGITransport(app=application)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers=session_cookie(session_token),
    ) as ac:
        yield ac


# --- Realtime ---


@pytest.fixture
def mock_sio() -> MagicMock:
    """Socket.IO server double recording emits and room joins."""
    return MagicMock(spec=socketio.AsyncServer)


@pytest.fixture
def gateway(mock_sio: MagicMock, session_store: SessionStore) -> ChatGateway:
    """ChatGateway wired to the test database and fake Redis."""
    return ChatGateway(
        mock_sio,
        session_store_provider=lambda: session_store,
        db_session_factory=test_session_factory,
        cookie_name=settings.session.cookie_name,
        max_message_length=settings.chat.max_message_length,
        persist_messages=True,
    )


def handshake_environ(token: str | None) -> dict[str, str]:
    """Minimal engine.io environ for a handshake carrying the session cookie."""
    environ = {"REQUEST_METHOD": "GET", "QUERY_STRING": "EIO=4&transport=websocket"}
    if token:
        environ["HTTP_COOKIE"] = f"{settings.session.cookie_name}={token}"
    return environ


def token_from_response(response: Response) -> str | None:
    """Session token from a response's ``Set-Cookie`` header."""
    cookies = SimpleCookie()
    for header in response.headers.get_list("set-cookie"):
        cookies.load(header)
    morsel = cookies.get(settings.session.cookie_name)
    return morsel.value if morsel is not None and morsel.value else None

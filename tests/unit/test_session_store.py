"""Tests for the Redis-backed session store."""

from datetime import UTC, datetime

import fakeredis.aioredis

from forum.schemas.session_schema import SessionData
from forum.services.session_store import SESSION_PREFIX, SessionStore


def _session(**overrides: object) -> SessionData:
    data: dict[str, object] = {
        "user_id": 1,
        "username": "Doc",
        "is_logged_in": True,
        "login_time": datetime(2026, 3, 1, 12, 0, tzinfo=UTC),
        "visit_count": 0,
    }
    data.update(overrides)
    return SessionData(**data)  # type: ignore[arg-type]


class TestSessionStore:
    async def test_unknown_token_is_absent(self, session_store: SessionStore) -> None:
        assert await session_store.get("nope") is None

    async def test_empty_token_is_absent(self, session_store: SessionStore) -> None:
        assert await session_store.get("") is None

    async def test_set_then_get(self, session_store: SessionStore) -> None:
        await session_store.set("tok", _session(visit_count=3))
        loaded = await session_store.get("tok")
        assert loaded == _session(visit_count=3)

    async def test_last_write_wins(self, session_store: SessionStore) -> None:
        await session_store.set("tok", _session(visit_count=1))
        await session_store.set("tok", _session(visit_count=2))
        loaded = await session_store.get("tok")
        assert loaded is not None
        assert loaded.visit_count == 2

    async def test_destroy(self, session_store: SessionStore) -> None:
        await session_store.set("tok", _session())
        await session_store.destroy("tok")
        assert await session_store.get("tok") is None

    async def test_touch_updates_live_session(
        self, session_store: SessionStore
    ) -> None:
        await session_store.set("tok", _session(visit_count=1))

        assert await session_store.touch("tok", _session(visit_count=2)) is True

        loaded = await session_store.get("tok")
        assert loaded is not None
        assert loaded.visit_count == 2

    async def test_touch_does_not_revive_destroyed_session(
        self, session_store: SessionStore
    ) -> None:
        await session_store.set("tok", _session())
        seen = await session_store.get("tok")
        assert seen is not None
        await session_store.destroy("tok")

        assert await session_store.touch("tok", seen.visited()) is False
        assert await session_store.get("tok") is None

    async def test_destroy_unknown_is_noop(self, session_store: SessionStore) -> None:
        await session_store.destroy("never-existed")

    async def test_create_issues_distinct_tokens(
        self, session_store: SessionStore
    ) -> None:
        token_a, session_a = await session_store.create(1, "Doc")
        token_b, _ = await session_store.create(1, "Doc")
        assert token_a != token_b
        assert len(token_a) >= 32
        assert session_a.is_logged_in is True
        assert session_a.visit_count == 0
        assert await session_store.get(token_a) == session_a

    async def test_entries_expire(
        self, fake_redis: fakeredis.aioredis.FakeRedis
    ) -> None:
        store = SessionStore(fake_redis, ttl_seconds=120)
        await store.set("tok", _session())
        ttl = await fake_redis.ttl(f"{SESSION_PREFIX}tok")
        assert 0 < ttl <= 120

    async def test_corrupt_entry_is_discarded(
        self,
        session_store: SessionStore,
        fake_redis: fakeredis.aioredis.FakeRedis,
    ) -> None:
        await fake_redis.set(f"{SESSION_PREFIX}tok", "{not json")
        assert await session_store.get("tok") is None
        assert await fake_redis.exists(f"{SESSION_PREFIX}tok") == 0


class TestSessionData:
    def test_visited_increments_copy(self) -> None:
        session = _session(visit_count=4)
        bumped = session.visited()
        assert bumped.visit_count == 5
        assert session.visit_count == 4
        assert bumped.login_time == session.login_time

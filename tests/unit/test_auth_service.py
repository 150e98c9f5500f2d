"""Tests for AuthService."""

import fakeredis.aioredis
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from forum.core.exceptions import (
    AccountLockedError,
    ConflictError,
    InvalidCredentialsError,
    ValidationError,
)
from forum.core.security import verify_password
from forum.repositories.user_repo import UserRepository
from forum.schemas.auth_schema import (
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
)
from forum.services.auth_service import AuthService
from forum.services.login_attempts import LoginAttemptTracker
from forum.services.session_store import SessionStore

PASSWORD = "Holliday123!"


@pytest.fixture
def auth_service(
    db_session: AsyncSession,
    fake_redis: fakeredis.aioredis.FakeRedis,
    session_store: SessionStore,
) -> AuthService:
    return AuthService(
        user_repo=UserRepository(db_session),
        session_store=session_store,
        login_attempts=LoginAttemptTracker(fake_redis),
        session=db_session,
    )


def _register_request(
    username: str = "Doc",
    display_name: str = "Doc Holliday",
    email: str = "doc@example.com",
    password: str = PASSWORD,
    confirm_password: str | None = None,
) -> RegisterRequest:
    return RegisterRequest(
        username=username,
        display_name=display_name,
        email=email,
        password=password,
        confirm_password=confirm_password or password,
    )


class TestRegister:
    async def test_register_success(self, auth_service: AuthService) -> None:
        user = await auth_service.register(_register_request())
        assert user.id is not None
        assert user.username == "Doc"
        assert user.display_name == "Doc Holliday"
        assert user.password_hash != PASSWORD
        assert await verify_password(PASSWORD, user.password_hash) is True

    async def test_password_mismatch(self, auth_service: AuthService) -> None:
        with pytest.raises(ValidationError, match="Passwords do not match."):
            await auth_service.register(
                _register_request(confirm_password="Different123!")
            )

    async def test_duplicate_username(self, auth_service: AuthService) -> None:
        await auth_service.register(_register_request())
        with pytest.raises(ConflictError, match="Username already taken."):
            await auth_service.register(
                _register_request(display_name="Other", email="other@example.com")
            )

    async def test_duplicate_display_name_keeps_first_account(
        self, auth_service: AuthService, db_session: AsyncSession
    ) -> None:
        first = await auth_service.register(_register_request())
        with pytest.raises(ConflictError, match="Display name already in use."):
            await auth_service.register(
                _register_request(username="Wyatt", email="wyatt@example.com")
            )

        repo = UserRepository(db_session)
        assert await repo.exists_by_username("Wyatt") is False
        kept = await repo.find_by_id(first.id)
        assert kept is not None
        assert kept.display_name == "Doc Holliday"

    async def test_duplicate_email(self, auth_service: AuthService) -> None:
        await auth_service.register(_register_request())
        with pytest.raises(ConflictError, match="Email already in use."):
            await auth_service.register(
                _register_request(username="Wyatt", display_name="Wyatt Earp")
            )


class TestLogin:
    async def test_login_creates_session(
        self, auth_service: AuthService, session_store: SessionStore
    ) -> None:
        await auth_service.register(_register_request())

        token, session, user = await auth_service.login(
            LoginRequest(username="Doc", password=PASSWORD)
        )

        assert session.user_id == user.id
        assert session.username == "Doc"
        assert session.is_logged_in is True
        assert session.visit_count == 0
        assert await session_store.get(token) == session

    async def test_wrong_password(self, auth_service: AuthService) -> None:
        await auth_service.register(_register_request())
        with pytest.raises(InvalidCredentialsError):
            await auth_service.login(LoginRequest(username="Doc", password="Wrong1!"))

    async def test_unknown_user(self, auth_service: AuthService) -> None:
        with pytest.raises(InvalidCredentialsError):
            await auth_service.login(LoginRequest(username="Ghost", password=PASSWORD))

    async def test_lockout_after_repeated_failures(
        self, auth_service: AuthService
    ) -> None:
        await auth_service.register(_register_request())
        for _ in range(5):
            with pytest.raises(InvalidCredentialsError):
                await auth_service.login(
                    LoginRequest(username="Doc", password="Wrong1!")
                )

        with pytest.raises(AccountLockedError):
            await auth_service.login(LoginRequest(username="Doc", password=PASSWORD))

    async def test_success_resets_failures(
        self, auth_service: AuthService, fake_redis: fakeredis.aioredis.FakeRedis
    ) -> None:
        await auth_service.register(_register_request())
        with pytest.raises(InvalidCredentialsError):
            await auth_service.login(LoginRequest(username="Doc", password="Wrong1!"))

        await auth_service.login(LoginRequest(username="Doc", password=PASSWORD))

        assert await LoginAttemptTracker(fake_redis).count("Doc") == 0


class TestLogout:
    async def test_logout_destroys_session(
        self, auth_service: AuthService, session_store: SessionStore
    ) -> None:
        await auth_service.register(_register_request())
        token, session, _ = await auth_service.login(
            LoginRequest(username="Doc", password=PASSWORD)
        )

        await auth_service.logout(token, session)

        assert await session_store.get(token) is None


class TestChangePassword:
    async def test_change_password_ends_session(
        self, auth_service: AuthService, session_store: SessionStore
    ) -> None:
        await auth_service.register(_register_request())
        token, session, user = await auth_service.login(
            LoginRequest(username="Doc", password=PASSWORD)
        )

        await auth_service.change_password(
            user.id,
            token,
            ChangePasswordRequest(
                current_password=PASSWORD,
                new_password="Tombstone881!",
                confirm_password="Tombstone881!",
            ),
        )

        assert await session_store.get(token) is None
        with pytest.raises(InvalidCredentialsError):
            await auth_service.login(LoginRequest(username="Doc", password=PASSWORD))
        await auth_service.login(
            LoginRequest(username="Doc", password="Tombstone881!")
        )

    async def test_wrong_current_password(
        self, auth_service: AuthService, session_store: SessionStore
    ) -> None:
        await auth_service.register(_register_request())
        token, _, user = await auth_service.login(
            LoginRequest(username="Doc", password=PASSWORD)
        )

        with pytest.raises(ValidationError, match="Current password is invalid."):
            await auth_service.change_password(
                user.id,
                token,
                ChangePasswordRequest(
                    current_password="Wrong123!",
                    new_password="Tombstone881!",
                    confirm_password="Tombstone881!",
                ),
            )
        assert await session_store.get(token) is not None

    async def test_confirmation_mismatch(self, auth_service: AuthService) -> None:
        user = await auth_service.register(_register_request())
        with pytest.raises(ValidationError, match="Passwords do not match."):
            await auth_service.change_password(
                user.id,
                "token",
                ChangePasswordRequest(
                    current_password=PASSWORD,
                    new_password="Tombstone881!",
                    confirm_password="Tombstone882!",
                ),
            )

"""Authentication business logic."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from forum.core.exceptions import (
    AccountLockedError,
    ConflictError,
    InvalidCredentialsError,
    UserNotFoundError,
    ValidationError,
)
from forum.core.security import DUMMY_HASH, hash_password, verify_password
from forum.models.user import User
from forum.repositories.user_repo import UserRepository
from forum.schemas.auth_schema import (
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
)
from forum.schemas.session_schema import SessionData
from forum.services.login_attempts import LoginAttemptTracker
from forum.services.session_store import SessionStore

logger = structlog.get_logger()


class AuthService:
    """Orchestrates registration, login, logout, and password changes.

    A session moves Anonymous -> Authenticated on login and back to Anonymous
    on logout or password change.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        session_store: SessionStore,
        login_attempts: LoginAttemptTracker,
        session: AsyncSession,
    ) -> None:
        self._user_repo = user_repo
        self._session_store = session_store
        self._login_attempts = login_attempts
        self._session = session

    async def register(self, request: RegisterRequest) -> User:
        """Create a member account."""
        if request.password != request.confirm_password:
            raise ValidationError("Passwords do not match.")

        if await self._user_repo.exists_by_username(request.username):
            raise ConflictError("Username already taken.")
        if await self._user_repo.exists_by_display_name(request.display_name):
            raise ConflictError("Display name already in use.")
        if await self._user_repo.exists_by_email(request.email):
            raise ConflictError("Email already in use.")

        hashed = await hash_password(request.password)
        # Unique constraints still guard against a concurrent registration.
        user = await self._user_repo.create(
            username=request.username,
            display_name=request.display_name,
            email=request.email,
            password_hash=hashed,
        )
        await self._session.commit()

        logger.info("User registered", username=user.username, user_id=user.id)
        return user

    async def login(self, request: LoginRequest) -> tuple[str, SessionData, User]:
        """Verify credentials and open a session.

        Returns the new session token, the stored session and the user.
        """
        if await self._login_attempts.is_locked(request.username):
            raise AccountLockedError

        user = await self._user_repo.find_by_username(request.username)

        if user is None:
            await verify_password(request.password, DUMMY_HASH)
            await self._login_attempts.record_failure(request.username)
            raise InvalidCredentialsError

        if not await verify_password(request.password, user.password_hash):
            await self._login_attempts.record_failure(request.username)
            raise InvalidCredentialsError

        await self._login_attempts.reset(request.username)
        token, session = await self._session_store.create(user.id, user.username)
        logger.info("User logged in", username=user.username, user_id=user.id)
        return token, session, user

    async def logout(self, token: str, session: SessionData | None = None) -> None:
        """Destroy the session behind ``token``."""
        await self._session_store.destroy(token)
        logger.info(
            "User logged out",
            user_id=session.user_id if session else None,
        )

    async def change_password(
        self, user_id: int, token: str, request: ChangePasswordRequest
    ) -> None:
        """Replace the password hash and end the acting session.

        The caller must log in again with the new password.
        """
        if request.new_password != request.confirm_password:
            raise ValidationError("Passwords do not match.")

        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError

        if not await verify_password(request.current_password, user.password_hash):
            raise ValidationError("Current password is invalid.")

        new_hash = await hash_password(request.new_password)
        await self._user_repo.update_password_hash(user, new_hash)
        await self._session.commit()

        await self._session_store.destroy(token)
        logger.info("Password changed, session ended", user_id=user_id)

"""User repository for database operations."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from forum.core.exceptions import ConflictError
from forum.models.user import User


class UserRepository:
    """Encapsulates user-related database queries.

    Uniqueness of username, display name and email is enforced by the schema.
    Writes that violate it raise ``ConflictError`` after rolling back, so a
    concurrent check-then-write can never produce a duplicate.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, user_id: int) -> User | None:
        """Find a user by primary key."""
        result = await self._session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def find_by_username(self, username: str) -> User | None:
        result = await self._session.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    async def exists_by_username(self, username: str) -> bool:
        result = await self._session.execute(
            select(User.id).where(User.username == username)
        )
        return result.scalar_one_or_none() is not None

    async def exists_by_display_name(
        self, display_name: str, exclude_id: int | None = None
    ) -> bool:
        """Check if another user already uses this display name."""
        stmt = select(User.id).where(User.display_name == display_name)
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def exists_by_email(self, email: str, exclude_id: int | None = None) -> bool:
        """Check if another user already uses this email address."""
        stmt = select(User.id).where(User.email == email)
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def create(
        self,
        username: str,
        display_name: str,
        email: str,
        password_hash: str,
    ) -> User:
        """Create a new user record."""
        user = User(
            username=username,
            display_name=display_name,
            email=email,
            password_hash=password_hash,
        )
        self._session.add(user)
        await self._flush_unique()
        return user

    async def update_password_hash(self, user: User, password_hash: str) -> None:
        user.password_hash = password_hash
        await self._session.flush()

    async def update_email(self, user: User, email: str) -> None:
        user.email = email
        await self._flush_unique("Email already in use.")

    async def update_display_name(self, user: User, display_name: str) -> None:
        user.display_name = display_name
        await self._flush_unique("Display name already in use.")

    async def update_customization(
        self, user: User, name_color: str | None, bio: str | None
    ) -> None:
        user.name_color = name_color
        user.bio = bio
        await self._session.flush()

    async def _flush_unique(self, message: str | None = None) -> None:
        try:
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            raise (ConflictError(message) if message else ConflictError()) from exc

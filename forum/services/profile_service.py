"""Profile viewing and account updates."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from forum.core.exceptions import ConflictError, UserNotFoundError, ValidationError
from forum.core.security import verify_password
from forum.models.user import User
from forum.repositories.comment_repo import CommentRepository, CommentRow
from forum.repositories.user_repo import UserRepository
from forum.schemas.profile_schema import (
    ChangeDisplayNameRequest,
    ChangeEmailRequest,
    CustomizationRequest,
)

logger = structlog.get_logger()

RECENT_COMMENTS_LIMIT = 10


class ProfileService:
    """Account settings of the authenticated member."""

    def __init__(
        self,
        user_repo: UserRepository,
        comment_repo: CommentRepository,
        session: AsyncSession,
        user_id: int,
    ) -> None:
        self._user_repo = user_repo
        self._comment_repo = comment_repo
        self._session = session
        self._user_id = user_id

    async def _load_user(self) -> User:
        user = await self._user_repo.find_by_id(self._user_id)
        if user is None:
            raise UserNotFoundError
        return user

    async def get_profile(self) -> tuple[User, list[CommentRow]]:
        """The member's record and their latest comments, newest first."""
        user = await self._load_user()
        comments = await self._comment_repo.find_recent_by_user(
            self._user_id, limit=RECENT_COMMENTS_LIMIT
        )
        return user, comments

    async def change_email(self, request: ChangeEmailRequest) -> User:
        if request.new_email != request.confirm_email:
            raise ValidationError("New email does not match.")

        if await self._user_repo.exists_by_email(
            request.new_email, exclude_id=self._user_id
        ):
            raise ConflictError("Email already in use.")

        user = await self._load_user()
        if not await verify_password(request.current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")

        await self._user_repo.update_email(user, request.new_email)
        await self._session.commit()
        logger.info("Email updated", user_id=self._user_id)
        return user

    async def change_display_name(self, request: ChangeDisplayNameRequest) -> User:
        display_name = request.display_name.strip()
        if not display_name:
            raise ValidationError("Display name is required")

        if await self._user_repo.exists_by_display_name(
            display_name, exclude_id=self._user_id
        ):
            raise ConflictError("Display name already in use.")

        user = await self._load_user()
        await self._user_repo.update_display_name(user, display_name)
        await self._session.commit()
        logger.info(
            "Display name updated", user_id=self._user_id, display_name=display_name
        )
        return user

    async def update_customization(self, request: CustomizationRequest) -> User:
        user = await self._load_user()
        await self._user_repo.update_customization(
            user, name_color=request.name_color, bio=request.bio
        )
        await self._session.commit()
        return user

"""Forum comment listing and posting."""

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from forum.core.config import settings
from forum.core.exceptions import StoreError
from forum.repositories.comment_repo import CommentRepository, CommentRow
from forum.services.chat_service import parse_before, parse_limit

logger = structlog.get_logger()


class CommentService:
    """Comments follow the chat history paging rules."""

    def __init__(self, comment_repo: CommentRepository, session: AsyncSession) -> None:
        self._comment_repo = comment_repo
        self._session = session

    async def list_comments(
        self,
        limit: str | int | None = None,
        before: str | None = None,
    ) -> list[CommentRow]:
        page_size = parse_limit(
            limit,
            default=settings.chat.history_default_limit,
            maximum=settings.chat.history_max_limit,
        )
        cutoff = parse_before(before)
        try:
            return await self._comment_repo.find_page(limit=page_size, before=cutoff)
        except SQLAlchemyError as exc:
            logger.exception("Error fetching comments", limit=page_size)
            raise StoreError("Failed to load comments") from exc

    async def post_comment(self, user_id: int, author: str, text: str) -> CommentRow:
        """Append a comment and return it as it will be listed."""
        try:
            comment = await self._comment_repo.create(user_id=user_id, text=text)
            await self._session.commit()
        except SQLAlchemyError as exc:
            logger.exception("Error saving comment", user_id=user_id)
            raise StoreError("Failed to post comment") from exc

        logger.info("Comment posted", user_id=user_id, comment_id=comment.id)
        return CommentRow(
            id=comment.id,
            user_id=user_id,
            author=author,
            text=comment.text,
            created_at=comment.created_at,
        )

"""Comment repository."""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from forum.models.comment import Comment
from forum.models.user import User


@dataclass(frozen=True)
class CommentRow:
    """Comment joined with its author's display name."""

    id: int
    user_id: int
    author: str
    text: str
    created_at: datetime


class CommentRepository:
    """Encapsulates comment database queries."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _select_rows(self):  # type: ignore[no-untyped-def]
        return select(
            Comment.id,
            Comment.user_id,
            User.display_name.label("author"),
            Comment.text,
            Comment.created_at,
        ).join(User, Comment.user_id == User.id)

    @staticmethod
    def _to_rows(result) -> list[CommentRow]:  # type: ignore[no-untyped-def]
        return [
            CommentRow(
                id=row.id,
                user_id=row.user_id,
                author=row.author,
                text=row.text,
                created_at=row.created_at,
            )
            for row in result
        ]

    async def create(self, user_id: int, text: str) -> Comment:
        comment = Comment(user_id=user_id, text=text)
        self._session.add(comment)
        await self._session.flush()
        return comment

    async def find_page(
        self, limit: int, before: datetime | None = None
    ) -> list[CommentRow]:
        """Newest ``limit`` comments older than ``before``, oldest first."""
        stmt = self._select_rows()
        if before is not None:
            stmt = stmt.where(Comment.created_at < before)
        stmt = stmt.order_by(Comment.created_at.desc(), Comment.id.desc()).limit(limit)
        result = await self._session.execute(stmt)
        rows = self._to_rows(result)
        rows.reverse()
        return rows

    async def find_recent_by_user(self, user_id: int, limit: int = 10) -> list[CommentRow]:
        """Most recent comments of one user, newest first."""
        stmt = (
            self._select_rows()
            .where(Comment.user_id == user_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return self._to_rows(result)

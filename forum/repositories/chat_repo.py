"""Chat message repository: append and paginated history."""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from forum.models.chat_message import ChatMessage
from forum.models.user import User


@dataclass(frozen=True)
class ChatHistoryRow:
    """Chat message joined with its author's display fields."""

    id: int
    user_id: int
    message: str
    created_at: datetime
    username: str
    display_name: str
    name_color: str | None


class ChatRepository:
    """Encapsulates chat message database queries."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_message(
        self,
        user_id: int,
        message: str,
        created_at: datetime | None = None,
    ) -> ChatMessage:
        """Append a single chat message."""
        chat_message = ChatMessage(user_id=user_id, message=message)
        if created_at is not None:
            chat_message.created_at = created_at
        self._session.add(chat_message)
        await self._session.flush()
        return chat_message

    async def find_history(
        self,
        limit: int,
        before: datetime | None = None,
    ) -> list[ChatHistoryRow]:
        """Fetch the newest ``limit`` messages older than ``before``.

        Rows are selected newest-first (created_at DESC, id DESC) so the limit
        keeps the most recent page, then reversed into chronological order.
        """
        stmt = select(
            ChatMessage.id,
            ChatMessage.user_id,
            ChatMessage.message,
            ChatMessage.created_at,
            User.username,
            User.display_name,
            User.name_color,
        ).join(User, ChatMessage.user_id == User.id)

        if before is not None:
            stmt = stmt.where(ChatMessage.created_at < before)

        stmt = stmt.order_by(
            ChatMessage.created_at.desc(),
            ChatMessage.id.desc(),
        ).limit(limit)

        result = await self._session.execute(stmt)
        rows = [
            ChatHistoryRow(
                id=row.id,
                user_id=row.user_id,
                message=row.message,
                created_at=row.created_at,
                username=row.username,
                display_name=row.display_name,
                name_color=row.name_color,
            )
            for row in result
        ]
        rows.reverse()
        return rows

"""Chat history paging and message recording."""

from datetime import datetime

import structlog
from sqlalchemy.exc import SQLAlchemyError

from forum.core.clock import as_utc, parse_iso8601
from forum.core.config import settings
from forum.core.exceptions import StoreError, ValidationError
from forum.models.chat_message import ChatMessage
from forum.repositories.chat_repo import ChatHistoryRow, ChatRepository

logger = structlog.get_logger()


def parse_limit(
    raw: str | int | None, default: int, maximum: int | None = None
) -> int:
    """Page size from a query value.

    Absent, non-numeric and non-positive values fall back to ``default``.
    Values above ``maximum`` are clamped only when a maximum is given.
    """
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    if value <= 0:
        return default
    if maximum is not None:
        return min(value, maximum)
    return value


def parse_before(raw: str | None) -> datetime | None:
    """Exclusive upper bound for a history page; ``None`` means newest page."""
    if raw is None or not raw.strip():
        return None
    try:
        return parse_iso8601(raw)
    except ValueError as exc:
        raise ValidationError("Invalid 'before' timestamp") from exc


class ChatService:
    """Reads and appends chat room messages."""

    def __init__(self, chat_repo: ChatRepository) -> None:
        self._chat_repo = chat_repo

    async def history(
        self,
        limit: str | int | None = None,
        before: str | None = None,
    ) -> list[ChatHistoryRow]:
        """Most recent page of messages, in ascending chronological order."""
        page_size = parse_limit(
            limit,
            default=settings.chat.history_default_limit,
            maximum=settings.chat.history_max_limit,
        )
        cutoff = parse_before(before)
        try:
            return await self._chat_repo.find_history(limit=page_size, before=cutoff)
        except SQLAlchemyError as exc:
            logger.exception("Error fetching chat history", limit=page_size)
            raise StoreError("Failed to fetch chat history") from exc

    async def record_message(
        self,
        user_id: int,
        message: str,
        created_at: datetime | None = None,
    ) -> ChatMessage:
        """Persist one chat message; ``created_at`` defaults to now."""
        return await self._chat_repo.create_message(
            user_id=user_id,
            message=message,
            created_at=as_utc(created_at) if created_at is not None else None,
        )

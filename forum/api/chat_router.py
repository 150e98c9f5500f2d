"""Chat history API router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from forum.dependencies import get_chat_service, get_current_user
from forum.schemas.chat_schema import ChatHistoryMessage, ChatHistoryResponse
from forum.schemas.response_schema import success_response
from forum.services.chat_service import ChatService

router = APIRouter(
    prefix="/chat",
    tags=["chat"],
    dependencies=[Depends(get_current_user)],
)

ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]


@router.get("/history", response_model=ChatHistoryResponse)
async def chat_history(
    service: ChatServiceDep,
    limit: str | None = Query(default=None, description="Page size, default 50"),
    before: str | None = Query(
        default=None, description="ISO-8601 timestamp; only older messages"
    ),
) -> dict:
    """Return a page of chat history in chronological order."""
    rows = await service.history(limit=limit, before=before)
    return success_response(
        messages=[ChatHistoryMessage.model_validate(row) for row in rows]
    )

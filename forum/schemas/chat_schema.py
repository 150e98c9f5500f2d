"""Chat history response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_serializer

from forum.core.clock import to_iso8601
from forum.schemas.response_schema import SuccessResponse


class ChatHistoryMessage(BaseModel):
    """One chat message with its author's display fields."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    user_id: int
    message: str
    created_at: datetime
    username: str
    display_name: str
    name_color: str | None = None

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return to_iso8601(value)


class ChatHistoryResponse(SuccessResponse):
    """Chat history page in ascending chronological order."""

    messages: list[ChatHistoryMessage]

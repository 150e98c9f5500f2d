"""Comment request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from forum.core.clock import to_iso8601
from forum.schemas.response_schema import SuccessResponse


class CreateCommentRequest(BaseModel):
    text: str = Field(min_length=1, max_length=2000)

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment text is required")
        return v


class CommentResponse(BaseModel):
    """Single comment as shown in the forum."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    user_id: int
    author: str
    text: str
    created_at: datetime

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return to_iso8601(value)


class CommentListResponse(SuccessResponse):
    comments: list[CommentResponse]


class CommentCreatedResponse(SuccessResponse):
    comment: CommentResponse

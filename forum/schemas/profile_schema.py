"""Profile update request/response schemas."""

import re

from pydantic import BaseModel, EmailStr, Field, field_validator

from forum.schemas.auth_schema import UserResponse
from forum.schemas.comment_schema import CommentResponse
from forum.schemas.response_schema import SuccessResponse

NAME_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class ChangeEmailRequest(BaseModel):
    current_password: str = Field(min_length=1, max_length=72)
    new_email: EmailStr
    confirm_email: str = Field(min_length=1, max_length=255)

    @field_validator("new_email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()

    @field_validator("confirm_email")
    @classmethod
    def normalize_confirm(cls, v: str) -> str:
        return v.lower().strip()


class ChangeDisplayNameRequest(BaseModel):
    display_name: str = Field(max_length=50)


class CustomizationRequest(BaseModel):
    """Name color (``#RRGGBB``) and free-form bio; both optional."""

    name_color: str | None = None
    bio: str | None = Field(default=None, max_length=500)

    @field_validator("name_color")
    @classmethod
    def validate_name_color(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not re.match(NAME_COLOR_PATTERN, v):
            raise ValueError("Invalid color format")
        return v


class ProfileResponse(SuccessResponse):
    """The member's own profile with their latest comments."""

    user: UserResponse
    comments: list[CommentResponse]

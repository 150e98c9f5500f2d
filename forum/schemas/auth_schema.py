"""Authentication request/response schemas."""

import re
from datetime import datetime

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_serializer,
    field_validator,
)

from forum.core.clock import to_iso8601
from forum.core.security import fits_bcrypt
from forum.schemas.response_schema import SuccessResponse

USERNAME_PATTERN = r"^[A-Za-z0-9_.-]+$"


def check_password_complexity(value: str) -> str:
    """Reject passwords over 72 bytes or missing a required character class."""
    if not fits_bcrypt(value):
        raise ValueError("Password must be at most 72 bytes")
    if not re.search(r"[A-Z]", value):
        raise ValueError("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", value):
        raise ValueError("Password must contain at least one lowercase letter")
    if not re.search(r"\d", value):
        raise ValueError("Password must contain at least one digit")
    if not re.search(r"[!@#$%^&*(),.?\":{}|<>_\-+=~\[\]\\/';`]", value):
        raise ValueError("Password must contain at least one special character")
    return value


class RegisterRequest(BaseModel):
    """User registration request."""

    username: str = Field(
        min_length=2,
        max_length=50,
        pattern=USERNAME_PATTERN,
        description="Login name (letters, digits, _ . -)",
    )
    display_name: str = Field(
        min_length=1,
        max_length=50,
        description="Name shown next to comments and chat messages",
    )
    email: EmailStr = Field(description="User email address")
    password: str = Field(
        min_length=8,
        max_length=72,
        description="Password (8-72 chars, must include uppercase, lowercase, digit, special char)",
    )
    confirm_password: str = Field(description="Repeat of the password")

    @field_validator("display_name")
    @classmethod
    def strip_display_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Display name is required")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()

    @field_validator("password")
    @classmethod
    def validate_password_complexity(cls, v: str) -> str:
        return check_password_complexity(v)


class LoginRequest(BaseModel):
    """User login request."""

    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1, max_length=72)


class ChangePasswordRequest(BaseModel):
    """Password change request; success ends the current session."""

    current_password: str = Field(min_length=1, max_length=72)
    new_password: str = Field(min_length=8, max_length=72)
    confirm_password: str = Field(min_length=1, max_length=72)

    @field_validator("new_password")
    @classmethod
    def validate_password_complexity(cls, v: str) -> str:
        return check_password_complexity(v)


class UserResponse(BaseModel):
    """Public user representation."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    username: str
    display_name: str
    email: str
    name_color: str | None = None
    bio: str | None = None
    created_at: datetime

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return to_iso8601(value)


class SessionResponse(BaseModel):
    """Session state exposed to the client (never the token itself)."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    user_id: int
    username: str
    is_logged_in: bool
    login_time: datetime
    visit_count: int


class RegisterResponse(SuccessResponse):
    user: UserResponse


class LoginResponse(SuccessResponse):
    user: UserResponse
    session: SessionResponse


class HomeUser(BaseModel):
    """Home page view model, Guest when anonymous."""

    name: str = "Guest"
    is_logged_in: bool = False
    login_time: datetime | None = None
    visit_count: int = 0


class HomeResponse(SuccessResponse):
    user: HomeUser

"""Session state shared by the HTTP layer and the realtime gateway."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SessionData(BaseModel):
    """Server-side session record stored under an opaque token."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    username: str
    is_logged_in: bool = True
    login_time: datetime
    visit_count: int = Field(default=0, ge=0)

    def visited(self) -> "SessionData":
        """Copy of this session with one more authenticated visit."""
        return self.model_copy(update={"visit_count": self.visit_count + 1})

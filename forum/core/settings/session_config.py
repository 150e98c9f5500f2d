"""Session cookie configuration."""

from typing import Literal

from pydantic import BaseModel


class SessionConfig(BaseModel, frozen=True):
    """Session cookie and lifetime settings.

    The same cookie identifies the session for HTTP requests and for the
    Socket.IO handshake.
    """

    cookie_name: str
    ttl_seconds: int
    cookie_secure: bool
    cookie_samesite: Literal["lax", "strict", "none"]

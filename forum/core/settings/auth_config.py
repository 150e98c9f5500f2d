"""Credential and login protection configuration."""

from pydantic import BaseModel


class AuthConfig(BaseModel, frozen=True):
    """Password hashing, lockout and rate limit settings."""

    bcrypt_rounds: int
    max_login_attempts: int
    lockout_seconds: int
    login_rate_limit: str
    register_rate_limit: str
    rate_limit_enabled: bool

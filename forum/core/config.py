"""Application configuration using Pydantic Settings V2."""

from functools import cached_property
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from forum.core.settings import (
    AppConfig,
    AuthConfig,
    ChatConfig,
    DatabaseConfig,
    RedisConfig,
    ServerConfig,
    SessionConfig,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Flat fields are loaded directly from environment variables.
    Domain properties provide grouped access (e.g. settings.chat.history_default_limit).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = Field(
        default="frontier-forum",
        description="Application name",
    )
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    debug: bool = Field(
        default=False,
        description="Debug mode",
    )

    # Server
    host: str = Field(
        default="0.0.0.0",
        description="Server host",
    )
    port: int = Field(
        default=3010,
        ge=1,
        le=65535,
        description="Server port",
    )

    # Database
    database_url: SecretStr = Field(
        default=SecretStr("sqlite+aiosqlite:///./forum.db"),
        description="Async database URL (sqlite+aiosqlite://... or mysql+aiomysql://...)",
    )

    # Redis
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (session store)",
    )

    # Session
    session_cookie_name: str = Field(
        default="forum_sid",
        min_length=1,
        description="Cookie carrying the session token",
    )
    session_ttl_seconds: int = Field(
        default=24 * 60 * 60,
        ge=60,
        description="Session lifetime in seconds",
    )
    session_cookie_secure: bool = Field(
        default=False,
        description="Only send the session cookie over HTTPS",
    )
    session_cookie_samesite: Literal["lax", "strict", "none"] = Field(
        default="lax",
        description="SameSite attribute of the session cookie",
    )

    # Auth
    bcrypt_rounds: int = Field(
        default=12,
        ge=4,
        le=16,
        description="bcrypt cost factor",
    )
    max_login_attempts: int = Field(
        default=5,
        ge=1,
        description="Failed logins before the username is locked",
    )
    login_lockout_seconds: int = Field(
        default=300,
        ge=1,
        description="Lockout window for failed logins",
    )
    login_rate_limit: str = Field(
        default="5/minute",
        description="Login endpoint rate limit",
    )
    register_rate_limit: str = Field(
        default="3/minute",
        description="Register endpoint rate limit",
    )
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable per-address rate limiting",
    )

    # Chat
    chat_history_default_limit: int = Field(
        default=50,
        ge=1,
        description="Page size when no valid limit is given",
    )
    chat_history_max_limit: int | None = Field(
        default=None,
        ge=1,
        description="Optional ceiling on the page size; unset honours any limit",
    )
    chat_max_message_length: int = Field(
        default=2000,
        ge=1,
        description="Maximum chat message length in characters",
    )
    chat_persist_realtime: bool = Field(
        default=True,
        description="Persist messages sent over Socket.IO into chat history",
    )

    # --- Domain properties ---

    @cached_property
    def app(self) -> AppConfig:
        """Application environment configuration."""
        return AppConfig(
            name=self.app_name,
            env=self.app_env,
            debug=self.debug,
        )

    @cached_property
    def server(self) -> ServerConfig:
        """Server configuration."""
        return ServerConfig(
            host=self.host,
            port=self.port,
        )

    @cached_property
    def database(self) -> DatabaseConfig:
        """Database connection configuration."""
        return DatabaseConfig(url=self.database_url)

    @cached_property
    def redis(self) -> RedisConfig:
        """Redis connection configuration."""
        return RedisConfig(url=self.redis_url)

    @cached_property
    def session(self) -> SessionConfig:
        """Session cookie configuration."""
        return SessionConfig(
            cookie_name=self.session_cookie_name,
            ttl_seconds=self.session_ttl_seconds,
            cookie_secure=self.session_cookie_secure,
            cookie_samesite=self.session_cookie_samesite,
        )

    @cached_property
    def auth(self) -> AuthConfig:
        """Password and login protection configuration."""
        return AuthConfig(
            bcrypt_rounds=self.bcrypt_rounds,
            max_login_attempts=self.max_login_attempts,
            lockout_seconds=self.login_lockout_seconds,
            login_rate_limit=self.login_rate_limit,
            register_rate_limit=self.register_rate_limit,
            rate_limit_enabled=self.rate_limit_enabled,
        )

    @cached_property
    def chat(self) -> ChatConfig:
        """Chat room configuration."""
        return ChatConfig(
            history_default_limit=self.chat_history_default_limit,
            history_max_limit=self.chat_history_max_limit,
            max_message_length=self.chat_max_message_length,
            persist_realtime_messages=self.chat_persist_realtime,
        )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app.is_development


# Global settings instance
settings = Settings()

"""Domain-specific configuration models."""

from forum.core.settings.app_config import AppConfig
from forum.core.settings.auth_config import AuthConfig
from forum.core.settings.chat_config import ChatConfig
from forum.core.settings.database_config import DatabaseConfig
from forum.core.settings.redis_config import RedisConfig
from forum.core.settings.server_config import ServerConfig
from forum.core.settings.session_config import SessionConfig

__all__ = [
    "AppConfig",
    "AuthConfig",
    "ChatConfig",
    "DatabaseConfig",
    "RedisConfig",
    "ServerConfig",
    "SessionConfig",
]

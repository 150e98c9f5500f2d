"""Server configuration."""

from pydantic import BaseModel


class ServerConfig(BaseModel, frozen=True):
    """Bind address of the combined HTTP and Socket.IO ASGI app."""

    host: str
    port: int

"""Chat room configuration."""

from pydantic import BaseModel


class ChatConfig(BaseModel, frozen=True):
    """Chat history paging and realtime message settings."""

    history_default_limit: int
    history_max_limit: int | None
    max_message_length: int
    persist_realtime_messages: bool

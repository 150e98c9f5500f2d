"""Forum comment database model."""

from datetime import datetime

from sqlalchemy import ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from forum.core.clock import utc_now
from forum.core.database import Base
from forum.models.columns import UtcDateTime


class Comment(Base):
    """Append-only forum comment."""

    __tablename__ = "comments"
    __table_args__ = (
        Index("ix_comments_created_at_id", "created_at", "id"),
        Index("ix_comments_user_id_created_at", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime, nullable=False, default=utc_now
    )

"""Column types shared by the ORM models."""

from sqlalchemy import DateTime
from sqlalchemy.dialects import mysql

# Microsecond precision on MySQL keeps (created_at, id) ordering meaningful.
UtcDateTime = DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), "mysql")

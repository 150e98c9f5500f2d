"""UTC timestamp helpers shared by the stores and the realtime gateway."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Return ``value`` in UTC; naive values are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_iso8601(value: datetime) -> str:
    """Format as ISO-8601 with microsecond precision and a ``Z`` suffix.

    The full precision matches what the stores keep, so a formatted value can
    be handed back as a paging cursor without skipping rows.
    """
    return as_utc(value).isoformat(timespec="microseconds").replace("+00:00", "Z")


def parse_iso8601(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Raises ``ValueError`` for malformed input.
    """
    return as_utc(datetime.fromisoformat(value.strip()))

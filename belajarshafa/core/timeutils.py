# belajarshafa/core/timeutils.py
from datetime import datetime, timezone


def as_aware(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; those are stored as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

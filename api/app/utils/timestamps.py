"""
Timezone-aware UTC timestamps for every stored datetime.
"""
from datetime import datetime, timezone

from sqlalchemy import DateTime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def utc_datetime() -> DateTime:
    """Column type for timestamp fields; values are written with tzinfo=UTC."""
    return DateTime(timezone=True)

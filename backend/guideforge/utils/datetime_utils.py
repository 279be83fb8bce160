"""Datetime utility functions."""

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from guideforge.config import settings

# Timezone for API responses (from config)
API_TIMEZONE = ZoneInfo(settings.timezone)


def to_api_timezone(dt: datetime | None) -> datetime | None:
    """Convert a datetime to API timezone (from config).

    Naive datetimes (as returned by SQLite) are assumed to be UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(API_TIMEZONE)


def serialize_api_datetime(dt: datetime) -> str:
    localized_dt = to_api_timezone(dt)
    assert localized_dt is not None
    return localized_dt.isoformat()

from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from core.config import settings

DAY_FORMAT = "%Y-%m-%d"

def _zone() -> Optional[ZoneInfo]:
    return ZoneInfo(settings.TIMEZONE) if settings.TIMEZONE else None

def get_current_time() -> datetime:
    """Returns the current wall-clock time as a naive datetime."""
    zone = _zone()
    if zone is None:
        return datetime.now()
    return datetime.now(zone).replace(tzinfo=None)

def get_today() -> date:
    return get_current_time().date()

def day_token(day) -> str:
    """Normalizes a date or datetime to its calendar-day token (YYYY-MM-DD)."""
    if isinstance(day, datetime):
        day = day.date()
    return day.strftime(DAY_FORMAT)

def days_ago(today: date, n: int) -> Optional[date]:
    """Returns None when the result would fall before date.min."""
    try:
        return today - timedelta(days=n)
    except OverflowError:
        return None

def whole_days_between(start: datetime, end: datetime) -> int:
    """Number of whole days from start to end, truncated toward zero."""
    seconds = (end - start).total_seconds()
    return int(seconds / 86400)

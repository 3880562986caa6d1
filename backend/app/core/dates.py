"""
Calendar-day boundaries in the configured time zone.
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from app.core.config import settings

DayBounds = Tuple[datetime, datetime]


def get_timezone(name: Optional[str] = None) -> ZoneInfo:
    """Resolve an IANA zone name, falling back to the TIMEZONE setting."""
    return ZoneInfo(name or settings.TIMEZONE)


def day_bounds(day: date, tz: ZoneInfo) -> DayBounds:
    """
    Return the first and last instant of ``day`` in ``tz``.

    The end bound is 23:59:59.999999 so that both bounds can be used
    inclusively.
    """
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day, time.max, tzinfo=tz)
    return start, end


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _local_date(now: Optional[datetime], tz: ZoneInfo) -> date:
    if now is None:
        now = utcnow()
    elif now.tzinfo is None:
        # Naive datetimes are taken as UTC
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(tz).date()


def today_bounds(now: Optional[datetime] = None, tz: Optional[ZoneInfo] = None) -> DayBounds:
    """Boundaries of the calendar day containing ``now``."""
    tz = tz or get_timezone()
    return day_bounds(_local_date(now, tz), tz)


def yesterday_bounds(now: Optional[datetime] = None, tz: Optional[ZoneInfo] = None) -> DayBounds:
    """Boundaries of the calendar day before the one containing ``now``."""
    tz = tz or get_timezone()
    return day_bounds(_local_date(now, tz) - timedelta(days=1), tz)

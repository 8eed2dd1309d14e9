# baytkom/utils/timezones.py
from datetime import datetime, date, timedelta, timezone
from zoneinfo import ZoneInfo
from typing import Optional

from baytkom.core.config import settings

LOCAL = ZoneInfo(settings.local_timezone)
UTC = ZoneInfo("UTC")


def utcnow() -> datetime:
    """Naive UTC 'now', matching how every timestamp column is stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None or dt.tzinfo is None:
        return dt
    return dt.astimezone(UTC).replace(tzinfo=None)


def local_today(now: Optional[datetime] = None) -> date:
    local_now = (now or datetime.now(UTC)).astimezone(LOCAL)
    return local_now.date()


def js_weekday(d: date) -> int:
    """Sunday=0 .. Saturday=6 (the numbering stored in days_of_week)."""
    return (d.weekday() + 1) % 7


def week_of_month(d: date) -> int:
    return 1 + (d.day - 1) // 7


def saturday_of_week(d: date) -> date:
    # Household weeks start on Saturday
    return d - timedelta(days=(js_weekday(d) + 1) % 7)

from datetime import date, datetime, timedelta
from typing import Optional
import re

from baytkom.core.errors import ValidationError
from baytkom.utils.timezones import LOCAL, UTC, utcnow

RELATIVE = re.compile(r"(\d+)([hdw])")
UNITS = {"h": "hours", "d": "days", "w": "weeks"}


def parse_since(since: Optional[str], now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Lower bound for the notification feed, as naive UTC.

    Accepts '24h', '7d', '2w', a local date 'YYYY-MM-DD', or 'all'/None for no bound.
    Anything else raises ValidationError.
    """
    if not since:
        return None
    value = since.strip().lower()
    if value in {"all", "any"}:
        return None

    match = RELATIVE.fullmatch(value)
    if match:
        amount, unit = int(match.group(1)), match.group(2)
        return (now or utcnow()) - timedelta(**{UNITS[unit]: amount})

    try:
        day = date.fromisoformat(value)
    except ValueError:
        raise ValidationError("Invalid since value")
    start = datetime(day.year, day.month, day.day, tzinfo=LOCAL)
    return start.astimezone(UTC).replace(tzinfo=None)

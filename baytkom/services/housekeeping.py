from datetime import date
from typing import Optional

from baytkom.models.housekeeping import HousekeepingTask, Room
from baytkom.utils.timezones import js_weekday, week_of_month, saturday_of_week


def is_task_due(task: HousekeepingTask, day: date, room: Optional[Room] = None) -> bool:
    """Whether a housekeeping task shows up on the checklist for `day`."""
    if not task.is_active:
        return False
    if room is not None and (room.is_excluded or not room.is_active):
        return False

    if task.frequency == "once":
        return task.specific_date == day.isoformat()

    days = task.days_of_week or []
    if task.frequency == "monthly":
        weeks = task.weeks_of_month or []
        if weeks and week_of_month(day) not in weeks:
            return False
        if days and js_weekday(day) not in days:
            return False
        return True

    # daily / weekly
    if days and js_weekday(day) not in days:
        return False
    return True


def completion_key(frequency: str, day: date) -> str:
    """Weekly tasks are ticked off once per week, monthly ones once per month."""
    if frequency == "weekly":
        return f"W-{saturday_of_week(day).isoformat()}"
    if frequency == "monthly":
        return f"M-{day.year:04d}-{day.month:02d}"
    return day.isoformat()

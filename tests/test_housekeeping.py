from datetime import date

from baytkom.models.housekeeping import HousekeepingTask, Room
from baytkom.services.housekeeping import completion_key, is_task_due
from baytkom.utils.timezones import js_weekday, saturday_of_week, week_of_month

# 2030-01-05 is a Saturday, 2030-01-07 a Monday
SAT = date(2030, 1, 5)
MON = date(2030, 1, 7)
TUE = date(2030, 1, 8)


def task(frequency="daily", **kwargs):
    kwargs.setdefault("is_active", True)
    return HousekeepingTask(title_ar="تنظيف", frequency=frequency, room_id=1, **kwargs)


def test_weekday_numbering_starts_on_sunday():
    assert js_weekday(date(2030, 1, 6)) == 0
    assert js_weekday(MON) == 1
    assert js_weekday(SAT) == 6


def test_week_of_month():
    assert week_of_month(date(2030, 1, 1)) == 1
    assert week_of_month(date(2030, 1, 7)) == 1
    assert week_of_month(date(2030, 1, 8)) == 2
    assert week_of_month(date(2030, 1, 29)) == 5


def test_daily_task_without_days_is_always_due():
    assert is_task_due(task(), MON)
    assert is_task_due(task(), TUE)


def test_weekly_task_matches_weekdays():
    t = task("weekly", days_of_week=[1])
    assert is_task_due(t, MON)
    assert not is_task_due(t, TUE)


def test_monthly_task_checks_week_and_day():
    t = task("monthly", weeks_of_month=[1], days_of_week=[1])
    assert is_task_due(t, MON)
    assert not is_task_due(t, date(2030, 1, 14))  # Monday, second week
    assert not is_task_due(t, date(2030, 1, 2))  # first week, Wednesday


def test_once_task_matches_its_date_only():
    t = task("once", specific_date="2030-01-07")
    assert is_task_due(t, MON)
    assert not is_task_due(t, TUE)


def test_excluded_or_inactive_rooms_hide_tasks():
    assert not is_task_due(task(), MON, Room(is_excluded=True, is_active=True))
    assert not is_task_due(task(), MON, Room(is_excluded=False, is_active=False))
    assert is_task_due(task(), MON, Room(is_excluded=False, is_active=True))


def test_inactive_task_is_never_due():
    assert not is_task_due(task(is_active=False), MON)


def test_weeks_start_on_saturday():
    assert saturday_of_week(SAT) == SAT
    assert saturday_of_week(MON) == SAT
    assert saturday_of_week(date(2030, 1, 11)) == SAT  # Friday


def test_completion_keys():
    assert completion_key("daily", MON) == "2030-01-07"
    assert completion_key("once", MON) == "2030-01-07"
    assert completion_key("weekly", MON) == "W-2030-01-05"
    assert completion_key("monthly", MON) == "M-2030-01"

from datetime import datetime, timedelta

import pytest

from baytkom.core.errors import Forbidden, MissingPermission
from baytkom.models.logistics import Trip
from baytkom.models.user import User
from baytkom.services.trip_status import accumulate_waiting, apply_trip_transition, cancel_trip

NOW = datetime(2030, 1, 1, 12, 0)


def user(uid, role="household", **flags):
    return User(id=uid, username=uid, role=role, is_suspended=False, **flags)


def trip(status="pending", **kwargs):
    kwargs.setdefault("departure_time", NOW + timedelta(hours=1))
    kwargs.setdefault("created_by", "sara")
    kwargs.setdefault("waiting_duration", 0)
    return Trip(id=7, person_name="Sara", location="Mall", status=status, **kwargs)


DRIVER = user("drv", role="driver")
ADMIN = user("boss", role="admin")


def test_trip_approver_approves():
    t = trip()
    apply_trip_transition(t, user("mama", can_approve_trips=True), "approved", now=NOW)
    assert (t.status, t.approved_by) == ("approved", "mama")


def test_household_cannot_approve_trips():
    t = trip()
    with pytest.raises(MissingPermission):
        apply_trip_transition(t, user("sara"), "approved", now=NOW)
    assert t.status == "pending"


def test_driver_start_assigns_and_stamps():
    t = trip("approved")
    apply_trip_transition(t, DRIVER, "started", now=NOW)
    assert t.status == "started"
    assert t.started_at == NOW
    assert t.assigned_driver == "drv"


def test_admin_start_keeps_assigned_driver():
    t = trip("approved", assigned_driver="drv")
    apply_trip_transition(t, ADMIN, "started", now=NOW)
    assert t.assigned_driver == "drv"


def test_waiting_then_completed_accumulates_elapsed_time():
    t = trip("started", assigned_driver="drv")
    apply_trip_transition(t, DRIVER, "waiting", now=NOW)
    assert t.waiting_started_at == NOW

    apply_trip_transition(t, DRIVER, "completed", now=NOW + timedelta(seconds=95))
    assert t.status == "completed"
    assert t.waiting_duration == 95
    assert t.waiting_started_at is None
    assert t.completed_at == NOW + timedelta(seconds=95)


def test_waiting_periods_add_up():
    t = trip("started", assigned_driver="drv")
    apply_trip_transition(t, DRIVER, "waiting", now=NOW)
    apply_trip_transition(t, DRIVER, "started", now=NOW + timedelta(minutes=2))
    apply_trip_transition(t, DRIVER, "waiting", now=NOW + timedelta(minutes=10))
    apply_trip_transition(t, DRIVER, "completed", now=NOW + timedelta(minutes=13))
    assert t.waiting_duration == 5 * 60


def test_accumulate_never_goes_negative():
    t = trip("waiting", waiting_started_at=NOW, waiting_duration=30)
    assert accumulate_waiting(t, NOW - timedelta(minutes=1)) == 30


def test_other_driver_cannot_finish_someone_elses_trip():
    t = trip("started", assigned_driver="someone-else")
    with pytest.raises(Forbidden):
        apply_trip_transition(t, DRIVER, "completed", now=NOW)


def test_unknown_pair_is_rejected():
    t = trip("pending")
    with pytest.raises(Forbidden) as exc:
        apply_trip_transition(t, ADMIN, "completed", now=NOW)
    assert "Cannot move trip from pending to completed" in exc.value.detail


def test_creator_cancels_future_trip():
    t = trip("approved")
    cancel_trip(t, user("sara"), now=NOW)
    assert t.status == "cancelled"


def test_cancel_after_departure_is_rejected():
    t = trip("approved", departure_time=NOW - timedelta(minutes=1))
    with pytest.raises(Forbidden) as exc:
        cancel_trip(t, user("sara"), now=NOW)
    assert exc.value.detail == "Trip has already departed"
    assert t.status == "approved"


def test_only_creator_or_admin_cancels():
    with pytest.raises(Forbidden):
        cancel_trip(trip(), user("stranger"), now=NOW)
    t = trip()
    apply_trip_transition(t, ADMIN, "cancelled", now=NOW)
    assert t.status == "cancelled"


def test_started_trip_cannot_be_cancelled():
    with pytest.raises(Forbidden):
        cancel_trip(trip("started"), user("sara"), now=NOW)

from datetime import datetime

from baytkom.models.logistics import Trip
from baytkom.services.availability import Availability, find_time_conflicts, windows_overlap


def trip(trip_id, hour, minute=0, duration=30, status="approved"):
    return Trip(
        id=trip_id,
        person_name="Sara",
        location="School",
        departure_time=datetime(2030, 1, 1, hour, minute),
        estimated_duration=duration,
        status=status,
    )


def test_overlap_is_half_open():
    s = datetime(2030, 1, 1, 9, 0)
    e = datetime(2030, 1, 1, 9, 30)
    assert windows_overlap(s, e, datetime(2030, 1, 1, 9, 15), datetime(2030, 1, 1, 9, 45))
    assert not windows_overlap(s, e, e, datetime(2030, 1, 1, 10, 0))


def test_nine_and_nine_fifteen_conflict():
    a = trip(1, 9, 0)
    conflicts = find_time_conflicts([a], datetime(2030, 1, 1, 9, 15), 30, exclude_trip_id=2)
    assert conflicts == [a]


def test_excluded_trip_never_conflicts_with_itself():
    b = trip(2, 9, 15)
    assert find_time_conflicts([b], b.departure_time, 30, exclude_trip_id=2) == []


def test_back_to_back_trips_do_not_conflict():
    a = trip(1, 9, 0)
    assert find_time_conflicts([a], datetime(2030, 1, 1, 9, 30), 30) == []


def test_finished_trips_are_ignored():
    trips = [trip(1, 9, status=s) for s in ("completed", "cancelled", "rejected")]
    assert find_time_conflicts(trips, datetime(2030, 1, 1, 9, 10), 30) == []


def test_missing_duration_defaults_to_thirty_minutes():
    a = trip(1, 9, 0, duration=None)
    assert find_time_conflicts([a], datetime(2030, 1, 1, 9, 29)) == [a]
    assert find_time_conflicts([a], datetime(2030, 1, 1, 9, 30)) == []


def test_conflicts_alone_do_not_make_a_driver_busy():
    availability = Availability(driver_id="d1", time_conflicts=[trip(1, 9)])
    assert availability.busy is False
    availability.active_trips.append(trip(2, 8, status="started"))
    assert availability.busy is True

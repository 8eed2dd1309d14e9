from datetime import datetime
from typing import Optional
import logging

from baytkom.auth.permissions import Capability, can
from baytkom.core.constants import TripStatus
from baytkom.core.errors import Forbidden, MissingPermission
from baytkom.models.logistics import Trip
from baytkom.models.user import User
from baytkom.utils.timezones import utcnow

log = logging.getLogger(__name__)

TRIP_TRANSITIONS = {
    (TripStatus.PENDING, TripStatus.APPROVED): Capability.TRIPS_APPROVE,
    (TripStatus.PENDING, TripStatus.REJECTED): Capability.TRIPS_APPROVE,
    (TripStatus.APPROVED, TripStatus.STARTED): Capability.TRIPS_DRIVE,
    (TripStatus.STARTED, TripStatus.WAITING): Capability.TRIPS_DRIVE,
    (TripStatus.WAITING, TripStatus.STARTED): Capability.TRIPS_DRIVE,
    (TripStatus.WAITING, TripStatus.COMPLETED): Capability.TRIPS_DRIVE,
    (TripStatus.STARTED, TripStatus.COMPLETED): Capability.TRIPS_DRIVE,
}

TARGET_CAPABILITY = {
    TripStatus.APPROVED: Capability.TRIPS_APPROVE,
    TripStatus.REJECTED: Capability.TRIPS_APPROVE,
    TripStatus.STARTED: Capability.TRIPS_DRIVE,
    TripStatus.WAITING: Capability.TRIPS_DRIVE,
    TripStatus.COMPLETED: Capability.TRIPS_DRIVE,
}

CANCELLABLE = (TripStatus.PENDING, TripStatus.APPROVED)


def accumulate_waiting(trip: Trip, now: datetime) -> int:
    """Fold the open waiting period into waiting_duration (seconds) and close it."""
    if trip.waiting_started_at is not None:
        elapsed = int((now - trip.waiting_started_at).total_seconds())
        trip.waiting_duration = (trip.waiting_duration or 0) + max(elapsed, 0)
        trip.waiting_started_at = None
    return trip.waiting_duration or 0


def check_trip_transition(user: User, trip: Trip, target: str) -> str:
    needed = TARGET_CAPABILITY.get(target)
    if needed and not can(user, needed):
        raise MissingPermission(needed)

    needed = TRIP_TRANSITIONS.get((trip.status, target))
    if needed is None:
        raise Forbidden(f"Cannot move trip from {trip.status} to {target}")
    if not can(user, needed):
        raise MissingPermission(needed)

    # Once on the road only the assigned driver (or an admin) drives the trip forward
    if (
        needed == Capability.TRIPS_DRIVE
        and trip.status != TripStatus.APPROVED
        and trip.assigned_driver not in (None, user.id)
        and not can(user, Capability.ADMIN)
    ):
        raise Forbidden("Trip is assigned to another driver")
    return needed


def apply_trip_transition(trip: Trip, user: User, target: str, now: Optional[datetime] = None) -> Trip:
    """Validate and apply a status change in memory. The caller commits."""
    if target == TripStatus.CANCELLED:
        return cancel_trip(trip, user, now)

    check_trip_transition(user, trip, target)
    now = now or utcnow()
    previous = trip.status

    if target in (TripStatus.APPROVED, TripStatus.REJECTED):
        trip.approved_by = user.id
    elif target == TripStatus.STARTED:
        if previous == TripStatus.WAITING:
            accumulate_waiting(trip, now)
        else:
            trip.started_at = now
            if user.role == "driver" or not trip.assigned_driver:
                trip.assigned_driver = user.id
    elif target == TripStatus.WAITING:
        trip.waiting_started_at = now
    elif target == TripStatus.COMPLETED:
        accumulate_waiting(trip, now)
        trip.completed_at = now

    trip.status = target
    log.info("trip %s: %s -> %s by %s", trip.id, previous, target, user.id)
    return trip


def cancel_trip(trip: Trip, user: User, now: Optional[datetime] = None) -> Trip:
    now = now or utcnow()
    if trip.created_by != user.id and not can(user, Capability.ADMIN):
        raise Forbidden("Only the trip creator can cancel it")
    if trip.status not in CANCELLABLE:
        raise Forbidden(f"Cannot cancel a trip that is {trip.status}")
    if trip.departure_time <= now:
        raise Forbidden("Trip has already departed")

    previous = trip.status
    trip.status = TripStatus.CANCELLED
    log.info("trip %s: %s -> cancelled by %s", trip.id, previous, user.id)
    return trip

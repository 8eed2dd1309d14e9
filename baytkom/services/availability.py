"""
Driver availability

Read-only advisory check: is a driver busy right now, and does a proposed
trip window collide with anything already on their schedule.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from baytkom.core.constants import DEFAULT_TRIP_DURATION, OrderStatus, TripStatus
from baytkom.models.order import Order
from baytkom.models.logistics import Trip


@dataclass
class Availability:
    driver_id: str
    active_trips: List[Trip] = field(default_factory=list)
    active_orders: List[Order] = field(default_factory=list)
    time_conflicts: List[Trip] = field(default_factory=list)

    @property
    def busy(self) -> bool:
        # Schedule overlaps are warnings only, they never make a driver busy
        return bool(self.active_trips or self.active_orders)


def windows_overlap(s1: datetime, e1: datetime, s2: datetime, e2: datetime) -> bool:
    """Half-open intervals [s1, e1) and [s2, e2)."""
    return s1 < e2 and s2 < e1


def trip_window(trip: Trip) -> tuple[datetime, datetime]:
    duration = trip.estimated_duration or DEFAULT_TRIP_DURATION
    return trip.departure_time, trip.departure_time + timedelta(minutes=duration)


def find_time_conflicts(
    trips: Iterable[Trip],
    departure_time: datetime,
    duration: Optional[int] = None,
    exclude_trip_id: Optional[int] = None,
) -> List[Trip]:
    start = departure_time
    end = departure_time + timedelta(minutes=duration or DEFAULT_TRIP_DURATION)

    conflicts = []
    for trip in trips:
        if exclude_trip_id is not None and trip.id == exclude_trip_id:
            continue
        if trip.status not in TripStatus.SCHEDULED:
            continue
        if windows_overlap(start, end, *trip_window(trip)):
            conflicts.append(trip)
    return conflicts


async def check_availability(
    db: AsyncSession,
    driver_id: str,
    departure_time: Optional[datetime] = None,
    duration: Optional[int] = None,
    exclude_trip_id: Optional[int] = None,
) -> Availability:
    trip_q = select(Trip).where(
        Trip.assigned_driver == driver_id,
        Trip.status.in_(TripStatus.ACTIVE),
    )
    if exclude_trip_id is not None:
        trip_q = trip_q.where(Trip.id != exclude_trip_id)
    active_trips = (await db.execute(trip_q.order_by(Trip.departure_time))).scalars().all()

    active_orders = (
        await db.execute(
            select(Order)
            .where(
                Order.assigned_driver == driver_id,
                Order.status == OrderStatus.IN_PROGRESS,
            )
            .order_by(Order.updated_at)
        )
    ).scalars().all()

    availability = Availability(
        driver_id=driver_id,
        active_trips=list(active_trips),
        active_orders=list(active_orders),
    )

    if departure_time is not None:
        scheduled = (
            await db.execute(
                select(Trip)
                .where(
                    Trip.assigned_driver == driver_id,
                    Trip.status.in_(TripStatus.SCHEDULED),
                )
                .order_by(Trip.departure_time)
            )
        ).scalars().all()
        availability.time_conflicts = find_time_conflicts(
            scheduled, departure_time, duration, exclude_trip_id
        )

    return availability


async def busy_driver_ids(db: AsyncSession) -> set[str]:
    """Every driver currently on an active trip or shopping run."""
    trip_rows = await db.execute(
        select(Trip.assigned_driver).where(
            Trip.assigned_driver.is_not(None),
            Trip.status.in_(TripStatus.ACTIVE),
        )
    )
    order_rows = await db.execute(
        select(Order.assigned_driver).where(
            Order.assigned_driver.is_not(None),
            Order.status == OrderStatus.IN_PROGRESS,
        )
    )
    return set(trip_rows.scalars().all()) | set(order_rows.scalars().all())

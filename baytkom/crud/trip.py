from typing import List

from sqlalchemy import select, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession

from baytkom.auth.permissions import Capability, can
from baytkom.core.constants import TripStatus
from baytkom.core.errors import Forbidden, NotFound, ValidationError
from baytkom.models.logistics import Trip, Vehicle
from baytkom.models.user import User
from baytkom.schemas.logistics import TripCreate, TripUpdate

EDITABLE = (TripStatus.PENDING, TripStatus.APPROVED)


async def get_trip(db: AsyncSession, trip_id: int) -> Trip:
    trip = await db.get(Trip, trip_id)
    if not trip:
        raise NotFound("Trip")
    return trip


async def list_trips_for(db: AsyncSession, user: User) -> List[Trip]:
    stmt = select(Trip).order_by(Trip.departure_time.desc())
    if can(user, Capability.LOGISTICS_MANAGE) or can(user, Capability.TRIPS_APPROVE):
        pass
    elif can(user, Capability.TRIPS_DRIVE):
        stmt = stmt.where(
            or_(
                Trip.assigned_driver == user.id,
                Trip.created_by == user.id,
                and_(Trip.assigned_driver.is_(None), Trip.status == TripStatus.APPROVED),
            )
        )
    else:
        stmt = stmt.where(Trip.created_by == user.id)
    return (await db.execute(stmt)).scalars().all()


async def _validate_refs(db: AsyncSession, driver_id, vehicle_id) -> None:
    if driver_id is not None:
        driver = await db.get(User, driver_id)
        if not driver or driver.role != "driver" or driver.is_suspended:
            raise ValidationError("Assigned driver must be an active driver")
    if vehicle_id is not None:
        vehicle = await db.get(Vehicle, vehicle_id)
        if not vehicle or not vehicle.is_active:
            raise ValidationError("Invalid vehicle")


async def create_trip(db: AsyncSession, user: User, data: TripCreate) -> Trip:
    assigned_driver = data.assigned_driver
    if assigned_driver is None and user.role == "driver":
        assigned_driver = user.id
    await _validate_refs(db, assigned_driver, data.vehicle_id)

    trip = Trip(
        person_name=data.person_name,
        location=data.location,
        departure_time=data.departure_time,
        estimated_duration=data.estimated_duration,
        assigned_driver=assigned_driver,
        vehicle_id=data.vehicle_id,
        notes=data.notes,
        is_personal=data.is_personal,
        created_by=user.id,
        # Personal trips never go through approval
        status=TripStatus.APPROVED if data.is_personal else TripStatus.PENDING,
    )
    db.add(trip)
    await db.commit()
    await db.refresh(trip)
    return trip


async def update_trip(db: AsyncSession, user: User, trip: Trip, data: TripUpdate) -> Trip:
    if trip.created_by != user.id and not can(user, Capability.LOGISTICS_MANAGE):
        raise Forbidden("Only the trip creator can edit it")
    if trip.status not in EDITABLE:
        raise Forbidden(f"Cannot edit a trip that is {trip.status}")

    changes = data.model_dump(exclude_unset=True)
    await _validate_refs(db, changes.get("assigned_driver"), changes.get("vehicle_id"))
    for key, value in changes.items():
        if key in ("person_name", "location", "departure_time") and value is None:
            raise ValidationError(f"{key} cannot be empty")
        setattr(trip, key, value)

    await db.commit()
    await db.refresh(trip)
    return trip

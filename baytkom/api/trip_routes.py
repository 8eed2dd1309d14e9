from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from baytkom.auth.dependencies import get_current_user
from baytkom.auth.permissions import Capability, require
from baytkom.core.constants import TripStatus
from baytkom.core.errors import NotFound
from baytkom.crud import trip as trip_crud
from baytkom.db import get_db
from baytkom.models.logistics import Trip, TripLocation, Vehicle
from baytkom.models.user import User
from baytkom.schemas.order import OrderRead
from baytkom.schemas.logistics import (
    AvailabilityRead,
    DriverRead,
    TripCreate,
    TripLocationCreate,
    TripLocationRead,
    TripLocationUpdate,
    TripRead,
    TripStatusUpdate,
    TripUpdate,
    TripWithConflicts,
    VehicleCreate,
    VehicleRead,
    VehicleUpdate,
)
from baytkom.services import notifier
from baytkom.services.availability import busy_driver_ids, check_availability
from baytkom.services.trip_status import apply_trip_transition, cancel_trip
from baytkom.utils.timezones import to_naive_utc

router = APIRouter()

manage_logistics = require(Capability.LOGISTICS_MANAGE)

STATUS_TITLES = {
    TripStatus.APPROVED: ("تمت الموافقة على المشوار", "Trip approved"),
    TripStatus.REJECTED: ("تم رفض المشوار", "Trip rejected"),
    TripStatus.STARTED: ("بدأ المشوار", "Trip started"),
    TripStatus.WAITING: ("السائق في الانتظار", "Driver is waiting"),
    TripStatus.COMPLETED: ("اكتمل المشوار", "Trip completed"),
    TripStatus.CANCELLED: ("تم إلغاء المشوار", "Trip cancelled"),
}


async def _with_conflicts(db: AsyncSession, trip: Trip) -> TripWithConflicts:
    result = TripWithConflicts.model_validate(trip)
    if trip.assigned_driver:
        availability = await check_availability(
            db,
            trip.assigned_driver,
            departure_time=trip.departure_time,
            duration=trip.estimated_duration,
            exclude_trip_id=trip.id,
        )
        result.conflicts = [TripRead.model_validate(t) for t in availability.time_conflicts]
    return result


# ---------- Trips ----------
@router.get("/trips", response_model=List[TripRead])
async def list_trips(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    return await trip_crud.list_trips_for(db, user)


@router.get("/trips/{trip_id}", response_model=TripRead)
async def get_trip(trip_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    return await trip_crud.get_trip(db, trip_id)


@router.post("/trips", response_model=TripWithConflicts)
async def create_trip(
    payload: TripCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    trip = await trip_crud.create_trip(db, user, payload)
    result = await _with_conflicts(db, trip)

    if trip.is_personal:
        recipients = [trip.assigned_driver]
    else:
        recipients = await notifier.user_ids_with(db, Capability.TRIPS_APPROVE)
    await notifier.notify(
        db,
        [uid for uid in recipients if uid != user.id],
        title_ar="مشوار جديد",
        title_en="New trip",
        body_ar=f"{trip.person_name} إلى {trip.location}",
        body_en=f"{trip.person_name} to {trip.location}",
        type="trip_new",
        url="/logistics",
    )
    return result


@router.patch("/trips/{trip_id}", response_model=TripWithConflicts)
async def update_trip(
    trip_id: int,
    payload: TripUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    trip = await trip_crud.get_trip(db, trip_id)
    trip = await trip_crud.update_trip(db, user, trip, payload)
    return await _with_conflicts(db, trip)


async def _notify_status(db: AsyncSession, trip: Trip, actor: User) -> None:
    title_ar, title_en = STATUS_TITLES[trip.status]
    recipients = [trip.created_by]
    if trip.status == TripStatus.APPROVED:
        recipients.append(trip.assigned_driver)
    await notifier.notify(
        db,
        [uid for uid in recipients if uid != actor.id],
        title_ar=title_ar,
        title_en=title_en,
        body_ar=f"{trip.person_name} إلى {trip.location}",
        body_en=f"{trip.person_name} to {trip.location}",
        type=f"trip_{trip.status}",
        url="/logistics",
    )


@router.patch("/trips/{trip_id}/status", response_model=TripRead)
async def update_trip_status(
    trip_id: int,
    payload: TripStatusUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    trip = await trip_crud.get_trip(db, trip_id)
    apply_trip_transition(trip, user, payload.status)
    await db.commit()
    await db.refresh(trip)

    await _notify_status(db, trip, user)
    await db.refresh(trip)
    return trip


@router.delete("/trips/{trip_id}", response_model=TripRead)
async def delete_trip(trip_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    trip = await trip_crud.get_trip(db, trip_id)
    cancel_trip(trip, user)
    await db.commit()
    await db.refresh(trip)

    await _notify_status(db, trip, user)
    await db.refresh(trip)
    return trip


# ---------- Drivers ----------
@router.get("/drivers", response_model=List[DriverRead])
async def list_drivers(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    drivers = (
        await db.execute(
            select(User)
            .where(User.role == "driver", User.is_suspended == False)
            .order_by(User.username)
        )
    ).scalars().all()
    busy = await busy_driver_ids(db)
    return [
        DriverRead(
            id=d.id,
            username=d.username,
            display_name=d.display_name,
            first_name=d.first_name,
            busy=d.id in busy,
        )
        for d in drivers
    ]


@router.get("/drivers/{driver_id}/availability", response_model=AvailabilityRead)
async def driver_availability(
    driver_id: str,
    departure_time: Optional[datetime] = Query(None, alias="departureTime"),
    duration: Optional[int] = Query(None, ge=1, le=24 * 60),
    exclude_trip_id: Optional[int] = Query(None, alias="excludeTripId"),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    driver = await db.get(User, driver_id)
    if not driver:
        raise NotFound("Driver")

    availability = await check_availability(
        db,
        driver_id,
        departure_time=to_naive_utc(departure_time),
        duration=duration,
        exclude_trip_id=exclude_trip_id,
    )
    return AvailabilityRead(
        driver_id=driver_id,
        busy=availability.busy,
        active_trips=[TripRead.model_validate(t) for t in availability.active_trips],
        active_orders=[OrderRead.model_validate(o) for o in availability.active_orders],
        time_conflicts=[TripRead.model_validate(t) for t in availability.time_conflicts],
    )


# ---------- Vehicles ----------
@router.get("/vehicles", response_model=List[VehicleRead])
async def list_vehicles(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    res = await db.execute(select(Vehicle).where(Vehicle.is_active == True).order_by(Vehicle.name))
    return res.scalars().all()


@router.post("/vehicles", response_model=VehicleRead)
async def create_vehicle(
    payload: VehicleCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_logistics),
):
    vehicle = Vehicle(**payload.model_dump())
    db.add(vehicle)
    await db.commit()
    await db.refresh(vehicle)
    return vehicle


@router.patch("/vehicles/{vehicle_id}", response_model=VehicleRead)
async def update_vehicle(
    vehicle_id: int,
    payload: VehicleUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_logistics),
):
    vehicle = await db.get(Vehicle, vehicle_id)
    if not vehicle:
        raise NotFound("Vehicle")
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(vehicle, key, value)
    await db.commit()
    await db.refresh(vehicle)
    return vehicle


@router.delete("/vehicles/{vehicle_id}")
async def delete_vehicle(vehicle_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(manage_logistics)):
    vehicle = await db.get(Vehicle, vehicle_id)
    if not vehicle:
        raise NotFound("Vehicle")
    vehicle.is_active = False
    await db.commit()
    return {"success": True}


# ---------- Trip locations ----------
@router.get("/trip-locations", response_model=List[TripLocationRead])
async def list_locations(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    res = await db.execute(
        select(TripLocation).where(TripLocation.is_active == True).order_by(TripLocation.name_ar)
    )
    return res.scalars().all()


@router.post("/trip-locations", response_model=TripLocationRead)
async def create_location(
    payload: TripLocationCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    location = TripLocation(**payload.model_dump())
    db.add(location)
    await db.commit()
    await db.refresh(location)
    return location


@router.patch("/trip-locations/{location_id}", response_model=TripLocationRead)
async def update_location(
    location_id: int,
    payload: TripLocationUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_logistics),
):
    location = await db.get(TripLocation, location_id)
    if not location:
        raise NotFound("Trip location")
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(location, key, value)
    await db.commit()
    await db.refresh(location)
    return location


@router.delete("/trip-locations/{location_id}")
async def delete_location(location_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(manage_logistics)):
    location = await db.get(TripLocation, location_id)
    if not location:
        raise NotFound("Trip location")
    location.is_active = False
    await db.commit()
    return {"success": True}

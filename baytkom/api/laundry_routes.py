from typing import List, Optional, Literal

from fastapi import APIRouter, Depends
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from baytkom.auth.dependencies import get_current_user
from baytkom.auth.permissions import Capability, can, require
from baytkom.core.errors import Forbidden, NotFound, ValidationError
from baytkom.db import get_db
from baytkom.models.housekeeping import LaundryRequest, LaundrySchedule, Room
from baytkom.models.user import User
from baytkom.schemas.housekeeping import (
    LaundryRequestCreate,
    LaundryRequestRead,
    LaundryScheduleRead,
    LaundryScheduleUpdate,
)
from baytkom.services import notifier
from baytkom.utils.timezones import utcnow

router = APIRouter()


# ---------- Requests ----------
@router.get("/laundry-requests", response_model=List[LaundryRequestRead])
async def list_requests(
    status: Optional[Literal["pending", "completed"]] = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    stmt = select(LaundryRequest)
    if status:
        stmt = stmt.where(LaundryRequest.status == status)
    res = await db.execute(stmt.order_by(LaundryRequest.created_at.desc()))
    return res.scalars().all()


@router.post("/laundry-requests", response_model=LaundryRequestRead)
async def create_request(
    payload: LaundryRequestCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    room = await db.get(Room, payload.room_id)
    if not room or not room.is_active:
        raise ValidationError("Invalid room")

    request = LaundryRequest(room_id=room.id, requested_by=user.id)
    db.add(request)
    await db.commit()
    await db.refresh(request)

    maids = await notifier.user_ids_with_role(db, "maid", exclude=user.id)
    await notifier.notify(
        db,
        maids,
        title_ar="طلب غسيل جديد",
        title_en="New laundry request",
        body_ar=room.name_ar,
        body_en=room.name_en or room.name_ar,
        type="laundry_new",
        url="/housekeeping",
    )
    await db.refresh(request)
    return request


@router.patch("/laundry-requests/{request_id}/complete", response_model=LaundryRequestRead)
async def complete_request(
    request_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require(Capability.HOUSEKEEPING_COMPLETE)),
):
    request = await db.get(LaundryRequest, request_id)
    if not request:
        raise NotFound("Laundry request")
    request.status = "completed"
    request.completed_by = user.id
    request.completed_at = utcnow()
    await db.commit()
    await db.refresh(request)
    return request


@router.delete("/laundry-requests/{request_id}")
async def delete_request(request_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    request = await db.get(LaundryRequest, request_id)
    if not request:
        raise NotFound("Laundry request")
    if request.requested_by != user.id and not can(user, Capability.HOUSEKEEPING_MANAGE):
        raise Forbidden("Only the requester can delete this request")
    await db.delete(request)
    await db.commit()
    return {"success": True}


# ---------- Schedule ----------
@router.get("/laundry-schedule", response_model=List[LaundryScheduleRead])
async def get_schedule(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    res = await db.execute(
        select(LaundrySchedule).where(LaundrySchedule.is_active == True).order_by(LaundrySchedule.day_of_week)
    )
    return res.scalars().all()


@router.put("/laundry-schedule", response_model=List[LaundryScheduleRead])
async def set_schedule(
    payload: LaundryScheduleUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require(Capability.HOUSEKEEPING_MANAGE)),
):
    await db.execute(delete(LaundrySchedule))
    rows = [LaundrySchedule(day_of_week=day, is_active=True) for day in payload.days]
    db.add_all(rows)
    await db.commit()
    for row in rows:
        await db.refresh(row)
    return rows

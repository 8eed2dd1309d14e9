from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from baytkom.auth.dependencies import get_current_user
from baytkom.auth.permissions import Capability, can, require
from baytkom.core.errors import Forbidden, NotFound, ValidationError
from baytkom.db import get_db
from baytkom.models.logistics import SparePartOrder, Technician, Vehicle
from baytkom.models.user import User
from baytkom.schemas.logistics import (
    SparePartCreate,
    SparePartRead,
    SparePartUpdate,
    TechnicianCreate,
    TechnicianRead,
    TechnicianUpdate,
)
from baytkom.services import notifier

router = APIRouter()

manage_logistics = require(Capability.LOGISTICS_MANAGE)


# ---------- Technicians ----------
@router.get("/technicians", response_model=List[TechnicianRead])
async def list_technicians(
    specialty: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    stmt = select(Technician).where(Technician.is_active == True)
    if specialty:
        stmt = stmt.where(Technician.specialty == specialty)
    res = await db.execute(stmt.order_by(Technician.name))
    return res.scalars().all()


@router.post("/technicians", response_model=TechnicianRead)
async def create_technician(
    payload: TechnicianCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_logistics),
):
    tech = Technician(**payload.model_dump())
    db.add(tech)
    await db.commit()
    await db.refresh(tech)
    return tech


@router.patch("/technicians/{tech_id}", response_model=TechnicianRead)
async def update_technician(
    tech_id: int,
    payload: TechnicianUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_logistics),
):
    tech = await db.get(Technician, tech_id)
    if not tech:
        raise NotFound("Technician")
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(tech, key, value)
    await db.commit()
    await db.refresh(tech)
    return tech


@router.delete("/technicians/{tech_id}")
async def delete_technician(tech_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(manage_logistics)):
    tech = await db.get(Technician, tech_id)
    if not tech:
        raise NotFound("Technician")
    tech.is_active = False
    await db.commit()
    return {"success": True}


# ---------- Spare parts ----------
async def _check_refs(db: AsyncSession, vehicle_id, technician_id) -> None:
    if vehicle_id is not None and not await db.get(Vehicle, vehicle_id):
        raise ValidationError("Invalid vehicle")
    if technician_id is not None and not await db.get(Technician, technician_id):
        raise ValidationError("Invalid technician")


@router.get("/spare-parts", response_model=List[SparePartRead])
async def list_spare_parts(
    status: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    stmt = select(SparePartOrder)
    if not can(user, Capability.LOGISTICS_MANAGE):
        stmt = stmt.where(
            (SparePartOrder.created_by == user.id) | (SparePartOrder.assigned_to == user.id)
        )
    if status:
        stmt = stmt.where(SparePartOrder.status == status)
    res = await db.execute(stmt.order_by(SparePartOrder.created_at.desc()))
    return res.scalars().all()


@router.post("/spare-parts", response_model=SparePartRead)
async def create_spare_part(
    payload: SparePartCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await _check_refs(db, payload.vehicle_id, payload.technician_id)
    part = SparePartOrder(**payload.model_dump(), created_by=user.id)
    db.add(part)
    await db.commit()
    await db.refresh(part)

    if part.assigned_to and part.assigned_to != user.id:
        await notifier.notify(
            db,
            [part.assigned_to],
            title_ar="طلب قطعة غيار",
            title_en="Spare part request",
            body_ar=part.name,
            body_en=part.name,
            type="spare_part_new",
            url="/logistics",
        )
        await db.refresh(part)
    return part


@router.patch("/spare-parts/{part_id}", response_model=SparePartRead)
async def update_spare_part(
    part_id: int,
    payload: SparePartUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    part = await db.get(SparePartOrder, part_id)
    if not part:
        raise NotFound("Spare part")
    if user.id not in (part.created_by, part.assigned_to) and not can(user, Capability.LOGISTICS_MANAGE):
        raise Forbidden("You cannot edit this spare part order")

    changes = payload.model_dump(exclude_unset=True)
    await _check_refs(db, changes.get("vehicle_id"), changes.get("technician_id"))
    for key, value in changes.items():
        setattr(part, key, value)
    await db.commit()
    await db.refresh(part)
    return part


@router.delete("/spare-parts/{part_id}")
async def delete_spare_part(part_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    part = await db.get(SparePartOrder, part_id)
    if not part:
        raise NotFound("Spare part")
    if part.created_by != user.id and not can(user, Capability.LOGISTICS_MANAGE):
        raise Forbidden("Only the creator can delete this spare part order")
    await db.delete(part)
    await db.commit()
    return {"success": True}

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from baytkom.auth.dependencies import get_current_user
from baytkom.auth.permissions import Capability, can, require
from baytkom.core.errors import Forbidden, NotFound
from baytkom.db import get_db
from baytkom.models.shortage import Shortage
from baytkom.models.user import User
from baytkom.schemas.shortage import ShortageCreate, ShortageRead, ShortageStatusUpdate
from baytkom.services import notifier
from baytkom.utils.timezones import utcnow

router = APIRouter()


@router.get("/shortages", response_model=List[ShortageRead])
async def list_shortages(
    status: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    stmt = select(Shortage)
    if status:
        stmt = stmt.where(Shortage.status == status)
    res = await db.execute(stmt.order_by(Shortage.created_at.desc(), Shortage.id.desc()))
    return res.scalars().all()


@router.post("/shortages", response_model=ShortageRead)
async def create_shortage(
    payload: ShortageCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require(Capability.SHORTAGES_ADD)),
):
    shortage = Shortage(**payload.model_dump(), created_by=user.id)
    db.add(shortage)
    await db.commit()
    await db.refresh(shortage)

    approvers = await notifier.user_ids_with(db, Capability.SHORTAGES_APPROVE, exclude=user.id)
    await notifier.notify(
        db,
        approvers,
        title_ar="نواقص جديدة",
        title_en="New shortage reported",
        body_ar=f"{shortage.name_ar} × {shortage.quantity}",
        body_en=f"{shortage.name_en or shortage.name_ar} x {shortage.quantity}",
        type="shortage_new",
        url="/groceries",
    )
    await db.refresh(shortage)
    return shortage


@router.patch("/shortages/{shortage_id}/status", response_model=ShortageRead)
async def update_shortage_status(
    shortage_id: int,
    payload: ShortageStatusUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require(Capability.SHORTAGES_APPROVE)),
):
    shortage = await db.get(Shortage, shortage_id)
    if not shortage:
        raise NotFound("Shortage")
    shortage.status = payload.status
    shortage.approved_by = user.id
    shortage.updated_at = utcnow()
    await db.commit()
    await db.refresh(shortage)

    if shortage.created_by != user.id:
        await notifier.notify(
            db,
            [shortage.created_by],
            title_ar="تم تحديث النواقص",
            title_en="Shortage updated",
            body_ar=shortage.name_ar,
            body_en=f"{shortage.name_en or shortage.name_ar}: {shortage.status}",
            type=f"shortage_{shortage.status}",
            url="/groceries",
        )
        await db.refresh(shortage)
    return shortage


@router.delete("/shortages/{shortage_id}")
async def delete_shortage(shortage_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    shortage = await db.get(Shortage, shortage_id)
    if not shortage:
        raise NotFound("Shortage")
    if shortage.created_by != user.id and not can(user, Capability.SHORTAGES_APPROVE):
        raise Forbidden("Only the reporter can delete this shortage")
    await db.delete(shortage)
    await db.commit()
    return {"success": True}

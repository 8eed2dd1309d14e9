from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from baytkom.auth.dependencies import get_current_user
from baytkom.core.config import settings
from baytkom.crud import notification as notification_crud
from baytkom.db import get_db
from baytkom.models.user import User
from baytkom.schemas.notification import (
    NotificationRead,
    PushSubscriptionIn,
    PushUnsubscribeIn,
    UnreadCounts,
)
from baytkom.utils.time_windows import parse_since

router = APIRouter()


@router.get("/notifications", response_model=List[NotificationRead])
async def list_notifications(
    since: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await notification_crud.list_notifications(db, user.id, since=parse_since(since))


@router.get("/notifications/unread-count", response_model=UnreadCounts)
async def unread_count(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    return await notification_crud.unread_counts(db, user.id)


@router.patch("/notifications/{notification_id}/read", response_model=NotificationRead)
async def mark_read(notification_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    return await notification_crud.mark_read(db, user.id, notification_id)


@router.post("/notifications/mark-all-read")
async def mark_all_read(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    updated = await notification_crud.mark_all_read(db, user.id)
    return {"success": True, "updated": updated}


# ---------- Web Push ----------
@router.get("/vapid-public-key")
async def vapid_public_key():
    return {"publicKey": settings.vapid_public_key}


@router.post("/push-subscribe")
async def push_subscribe(
    payload: PushSubscriptionIn,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await notification_crud.upsert_subscription(db, user.id, payload)
    return {"success": True}


@router.post("/push-unsubscribe")
async def push_unsubscribe(
    payload: PushUnsubscribeIn,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    removed = await notification_crud.delete_subscription(db, user.id, payload.endpoint)
    return {"success": removed}

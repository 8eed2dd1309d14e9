from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from baytkom.core.constants import NOTIFICATION_SECTIONS, SECTIONS
from baytkom.core.errors import NotFound
from baytkom.models.notification import Notification, PushSubscription
from baytkom.schemas.notification import PushSubscriptionIn


def section_for(notification_type: str) -> str:
    for prefix, section in NOTIFICATION_SECTIONS.items():
        if (notification_type or "").startswith(prefix):
            return section
    return "home"


async def list_notifications(
    db: AsyncSession, user_id: str, since: Optional[datetime] = None, limit: int = 50
) -> List[Notification]:
    stmt = select(Notification).where(Notification.user_id == user_id)
    if since is not None:
        stmt = stmt.where(Notification.created_at >= since)
    stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)
    return (await db.execute(stmt)).scalars().all()


async def unread_counts(db: AsyncSession, user_id: str) -> dict:
    rows = await db.execute(
        select(Notification.type, func.count(Notification.id))
        .where(Notification.user_id == user_id, Notification.is_read == False)
        .group_by(Notification.type)
    )
    counts = {section: 0 for section in SECTIONS}
    total = 0
    for ntype, n in rows.all():
        counts[section_for(ntype)] += n
        total += n
    return {"count": total, **counts}


async def mark_read(db: AsyncSession, user_id: str, notification_id: int) -> Notification:
    res = await db.execute(
        select(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
    )
    notification = res.scalar_one_or_none()
    if not notification:
        raise NotFound("Notification")
    notification.is_read = True
    await db.commit()
    return notification


async def mark_all_read(db: AsyncSession, user_id: str) -> int:
    res = await db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read == False)
        .values(is_read=True)
    )
    await db.commit()
    return res.rowcount


# --------- Push subscriptions ---------
async def upsert_subscription(db: AsyncSession, user_id: str, data: PushSubscriptionIn) -> PushSubscription:
    res = await db.execute(
        select(PushSubscription).where(
            PushSubscription.user_id == user_id, PushSubscription.endpoint == data.endpoint
        )
    )
    sub = res.scalar_one_or_none()
    if not sub:
        sub = PushSubscription(user_id=user_id, endpoint=data.endpoint)
        db.add(sub)
    sub.p256dh = data.keys.p256dh
    sub.auth = data.keys.auth
    await db.commit()
    await db.refresh(sub)
    return sub


async def delete_subscription(db: AsyncSession, user_id: str, endpoint: str) -> bool:
    res = await db.execute(
        select(PushSubscription).where(
            PushSubscription.user_id == user_id, PushSubscription.endpoint == endpoint
        )
    )
    sub = res.scalar_one_or_none()
    if not sub:
        return False
    await db.delete(sub)
    await db.commit()
    return True

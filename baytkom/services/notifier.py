"""
Notification dispatcher

Inserts in-app notification rows for the recipients of a domain event and
then tries Web Push delivery to each recipient's devices. Delivery is
best-effort: nothing here ever fails the write that triggered it.
"""
import asyncio
import logging
from typing import Iterable, List, Optional

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from baytkom.auth.permissions import capabilities_for
from baytkom.models.notification import Notification, PushSubscription
from baytkom.models.user import User
from baytkom.services import push

log = logging.getLogger(__name__)


async def user_ids_with(db: AsyncSession, capability: str, exclude: Optional[str] = None) -> List[str]:
    users = (await db.execute(select(User).where(User.is_suspended == False))).scalars().all()
    return [u.id for u in users if capability in capabilities_for(u) and u.id != exclude]


async def user_ids_with_role(db: AsyncSession, role: str, exclude: Optional[str] = None) -> List[str]:
    rows = await db.execute(
        select(User.id).where(User.role == role, User.is_suspended == False)
    )
    return [uid for uid in rows.scalars().all() if uid != exclude]


async def unread_count(db: AsyncSession, user_id: str) -> int:
    res = await db.execute(
        select(func.count(Notification.id)).where(
            Notification.user_id == user_id, Notification.is_read == False
        )
    )
    return res.scalar_one()


async def notify(
    db: AsyncSession,
    user_ids: Iterable[Optional[str]],
    *,
    title_ar: str,
    title_en: Optional[str] = None,
    body_ar: Optional[str] = None,
    body_en: Optional[str] = None,
    type: str = "general",
    url: Optional[str] = None,
) -> List[Notification]:
    recipients = list(dict.fromkeys(uid for uid in user_ids if uid))
    if not recipients:
        return []

    try:
        rows = [
            Notification(
                user_id=uid,
                title_ar=title_ar,
                title_en=title_en,
                body_ar=body_ar,
                body_en=body_en,
                type=type,
                url=url,
            )
            for uid in recipients
        ]
        db.add_all(rows)
        await db.commit()
    except Exception:
        log.exception("failed to store %s notification for %s", type, recipients)
        await db.rollback()
        return []

    if push.push_enabled():
        for uid in recipients:
            await _push_to_user(db, uid, title_ar, body_ar, url, type)
    return rows


async def _push_to_user(db: AsyncSession, user_id: str, title, body, url, tag) -> None:
    try:
        subs = (
            await db.execute(select(PushSubscription).where(PushSubscription.user_id == user_id))
        ).scalars().all()
        if not subs:
            return
        payload = push.build_payload(title, body, url, tag, badge_count=await unread_count(db, user_id))

        gone = []
        for sub in subs:
            result = await asyncio.to_thread(push.send_push, sub.endpoint, sub.p256dh, sub.auth, payload)
            if result == push.PUSH_GONE:
                gone.append(sub.id)

        if gone:
            await db.execute(delete(PushSubscription).where(PushSubscription.id.in_(gone)))
            await db.commit()
    except Exception:
        log.warning("push delivery to %s failed", user_id, exc_info=True)
        await db.rollback()

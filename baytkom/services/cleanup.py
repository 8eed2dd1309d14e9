import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from baytkom.core.config import settings
from baytkom.core.constants import OrderStatus, TripStatus
from baytkom.models.housekeeping import MaidCall
from baytkom.models.logistics import Trip
from baytkom.models.notification import Notification
from baytkom.models.order import Order, OrderItem
from baytkom.utils.timezones import utcnow

log = logging.getLogger(__name__)


async def run_cleanup(db: AsyncSession, now: Optional[datetime] = None) -> dict:
    """Delete stale rows. Returns per-table delete counts."""
    now = now or utcnow()
    notif_cutoff = now - timedelta(days=settings.notification_retention_days)
    history_cutoff = now - timedelta(days=settings.history_retention_days)

    counts = {}

    res = await db.execute(
        delete(Notification).where(
            Notification.is_read == True,
            Notification.created_at < notif_cutoff,
        )
    )
    counts["notifications"] = res.rowcount

    res = await db.execute(
        delete(Trip).where(
            Trip.status.in_(TripStatus.TERMINAL),
            Trip.created_at < history_cutoff,
        )
    )
    counts["trips"] = res.rowcount

    old_orders = select(Order.id).where(
        Order.status.in_(OrderStatus.TERMINAL),
        Order.updated_at < history_cutoff,
    )
    await db.execute(delete(OrderItem).where(OrderItem.order_id.in_(old_orders)))
    res = await db.execute(delete(Order).where(Order.id.in_(old_orders)))
    counts["orders"] = res.rowcount

    res = await db.execute(
        delete(MaidCall).where(
            MaidCall.status == "dismissed",
            MaidCall.created_at < now - timedelta(days=1),
        )
    )
    counts["maid_calls"] = res.rowcount

    await db.commit()
    log.info("cleanup sweep: %s", counts)
    return counts


async def cleanup_loop(interval_minutes: int) -> None:
    from baytkom.db import async_session

    while True:
        await asyncio.sleep(interval_minutes * 60)
        try:
            async with async_session() as db:
                await run_cleanup(db)
        except Exception:
            log.exception("cleanup sweep failed")

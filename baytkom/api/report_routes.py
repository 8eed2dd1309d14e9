from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from baytkom.auth.permissions import Capability, require
from baytkom.core.constants import OrderStatus, TripStatus
from baytkom.db import get_db
from baytkom.models.logistics import Trip
from baytkom.models.order import Order
from baytkom.models.user import User
from baytkom.utils.timezones import LOCAL, UTC, local_today

router = APIRouter()


class MonthlyReport(BaseModel):
    month: str
    total_spent: int
    orders_completed: int
    trips_completed: int
    waiting_minutes: int


def month_bounds(month: str) -> tuple[datetime, datetime]:
    """Naive UTC [start, end) of a local calendar month given as YYYY-MM."""
    year, mon = (int(part) for part in month.split("-"))
    start = datetime(year, mon, 1, tzinfo=LOCAL)
    end = datetime(year + 1, 1, 1, tzinfo=LOCAL) if mon == 12 else datetime(year, mon + 1, 1, tzinfo=LOCAL)
    return (
        start.astimezone(UTC).replace(tzinfo=None),
        end.astimezone(UTC).replace(tzinfo=None),
    )


@router.get("/reports", response_model=MonthlyReport)
async def monthly_report(
    month: Optional[str] = Query(None, pattern=r"^\d{4}-(0[1-9]|1[0-2])$"),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require(Capability.ADMIN)),
):
    month = month or local_today().strftime("%Y-%m")
    start, end = month_bounds(month)

    orders = await db.execute(
        select(func.count(Order.id), func.coalesce(func.sum(Order.total_actual), 0)).where(
            Order.status == OrderStatus.COMPLETED,
            Order.completed_at >= start,
            Order.completed_at < end,
        )
    )
    orders_completed, total_spent = orders.one()

    trips = await db.execute(
        select(func.count(Trip.id), func.coalesce(func.sum(Trip.waiting_duration), 0)).where(
            Trip.status == TripStatus.COMPLETED,
            Trip.completed_at >= start,
            Trip.completed_at < end,
        )
    )
    trips_completed, waiting_seconds = trips.one()

    return MonthlyReport(
        month=month,
        total_spent=int(total_spent or 0),
        orders_completed=orders_completed,
        trips_completed=trips_completed,
        waiting_minutes=int(waiting_seconds or 0) // 60,
    )

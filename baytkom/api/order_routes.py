from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from baytkom.auth.dependencies import get_current_user
from baytkom.auth.permissions import Capability, can, ensure
from baytkom.core.constants import OrderStatus
from baytkom.core.errors import Forbidden, NotFound, ValidationError
from baytkom.crud import order as order_crud
from baytkom.db import get_db
from baytkom.models.user import User
from baytkom.schemas.order import (
    OrderActualUpdate,
    OrderCreate,
    OrderDetail,
    OrderDriverUpdate,
    OrderItemCreate,
    OrderItemRead,
    OrderItemUpdate,
    OrderRead,
    OrderScheduleUpdate,
    OrderStats,
    OrderStatusLiteral,
    OrderStatusUpdate,
)
from baytkom.services import notifier
from baytkom.services.order_status import apply_order_transition, check_order_driver

router = APIRouter()

STATUS_TITLES = {
    OrderStatus.APPROVED: ("تمت الموافقة على الطلب", "Order approved"),
    OrderStatus.REJECTED: ("تم رفض الطلب", "Order rejected"),
    OrderStatus.IN_PROGRESS: ("جاري شراء الطلب", "Order is being purchased"),
    OrderStatus.COMPLETED: ("تم شراء الطلب", "Order completed"),
}


async def _visible_order(db: AsyncSession, user: User, order_id: int, with_items: bool = False):
    order = await order_crud.get_order(db, order_id, with_items=with_items)
    if not order_crud.can_view_order(user, order):
        raise NotFound("Order")
    return order


# ---------- Orders ----------
@router.get("/orders", response_model=List[OrderRead])
async def list_orders(
    status: Optional[OrderStatusLiteral] = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await order_crud.list_orders_for(db, user, status)


@router.get("/orders/{order_id}", response_model=OrderDetail)
async def get_order(order_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    return await _visible_order(db, user, order_id, with_items=True)


@router.post("/orders", response_model=OrderDetail)
async def create_order(
    payload: OrderCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    order = await order_crud.create_order(db, user, payload)
    order_id = order.id

    approvers = await notifier.user_ids_with(db, Capability.ORDERS_APPROVE, exclude=user.id)
    await notifier.notify(
        db,
        approvers,
        title_ar="طلب مشتريات جديد",
        title_en="New grocery order",
        body_ar=f"طلب رقم {order_id} من {user.name}",
        body_en=f"Order #{order_id} from {user.name}",
        type="order_new",
        url="/groceries",
    )
    return await order_crud.get_order(db, order_id, with_items=True)


@router.patch("/orders/{order_id}/status", response_model=OrderRead)
async def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    order = await order_crud.get_order(db, order_id)
    apply_order_transition(order, user, payload.status)
    await db.commit()
    await db.refresh(order)

    title_ar, title_en = STATUS_TITLES[order.status]
    recipients = [order.created_by]
    if order.status == OrderStatus.APPROVED:
        recipients += await notifier.user_ids_with_role(db, "driver")
    await notifier.notify(
        db,
        [uid for uid in recipients if uid != user.id],
        title_ar=title_ar,
        title_en=title_en,
        body_ar=f"طلب رقم {order.id}",
        body_en=f"Order #{order.id}",
        type=f"order_{order.status}",
        url="/groceries",
    )
    await db.refresh(order)
    return order


@router.patch("/orders/{order_id}/driver", response_model=OrderRead)
async def assign_driver(
    order_id: int,
    payload: OrderDriverUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ensure(user, Capability.ORDERS_FULFILL)
    order = await order_crud.get_order(db, order_id)
    if order.status in OrderStatus.TERMINAL:
        raise Forbidden(f"Cannot assign a driver to a {order.status} order")

    driver_id = payload.driver_id or user.id
    if driver_id != user.id:
        ensure(user, Capability.ADMIN)
    driver = await db.get(User, driver_id)
    if not driver or driver.role not in ("driver", "admin"):
        raise ValidationError("Assigned driver must be a driver")

    order.assigned_driver = driver_id
    await db.commit()
    await db.refresh(order)
    return order


@router.patch("/orders/{order_id}/actual", response_model=OrderRead)
async def update_actual_total(
    order_id: int,
    payload: OrderActualUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ensure(user, Capability.ORDERS_FULFILL)
    order = await order_crud.get_order(db, order_id)
    if order.status not in (OrderStatus.IN_PROGRESS, OrderStatus.COMPLETED):
        raise Forbidden("Totals can only be recorded once shopping has started")
    check_order_driver(user, order)

    order.total_actual = payload.total_actual
    if payload.receipt_image_url:
        order.receipt_image_url = payload.receipt_image_url
    await db.commit()
    await db.refresh(order)
    return order


@router.patch("/orders/{order_id}/scheduled", response_model=OrderRead)
async def update_schedule(
    order_id: int,
    payload: OrderScheduleUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    order = await _visible_order(db, user, order_id)
    if order.created_by != user.id and not can(user, Capability.ORDERS_APPROVE):
        raise Forbidden("Only the creator or an approver can reschedule")
    if order.status in OrderStatus.TERMINAL:
        raise Forbidden(f"Cannot reschedule a {order.status} order")
    order.scheduled_for = payload.scheduled_for
    await db.commit()
    await db.refresh(order)
    return order


# ---------- Order Items ----------
@router.get("/orders/{order_id}/items", response_model=List[OrderItemRead])
async def list_items(order_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    await _visible_order(db, user, order_id)
    return await order_crud.get_order_items(db, order_id)


@router.post("/orders/{order_id}/items", response_model=OrderItemRead)
async def add_item(
    order_id: int,
    payload: OrderItemCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    order = await _visible_order(db, user, order_id)
    order_crud.ensure_can_edit_items(user, order)
    return await order_crud.add_item(db, order, payload)


@router.patch("/order-items/{item_id}", response_model=OrderItemRead)
async def update_item(
    item_id: int,
    payload: OrderItemUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    item = await order_crud.get_item(db, item_id)
    order = await _visible_order(db, user, item.order_id)
    order_crud.ensure_can_edit_items(user, order)
    return await order_crud.update_item(db, order, item, payload)


@router.delete("/order-items/{item_id}")
async def delete_item(item_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    item = await order_crud.get_item(db, item_id)
    order = await _visible_order(db, user, item.order_id)
    order_crud.ensure_can_edit_items(user, order)
    await order_crud.delete_item(db, order, item)
    return {"success": True}


# ---------- Stats ----------
@router.get("/stats", response_model=OrderStats)
async def stats(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    return await order_crud.order_stats(db)

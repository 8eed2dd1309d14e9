from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from baytkom.auth.permissions import Capability, can
from baytkom.core.constants import OrderStatus
from baytkom.core.errors import Forbidden, NotFound, ValidationError
from baytkom.models.catalog import Product
from baytkom.models.order import Order, OrderItem
from baytkom.models.user import User
from baytkom.schemas.order import OrderCreate, OrderItemCreate, OrderItemUpdate
from baytkom.utils.timezones import utcnow

DRIVER_VISIBLE = (OrderStatus.APPROVED, OrderStatus.IN_PROGRESS, OrderStatus.COMPLETED)


# --------- Access rules ---------
def can_view_order(user: User, order: Order) -> bool:
    if can(user, Capability.ORDERS_VIEW_ALL) or order.created_by == user.id:
        return True
    return can(user, Capability.ORDERS_FULFILL) and order.status in DRIVER_VISIBLE


def ensure_can_edit_items(user: User, order: Order) -> None:
    if can(user, Capability.ORDERS_APPROVE):
        return
    if order.created_by == user.id and order.status == OrderStatus.PENDING:
        return
    if can(user, Capability.ORDERS_FULFILL) and order.status in (OrderStatus.APPROVED, OrderStatus.IN_PROGRESS):
        return
    raise Forbidden("Order items can no longer be changed")


# --------- Orders ---------
async def get_order(db: AsyncSession, order_id: int, with_items: bool = False) -> Order:
    stmt = select(Order).where(Order.id == order_id)
    if with_items:
        stmt = stmt.options(selectinload(Order.items))
    order = (await db.execute(stmt)).scalar_one_or_none()
    if not order:
        raise NotFound("Order")
    return order


async def list_orders_for(db: AsyncSession, user: User, status: Optional[str] = None) -> List[Order]:
    stmt = select(Order).order_by(Order.created_at.desc(), Order.id.desc())
    if can(user, Capability.ORDERS_VIEW_ALL):
        pass
    elif can(user, Capability.ORDERS_FULFILL):
        stmt = stmt.where(Order.status.in_(DRIVER_VISIBLE))
    else:
        stmt = stmt.where(Order.created_by == user.id)

    if status:
        stmt = stmt.where(Order.status == status)
    return (await db.execute(stmt)).scalars().all()


async def create_order(db: AsyncSession, user: User, data: OrderCreate) -> Order:
    order = Order(
        status=OrderStatus.PENDING,
        created_by=user.id,
        notes=data.notes,
        scheduled_for=data.scheduled_for,
    )
    db.add(order)
    await db.flush()  # Get order ID before adding items

    for item in data.items:
        await _build_item(db, order, item)

    await db.flush()
    await recompute_estimated_total(db, order)
    await db.commit()
    await db.refresh(order)
    return order


async def recompute_estimated_total(db: AsyncSession, order: Order) -> int:
    res = await db.execute(
        select(func.coalesce(func.sum(OrderItem.quantity * OrderItem.estimated_price), 0))
        .where(OrderItem.order_id == order.id)
    )
    order.total_estimated = int(res.scalar_one())
    order.updated_at = utcnow()
    return order.total_estimated


# --------- Order Items ---------
async def _get_product(db: AsyncSession, product_id: int) -> Product:
    product = await db.get(Product, product_id)
    if not product or not product.is_active:
        raise NotFound("Product")
    return product


async def _build_item(db: AsyncSession, order: Order, data: OrderItemCreate) -> OrderItem:
    product = await _get_product(db, data.product_id)
    item = OrderItem(
        order_id=order.id,
        product_id=product.id,
        quantity=data.quantity,
        estimated_price=data.estimated_price if data.estimated_price is not None else (product.estimated_price or 0),
        notes=data.notes,
    )
    db.add(item)
    return item


async def get_order_items(db: AsyncSession, order_id: int) -> List[OrderItem]:
    res = await db.execute(select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id))
    return res.scalars().all()


async def add_item(db: AsyncSession, order: Order, data: OrderItemCreate) -> OrderItem:
    item = await _build_item(db, order, data)
    await db.flush()
    await recompute_estimated_total(db, order)
    await db.commit()
    await db.refresh(item)
    return item


async def get_item(db: AsyncSession, item_id: int) -> OrderItem:
    item = await db.get(OrderItem, item_id)
    if not item:
        raise NotFound("Order item")
    return item


async def update_item(db: AsyncSession, order: Order, item: OrderItem, data: OrderItemUpdate) -> OrderItem:
    changes = data.model_dump(exclude_unset=True)
    if changes.get("substitute_product_id") is not None:
        await _get_product(db, changes["substitute_product_id"])
    if "quantity" in changes and changes["quantity"] is None:
        raise ValidationError("quantity cannot be empty")
    for key, value in changes.items():
        setattr(item, key, value)

    await db.flush()
    await recompute_estimated_total(db, order)
    await db.commit()
    await db.refresh(item)
    return item


async def delete_item(db: AsyncSession, order: Order, item: OrderItem) -> None:
    await db.delete(item)
    await db.flush()
    await recompute_estimated_total(db, order)
    await db.commit()


# --------- Stats ---------
async def order_stats(db: AsyncSession) -> dict:
    rows = (await db.execute(select(Order.status, func.count(Order.id)).group_by(Order.status))).all()
    counts = {status: n for status, n in rows}
    spent = await db.execute(
        select(func.coalesce(func.sum(Order.total_actual), 0)).where(Order.status == OrderStatus.COMPLETED)
    )
    return {
        "pending": counts.get(OrderStatus.PENDING, 0),
        "approved": counts.get(OrderStatus.APPROVED, 0),
        "in_progress": counts.get(OrderStatus.IN_PROGRESS, 0),
        "completed": counts.get(OrderStatus.COMPLETED, 0),
        "rejected": counts.get(OrderStatus.REJECTED, 0),
        "total": sum(counts.values()),
        "total_spent": int(spent.scalar_one()),
    }

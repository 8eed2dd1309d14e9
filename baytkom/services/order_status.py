from datetime import datetime
from typing import Optional
import logging

from baytkom.auth.permissions import Capability, can
from baytkom.core.constants import OrderStatus
from baytkom.core.errors import Forbidden, MissingPermission
from baytkom.models.order import Order
from baytkom.models.user import User
from baytkom.utils.timezones import utcnow

log = logging.getLogger(__name__)

# (from, to) -> capability the caller needs
ORDER_TRANSITIONS = {
    (OrderStatus.PENDING, OrderStatus.APPROVED): Capability.ORDERS_APPROVE,
    (OrderStatus.PENDING, OrderStatus.REJECTED): Capability.ORDERS_APPROVE,
    (OrderStatus.APPROVED, OrderStatus.IN_PROGRESS): Capability.ORDERS_FULFILL,
    (OrderStatus.IN_PROGRESS, OrderStatus.COMPLETED): Capability.ORDERS_FULFILL,
}

# capability implied by the requested target status alone
TARGET_CAPABILITY = {
    OrderStatus.APPROVED: Capability.ORDERS_APPROVE,
    OrderStatus.REJECTED: Capability.ORDERS_APPROVE,
    OrderStatus.IN_PROGRESS: Capability.ORDERS_FULFILL,
    OrderStatus.COMPLETED: Capability.ORDERS_FULFILL,
}


def check_order_transition(user: User, current: str, target: str) -> str:
    """Returns the capability that authorised the move, or raises Forbidden."""
    needed = TARGET_CAPABILITY.get(target)
    if needed and not can(user, needed):
        raise MissingPermission(needed)

    needed = ORDER_TRANSITIONS.get((current, target))
    if needed is None:
        raise Forbidden(f"Cannot move order from {current} to {target}")
    if not can(user, needed):
        raise MissingPermission(needed)
    return needed


def check_order_driver(user: User, order: Order) -> None:
    if order.assigned_driver not in (None, user.id) and not can(user, Capability.ADMIN):
        raise Forbidden("Order is assigned to another driver")


def apply_order_transition(order: Order, user: User, target: str, now: Optional[datetime] = None) -> Order:
    """Validate and apply a status change in memory. The caller commits."""
    needed = check_order_transition(user, order.status, target)
    if needed == Capability.ORDERS_FULFILL:
        check_order_driver(user, order)
    now = now or utcnow()

    previous = order.status
    order.status = target
    order.updated_at = now

    if target in (OrderStatus.APPROVED, OrderStatus.REJECTED):
        order.approved_by = user.id
    elif target == OrderStatus.IN_PROGRESS and not order.assigned_driver:
        order.assigned_driver = user.id
    elif target == OrderStatus.COMPLETED:
        order.completed_at = now

    log.info("order %s: %s -> %s by %s", order.id, previous, target, user.id)
    return order

from datetime import datetime

import pytest

from baytkom.core.errors import Forbidden, MissingPermission
from baytkom.models.order import Order
from baytkom.models.user import User
from baytkom.services.order_status import apply_order_transition

NOW = datetime(2030, 1, 1, 12, 0)


def user(uid, role="household", **flags):
    return User(id=uid, username=uid, role=role, is_suspended=False, **flags)


def order(status="pending", **kwargs):
    return Order(id=12, status=status, created_by="creator", **kwargs)


def test_pending_to_approved_needs_approval_capability():
    o = order()
    with pytest.raises(MissingPermission) as exc:
        apply_order_transition(o, user("sara", can_approve=False), "approved", now=NOW)
    assert exc.value.status_code == 403
    assert "orders.approve" in exc.value.detail
    assert o.status == "pending"
    assert o.approved_by is None


def test_approver_sets_approved_by():
    o = order()
    apply_order_transition(o, user("mama", can_approve=True), "approved", now=NOW)
    assert o.status == "approved"
    assert o.approved_by == "mama"
    assert o.updated_at == NOW


def test_reject_records_approver():
    o = order()
    apply_order_transition(o, user("mama", can_approve=True), "rejected", now=NOW)
    assert (o.status, o.approved_by) == ("rejected", "mama")


def test_driver_picking_up_order_becomes_its_driver():
    o = order("approved")
    apply_order_transition(o, user("drv", role="driver"), "in_progress", now=NOW)
    assert o.status == "in_progress"
    assert o.assigned_driver == "drv"


def test_preassigned_driver_is_kept():
    o = order("approved", assigned_driver="other")
    apply_order_transition(o, user("boss", role="admin"), "in_progress", now=NOW)
    assert o.assigned_driver == "other"


def test_unknown_pair_is_rejected_without_mutation():
    o = order()
    with pytest.raises(Forbidden) as exc:
        apply_order_transition(o, user("boss", role="admin"), "completed", now=NOW)
    assert exc.value.detail == "Cannot move order from pending to completed"
    assert o.status == "pending"
    assert o.updated_at is None


def test_terminal_orders_stay_terminal():
    o = order("completed")
    with pytest.raises(Forbidden):
        apply_order_transition(o, user("boss", role="admin"), "in_progress", now=NOW)


def test_driver_cannot_approve():
    with pytest.raises(MissingPermission):
        apply_order_transition(order(), user("drv", role="driver"), "approved", now=NOW)


def test_completion_is_timestamped():
    o = order("in_progress", assigned_driver="drv")
    apply_order_transition(o, user("drv", role="driver"), "completed", now=NOW)
    assert o.completed_at == NOW


def test_other_driver_cannot_fulfil_assigned_order():
    o = order("approved", assigned_driver="drv")
    with pytest.raises(Forbidden) as exc:
        apply_order_transition(o, user("other", role="driver"), "in_progress", now=NOW)
    assert exc.value.detail == "Order is assigned to another driver"
    assert o.status == "approved"

    o = order("in_progress", assigned_driver="drv")
    with pytest.raises(Forbidden):
        apply_order_transition(o, user("other", role="driver"), "completed", now=NOW)
    assert o.completed_at is None

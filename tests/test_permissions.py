import pytest

from baytkom.auth.permissions import ALL_CAPABILITIES, Capability, can, capabilities_for, ensure
from baytkom.core.errors import MissingPermission
from baytkom.models.user import User


def make_user(role="household", **flags):
    flags.setdefault("is_suspended", False)
    return User(id=f"{role}-1", username=role, role=role, **flags)


def test_admin_holds_every_capability():
    assert capabilities_for(make_user("admin")) == ALL_CAPABILITIES


def test_household_without_flags_cannot_approve():
    user = make_user("household")
    assert not can(user, Capability.ORDERS_APPROVE)
    assert can(user, Capability.HOUSEKEEPING_MANAGE)


def test_flags_layer_on_top_of_role():
    user = make_user("household", can_approve=True, can_approve_trips=True)
    caps = capabilities_for(user)
    assert Capability.ORDERS_APPROVE in caps
    assert Capability.ORDERS_VIEW_ALL in caps
    assert Capability.SHORTAGES_APPROVE in caps
    assert Capability.TRIPS_APPROVE in caps
    assert Capability.SHORTAGES_ADD not in caps


def test_driver_can_fulfil_and_drive_only():
    caps = capabilities_for(make_user("driver"))
    assert caps == {Capability.ORDERS_FULFILL, Capability.TRIPS_DRIVE}


def test_maid_completes_housekeeping():
    user = make_user("maid", can_add_shortages=True)
    assert can(user, Capability.HOUSEKEEPING_COMPLETE)
    assert can(user, Capability.SHORTAGES_ADD)
    assert not can(user, Capability.HOUSEKEEPING_MANAGE)


def test_suspended_user_has_nothing():
    assert capabilities_for(make_user("admin", is_suspended=True)) == frozenset()


def test_ensure_names_the_missing_capability():
    with pytest.raises(MissingPermission) as exc:
        ensure(make_user("maid"), Capability.ORDERS_APPROVE)
    assert exc.value.status_code == 403
    assert exc.value.detail == "Missing permission: orders.approve"
    assert exc.value.capability == Capability.ORDERS_APPROVE

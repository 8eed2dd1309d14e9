# baytkom/auth/permissions.py
from fastapi import Depends

from baytkom.core.errors import MissingPermission
from baytkom.models.user import User


class Capability:
    ADMIN = "admin"
    ORDERS_APPROVE = "orders.approve"
    ORDERS_VIEW_ALL = "orders.view_all"
    ORDERS_FULFILL = "orders.fulfill"
    TRIPS_APPROVE = "trips.approve"
    TRIPS_DRIVE = "trips.drive"
    SHORTAGES_ADD = "shortages.add"
    SHORTAGES_APPROVE = "shortages.approve"
    CATALOG_MANAGE = "catalog.manage"
    USERS_MANAGE = "users.manage"
    HOUSEKEEPING_MANAGE = "housekeeping.manage"
    HOUSEKEEPING_COMPLETE = "housekeeping.complete"
    LOGISTICS_MANAGE = "logistics.manage"


ALL_CAPABILITIES = frozenset(
    v for k, v in vars(Capability).items() if not k.startswith("_")
)

# Granted by role alone
ROLE_CAPABILITIES = {
    "admin": ALL_CAPABILITIES,
    "household": frozenset({Capability.HOUSEKEEPING_MANAGE, Capability.HOUSEKEEPING_COMPLETE}),
    "maid": frozenset({Capability.HOUSEKEEPING_COMPLETE}),
    "driver": frozenset({Capability.ORDERS_FULFILL, Capability.TRIPS_DRIVE}),
}

# Granted by per-user flags, independent of role
FLAG_CAPABILITIES = {
    "can_approve": frozenset({
        Capability.ORDERS_APPROVE,
        Capability.ORDERS_VIEW_ALL,
        Capability.SHORTAGES_APPROVE,
    }),
    "can_approve_trips": frozenset({Capability.TRIPS_APPROVE}),
    "can_add_shortages": frozenset({Capability.SHORTAGES_ADD}),
}


def capabilities_for(user: User) -> frozenset:
    if user is None or user.is_suspended:
        return frozenset()
    caps = set(ROLE_CAPABILITIES.get((user.role or "").lower(), frozenset()))
    for flag, granted in FLAG_CAPABILITIES.items():
        if getattr(user, flag, False):
            caps |= granted
    return frozenset(caps)


def can(user: User, capability: str) -> bool:
    return capability in capabilities_for(user)


def ensure(user: User, capability: str) -> None:
    if not can(user, capability):
        raise MissingPermission(capability)


def require(capability: str):
    """Route dependency: the current user, if it holds `capability`."""
    from baytkom.auth.dependencies import get_current_user

    async def _dep(user: User = Depends(get_current_user)) -> User:
        ensure(user, capability)
        return user

    return _dep

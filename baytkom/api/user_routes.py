from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from baytkom.auth.dependencies import get_current_user
from baytkom.auth.passwords import hash_password
from baytkom.auth.permissions import Capability, require
from baytkom.core.errors import Forbidden, ValidationError
from baytkom.crud import user as user_crud
from baytkom.db import get_db
from baytkom.models.housekeeping import UserRoom
from baytkom.models.notification import Notification, PushSubscription
from baytkom.models.user import User
from baytkom.schemas.user import (
    SuspendUpdate,
    UserCreate,
    UserDetailsUpdate,
    UserRead,
    UserRoleUpdate,
)

router = APIRouter()


# ---------- Everyone: user directory (names for orders/trips) ----------
@router.get("/users", response_model=List[UserRead])
async def list_users(
    role: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await user_crud.list_users(db, role)


# ---------- Admin: create / edit / suspend / delete ----------
@router.post("/admin/create-user", response_model=UserRead)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require(Capability.USERS_MANAGE)),
):
    return await user_crud.create_user(db, payload)


@router.patch("/users/{user_id}/role", response_model=UserRead)
async def update_role(
    user_id: str,
    payload: UserRoleUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require(Capability.USERS_MANAGE)),
):
    target = await user_crud.get_user(db, user_id)
    if target.id == admin.id and payload.role != "admin":
        raise ValidationError("You cannot remove your own admin role")

    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(target, key, value)
    await db.commit()
    await db.refresh(target)
    return target


@router.patch("/users/{user_id}/details", response_model=UserRead)
async def update_details(
    user_id: str,
    payload: UserDetailsUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if user.id != user_id and user.role != "admin":
        raise Forbidden("You can only edit your own profile")

    target = await user_crud.get_user(db, user_id)
    changes = payload.model_dump(exclude_unset=True)
    password = changes.pop("password", None)
    for key, value in changes.items():
        setattr(target, key, value)
    if password:
        target.password = hash_password(password)
    await db.commit()
    await db.refresh(target)
    return target


@router.patch("/users/{user_id}/suspend", response_model=UserRead)
async def suspend_user(
    user_id: str,
    payload: SuspendUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require(Capability.USERS_MANAGE)),
):
    if user_id == admin.id:
        raise ValidationError("You cannot suspend yourself")
    target = await user_crud.get_user(db, user_id)
    target.is_suspended = payload.is_suspended
    await db.commit()
    await db.refresh(target)
    return target


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require(Capability.USERS_MANAGE)),
):
    if user_id == admin.id:
        raise ValidationError("You cannot delete yourself")
    target = await user_crud.get_user(db, user_id)

    await db.execute(delete(UserRoom).where(UserRoom.user_id == user_id))
    await db.execute(delete(PushSubscription).where(PushSubscription.user_id == user_id))
    await db.execute(delete(Notification).where(Notification.user_id == user_id))
    await db.delete(target)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ValidationError("User still owns orders or trips; suspend the account instead")
    return {"success": True}

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from baytkom.auth.dependencies import get_current_user
from baytkom.auth.passwords import hash_password, verify_password
from baytkom.auth.permissions import capabilities_for
from baytkom.core.errors import Unauthorized, ValidationError
from baytkom.crud import user as user_crud
from baytkom.db import get_db
from baytkom.models.user import User
from baytkom.schemas.user import CurrentUserRead, LoginRequest, PasswordChange

router = APIRouter()


def current_user_payload(user: User) -> CurrentUserRead:
    data = CurrentUserRead.model_validate(user)
    data.capabilities = sorted(capabilities_for(user))
    return data


@router.post("/login", response_model=CurrentUserRead)
async def login(
    payload: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    user = await user_crud.authenticate(db, payload.username, payload.password)
    if not user:
        raise Unauthorized("Invalid username or password")

    request.session.clear()
    request.session["user_id"] = user.id
    return current_user_payload(user)


@router.post("/logout")
async def logout(request: Request):
    request.session.clear()
    return {"success": True}


@router.get("/user", response_model=CurrentUserRead)
async def whoami(user: User = Depends(get_current_user)):
    return current_user_payload(user)


@router.patch("/password")
async def change_password(
    payload: PasswordChange,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ok, _ = verify_password(payload.current_password, user.password)
    if not ok:
        raise ValidationError("Current password is incorrect")
    user.password = hash_password(payload.new_password)
    await db.commit()
    return {"success": True}

# auth/dependencies.py
from fastapi import Request, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from baytkom.db import get_db
from baytkom.core.errors import Unauthorized
from baytkom.models.user import User


async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    user_id = request.session.get("user_id")
    if not user_id:
        raise Unauthorized()

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user or user.is_suspended:
        request.session.clear()
        raise Unauthorized("Session is no longer valid")
    return user

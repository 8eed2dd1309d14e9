from typing import List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from baytkom.auth.passwords import hash_password, verify_password
from baytkom.core.errors import NotFound, ValidationError
from baytkom.models.user import User
from baytkom.schemas.user import UserCreate

log = logging.getLogger(__name__)


async def get_user(db: AsyncSession, user_id: str) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise NotFound("User")
    return user


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    res = await db.execute(select(User).where(User.username == username.strip().lower()))
    return res.scalar_one_or_none()


async def list_users(db: AsyncSession, role: Optional[str] = None) -> List[User]:
    stmt = select(User).order_by(User.created_at)
    if role:
        stmt = stmt.where(User.role == role)
    return (await db.execute(stmt)).scalars().all()


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    if await get_user_by_username(db, data.username):
        raise ValidationError("Username already exists")

    fields = data.model_dump(exclude={"password"})
    user = User(**fields, password=hash_password(data.password))
    db.add(user)
    await db.commit()
    await db.refresh(user)
    log.info("created user %s (%s)", user.username, user.role)
    return user


async def authenticate(db: AsyncSession, username: str, password: str) -> Optional[User]:
    user = await get_user_by_username(db, username)
    if not user or user.is_suspended:
        return None

    ok, upgraded = verify_password(password, user.password)
    if not ok:
        return None
    if upgraded:
        user.password = upgraded
        await db.commit()
    return user


async def ensure_default_admin(db: AsyncSession, username: str, password: str) -> Optional[User]:
    res = await db.execute(select(User).where(User.role == "admin"))
    if res.scalars().first():
        return None

    log.info("👤 No admin found. Creating default admin user '%s'", username)
    return await create_user(
        db, UserCreate(username=username, password=password, role="admin", display_name="Admin")
    )

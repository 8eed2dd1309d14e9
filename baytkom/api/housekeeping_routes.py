from datetime import date as date_type
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from baytkom.auth.dependencies import get_current_user
from baytkom.auth.permissions import Capability, can, require
from baytkom.core.errors import Forbidden, NotFound, ValidationError
from baytkom.db import get_db
from baytkom.models.housekeeping import HousekeepingTask, MaidCall, Room, TaskCompletion, UserRoom
from baytkom.models.user import User
from baytkom.schemas.housekeeping import (
    HousekeepingTaskCreate,
    HousekeepingTaskRead,
    HousekeepingTaskUpdate,
    MaidCallRead,
    RoomCreate,
    RoomRead,
    RoomUpdate,
    TaskCompletionCreate,
    TaskCompletionRead,
    UserRoomsUpdate,
)
from baytkom.services import notifier
from baytkom.services.housekeeping import completion_key, is_task_due
from baytkom.utils.timezones import local_today, utcnow

router = APIRouter()

manage_housekeeping = require(Capability.HOUSEKEEPING_MANAGE)
complete_housekeeping = require(Capability.HOUSEKEEPING_COMPLETE)

DATE_QUERY = Query(None, pattern=r"^\d{4}-\d{2}-\d{2}$")


def _parse_day(value: Optional[str]) -> date_type:
    if not value:
        return local_today()
    try:
        return date_type.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid date: {value}")


# ---------- Rooms ----------
@router.get("/rooms", response_model=List[RoomRead])
async def list_rooms(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    res = await db.execute(select(Room).where(Room.is_active == True).order_by(Room.sort_order, Room.id))
    return res.scalars().all()


@router.post("/rooms", response_model=RoomRead)
async def create_room(payload: RoomCreate, db: AsyncSession = Depends(get_db), user: User = Depends(manage_housekeeping)):
    room = Room(**payload.model_dump())
    db.add(room)
    await db.commit()
    await db.refresh(room)
    return room


@router.patch("/rooms/{room_id}", response_model=RoomRead)
async def update_room(
    room_id: int,
    payload: RoomUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_housekeeping),
):
    room = await db.get(Room, room_id)
    if not room:
        raise NotFound("Room")
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(room, key, value)
    await db.commit()
    await db.refresh(room)
    return room


@router.delete("/rooms/{room_id}")
async def delete_room(room_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(manage_housekeeping)):
    room = await db.get(Room, room_id)
    if not room:
        raise NotFound("Room")
    room.is_active = False
    await db.commit()
    return {"success": True}


# ---------- User rooms ----------
@router.get("/user-rooms/{user_id}", response_model=List[int])
async def get_user_rooms(user_id: str, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    if user_id != user.id and not can(user, Capability.HOUSEKEEPING_MANAGE):
        raise Forbidden("You can only view your own rooms")
    res = await db.execute(select(UserRoom.room_id).where(UserRoom.user_id == user_id).order_by(UserRoom.room_id))
    return res.scalars().all()


@router.put("/user-rooms/{user_id}", response_model=List[int])
async def set_user_rooms(
    user_id: str,
    payload: UserRoomsUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_housekeeping),
):
    if not await db.get(User, user_id):
        raise NotFound("User")
    room_ids = sorted(set(payload.room_ids))
    if room_ids:
        found = (await db.execute(select(Room.id).where(Room.id.in_(room_ids)))).scalars().all()
        missing = set(room_ids) - set(found)
        if missing:
            raise ValidationError(f"Unknown room ids: {sorted(missing)}")

    await db.execute(delete(UserRoom).where(UserRoom.user_id == user_id))
    for room_id in room_ids:
        db.add(UserRoom(user_id=user_id, room_id=room_id))
    await db.commit()
    return room_ids


# ---------- Housekeeping tasks ----------
@router.get("/housekeeping-tasks", response_model=List[HousekeepingTaskRead])
async def list_tasks(
    date: Optional[str] = DATE_QUERY,
    room_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    stmt = (
        select(HousekeepingTask)
        .options(selectinload(HousekeepingTask.room))
        .where(HousekeepingTask.is_active == True)
        .order_by(HousekeepingTask.sort_order, HousekeepingTask.id)
    )
    if room_id is not None:
        stmt = stmt.where(HousekeepingTask.room_id == room_id)
    tasks = (await db.execute(stmt)).scalars().all()

    if date is None:
        return tasks
    day = _parse_day(date)
    return [t for t in tasks if is_task_due(t, day, t.room)]


@router.post("/housekeeping-tasks", response_model=HousekeepingTaskRead)
async def create_task(
    payload: HousekeepingTaskCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_housekeeping),
):
    if not await db.get(Room, payload.room_id):
        raise ValidationError("Invalid room")
    task = HousekeepingTask(**payload.model_dump())
    db.add(task)
    await db.commit()
    await db.refresh(task)
    return task


@router.patch("/housekeeping-tasks/{task_id}", response_model=HousekeepingTaskRead)
async def update_task(
    task_id: int,
    payload: HousekeepingTaskUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_housekeeping),
):
    task = await db.get(HousekeepingTask, task_id)
    if not task:
        raise NotFound("Task")
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("room_id") is not None and not await db.get(Room, changes["room_id"]):
        raise ValidationError("Invalid room")
    for key, value in changes.items():
        setattr(task, key, value)
    await db.commit()
    await db.refresh(task)
    return task


@router.delete("/housekeeping-tasks/{task_id}")
async def delete_task(task_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(manage_housekeeping)):
    task = await db.get(HousekeepingTask, task_id)
    if not task:
        raise NotFound("Task")
    await db.execute(delete(TaskCompletion).where(TaskCompletion.task_id == task_id))
    await db.delete(task)
    await db.commit()
    return {"success": True}


# ---------- Task completions ----------
@router.get("/task-completions", response_model=List[TaskCompletionRead])
async def list_completions(
    date: Optional[str] = DATE_QUERY,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    day = _parse_day(date)
    keys = {completion_key(freq, day) for freq in ("daily", "weekly", "monthly")}
    res = await db.execute(
        select(TaskCompletion)
        .where(TaskCompletion.completion_date.in_(keys))
        .order_by(TaskCompletion.completed_at)
    )
    return res.scalars().all()


@router.post("/task-completions", response_model=TaskCompletionRead)
async def complete_task(
    payload: TaskCompletionCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(complete_housekeeping),
):
    task = await db.get(HousekeepingTask, payload.task_id)
    if not task:
        raise NotFound("Task")
    key = completion_key(task.frequency, _parse_day(payload.date))

    existing = (
        await db.execute(
            select(TaskCompletion).where(
                TaskCompletion.task_id == task.id,
                TaskCompletion.completion_date == key,
            )
        )
    ).scalar_one_or_none()
    if existing:
        return existing

    completion = TaskCompletion(task_id=task.id, completed_by=user.id, completion_date=key)
    db.add(completion)
    await db.commit()
    await db.refresh(completion)
    return completion


@router.delete("/task-completions/{task_id}/{key}")
async def undo_completion(
    task_id: int,
    key: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(complete_housekeeping),
):
    res = await db.execute(
        delete(TaskCompletion).where(
            TaskCompletion.task_id == task_id,
            TaskCompletion.completion_date == key,
        )
    )
    if not res.rowcount:
        raise NotFound("Completion")
    await db.commit()
    return {"success": True}


# ---------- Maid calls ----------
@router.get("/maid-calls", response_model=List[MaidCallRead])
async def list_maid_calls(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    res = await db.execute(
        select(MaidCall).where(MaidCall.status == "active").order_by(MaidCall.created_at.desc())
    )
    return res.scalars().all()


@router.post("/maid-calls", response_model=MaidCallRead)
async def call_maid(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    call = MaidCall(called_by=user.id)
    db.add(call)
    await db.commit()
    await db.refresh(call)

    maids = await notifier.user_ids_with_role(db, "maid", exclude=user.id)
    await notifier.notify(
        db,
        maids,
        title_ar="نداء",
        title_en="You are being called",
        body_ar=f"{user.name} يطلبك",
        body_en=f"{user.name} is calling you",
        type="maid_call",
        url="/housekeeping",
    )
    await db.refresh(call)
    return call


@router.patch("/maid-calls/{call_id}/dismiss", response_model=MaidCallRead)
async def dismiss_maid_call(call_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    call = await db.get(MaidCall, call_id)
    if not call:
        raise NotFound("Maid call")
    if call.called_by != user.id and not can(user, Capability.HOUSEKEEPING_COMPLETE):
        raise Forbidden("You cannot dismiss this call")
    call.status = "dismissed"
    call.dismissed_at = utcnow()
    await db.commit()
    await db.refresh(call)
    return call

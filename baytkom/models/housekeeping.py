from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, DateTime, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from baytkom.models.base import Base
from baytkom.utils.timezones import utcnow


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name_ar = Column(String(200), nullable=False)
    name_en = Column(String(200), nullable=True)
    icon = Column(String(50), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_excluded = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, default=0)


class UserRoom(Base):
    __tablename__ = "user_rooms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "room_id", name="uq_user_room"),)


class HousekeepingTask(Base):
    __tablename__ = "housekeeping_tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title_ar = Column(String(200), nullable=False)
    title_en = Column(String(200), nullable=True)
    frequency = Column(String(20), nullable=False, default="daily")  # daily, weekly, monthly, once
    days_of_week = Column(JSON, nullable=True)  # [0..6], Sunday = 0
    weeks_of_month = Column(JSON, nullable=True)  # [1..5]
    specific_date = Column(String(10), nullable=True)  # YYYY-MM-DD, frequency == once
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    icon = Column(String(50), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, default=0)

    room = relationship("Room")


class TaskCompletion(Base):
    __tablename__ = "task_completions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(Integer, ForeignKey("housekeeping_tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    completed_by = Column(String, ForeignKey("users.id"), nullable=False)
    completion_date = Column(String(13), nullable=False, index=True)  # YYYY-MM-DD, W-YYYY-MM-DD or M-YYYY-MM
    completed_at = Column(DateTime, default=utcnow)

    __table_args__ = (UniqueConstraint("task_id", "completion_date", name="uq_task_completion"),)


class LaundryRequest(Base):
    __tablename__ = "laundry_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    requested_by = Column(String, ForeignKey("users.id"), nullable=False)
    status = Column(String(20), nullable=False, default="pending")  # pending, completed
    completed_by = Column(String, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=utcnow)
    completed_at = Column(DateTime, nullable=True)


class LaundrySchedule(Base):
    __tablename__ = "laundry_schedule"

    id = Column(Integer, primary_key=True, autoincrement=True)
    day_of_week = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)


class MaidCall(Base):
    __tablename__ = "maid_calls"

    id = Column(Integer, primary_key=True, autoincrement=True)
    called_by = Column(String, ForeignKey("users.id"), nullable=False)
    status = Column(String(20), nullable=False, default="active")  # active, dismissed
    created_at = Column(DateTime, default=utcnow)
    dismissed_at = Column(DateTime, nullable=True)

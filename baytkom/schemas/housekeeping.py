from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional, Literal
from datetime import datetime

FrequencyLiteral = Literal["daily", "weekly", "monthly", "once"]
DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


# ---------- Rooms ----------
class RoomBase(BaseModel):
    name_ar: str = Field(min_length=1)
    name_en: Optional[str] = None
    icon: Optional[str] = None
    is_excluded: bool = False
    sort_order: int = 0

class RoomCreate(RoomBase):
    pass

class RoomUpdate(BaseModel):
    name_ar: Optional[str] = None
    name_en: Optional[str] = None
    icon: Optional[str] = None
    is_excluded: Optional[bool] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None

class RoomRead(RoomBase):
    id: int
    is_active: bool

    class Config:
        from_attributes = True

class UserRoomsUpdate(BaseModel):
    room_ids: List[int] = []


# ---------- Housekeeping tasks ----------
class HousekeepingTaskBase(BaseModel):
    title_ar: str = Field(min_length=1)
    title_en: Optional[str] = None
    frequency: FrequencyLiteral = "daily"
    days_of_week: Optional[List[int]] = None
    weeks_of_month: Optional[List[int]] = None
    specific_date: Optional[str] = Field(default=None, pattern=DATE_PATTERN)
    room_id: int
    icon: Optional[str] = None
    sort_order: int = 0

    @field_validator("days_of_week")
    @classmethod
    def valid_days(cls, v):
        if v and any(d < 0 or d > 6 for d in v):
            raise ValueError("days_of_week must be between 0 (Sunday) and 6 (Saturday)")
        return sorted(set(v)) if v else v

    @field_validator("weeks_of_month")
    @classmethod
    def valid_weeks(cls, v):
        if v and any(w < 1 or w > 5 for w in v):
            raise ValueError("weeks_of_month must be between 1 and 5")
        return sorted(set(v)) if v else v

class HousekeepingTaskCreate(HousekeepingTaskBase):
    @model_validator(mode="after")
    def schedule_is_complete(self):
        if self.frequency == "once" and not self.specific_date:
            raise ValueError("specific_date is required for one-time tasks")
        if self.frequency == "weekly" and not self.days_of_week:
            raise ValueError("days_of_week is required for weekly tasks")
        if self.frequency == "monthly" and not self.weeks_of_month:
            raise ValueError("weeks_of_month is required for monthly tasks")
        return self

class HousekeepingTaskUpdate(BaseModel):
    title_ar: Optional[str] = None
    title_en: Optional[str] = None
    frequency: Optional[FrequencyLiteral] = None
    days_of_week: Optional[List[int]] = None
    weeks_of_month: Optional[List[int]] = None
    specific_date: Optional[str] = Field(default=None, pattern=DATE_PATTERN)
    room_id: Optional[int] = None
    icon: Optional[str] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None

class HousekeepingTaskRead(HousekeepingTaskBase):
    id: int
    is_active: bool

    class Config:
        from_attributes = True


# ---------- Completions ----------
class TaskCompletionCreate(BaseModel):
    task_id: int
    date: Optional[str] = Field(default=None, pattern=DATE_PATTERN)  # defaults to today (local)

class TaskCompletionRead(BaseModel):
    id: int
    task_id: int
    completed_by: str
    completion_date: str
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---------- Laundry ----------
class LaundryRequestCreate(BaseModel):
    room_id: int

class LaundryRequestRead(BaseModel):
    id: int
    room_id: int
    requested_by: str
    status: str
    completed_by: Optional[str] = None
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class LaundryScheduleUpdate(BaseModel):
    days: List[int] = []

    @field_validator("days")
    @classmethod
    def valid_days(cls, v):
        if any(d < 0 or d > 6 for d in v):
            raise ValueError("days must be between 0 (Sunday) and 6 (Saturday)")
        return sorted(set(v))

class LaundryScheduleRead(BaseModel):
    id: int
    day_of_week: int
    is_active: bool

    class Config:
        from_attributes = True


# ---------- Maid calls ----------
class MaidCallRead(BaseModel):
    id: int
    called_by: str
    status: str
    created_at: Optional[datetime] = None
    dismissed_at: Optional[datetime] = None

    class Config:
        from_attributes = True

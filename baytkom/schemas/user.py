from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Literal
from datetime import datetime

Role = Literal["admin", "household", "maid", "driver"]


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class PasswordChange(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=4)


class UserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=4)
    role: Role = "household"
    first_name: Optional[str] = None
    first_name_en: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None
    email: Optional[str] = None
    can_approve: bool = False
    can_add_shortages: bool = False
    can_approve_trips: bool = False

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        return v.strip().lower()


class UserRoleUpdate(BaseModel):
    role: Role
    can_approve: Optional[bool] = None
    can_add_shortages: Optional[bool] = None
    can_approve_trips: Optional[bool] = None


class UserDetailsUpdate(BaseModel):
    first_name: Optional[str] = None
    first_name_en: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None
    email: Optional[str] = None
    profile_image_url: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=4)


class SuspendUpdate(BaseModel):
    is_suspended: bool


class UserRead(BaseModel):
    id: str
    username: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    first_name_en: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: str
    can_approve: bool
    can_add_shortages: bool
    can_approve_trips: bool
    is_suspended: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CurrentUserRead(UserRead):
    capabilities: List[str] = []

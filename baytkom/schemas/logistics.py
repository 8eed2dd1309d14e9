from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Literal
from datetime import datetime

from baytkom.schemas.order import OrderRead
from baytkom.utils.timezones import to_naive_utc

TripStatusLiteral = Literal["pending", "approved", "rejected", "started", "waiting", "completed", "cancelled"]
SparePartStatusLiteral = Literal["pending", "ordered", "received", "installed", "cancelled"]


# ---------- Vehicles ----------
class VehicleBase(BaseModel):
    name: str = Field(min_length=1)
    odometer_reading: int = Field(default=0, ge=0)
    last_maintenance_date: Optional[datetime] = None
    is_private: bool = False
    assigned_user_id: Optional[str] = None

class VehicleCreate(VehicleBase):
    pass

class VehicleUpdate(BaseModel):
    name: Optional[str] = None
    odometer_reading: Optional[int] = Field(default=None, ge=0)
    last_maintenance_date: Optional[datetime] = None
    is_private: Optional[bool] = None
    assigned_user_id: Optional[str] = None
    is_active: Optional[bool] = None

class VehicleRead(VehicleBase):
    id: int
    is_active: bool

    class Config:
        from_attributes = True


# ---------- Trips ----------
class TripCreate(BaseModel):
    person_name: str = Field(min_length=1)
    location: str = Field(min_length=1)
    departure_time: datetime
    estimated_duration: int = Field(default=30, ge=1, le=24 * 60)
    assigned_driver: Optional[str] = None
    vehicle_id: Optional[int] = None
    notes: Optional[str] = None
    is_personal: bool = False

    @field_validator("departure_time")
    @classmethod
    def departure_as_utc(cls, v: datetime) -> datetime:
        return to_naive_utc(v)

class TripUpdate(BaseModel):
    person_name: Optional[str] = None
    location: Optional[str] = None
    departure_time: Optional[datetime] = None
    estimated_duration: Optional[int] = Field(default=None, ge=1, le=24 * 60)
    assigned_driver: Optional[str] = None
    vehicle_id: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("departure_time")
    @classmethod
    def departure_as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)

class TripStatusUpdate(BaseModel):
    status: TripStatusLiteral

class TripRead(BaseModel):
    id: int
    person_name: str
    location: str
    departure_time: datetime
    estimated_duration: Optional[int] = 30
    status: str
    approved_by: Optional[str] = None
    assigned_driver: Optional[str] = None
    vehicle_id: Optional[int] = None
    started_at: Optional[datetime] = None
    waiting_started_at: Optional[datetime] = None
    waiting_duration: Optional[int] = 0
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None
    is_personal: bool
    created_by: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class TripWithConflicts(TripRead):
    conflicts: List[TripRead] = []


# ---------- Drivers / availability ----------
class AvailabilityRead(BaseModel):
    driver_id: str
    busy: bool
    active_trips: List[TripRead] = []
    active_orders: List[OrderRead] = []
    time_conflicts: List[TripRead] = []

class DriverRead(BaseModel):
    id: str
    username: str
    display_name: Optional[str] = None
    first_name: Optional[str] = None
    busy: bool = False


# ---------- Trip locations ----------
class TripLocationBase(BaseModel):
    name_ar: str = Field(min_length=1)
    name_en: Optional[str] = None
    address: Optional[str] = None

class TripLocationCreate(TripLocationBase):
    pass

class TripLocationUpdate(BaseModel):
    name_ar: Optional[str] = None
    name_en: Optional[str] = None
    address: Optional[str] = None
    is_active: Optional[bool] = None

class TripLocationRead(TripLocationBase):
    id: int
    is_active: bool

    class Config:
        from_attributes = True


# ---------- Technicians ----------
class TechnicianBase(BaseModel):
    name: str = Field(min_length=1)
    specialty: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    notes: Optional[str] = None

class TechnicianCreate(TechnicianBase):
    pass

class TechnicianUpdate(BaseModel):
    name: Optional[str] = None
    specialty: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None

class TechnicianRead(TechnicianBase):
    id: int
    is_active: bool

    class Config:
        from_attributes = True


# ---------- Spare parts ----------
class SparePartCreate(BaseModel):
    name: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    price: Optional[int] = Field(default=None, ge=0)
    vehicle_id: Optional[int] = None
    technician_id: Optional[int] = None
    assigned_to: Optional[str] = None
    notes: Optional[str] = None

class SparePartUpdate(BaseModel):
    name: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=1)
    price: Optional[int] = Field(default=None, ge=0)
    vehicle_id: Optional[int] = None
    technician_id: Optional[int] = None
    assigned_to: Optional[str] = None
    status: Optional[SparePartStatusLiteral] = None
    notes: Optional[str] = None

class SparePartRead(BaseModel):
    id: int
    name: str
    quantity: int
    price: Optional[int] = None
    vehicle_id: Optional[int] = None
    technician_id: Optional[int] = None
    status: str
    assigned_to: Optional[str] = None
    created_by: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime


class ShortageCreate(BaseModel):
    name_ar: str = Field(min_length=1)
    name_en: Optional[str] = None
    quantity: int = Field(default=1, ge=1, le=999)
    notes: Optional[str] = Field(default=None, max_length=500)

class ShortageStatusUpdate(BaseModel):
    status: Literal["pending", "approved", "rejected", "purchased"]

class ShortageRead(BaseModel):
    id: int
    name_ar: str
    name_en: Optional[str] = None
    quantity: int
    notes: Optional[str] = None
    status: str
    created_by: str
    approved_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

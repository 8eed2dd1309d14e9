from pydantic import BaseModel, Field
from typing import List, Optional, Literal
from datetime import datetime

OrderStatusLiteral = Literal["pending", "approved", "rejected", "in_progress", "completed"]


# ---------- Order Items ----------
class OrderItemBase(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1, le=999)
    estimated_price: Optional[int] = Field(default=None, ge=0)  # defaults to the product's price
    notes: Optional[str] = None

class OrderItemCreate(OrderItemBase):
    pass

class OrderItemUpdate(BaseModel):
    quantity: Optional[int] = Field(default=None, ge=1, le=999)
    estimated_price: Optional[int] = Field(default=None, ge=0)
    actual_price: Optional[int] = Field(default=None, ge=0)
    is_purchased: Optional[bool] = None
    substitute_product_id: Optional[int] = None
    notes: Optional[str] = None

class OrderItemRead(BaseModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    estimated_price: Optional[int] = 0
    actual_price: Optional[int] = None
    is_purchased: bool
    substitute_product_id: Optional[int] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


# ---------- Orders ----------
class OrderCreate(BaseModel):
    notes: Optional[str] = None
    scheduled_for: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    items: List[OrderItemCreate] = []

class OrderStatusUpdate(BaseModel):
    status: OrderStatusLiteral

class OrderDriverUpdate(BaseModel):
    driver_id: Optional[str] = None  # defaults to the caller

class OrderActualUpdate(BaseModel):
    total_actual: int = Field(ge=0)
    receipt_image_url: Optional[str] = None

class OrderScheduleUpdate(BaseModel):
    scheduled_for: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")

class OrderRead(BaseModel):
    id: int
    status: str
    created_by: str
    approved_by: Optional[str] = None
    assigned_driver: Optional[str] = None
    notes: Optional[str] = None
    total_estimated: Optional[int] = 0
    total_actual: Optional[int] = 0
    receipt_image_url: Optional[str] = None
    scheduled_for: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class OrderDetail(OrderRead):
    items: List[OrderItemRead] = []


class OrderStats(BaseModel):
    pending: int
    approved: int
    in_progress: int
    completed: int
    rejected: int
    total: int
    total_spent: int

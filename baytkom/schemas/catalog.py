from pydantic import BaseModel, Field
from typing import List, Optional


# ---------- Categories ----------
class CategoryBase(BaseModel):
    name_ar: str = Field(min_length=1)
    name_en: Optional[str] = None
    icon: Optional[str] = None
    sort_order: int = 0

class CategoryCreate(CategoryBase):
    pass

class CategoryUpdate(BaseModel):
    name_ar: Optional[str] = None
    name_en: Optional[str] = None
    icon: Optional[str] = None
    sort_order: Optional[int] = None

class CategoryRead(CategoryBase):
    id: int

    class Config:
        from_attributes = True


# ---------- Stores ----------
class StoreBase(BaseModel):
    name_ar: str = Field(min_length=1)
    name_en: Optional[str] = None
    website_url: Optional[str] = None

class StoreCreate(StoreBase):
    pass

class StoreUpdate(BaseModel):
    name_ar: Optional[str] = None
    name_en: Optional[str] = None
    website_url: Optional[str] = None
    is_active: Optional[bool] = None

class StoreRead(StoreBase):
    id: int
    is_active: bool

    class Config:
        from_attributes = True


# ---------- Products ----------
class ProductBase(BaseModel):
    name_ar: str = Field(min_length=1)
    name_en: Optional[str] = None
    category_id: Optional[int] = None
    estimated_price: int = Field(default=0, ge=0)
    preferred_store: Optional[str] = None
    store_id: Optional[int] = None
    image_url: Optional[str] = None
    icon: Optional[str] = None
    unit: Optional[str] = None

class ProductCreate(ProductBase):
    pass

class ProductUpdate(BaseModel):
    name_ar: Optional[str] = None
    name_en: Optional[str] = None
    category_id: Optional[int] = None
    estimated_price: Optional[int] = Field(default=None, ge=0)
    preferred_store: Optional[str] = None
    store_id: Optional[int] = None
    image_url: Optional[str] = None
    icon: Optional[str] = None
    unit: Optional[str] = None
    is_active: Optional[bool] = None

class ProductRead(ProductBase):
    id: int
    is_active: bool

    class Config:
        from_attributes = True


class AlternativesUpdate(BaseModel):
    alternative_ids: List[int] = []

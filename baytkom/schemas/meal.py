from pydantic import BaseModel, Field
from typing import Optional, Literal

MealTypeLiteral = Literal["breakfast", "lunch", "dinner"]


class MealItemBase(BaseModel):
    meal_type: MealTypeLiteral
    name_ar: str = Field(min_length=1)
    name_en: Optional[str] = None
    image_url: Optional[str] = None

class MealItemCreate(MealItemBase):
    pass

class MealItemRead(MealItemBase):
    id: int

    class Config:
        from_attributes = True


class MealBase(BaseModel):
    day_of_week: int = Field(ge=0, le=6)
    date_str: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    meal_type: MealTypeLiteral
    title_ar: str = Field(min_length=1)
    title_en: Optional[str] = None
    image_url: Optional[str] = None
    people_count: int = Field(default=4, ge=1)
    notes: Optional[str] = None

class MealCreate(MealBase):
    pass

class MealUpdate(BaseModel):
    day_of_week: Optional[int] = Field(default=None, ge=0, le=6)
    date_str: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    meal_type: Optional[MealTypeLiteral] = None
    title_ar: Optional[str] = None
    title_en: Optional[str] = None
    image_url: Optional[str] = None
    people_count: Optional[int] = Field(default=None, ge=1)
    notes: Optional[str] = None

class MealRead(MealBase):
    id: int

    class Config:
        from_attributes = True

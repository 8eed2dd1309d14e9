from sqlalchemy import Column, String, Integer, Text
from baytkom.models.base import Base


class MealItem(Base):
    """Reusable dish the meal planner picks from"""
    __tablename__ = "meal_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    meal_type = Column(String(20), nullable=False)
    name_ar = Column(String(200), nullable=False)
    name_en = Column(String(200), nullable=True)
    image_url = Column(String(500), nullable=True)


class Meal(Base):
    __tablename__ = "meals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    day_of_week = Column(Integer, nullable=False)
    date_str = Column(String(10), nullable=True, index=True)
    meal_type = Column(String(20), nullable=False)  # breakfast, lunch, dinner
    title_ar = Column(String(200), nullable=False)
    title_en = Column(String(200), nullable=True)
    image_url = Column(String(500), nullable=True)
    people_count = Column(Integer, nullable=False, default=4)
    notes = Column(Text, nullable=True)

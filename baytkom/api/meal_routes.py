from datetime import date as date_type
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession

from baytkom.auth.dependencies import get_current_user
from baytkom.auth.permissions import Capability, require
from baytkom.core.errors import NotFound
from baytkom.db import get_db
from baytkom.models.meal import Meal, MealItem
from baytkom.models.user import User
from baytkom.schemas.meal import MealCreate, MealItemCreate, MealItemRead, MealRead, MealTypeLiteral, MealUpdate
from baytkom.utils.timezones import js_weekday

router = APIRouter()

manage_meals = require(Capability.HOUSEKEEPING_MANAGE)


# ---------- Meal items ----------
@router.get("/meal-items", response_model=List[MealItemRead])
async def list_meal_items(
    meal_type: Optional[MealTypeLiteral] = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    stmt = select(MealItem)
    if meal_type:
        stmt = stmt.where(MealItem.meal_type == meal_type)
    res = await db.execute(stmt.order_by(MealItem.name_ar))
    return res.scalars().all()


@router.post("/meal-items", response_model=MealItemRead)
async def create_meal_item(payload: MealItemCreate, db: AsyncSession = Depends(get_db), user: User = Depends(manage_meals)):
    item = MealItem(**payload.model_dump())
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


@router.delete("/meal-items/{item_id}")
async def delete_meal_item(item_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(manage_meals)):
    item = await db.get(MealItem, item_id)
    if not item:
        raise NotFound("Meal item")
    await db.delete(item)
    await db.commit()
    return {"success": True}


# ---------- Meals ----------
@router.get("/meals", response_model=List[MealRead])
async def list_meals(
    date: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}-\d{2}$"),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    stmt = select(Meal)
    if date:
        # Dated meals win; undated ones repeat every week on their weekday
        weekday = js_weekday(date_type.fromisoformat(date))
        stmt = stmt.where(
            or_(
                Meal.date_str == date,
                and_(Meal.date_str.is_(None), Meal.day_of_week == weekday),
            )
        )
    res = await db.execute(stmt.order_by(Meal.day_of_week, Meal.meal_type, Meal.id))
    return res.scalars().all()


@router.post("/meals", response_model=MealRead)
async def create_meal(payload: MealCreate, db: AsyncSession = Depends(get_db), user: User = Depends(manage_meals)):
    meal = Meal(**payload.model_dump())
    db.add(meal)
    await db.commit()
    await db.refresh(meal)
    return meal


@router.patch("/meals/{meal_id}", response_model=MealRead)
async def update_meal(
    meal_id: int,
    payload: MealUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_meals),
):
    meal = await db.get(Meal, meal_id)
    if not meal:
        raise NotFound("Meal")
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(meal, key, value)
    await db.commit()
    await db.refresh(meal)
    return meal


@router.delete("/meals/{meal_id}")
async def delete_meal(meal_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(manage_meals)):
    meal = await db.get(Meal, meal_id)
    if not meal:
        raise NotFound("Meal")
    await db.delete(meal)
    await db.commit()
    return {"success": True}

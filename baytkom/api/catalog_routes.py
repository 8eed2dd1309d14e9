from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from baytkom.auth.dependencies import get_current_user
from baytkom.auth.permissions import Capability, require
from baytkom.core.errors import NotFound, ValidationError
from baytkom.db import get_db
from baytkom.models.catalog import Category, Store, Product, ProductAlternative
from baytkom.models.user import User
from baytkom.schemas.catalog import (
    AlternativesUpdate,
    CategoryCreate, CategoryRead, CategoryUpdate,
    ProductCreate, ProductRead, ProductUpdate,
    StoreCreate, StoreRead, StoreUpdate,
)

router = APIRouter()
manage_catalog = require(Capability.CATALOG_MANAGE)


async def _get_or_404(db: AsyncSession, model, obj_id: int, label: str):
    obj = await db.get(model, obj_id)
    if not obj:
        raise NotFound(label)
    return obj


# ----------------------------
# Categories
# ----------------------------
@router.get("/categories", response_model=List[CategoryRead])
async def list_categories(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    res = await db.execute(select(Category).order_by(Category.sort_order, Category.id))
    return res.scalars().all()


@router.post("/categories", response_model=CategoryRead)
async def create_category(
    payload: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_catalog),
):
    category = Category(**payload.model_dump())
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category


@router.patch("/categories/{category_id}", response_model=CategoryRead)
async def update_category(
    category_id: int,
    payload: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_catalog),
):
    category = await _get_or_404(db, Category, category_id, "Category")
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(category, key, value)
    await db.commit()
    await db.refresh(category)
    return category


@router.delete("/categories/{category_id}")
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_catalog),
):
    category = await _get_or_404(db, Category, category_id, "Category")
    in_use = await db.execute(select(Product.id).where(Product.category_id == category_id, Product.is_active == True).limit(1))
    if in_use.first():
        raise ValidationError("Category still has products")
    await db.delete(category)
    await db.commit()
    return {"success": True}


# ----------------------------
# Stores
# ----------------------------
@router.get("/stores", response_model=List[StoreRead])
async def list_stores(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    res = await db.execute(select(Store).where(Store.is_active == True).order_by(Store.name_ar))
    return res.scalars().all()


@router.post("/stores", response_model=StoreRead)
async def create_store(
    payload: StoreCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_catalog),
):
    store = Store(**payload.model_dump())
    db.add(store)
    await db.commit()
    await db.refresh(store)
    return store


@router.patch("/stores/{store_id}", response_model=StoreRead)
async def update_store(
    store_id: int,
    payload: StoreUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_catalog),
):
    store = await _get_or_404(db, Store, store_id, "Store")
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(store, key, value)
    await db.commit()
    await db.refresh(store)
    return store


@router.delete("/stores/{store_id}")
async def delete_store(
    store_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_catalog),
):
    store = await _get_or_404(db, Store, store_id, "Store")
    store.is_active = False
    await db.commit()
    return {"success": True}


# ----------------------------
# Products
# ----------------------------
@router.get("/products", response_model=List[ProductRead])
async def list_products(
    category_id: Optional[int] = None,
    q: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    stmt = select(Product).where(Product.is_active == True).order_by(Product.name_ar)
    if category_id is not None:
        stmt = stmt.where(Product.category_id == category_id)
    if q:
        like = f"%{q.strip()}%"
        stmt = stmt.where((Product.name_ar.ilike(like)) | (Product.name_en.ilike(like)))
    return (await db.execute(stmt)).scalars().all()


@router.get("/products/{product_id}", response_model=ProductRead)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    return await _get_or_404(db, Product, product_id, "Product")


@router.post("/products", response_model=ProductRead)
async def create_product(
    payload: ProductCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_catalog),
):
    if payload.category_id is not None:
        await _get_or_404(db, Category, payload.category_id, "Category")
    product = Product(**payload.model_dump())
    db.add(product)
    await db.commit()
    await db.refresh(product)
    return product


@router.patch("/products/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: int,
    payload: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_catalog),
):
    product = await _get_or_404(db, Product, product_id, "Product")
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(product, key, value)
    await db.commit()
    await db.refresh(product)
    return product


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_catalog),
):
    # Soft delete: existing order items keep pointing at it
    product = await _get_or_404(db, Product, product_id, "Product")
    product.is_active = False
    await db.commit()
    return {"success": True}


@router.get("/products/{product_id}/alternatives", response_model=List[ProductRead])
async def get_alternatives(product_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    res = await db.execute(
        select(Product)
        .join(ProductAlternative, ProductAlternative.alternative_product_id == Product.id)
        .where(ProductAlternative.product_id == product_id, Product.is_active == True)
    )
    return res.scalars().all()


@router.put("/products/{product_id}/alternatives")
async def set_alternatives(
    product_id: int,
    payload: AlternativesUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(manage_catalog),
):
    await _get_or_404(db, Product, product_id, "Product")
    alternative_ids = [i for i in dict.fromkeys(payload.alternative_ids) if i != product_id]
    for alt_id in alternative_ids:
        await _get_or_404(db, Product, alt_id, "Product")

    await db.execute(delete(ProductAlternative).where(ProductAlternative.product_id == product_id))
    for alt_id in alternative_ids:
        db.add(ProductAlternative(product_id=product_id, alternative_product_id=alt_id))
    await db.commit()
    return {"success": True, "alternative_ids": alternative_ids}

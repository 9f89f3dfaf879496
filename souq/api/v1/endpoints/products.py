"""
Public product catalogue: approved products only, with live offer pricing.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from souq.api.v1.catalog import (live_offers, public_products, to_public_product,
                                 today_utc)
from souq.api.v1.deps import get_db
from souq.models.product import Product
from souq.schemas.product import CategoryKey, PublicProductRead

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[PublicProductRead])
async def list_products(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    category: CategoryKey | None = None,
    search: str | None = Query(default=None, max_length=100),
    db: AsyncSession = Depends(get_db),
) -> list[PublicProductRead]:
    query = public_products()
    if category:
        query = query.where(Product.category_key == category)
    if search:
        # Escape SQL LIKE metacharacters to prevent wildcard injection
        safe_search = search.replace("\\", "\\\\").replace("%", r"\%").replace("_", r"\_")
        pattern = f"%{safe_search}%"
        query = query.where(
            or_(
                Product.name_en.ilike(pattern, escape="\\"),
                Product.name_ar.ilike(pattern, escape="\\"),
            )
        )
    query = query.order_by(Product.created_at.desc(), Product.id.desc()).offset(skip).limit(limit)

    result = await db.execute(query)
    today = today_utc()
    offers = await live_offers(db, today)
    return [to_public_product(p, offers, today) for p in result.scalars().all()]


@router.get("/{product_id}", response_model=PublicProductRead)
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
) -> PublicProductRead:
    result = await db.execute(public_products().where(Product.id == product_id))
    product = result.scalar_one_or_none()
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    today = today_utc()
    return to_public_product(product, await live_offers(db, today), today)

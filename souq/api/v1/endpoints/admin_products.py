"""
Admin product management CRUD plus the moderation status endpoint.

Every route requires the ``products:manage`` capability. Listings show all
statuses with the pending backlog first.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import delete as sa_delete
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from souq.api.v1.catalog import pending_first
from souq.api.v1.deps import get_db, require_capability
from souq.core.moderation import (ModerationStatus, status_after_edit,
                                  transition)
from souq.core.permissions import Capability, Principal
from souq.models.offer import offer_products
from souq.models.product import Product
from souq.models.project import project_products
from souq.schemas.common import (StatusUpdate, StatusUpdateResponse,
                                 SuccessResponse)
from souq.schemas.product import ProductCreate, ProductRead, ProductUpdate

router = APIRouter(prefix="/admin/products", tags=["admin: products"])
logger = logging.getLogger(__name__)

require_product_manager = require_capability(Capability.MANAGE_PRODUCTS)


async def _get_product_or_404(db: AsyncSession, product_id: int) -> Product:
    result = await db.execute(select(Product).where(Product.id == product_id))
    product = result.scalar_one_or_none()
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("", response_model=list[ProductRead])
async def list_products(
    status: ModerationStatus | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_product_manager),
) -> list[Product]:
    query = select(Product)
    if status is not None:
        query = query.where(Product.status == status.value)
    query = query.order_by(*pending_first(Product)).offset(skip).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_product_manager),
) -> Product:
    return await _get_product_or_404(db, product_id)


@router.post("", response_model=ProductRead, status_code=201)
async def create_product(
    body: ProductCreate,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_product_manager),
) -> Product:
    """Create a product. New products always wait for review."""
    product = Product(**body.model_dump(), status=ModerationStatus.PENDING.value)
    db.add(product)
    await db.commit()
    await db.refresh(product)
    logger.info("Admin %d created product %d", admin.id, product.id)
    return product


@router.put("/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: int,
    body: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_product_manager),
) -> Product:
    """Edit product content. Moderator edits keep the current status."""
    product = await _get_product_or_404(db, product_id)

    changes = body.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is None:
            raise HTTPException(status_code=422, detail=f"'{field}' cannot be null")
        setattr(product, field, value)
    product.status = status_after_edit(product.status, edited_by_moderator=True).value

    await db.commit()
    await db.refresh(product)
    logger.info("Admin %d updated product %d (%s)", admin.id, product_id, ", ".join(changes))
    return product


@router.put("/{product_id}/status", response_model=StatusUpdateResponse)
async def update_product_status(
    product_id: int,
    body: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_product_manager),
) -> StatusUpdateResponse:
    """Approve or reject a product."""
    product = await _get_product_or_404(db, product_id)
    previous = product.status
    product.status = transition(previous, body.status.value).value
    await db.commit()
    logger.info(
        "Admin %d moved product %d from %s to %s", admin.id, product_id, previous, product.status
    )
    return StatusUpdateResponse(status=product.status)


@router.delete("/{product_id}", response_model=SuccessResponse)
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_product_manager),
) -> SuccessResponse:
    """Delete a product and detach it from projects and offers."""
    product = await _get_product_or_404(db, product_id)
    await db.execute(sa_delete(project_products).where(project_products.c.product_id == product_id))
    await db.execute(sa_delete(offer_products).where(offer_products.c.product_id == product_id))
    await db.delete(product)
    await db.commit()
    logger.info("Admin %d deleted product %d", admin.id, product_id)
    return SuccessResponse(message=f"Product {product_id} deleted")

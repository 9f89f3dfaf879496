"""
Admin offer management. Requires the ``offers:manage`` capability, which
comes with product management.

The stored status follows the date range; ``expired`` may also be set by
hand to end an offer early.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from souq.api.v1.catalog import load_products, today_utc
from souq.api.v1.deps import get_db, require_capability
from souq.core.permissions import Capability, Principal
from souq.core.pricing import OfferStatus, derive_offer_status
from souq.models.offer import Offer
from souq.schemas.common import SuccessResponse
from souq.schemas.offer import OfferCreate, OfferRead, OfferUpdate

router = APIRouter(prefix="/admin/offers", tags=["admin: offers"])
logger = logging.getLogger(__name__)

require_offer_manager = require_capability(Capability.MANAGE_OFFERS)


async def _get_offer_or_404(db: AsyncSession, offer_id: int) -> Offer:
    result = await db.execute(select(Offer).where(Offer.id == offer_id))
    offer = result.scalar_one_or_none()
    if offer is None:
        raise HTTPException(status_code=404, detail="Offer not found")
    return offer


@router.get("", response_model=list[OfferRead])
async def list_offers(
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_offer_manager),
) -> list[Offer]:
    result = await db.execute(select(Offer).order_by(Offer.start_date.desc(), Offer.id.desc()))
    return list(result.scalars().all())


@router.get("/{offer_id}", response_model=OfferRead)
async def get_offer(
    offer_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_offer_manager),
) -> Offer:
    return await _get_offer_or_404(db, offer_id)


@router.post("", response_model=OfferRead, status_code=201)
async def create_offer(
    body: OfferCreate,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_offer_manager),
) -> Offer:
    offer = Offer(
        **body.model_dump(exclude={"product_ids"}),
        status=derive_offer_status(body.start_date, body.end_date, today_utc()).value,
        products=await load_products(db, body.product_ids),
    )
    db.add(offer)
    await db.commit()
    await db.refresh(offer)
    logger.info(
        "Admin %d created offer %d (%d%% on %d products)",
        admin.id, offer.id, offer.discount_percentage, len(body.product_ids),
    )
    return offer


@router.put("/{offer_id}", response_model=OfferRead)
async def update_offer(
    offer_id: int,
    body: OfferUpdate,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_offer_manager),
) -> Offer:
    offer = await _get_offer_or_404(db, offer_id)
    changes = body.model_dump(exclude_unset=True, exclude={"product_ids", "status"})
    for field, value in changes.items():
        if value is None:
            raise HTTPException(status_code=422, detail=f"'{field}' cannot be null")
        setattr(offer, field, value)

    if offer.end_date < offer.start_date:
        raise HTTPException(status_code=422, detail="end_date must not be before start_date")

    if body.product_ids is not None:
        offer.products = await load_products(db, body.product_ids)

    if body.status == OfferStatus.EXPIRED.value:
        offer.status = OfferStatus.EXPIRED.value
    elif body.status is not None or {"start_date", "end_date"} & changes.keys():
        # Without new dates or an explicit status the stored status is kept.
        offer.status = derive_offer_status(offer.start_date, offer.end_date, today_utc()).value

    await db.commit()
    await db.refresh(offer)
    logger.info("Admin %d updated offer %d (status %s)", admin.id, offer_id, offer.status)
    return offer


@router.delete("/{offer_id}", response_model=SuccessResponse)
async def delete_offer(
    offer_id: int,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_offer_manager),
) -> SuccessResponse:
    offer = await _get_offer_or_404(db, offer_id)
    await db.delete(offer)
    await db.commit()
    logger.info("Admin %d deleted offer %d", admin.id, offer_id)
    return SuccessResponse(message=f"Offer {offer_id} deleted")

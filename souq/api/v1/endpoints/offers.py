"""
Public offers feed: offers running today or scheduled to start later.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from souq.api.v1.catalog import live_offers, public_offer_feed, today_utc
from souq.api.v1.deps import get_db
from souq.schemas.offer import OfferRead

router = APIRouter(prefix="/offers", tags=["offers"])


@router.get("", response_model=list[OfferRead])
async def list_offers(db: AsyncSession = Depends(get_db)) -> list[OfferRead]:
    today = today_utc()
    return public_offer_feed(await live_offers(db, today), today)

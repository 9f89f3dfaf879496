"""
Query and serialisation helpers shared by the public and admin routers.

Public visibility rules live here so every endpoint filters the same way:
approved products, approved *and* active projects, published articles.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, timezone

from fastapi import HTTPException
from sqlalchemy import Select, case, select
from sqlalchemy.ext.asyncio import AsyncSession

from souq.core.moderation import ArticleStatus, ModerationStatus, is_public
from souq.core.permissions import UserType
from souq.core.pricing import (OfferStatus, best_offer_for, discounted_amount,
                               effective_offer_status, price_display)
from souq.models.article import Article
from souq.models.offer import Offer
from souq.models.product import Product
from souq.models.project import Project
from souq.models.user import User
from souq.schemas.artisan import ArtisanRead
from souq.schemas.offer import OfferRead
from souq.schemas.product import AppliedOffer, PublicProductRead
from souq.schemas.project import ProjectRead


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


# ── Visibility filters ──────────────────────────────────────────────
def public_products() -> Select:
    return select(Product).where(Product.status == ModerationStatus.APPROVED.value)


def public_projects() -> Select:
    return select(Project).where(
        Project.status == ModerationStatus.APPROVED.value,
        Project.is_active.is_(True),
    )


def public_articles() -> Select:
    return select(Article).where(Article.status == ArticleStatus.PUBLISHED.value)


def artisans() -> Select:
    return select(User).where(User.type == UserType.ARTISAN.value)


def pending_first(model) -> tuple:
    """ORDER BY clause surfacing the review backlog, newest first within a status."""
    return (
        case((model.status == ModerationStatus.PENDING.value, 0), else_=1),
        model.created_at.desc(),
        model.id.desc(),
    )


# ── Products ────────────────────────────────────────────────────────
async def load_products(db: AsyncSession, product_ids: Sequence[int]) -> list[Product]:
    """Fetch products by id, rejecting the request if any id is unknown."""
    if not product_ids:
        return []
    result = await db.execute(select(Product).where(Product.id.in_(product_ids)))
    products = list(result.scalars().all())
    missing = sorted(set(product_ids) - {p.id for p in products})
    if missing:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown product id(s): {', '.join(map(str, missing))}",
        )
    return products


async def live_offers(db: AsyncSession, today: date) -> list[Offer]:
    """Offers not manually expired whose range has not ended yet."""
    result = await db.execute(
        select(Offer)
        .where(Offer.status != OfferStatus.EXPIRED.value, Offer.end_date >= today)
        .order_by(Offer.start_date, Offer.id)
    )
    return list(result.scalars().all())


def to_public_product(product: Product, offers: Sequence[Offer], today: date) -> PublicProductRead:
    base = PublicProductRead.model_validate(
        {
            **_product_fields(product),
            "price_display": price_display(
                product.price_amount, product.price_currency, product.price_unit
            ),
        }
    )
    offer = best_offer_for(offers, product.id, today)
    if offer is None:
        return base

    applied = AppliedOffer(
        id=offer.id,
        discount_percentage=offer.discount_percentage,
        end_date=offer.end_date,
    )
    if product.price_amount is not None:
        amount = discounted_amount(product.price_amount, offer.discount_percentage)
        applied.discounted_amount = amount
        applied.discounted_display = price_display(
            amount, product.price_currency, product.price_unit
        )
    base.offer = applied
    return base


def _product_fields(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "category_key": product.category_key,
        "category": product.category,
        "image_urls": product.image_urls or [],
        "price": product.price,
        "origin": product.origin,
        "description": product.description,
        "status": product.status,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


def public_product_ids(products: Sequence[Product]) -> list[int]:
    return sorted(p.id for p in products if is_public(p.status))


# ── Projects ────────────────────────────────────────────────────────
def to_public_project(project: Project) -> ProjectRead:
    """Project as shown to visitors, listing only approved products."""
    read = ProjectRead.model_validate(project)
    read.products_used = public_product_ids(project.products)
    return read


# ── Offers ──────────────────────────────────────────────────────────
def to_public_offer(offer: Offer, today: date) -> OfferRead | None:
    """Offer as shown to visitors: status is derived from today's date.

    Only approved products are listed; an offer left with none is hidden.
    """
    product_ids = public_product_ids(offer.products)
    if not product_ids:
        return None
    read = OfferRead.model_validate(offer)
    read.product_ids = product_ids
    read.status = effective_offer_status(offer, today).value
    return read


def public_offer_feed(offers: Sequence[Offer], today: date) -> list[OfferRead]:
    feed = (to_public_offer(o, today) for o in offers)
    return [read for read in feed if read is not None]


# ── Artisans ────────────────────────────────────────────────────────
def to_artisan_read(user: User) -> ArtisanRead:
    profile = user.artisan_profile
    data: dict = {"id": user.id, "name": user.name, "avatar_url": user.avatar_url}
    if profile is not None:
        data.update(
            phone=profile.phone,
            bio=profile.bio or {},
            location=profile.location or {},
            experience=profile.experience or 0,
            specialties=profile.specialties or [],
            is_certified=profile.is_certified,
        )
    return ArtisanRead.model_validate(data)

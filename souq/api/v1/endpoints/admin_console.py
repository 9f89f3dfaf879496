"""
Admin console: dashboard counters and the contact inbox.

Open to every admin; counters only reveal totals, never records.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from souq.api.v1.catalog import today_utc
from souq.api.v1.deps import get_db, require_admin
from souq.core.moderation import ArticleStatus, ModerationStatus
from souq.core.permissions import Principal, UserType
from souq.core.pricing import OfferStatus
from souq.models.article import Article
from souq.models.contact import ContactMessage
from souq.models.offer import Offer
from souq.models.product import Product
from souq.models.project import Project
from souq.models.user import User
from souq.schemas.contact import ContactRead
from souq.schemas.dashboard import AdminStatsResponse

router = APIRouter(prefix="/admin", tags=["admin: console"])


@router.get("/stats", response_model=AdminStatsResponse)
async def admin_stats(
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_admin),
) -> AdminStatsResponse:
    """Review backlog and catalogue totals in a handful of grouped queries."""
    product_rows = await db.execute(select(Product.status, func.count()).group_by(Product.status))
    products = dict(product_rows.all())
    project_rows = await db.execute(select(Project.status, func.count()).group_by(Project.status))
    projects = dict(project_rows.all())
    user_rows = await db.execute(select(User.type, func.count()).group_by(User.type))
    users = dict(user_rows.all())
    article_rows = await db.execute(select(Article.status, func.count()).group_by(Article.status))
    articles = dict(article_rows.all())

    live_offers = await db.scalar(
        select(func.count())
        .select_from(Offer)
        .where(Offer.status != OfferStatus.EXPIRED.value, Offer.end_date >= today_utc())
    )
    messages = await db.scalar(select(func.count()).select_from(ContactMessage))

    return AdminStatsResponse(
        pending_products=products.get(ModerationStatus.PENDING.value, 0),
        pending_projects=projects.get(ModerationStatus.PENDING.value, 0),
        total_products=sum(products.values()),
        total_projects=sum(projects.values()),
        users=users.get(UserType.USER.value, 0),
        artisans=users.get(UserType.ARTISAN.value, 0),
        admins=users.get(UserType.ADMIN.value, 0),
        published_articles=articles.get(ArticleStatus.PUBLISHED.value, 0),
        draft_articles=articles.get(ArticleStatus.DRAFT.value, 0),
        live_offers=live_offers or 0,
        contact_messages=messages or 0,
    )


@router.get("/contact-messages", response_model=list[ContactRead])
async def list_contact_messages(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_admin),
) -> list[ContactMessage]:
    result = await db.execute(
        select(ContactMessage)
        .order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all())

"""
Landing-page aggregation and service health.

The home feed is assembled section by section; a failing section is logged
and served empty so the rest of the page still renders.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from souq.api.v1.catalog import (artisans, live_offers, public_articles,
                                 public_products, public_projects,
                                 public_offer_feed, to_artisan_read,
                                 to_public_product, to_public_project,
                                 today_utc)
from souq.api.v1.deps import get_db
from souq.core.config import settings
from souq.models.article import Article
from souq.models.product import Product
from souq.models.project import Project
from souq.models.user import User
from souq.schemas.article import ArticleRead
from souq.schemas.dashboard import HealthResponse, HomeResponse

router = APIRouter(tags=["home"])
logger = logging.getLogger(__name__)


@router.get("/home", response_model=HomeResponse)
async def home_feed(db: AsyncSession = Depends(get_db)) -> HomeResponse:
    limit = settings.HOME_SECTION_LIMIT
    today = today_utc()
    feed = HomeResponse()

    async def _offers() -> list:
        return await live_offers(db, today)

    async def _products() -> list:
        result = await db.execute(
            public_products().order_by(Product.created_at.desc(), Product.id.desc()).limit(limit)
        )
        return [to_public_product(p, offers, today) for p in result.scalars().all()]

    async def _projects() -> list:
        result = await db.execute(
            public_projects().order_by(Project.created_at.desc(), Project.id.desc()).limit(limit)
        )
        return [to_public_project(p) for p in result.scalars().all()]

    async def _artisans() -> list:
        result = await db.execute(artisans().order_by(User.created_at.desc()).limit(limit))
        return [to_artisan_read(u) for u in result.scalars().all()]

    async def _articles() -> list:
        result = await db.execute(
            public_articles().order_by(Article.created_at.desc(), Article.id.desc()).limit(limit)
        )
        return [ArticleRead.model_validate(a) for a in result.scalars().all()]

    async def _section(name: str, loader: Callable[[], Awaitable[list]]) -> list:
        try:
            return await loader()
        except Exception as e:
            logger.warning("Home section '%s' unavailable: %s", name, e)
            await db.rollback()
            feed.degraded_sections.append(name)
            return []

    offers = await _section("offers", _offers)
    feed.offers = public_offer_feed(offers, today)
    feed.products = await _section("products", _products)
    feed.projects = await _section("projects", _projects)
    feed.artisans = await _section("artisans", _artisans)
    feed.articles = await _section("articles", _articles)
    return feed


@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    db_ok = True
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Health check: database unreachable: %s", e)
        db_ok = False
    return HealthResponse(
        status="ok" if db_ok else "degraded",
        db=db_ok,
        version=settings.VERSION,
    )

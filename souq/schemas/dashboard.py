"""Pydantic schemas for aggregate views: home page, admin stats, health."""

from __future__ import annotations

from pydantic import BaseModel

from souq.schemas.article import ArticleRead
from souq.schemas.artisan import ArtisanRead
from souq.schemas.offer import OfferRead
from souq.schemas.product import PublicProductRead
from souq.schemas.project import ProjectRead


class HomeResponse(BaseModel):
    products: list[PublicProductRead] = []
    projects: list[ProjectRead] = []
    artisans: list[ArtisanRead] = []
    articles: list[ArticleRead] = []
    offers: list[OfferRead] = []
    degraded_sections: list[str] = []


class AdminStatsResponse(BaseModel):
    pending_products: int
    pending_projects: int
    total_products: int
    total_projects: int
    users: int
    artisans: int
    admins: int
    published_articles: int
    draft_articles: int
    live_offers: int
    contact_messages: int


class HealthResponse(BaseModel):
    status: str
    db: bool
    version: str

"""
Admin article management. Requires the ``articles:manage`` capability.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from souq.api.v1.deps import get_db, require_capability
from souq.core.moderation import ArticleStatus
from souq.core.permissions import Capability, Principal
from souq.models.article import Article
from souq.schemas.article import ArticleCreate, ArticleRead, ArticleUpdate
from souq.schemas.common import SuccessResponse

router = APIRouter(prefix="/admin/articles", tags=["admin: articles"])
logger = logging.getLogger(__name__)

require_editor = require_capability(Capability.MANAGE_ARTICLES)


async def _get_article_or_404(db: AsyncSession, article_id: int) -> Article:
    result = await db.execute(select(Article).where(Article.id == article_id))
    article = result.scalar_one_or_none()
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return article


@router.get("", response_model=list[ArticleRead])
async def list_articles(
    status: ArticleStatus | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_editor),
) -> list[Article]:
    query = select(Article)
    if status is not None:
        query = query.where(Article.status == status.value)
    query = query.order_by(Article.updated_at.desc(), Article.id.desc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.get("/{article_id}", response_model=ArticleRead)
async def get_article(
    article_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_editor),
) -> Article:
    return await _get_article_or_404(db, article_id)


@router.post("", response_model=ArticleRead, status_code=201)
async def create_article(
    body: ArticleCreate,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_editor),
) -> Article:
    """Create an article authored by the calling admin."""
    article = Article(
        **body.model_dump(),
        author_id=admin.id,
        author_name=admin.user.name,
    )
    db.add(article)
    await db.commit()
    await db.refresh(article)
    logger.info("Admin %d created article %d (%s)", admin.id, article.id, article.status)
    return article


@router.put("/{article_id}", response_model=ArticleRead)
async def update_article(
    article_id: int,
    body: ArticleUpdate,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_editor),
) -> Article:
    article = await _get_article_or_404(db, article_id)
    changes = body.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is None and field != "image_url":
            raise HTTPException(status_code=422, detail=f"'{field}' cannot be null")
        setattr(article, field, value)

    await db.commit()
    await db.refresh(article)
    logger.info("Admin %d updated article %d (%s)", admin.id, article_id, ", ".join(changes))
    return article


@router.delete("/{article_id}", response_model=SuccessResponse)
async def delete_article(
    article_id: int,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_editor),
) -> SuccessResponse:
    article = await _get_article_or_404(db, article_id)
    await db.delete(article)
    await db.commit()
    logger.info("Admin %d deleted article %d", admin.id, article_id)
    return SuccessResponse(message=f"Article {article_id} deleted")

"""
Artisans: public directory plus the owner's own console views.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from souq.api.v1.catalog import (artisans, public_projects, to_artisan_read,
                                 to_public_project)
from souq.api.v1.deps import ensure_owner, get_db, require_capability
from souq.core.permissions import Capability, Principal
from souq.models.artisan import ArtisanProfile
from souq.models.project import Project
from souq.models.user import User
from souq.schemas.artisan import ArtisanDetail, ArtisanProfileUpdate, ArtisanRead
from souq.schemas.project import ProjectRead

router = APIRouter(prefix="/artisans", tags=["artisans"])
logger = logging.getLogger(__name__)


async def _get_artisan_or_404(db: AsyncSession, artisan_id: int) -> User:
    result = await db.execute(artisans().where(User.id == artisan_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise HTTPException(status_code=404, detail="Artisan not found")
    return user


@router.get("", response_model=list[ArtisanRead])
async def list_artisans(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
) -> list[ArtisanRead]:
    result = await db.execute(artisans().order_by(User.name, User.id).offset(skip).limit(limit))
    return [to_artisan_read(u) for u in result.scalars().all()]


@router.get("/{artisan_id}", response_model=ArtisanDetail)
async def get_artisan(
    artisan_id: int,
    db: AsyncSession = Depends(get_db),
) -> ArtisanDetail:
    """Public profile with the artisan's approved, active projects."""
    user = await _get_artisan_or_404(db, artisan_id)
    result = await db.execute(
        public_projects()
        .where(Project.artisan_id == artisan_id)
        .order_by(Project.created_at.desc(), Project.id.desc())
    )
    projects = [to_public_project(p) for p in result.scalars().all()]
    return ArtisanDetail(**to_artisan_read(user).model_dump(), projects=projects)


# ── Owner views ─────────────────────────────────────────────────────
@router.get("/{artisan_id}/projects", response_model=list[ProjectRead])
async def list_own_projects(
    artisan_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_capability(Capability.MANAGE_OWN_PROJECTS)),
) -> list[Project]:
    """Every project of the artisan, whatever its status."""
    ensure_owner(principal, artisan_id)
    result = await db.execute(
        select(Project)
        .where(Project.artisan_id == artisan_id)
        .order_by(Project.created_at.desc(), Project.id.desc())
    )
    return list(result.scalars().all())


@router.get("/{artisan_id}/projects/{project_id}", response_model=ProjectRead)
async def get_own_project(
    artisan_id: int,
    project_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_capability(Capability.MANAGE_OWN_PROJECTS)),
) -> Project:
    ensure_owner(principal, artisan_id)
    result = await db.execute(
        select(Project).where(Project.id == project_id, Project.artisan_id == artisan_id)
    )
    project = result.scalar_one_or_none()
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.put("/{artisan_id}/profile", response_model=ArtisanRead)
async def update_profile(
    artisan_id: int,
    body: ArtisanProfileUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_capability(Capability.EDIT_ARTISAN_PROFILE)),
) -> ArtisanRead:
    ensure_owner(principal, artisan_id)
    user = principal.user
    profile = user.artisan_profile
    if profile is None:
        profile = ArtisanProfile(user_id=user.id, specialties=[])
        user.artisan_profile = profile

    updates = body.model_dump(exclude_unset=True)
    for field, value in updates.items():
        if field == "name":
            if value is not None:
                user.name = value
        elif field == "specialties":
            profile.specialties = value or []
        elif field == "experience":
            profile.experience = value or 0
        else:
            setattr(profile, field, value)

    await db.commit()
    await db.refresh(user)
    logger.info("Artisan %d updated profile (%s)", user.id, ", ".join(updates))
    return to_artisan_read(user)

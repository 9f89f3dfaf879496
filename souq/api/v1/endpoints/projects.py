"""
Projects: public portfolio reads and owner-only artisan mutations.

- GET operations are public and only show approved, active projects.
- POST creates a pending project owned by the calling artisan.
- PUT operations require the caller to own the project.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from souq.api.v1.catalog import (load_products, public_products, public_projects,
                                 to_public_project)
from souq.api.v1.deps import ensure_owner, get_db, require_capability
from souq.core.moderation import ModerationStatus, status_after_edit
from souq.core.permissions import Capability, Principal
from souq.models.product import Product
from souq.models.project import Project, project_products
from souq.schemas.project import (ActivationUpdate, ProjectCreate, ProjectRead,
                                  ProjectUpdate, StyleKey)

router = APIRouter(prefix="/projects", tags=["projects"])
logger = logging.getLogger(__name__)

require_artisan = require_capability(Capability.MANAGE_OWN_PROJECTS)


async def get_project_or_404(db: AsyncSession, project_id: int) -> Project:
    result = await db.execute(select(Project).where(Project.id == project_id))
    project = result.scalar_one_or_none()
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


async def apply_project_changes(
    db: AsyncSession, project: Project, body: ProjectUpdate
) -> list[str]:
    """Copy the fields set on ``body`` onto ``project``; returns their names."""
    changes = body.model_dump(exclude_unset=True, exclude={"products_used"})
    for field, value in changes.items():
        if value is None:
            raise HTTPException(status_code=422, detail=f"'{field}' cannot be null")
        setattr(project, field, value)
    changed = list(changes)
    if "products_used" in body.model_fields_set:
        project.products = await load_products(db, body.products_used or [])
        changed.append("products_used")
    return changed


# ── Public ──────────────────────────────────────────────────────────
@router.get("", response_model=list[ProjectRead])
async def list_projects(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    style: StyleKey | None = None,
    product_id: int | None = None,
    db: AsyncSession = Depends(get_db),
) -> list[ProjectRead]:
    query = public_projects()
    if style:
        query = query.where(Project.style_key == style)
    if product_id is not None:
        query = query.where(
            Project.id.in_(
                select(project_products.c.project_id).where(
                    project_products.c.product_id == product_id,
                    project_products.c.product_id.in_(
                        public_products().with_only_columns(Product.id)
                    ),
                )
            )
        )
    query = query.order_by(Project.created_at.desc(), Project.id.desc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return [to_public_project(p) for p in result.scalars().all()]


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(
    project_id: int,
    db: AsyncSession = Depends(get_db),
) -> ProjectRead:
    result = await db.execute(public_projects().where(Project.id == project_id))
    project = result.scalar_one_or_none()
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return to_public_project(project)


# ── Artisan (owner only) ────────────────────────────────────────────
@router.post("", response_model=ProjectRead, status_code=201)
async def create_project(
    body: ProjectCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_artisan),
) -> Project:
    """Submit a new portfolio entry for review."""
    project = Project(
        **body.model_dump(exclude={"products_used"}),
        artisan_id=principal.id,
        status=ModerationStatus.PENDING.value,
        is_active=True,
        products=await load_products(db, body.products_used),
    )
    db.add(project)
    await db.commit()
    await db.refresh(project)
    logger.info("Artisan %d submitted project %d", principal.id, project.id)
    return project


@router.put("/{project_id}", response_model=ProjectRead)
async def update_project(
    project_id: int,
    body: ProjectUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_artisan),
) -> Project:
    """Edit an owned project. Reviewed projects go back to the review queue."""
    project = await get_project_or_404(db, project_id)
    ensure_owner(principal, project.artisan_id)

    changed = await apply_project_changes(db, project, body)
    if changed:
        project.status = status_after_edit(project.status, edited_by_moderator=False).value

    await db.commit()
    await db.refresh(project)
    logger.info("Artisan %d updated project %d (%s)", principal.id, project_id, ", ".join(changed))
    return project


@router.put("/{project_id}/activation", response_model=ProjectRead)
async def update_project_activation(
    project_id: int,
    body: ActivationUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_artisan),
) -> Project:
    """Show or hide an approved project on the public portfolio."""
    project = await get_project_or_404(db, project_id)
    ensure_owner(principal, project.artisan_id)

    if project.status != ModerationStatus.APPROVED.value:
        raise HTTPException(
            status_code=409,
            detail="Only approved projects can be activated or deactivated",
        )

    project.is_active = body.is_active
    await db.commit()
    await db.refresh(project)
    logger.info("Project %d is_active=%s", project_id, project.is_active)
    return project

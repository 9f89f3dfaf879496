"""
Admin project management: moderation, edits and removal of any project.

Every route requires the ``projects:manage`` capability.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from souq.api.v1.catalog import artisans, load_products, pending_first
from souq.api.v1.deps import get_db, require_capability
from souq.api.v1.endpoints.projects import (apply_project_changes,
                                            get_project_or_404)
from souq.core.moderation import (ModerationStatus, status_after_edit,
                                  transition)
from souq.core.permissions import Capability, Principal
from souq.models.project import Project
from souq.models.user import User
from souq.schemas.common import (StatusUpdate, StatusUpdateResponse,
                                 SuccessResponse)
from souq.schemas.project import (AdminProjectCreate, ProjectRead,
                                  ProjectUpdate)

router = APIRouter(prefix="/admin/projects", tags=["admin: projects"])
logger = logging.getLogger(__name__)

require_project_manager = require_capability(Capability.MANAGE_PROJECTS)


@router.get("", response_model=list[ProjectRead])
async def list_projects(
    status: ModerationStatus | None = None,
    artisan_id: int | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_project_manager),
) -> list[Project]:
    query = select(Project)
    if status is not None:
        query = query.where(Project.status == status.value)
    if artisan_id is not None:
        query = query.where(Project.artisan_id == artisan_id)
    query = query.order_by(*pending_first(Project)).offset(skip).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(
    project_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_project_manager),
) -> Project:
    return await get_project_or_404(db, project_id)


@router.post("", response_model=ProjectRead, status_code=201)
async def create_project(
    body: AdminProjectCreate,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_project_manager),
) -> Project:
    """Create a project on behalf of an artisan. It still starts pending."""
    owner = await db.execute(artisans().where(User.id == body.artisan_id))
    if owner.scalar_one_or_none() is None:
        raise HTTPException(status_code=400, detail="artisan_id does not name an artisan")

    project = Project(
        **body.model_dump(exclude={"products_used"}),
        status=ModerationStatus.PENDING.value,
        products=await load_products(db, body.products_used),
    )
    db.add(project)
    await db.commit()
    await db.refresh(project)
    logger.info("Admin %d created project %d for artisan %d", admin.id, project.id, body.artisan_id)
    return project


@router.put("/{project_id}", response_model=ProjectRead)
async def update_project(
    project_id: int,
    body: ProjectUpdate,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_project_manager),
) -> Project:
    """Edit any project. Moderator edits keep the current status."""
    project = await get_project_or_404(db, project_id)
    changed = await apply_project_changes(db, project, body)
    project.status = status_after_edit(project.status, edited_by_moderator=True).value

    await db.commit()
    await db.refresh(project)
    logger.info("Admin %d updated project %d (%s)", admin.id, project_id, ", ".join(changed))
    return project


@router.put("/{project_id}/status", response_model=StatusUpdateResponse)
async def update_project_status(
    project_id: int,
    body: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_project_manager),
) -> StatusUpdateResponse:
    """Approve or reject a project. ``is_active`` is left untouched."""
    project = await get_project_or_404(db, project_id)
    previous = project.status
    project.status = transition(previous, body.status.value).value
    await db.commit()
    logger.info(
        "Admin %d moved project %d from %s to %s", admin.id, project_id, previous, project.status
    )
    return StatusUpdateResponse(status=project.status)


@router.delete("/{project_id}", response_model=SuccessResponse)
async def delete_project(
    project_id: int,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_project_manager),
) -> SuccessResponse:
    project = await get_project_or_404(db, project_id)
    await db.delete(project)
    await db.commit()
    logger.info("Admin %d deleted project %d", admin.id, project_id)
    return SuccessResponse(message=f"Project {project_id} deleted")

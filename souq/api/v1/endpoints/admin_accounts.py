"""
Account administration: shoppers/artisans and admin accounts.

- /admin/users requires ``users:manage``; admin accounts are out of its reach.
- /admin/admins listing requires ``admins:view``; every mutation requires
  the primary admin, re-checked against storage on each request.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import delete as sa_delete
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from souq.api.v1.deps import get_db, require_capability, require_primary_admin
from souq.core.permissions import Capability, Principal, UserType
from souq.core.security import get_password_hash
from souq.models.article import Article
from souq.models.project import Project, project_products
from souq.models.user import AdminPermission, RefreshToken, User
from souq.schemas.common import SuccessResponse
from souq.schemas.user import AdminCreate, AdminPermissions, UserRead

router = APIRouter(prefix="/admin", tags=["admin: accounts"])
logger = logging.getLogger(__name__)


async def _get_user_or_404(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


async def _delete_account(db: AsyncSession, user: User) -> None:
    """Remove a user and everything that only makes sense with it (caller commits)."""
    owned_projects = select(Project.id).where(Project.artisan_id == user.id)
    await db.execute(
        sa_delete(project_products).where(project_products.c.project_id.in_(owned_projects))
    )
    await db.execute(sa_delete(Project).where(Project.artisan_id == user.id))
    await db.execute(sa_delete(RefreshToken).where(RefreshToken.user_id == user.id))
    await db.execute(update(Article).where(Article.author_id == user.id).values(author_id=None))
    await db.delete(user)


# ── Users ───────────────────────────────────────────────────────────
@router.get("/users", response_model=list[UserRead])
async def list_users(
    type: UserType | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_capability(Capability.MANAGE_USERS)),
) -> list[User]:
    query = select(User)
    if type is not None:
        query = query.where(User.type == type.value)
    query = query.order_by(User.created_at.desc(), User.id.desc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.delete("/users/{user_id}", response_model=SuccessResponse)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    admin: Principal = Depends(require_capability(Capability.MANAGE_USERS)),
) -> SuccessResponse:
    """Delete a shopper or artisan account along with its projects."""
    user = await _get_user_or_404(db, user_id)
    if user.type == UserType.ADMIN.value:
        raise HTTPException(
            status_code=403,
            detail="Admin accounts are managed through /admin/admins",
        )

    await _delete_account(db, user)
    await db.commit()
    logger.info("Admin %d deleted %s account %d", admin.id, user.type, user_id)
    return SuccessResponse(message=f"User {user_id} deleted")


# ── Admins ──────────────────────────────────────────────────────────
@router.get("/admins", response_model=list[UserRead])
async def list_admins(
    db: AsyncSession = Depends(get_db),
    _admin: Principal = Depends(require_capability(Capability.VIEW_ADMINS)),
) -> list[User]:
    result = await db.execute(
        select(User)
        .where(User.type == UserType.ADMIN.value)
        .order_by(User.is_primary.desc(), User.created_at, User.id)
    )
    return list(result.scalars().all())


@router.post("/admins", response_model=UserRead, status_code=201)
async def create_admin(
    body: AdminCreate,
    db: AsyncSession = Depends(get_db),
    primary: Principal = Depends(require_primary_admin),
) -> User:
    """Create a secondary admin account with the given permissions."""
    existing = await db.execute(select(User.id).where(User.email == body.email))
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(status_code=409, detail="User with this email already exists")

    admin = User(
        name=body.name,
        email=body.email,
        hashed_password=get_password_hash(body.password),
        type=UserType.ADMIN.value,
        is_primary=False,
        artisan_profile=None,
        permissions=AdminPermission(**body.permissions.model_dump()),
    )
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    logger.info(
        "Primary admin %d created admin %d with %s",
        primary.id, admin.id, body.permissions.model_dump(),
    )
    return admin


@router.put("/admins/{admin_id}/permissions", response_model=UserRead)
async def update_admin_permissions(
    admin_id: int,
    body: AdminPermissions,
    db: AsyncSession = Depends(get_db),
    primary: Principal = Depends(require_primary_admin),
) -> User:
    admin = await _get_user_or_404(db, admin_id)
    if admin.type != UserType.ADMIN.value:
        raise HTTPException(status_code=404, detail="Admin not found")
    if admin.is_primary:
        raise HTTPException(status_code=403, detail="The primary admin's permissions are fixed")

    if admin.permissions is None:
        admin.permissions = AdminPermission(**body.model_dump())
    else:
        for flag, value in body.model_dump().items():
            setattr(admin.permissions, flag, value)

    await db.commit()
    await db.refresh(admin)
    logger.info("Primary admin %d set permissions of admin %d: %s", primary.id, admin_id, body.model_dump())
    return admin


@router.delete("/admins/{admin_id}", response_model=SuccessResponse)
async def delete_admin(
    admin_id: int,
    db: AsyncSession = Depends(get_db),
    primary: Principal = Depends(require_primary_admin),
) -> SuccessResponse:
    admin = await _get_user_or_404(db, admin_id)
    if admin.type != UserType.ADMIN.value:
        raise HTTPException(status_code=404, detail="Admin not found")
    if admin.is_primary:
        raise HTTPException(status_code=403, detail="The primary admin cannot be deleted")

    await _delete_account(db, admin)
    await db.commit()
    logger.info("Primary admin %d deleted admin %d", primary.id, admin_id)
    return SuccessResponse(message=f"Admin {admin_id} deleted")

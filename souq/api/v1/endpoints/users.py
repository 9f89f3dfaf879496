"""
Self-service account endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from souq.api.v1.deps import ensure_owner, get_db, require_capability
from souq.core.permissions import Capability, Principal
from souq.models.user import User
from souq.schemas.user import AvatarUpdate, UserRead

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)


@router.put("/{user_id}/avatar", response_model=UserRead)
async def update_avatar(
    user_id: int,
    body: AvatarUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_capability(Capability.EDIT_OWN_ACCOUNT)),
) -> User:
    ensure_owner(principal, user_id)
    user = principal.user
    user.avatar_url = body.avatar_url
    await db.commit()
    await db.refresh(user)
    logger.info("User %d changed avatar", user.id)
    return user

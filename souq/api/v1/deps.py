"""
FastAPI dependencies: database session, request-scoped principal and guards.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Optional

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from souq.core.config import settings
from souq.core.permissions import Capability, Principal
from souq.core.security import decode_access_token
from souq.db.session import async_session_factory
from souq.models.user import User

# auto_error=False so we can fall back to the cookie when the header is missing
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_PREFIX}/auth/login", auto_error=False
)


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Identity ────────────────────────────────────────────────────────
async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Cookie(default=None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Decode the JWT from header or cookie and load the user it names.

    The stored row is authoritative: a token whose role claim no longer
    matches the user's type is rejected.
    """
    final_token = token
    if not final_token and access_token:
        final_token = access_token.removeprefix("Bearer ").strip()

    credentials_exc = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not final_token:
        raise credentials_exc

    payload = decode_access_token(final_token)
    if payload is None:
        raise credentials_exc

    user_id: str | None = payload.get("sub")
    if user_id is None or not user_id.isdigit():
        raise credentials_exc

    result = await db.execute(select(User).where(User.id == int(user_id)))
    user = result.scalar_one_or_none()
    if user is None or user.type != payload.get("role"):
        raise credentials_exc
    return user


async def get_principal(current_user: User = Depends(get_current_user)) -> Principal:
    return Principal.from_user(current_user)


# ── Guards ──────────────────────────────────────────────────────────
def require_capability(capability: Capability) -> Callable[..., Awaitable[Principal]]:
    """Build a dependency that admits callers holding ``capability``."""

    async def _guard(principal: Principal = Depends(get_principal)) -> Principal:
        if not principal.can(capability):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return principal

    _guard.__name__ = f"require_{capability.name.lower()}"
    return _guard


require_admin = require_capability(Capability.ADMIN_CONSOLE)


async def require_primary_admin(
    principal: Principal = Depends(require_capability(Capability.MANAGE_ADMINS)),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """Admin management is reserved to the primary admin, checked live."""
    result = await db.execute(select(User.is_primary).where(User.id == principal.id))
    if result.scalar_one_or_none() is not True:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the primary admin can manage admin accounts",
        )
    return principal


def ensure_owner(principal: Principal, owner_id: int | None) -> None:
    """Reject the request unless ``principal`` owns the resource."""
    if not principal.owns(owner_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only modify your own resources",
        )

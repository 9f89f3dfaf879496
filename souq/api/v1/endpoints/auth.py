"""
Auth endpoints: registration, role-scoped login, token refresh & logout.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Cookie, Depends, HTTPException, Request, Response, status
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from souq.api.v1.deps import get_db, get_principal
from souq.core.config import settings
from souq.core.permissions import Principal, UserType
from souq.core.security import (create_access_token, create_refresh_token,
                                decode_refresh_token, get_password_hash,
                                verify_password)
from souq.models.artisan import ArtisanProfile
from souq.models.user import RefreshToken, User
from souq.schemas.common import SuccessResponse
from souq.schemas.token import LoginRequest, LoginResponse, RefreshRequest
from souq.schemas.user import MeRead, UserRead, UserRegister

# Rate limiter: keyed by client IP
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _ensure_utc(dt: datetime) -> datetime:
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt


def _set_auth_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    response.set_cookie(
        key="access_token",
        value=f"Bearer {access_token}",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    response.set_cookie(
        key="refresh_token",
        value=refresh_token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
    )


def _issue_tokens(db: AsyncSession, user: User, response: Response) -> LoginResponse:
    """Mint an access/refresh pair and stage the refresh record (caller commits)."""
    access_token = create_access_token(user.id, user.type)
    refresh_token, jti, expires_at = create_refresh_token(user.id, user.type)
    db.add(RefreshToken(user_id=user.id, jti=jti, expires_at=expires_at))
    _set_auth_cookies(response, access_token, refresh_token)
    return LoginResponse(
        user=UserRead.model_validate(user),
        access_token=access_token,
        refresh_token=refresh_token,
    )


@router.post("/register", response_model=UserRead, status_code=201)
async def register(
    body: UserRegister,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Create a shopper or artisan account."""
    existing = await db.execute(select(User.id).where(User.email == body.email))
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        )

    user = User(
        name=body.name,
        email=body.email,
        hashed_password=get_password_hash(body.password),
        type=body.type,
        is_primary=False,
        permissions=None,
        artisan_profile=ArtisanProfile(specialties=[]) if body.type == UserType.ARTISAN.value else None,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Registered %s account %d", user.type, user.id)
    return user


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """Authenticate against the account registered for the claimed role."""
    result = await db.execute(
        select(User).where(User.email == body.email, User.type == body.type)
    )
    user = result.scalar_one_or_none()

    if user is None or not verify_password(body.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    tokens = _issue_tokens(db, user, response)
    await db.commit()
    logger.info("User %d logged in as %s", user.id, user.type)
    return tokens


@router.post("/refresh", response_model=LoginResponse)
@limiter.limit(settings.REFRESH_RATE_LIMIT)
async def refresh_access_token(
    request: Request,
    response: Response,
    body: RefreshRequest | None = None,
    refresh_token_cookie: str | None = Cookie(None, alias="refresh_token"),
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """Exchange a live refresh token for a new token pair (rotation)."""
    # Priority: Body > Cookie
    token_str = body.refresh_token if body and body.refresh_token else refresh_token_cookie
    if not token_str:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token missing",
        )

    invalid_exc = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired refresh token",
    )

    payload = decode_refresh_token(token_str)
    if payload is None:
        raise invalid_exc

    result = await db.execute(select(RefreshToken).where(RefreshToken.jti == payload["jti"]))
    stored = result.scalar_one_or_none()
    now = datetime.now(timezone.utc)
    if stored is None or stored.revoked_at is not None or _ensure_utc(stored.expires_at) <= now:
        raise invalid_exc

    user_result = await db.execute(select(User).where(User.id == stored.user_id))
    user = user_result.scalar_one_or_none()
    if user is None or user.type != payload.get("role"):
        raise invalid_exc

    stored.revoked_at = now
    tokens = _issue_tokens(db, user, response)
    await db.commit()
    return tokens


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    response: Response,
    body: RefreshRequest | None = None,
    refresh_token_cookie: str | None = Cookie(None, alias="refresh_token"),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """Revoke the presented refresh token and clear auth cookies."""
    token_str = body.refresh_token if body and body.refresh_token else refresh_token_cookie
    payload = decode_refresh_token(token_str) if token_str else None
    if payload is not None:
        result = await db.execute(select(RefreshToken).where(RefreshToken.jti == payload["jti"]))
        stored = result.scalar_one_or_none()
        if stored is not None and stored.revoked_at is None:
            stored.revoked_at = datetime.now(timezone.utc)
            await db.commit()

    response.delete_cookie("access_token")
    response.delete_cookie("refresh_token")
    return SuccessResponse(message="Logged out")


@router.get("/me", response_model=MeRead)
async def read_current_user(
    principal: Principal = Depends(get_principal),
) -> MeRead:
    """Return the caller's profile and the actions it may perform."""
    return MeRead(
        **UserRead.model_validate(principal.user).model_dump(),
        capabilities=sorted(c.value for c in principal.capabilities),
    )

"""
Souq Marketplace: application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `api/`, `models/`, and `core/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from souq.api.v1.api import api_router
from souq.api.v1.endpoints.auth import limiter
from souq.core.config import settings
from souq.core.exceptions import register_exception_handlers
from souq.core.permissions import PERMISSION_FLAGS, UserType
from souq.core.security import get_password_hash
from souq.db.base import Base
from souq.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from souq.models.article import Article  # noqa: F401
from souq.models.artisan import ArtisanProfile  # noqa: F401
from souq.models.contact import ContactMessage  # noqa: F401
from souq.models.offer import Offer  # noqa: F401
from souq.models.product import Product  # noqa: F401
from souq.models.project import Project  # noqa: F401
from souq.models.user import AdminPermission, User

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


async def seed_primary_admin(session: AsyncSession) -> User | None:
    """Create the primary admin unless one already exists; returns it if created."""
    result = await session.execute(select(User.id).where(User.is_primary.is_(True)))
    if result.scalar_one_or_none() is not None:
        return None

    taken = await session.execute(select(User.id).where(User.email == settings.FIRST_ADMIN_EMAIL))
    if taken.scalar_one_or_none() is not None:
        logger.error(
            "Cannot seed primary admin: %s is already used by another account",
            settings.FIRST_ADMIN_EMAIL,
        )
        return None

    admin = User(
        name=settings.FIRST_ADMIN_NAME,
        email=settings.FIRST_ADMIN_EMAIL.strip().lower(),
        hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
        type=UserType.ADMIN.value,
        is_primary=True,
        artisan_profile=None,
        permissions=AdminPermission(**{flag: True for flag in PERMISSION_FLAGS}),
    )
    session.add(admin)
    await session.commit()
    logger.info(
        "Primary admin created: %s (password: <redacted>)",
        settings.FIRST_ADMIN_EMAIL,
    )
    return admin


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    async with async_session_factory() as session:
        await seed_primary_admin(session)

    logger.info("%s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Bilingual artisan marketplace API",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiter used by the auth routes
    application.state.limiter = limiter

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    # Mount API v1
    application.include_router(api_router, prefix=settings.API_V1_PREFIX)

    # Serve the prebuilt client bundle if present (mounted last, it catches every path)
    frontend_dir = Path(__file__).resolve().parent.parent / "frontend"
    if frontend_dir.is_dir():
        application.mount(
            "/",
            StaticFiles(directory=str(frontend_dir), html=True),
            name="frontend",
        )
        logger.info("Frontend mounted from %s", frontend_dir)

    return application


app = create_app()

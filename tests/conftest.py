"""
Shared test fixtures for the Souq Marketplace test suite.

Every test gets its own in-memory SQLite database (aiosqlite + AsyncSession)
and real JWTs minted for users created directly through the ORM.
"""

import itertools
import os
import sys
from datetime import date
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production-use-0123456789abcdef"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from souq.api.v1.deps import get_db
from souq.core.permissions import PERMISSION_FLAGS
from souq.core.security import create_access_token, get_password_hash
from souq.db.base import Base
from souq.db.session import build_engine, build_session_factory
from souq.main import app
from souq.models.artisan import ArtisanProfile
from souq.models.offer import Offer
from souq.models.product import Product
from souq.models.project import Project
from souq.models.user import AdminPermission, User

TEST_PASSWORD = "secret123"

_emails = itertools.count(1)
_password_hash: str | None = None


def _hashed_test_password() -> str:
    # bcrypt is slow on purpose; hash the shared password once per run
    global _password_hash
    if _password_hash is None:
        _password_hash = get_password_hash(TEST_PASSWORD)
    return _password_hash


# ── Database ────────────────────────────────────────────────────────
@pytest.fixture
async def engine():
    """Fresh in-memory database with every table created."""
    test_engine = build_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct setup and queries in tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app and the test database."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# ── Accounts ────────────────────────────────────────────────────────
@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory creating a stored account of the given type."""

    async def _make(
        type: str = "user",
        *,
        name: str = "Test User",
        email: str | None = None,
        is_primary: bool = False,
        permissions: dict | None = None,
    ) -> User:
        user = User(
            name=name,
            email=email or f"{type}{next(_emails)}@example.com",
            hashed_password=_hashed_test_password(),
            type=type,
            is_primary=is_primary,
        )
        if type == "admin":
            flags = {flag: is_primary for flag in PERMISSION_FLAGS}
            flags.update(permissions or {})
            user.permissions = AdminPermission(**flags)
        if type == "artisan":
            user.artisan_profile = ArtisanProfile(specialties=[])
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def auth_headers():
    """Build an Authorization header carrying a real access token for ``user``."""

    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(user.id, user.type)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
async def primary_admin(make_user) -> User:
    return await make_user("admin", name="Primary Admin", is_primary=True)


@pytest.fixture
async def artisan(make_user) -> User:
    return await make_user("artisan", name="Karim the Smith")


@pytest.fixture
async def other_artisan(make_user) -> User:
    return await make_user("artisan", name="Huda the Carpenter")


@pytest.fixture
async def shopper(make_user) -> User:
    return await make_user("user", name="Shopper")


# ── Catalogue ───────────────────────────────────────────────────────
@pytest.fixture
def make_product(db_session: AsyncSession):
    async def _make(
        *,
        status: str = "approved",
        amount: float | None = 1000,
        currency: str = "EGP",
        name_en: str = "Sliding window",
        name_ar: str = "نافذة منزلقة",
        category_key: str = "aluminum",
    ) -> Product:
        product = Product(
            name={"ar": name_ar, "en": name_en},
            category_key=category_key,
            category={"ar": "ألومنيوم", "en": "Aluminum"},
            image_urls=[],
            price={"amount": amount, "currency": currency, "unit": None},
            status=status,
        )
        db_session.add(product)
        await db_session.commit()
        await db_session.refresh(product)
        return product

    return _make


@pytest.fixture
def make_project(db_session: AsyncSession):
    async def _make(
        artisan: User,
        *,
        status: str = "approved",
        is_active: bool = True,
        products: list[Product] | None = None,
        title_en: str = "Villa kitchen",
    ) -> Project:
        project = Project(
            title={"ar": "مطبخ فيلا", "en": title_en},
            image_urls=[],
            artisan_id=artisan.id,
            location={"ar": "القاهرة", "en": "Cairo"},
            style_key="modern",
            style={"ar": "حديث", "en": "Modern"},
            status=status,
            is_active=is_active,
            products=products or [],
        )
        db_session.add(project)
        await db_session.commit()
        await db_session.refresh(project)
        return project

    return _make


@pytest.fixture
def make_offer(db_session: AsyncSession):
    async def _make(
        products: list[Product],
        *,
        discount: int = 15,
        start: date,
        end: date,
        status: str = "active",
    ) -> Offer:
        offer = Offer(
            title={"ar": "عرض", "en": "Offer"},
            description={"ar": "", "en": ""},
            discount_percentage=discount,
            start_date=start,
            end_date=end,
            status=status,
            products=products,
        )
        db_session.add(offer)
        await db_session.commit()
        await db_session.refresh(offer)
        return offer

    return _make

"""Tests for account administration, the admin console and admin seeding."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from souq.core.config import settings
from souq.main import seed_primary_admin
from souq.models.article import Article
from souq.models.contact import ContactMessage
from souq.models.project import Project
from souq.models.user import User

NEW_ADMIN = {
    "name": "Second Admin",
    "email": "second@souq.local",
    "password": "secret123",
    "permissions": {"can_manage_products": True},
}


async def _count(db: AsyncSession, *criteria) -> int:
    return await db.scalar(select(func.count()).select_from(User).where(*criteria))


# ── Admin accounts ──────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_primary_admin_creates_admin(async_client: AsyncClient, primary_admin, auth_headers):
    resp = await async_client.post("/api/v1/admin/admins", json=NEW_ADMIN, headers=auth_headers(primary_admin))
    assert resp.status_code == 201
    data = resp.json()
    assert data["type"] == "admin"
    assert data["is_primary"] is False
    assert data["permissions"]["can_manage_products"] is True
    assert data["permissions"]["can_manage_users"] is False

    login = await async_client.post(
        "/api/v1/auth/login",
        json={"email": NEW_ADMIN["email"], "password": NEW_ADMIN["password"], "type": "admin"},
    )
    assert login.status_code == 200
    me = await async_client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {login.json()['access_token']}"}
    )
    assert "products:manage" in me.json()["capabilities"]
    assert "offers:manage" in me.json()["capabilities"]
    assert "users:manage" not in me.json()["capabilities"]


@pytest.mark.asyncio
async def test_non_primary_admin_cannot_create_admins(
    async_client: AsyncClient, db_session: AsyncSession, make_user, auth_headers
):
    """Even with the admin-management flag, only the primary admin may create admins."""
    delegate = await make_user("admin", permissions={"can_manage_admins": True})
    resp = await async_client.post("/api/v1/admin/admins", json=NEW_ADMIN, headers=auth_headers(delegate))
    assert resp.status_code == 403
    assert await _count(db_session, User.email == NEW_ADMIN["email"]) == 0

    # ...but may list them
    listing = await async_client.get("/api/v1/admin/admins", headers=auth_headers(delegate))
    assert listing.status_code == 200
    assert [a["id"] for a in listing.json()] == [delegate.id]


@pytest.mark.asyncio
async def test_primary_status_is_checked_live(
    async_client: AsyncClient, db_session: AsyncSession, primary_admin, auth_headers
):
    headers = auth_headers(primary_admin)
    await db_session.execute(update(User).where(User.id == primary_admin.id).values(is_primary=False))
    await db_session.commit()

    resp = await async_client.post("/api/v1/admin/admins", json=NEW_ADMIN, headers=headers)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_create_admin_with_taken_email(async_client: AsyncClient, primary_admin, shopper, auth_headers):
    resp = await async_client.post(
        "/api/v1/admin/admins", json={**NEW_ADMIN, "email": shopper.email}, headers=auth_headers(primary_admin)
    )
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_permission_changes_apply_on_next_request(
    async_client: AsyncClient, primary_admin, make_user, auth_headers
):
    admin = await make_user("admin")
    headers = auth_headers(admin)
    assert (await async_client.get("/api/v1/admin/users", headers=headers)).status_code == 403

    resp = await async_client.put(
        f"/api/v1/admin/admins/{admin.id}/permissions",
        json={"can_manage_users": True},
        headers=auth_headers(primary_admin),
    )
    assert resp.status_code == 200
    assert resp.json()["permissions"]["can_manage_users"] is True

    # Same token, fresh capabilities
    assert (await async_client.get("/api/v1/admin/users", headers=headers)).status_code == 200


@pytest.mark.asyncio
async def test_primary_admin_is_protected(async_client: AsyncClient, primary_admin, auth_headers):
    headers = auth_headers(primary_admin)
    perms = await async_client.put(
        f"/api/v1/admin/admins/{primary_admin.id}/permissions", json={}, headers=headers
    )
    assert perms.status_code == 403
    delete = await async_client.delete(f"/api/v1/admin/admins/{primary_admin.id}", headers=headers)
    assert delete.status_code == 403


@pytest.mark.asyncio
async def test_delete_admin(async_client: AsyncClient, db_session: AsyncSession, primary_admin, make_user, auth_headers):
    admin = await make_user("admin")
    resp = await async_client.delete(f"/api/v1/admin/admins/{admin.id}", headers=auth_headers(primary_admin))
    assert resp.status_code == 200
    assert await _count(db_session, User.id == admin.id) == 0


@pytest.mark.asyncio
async def test_admin_endpoints_ignore_non_admins(async_client: AsyncClient, primary_admin, shopper, auth_headers):
    resp = await async_client.put(
        f"/api/v1/admin/admins/{shopper.id}/permissions", json={}, headers=auth_headers(primary_admin)
    )
    assert resp.status_code == 404


# ── Users ───────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_list_users_by_type(async_client: AsyncClient, primary_admin, shopper, artisan, auth_headers):
    resp = await async_client.get("/api/v1/admin/users?type=artisan", headers=auth_headers(primary_admin))
    assert resp.status_code == 200
    assert [u["id"] for u in resp.json()] == [artisan.id]


@pytest.mark.asyncio
async def test_delete_artisan_removes_projects(
    async_client: AsyncClient, db_session: AsyncSession, primary_admin, artisan, make_project, make_product,
    auth_headers,
):
    await make_project(artisan, products=[await make_product()])
    resp = await async_client.delete(f"/api/v1/admin/users/{artisan.id}", headers=auth_headers(primary_admin))
    assert resp.status_code == 200
    assert await _count(db_session, User.id == artisan.id) == 0
    remaining = await db_session.scalar(
        select(func.count()).select_from(Project).where(Project.artisan_id == artisan.id)
    )
    assert remaining == 0


@pytest.mark.asyncio
async def test_user_management_cannot_delete_admins(
    async_client: AsyncClient, db_session: AsyncSession, make_user, auth_headers
):
    moderator = await make_user("admin", permissions={"can_manage_users": True})
    target = await make_user("admin")
    resp = await async_client.delete(f"/api/v1/admin/users/{target.id}", headers=auth_headers(moderator))
    assert resp.status_code == 403
    assert await _count(db_session, User.id == target.id) == 1


@pytest.mark.asyncio
async def test_delete_unknown_user(async_client: AsyncClient, primary_admin, auth_headers):
    resp = await async_client.delete("/api/v1/admin/users/9999", headers=auth_headers(primary_admin))
    assert resp.status_code == 404


# ── Console ─────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_stats(
    async_client: AsyncClient, db_session: AsyncSession, make_user, shopper, artisan, make_product,
    make_project, auth_headers,
):
    admin = await make_user("admin")
    await make_product(status="pending")
    await make_product(status="approved")
    await make_project(artisan, status="pending")
    db_session.add(ContactMessage(name="Visitor", email="v@example.com", subject="Hi", message="Hello"))
    await db_session.commit()

    resp = await async_client.get("/api/v1/admin/stats", headers=auth_headers(admin))
    assert resp.status_code == 200
    stats = resp.json()
    assert stats["pending_products"] == 1
    assert stats["total_products"] == 2
    assert stats["pending_projects"] == 1
    assert stats["users"] == 1
    assert stats["artisans"] == 1
    assert stats["admins"] == 1
    assert stats["contact_messages"] == 1
    assert stats["live_offers"] == 0


@pytest.mark.asyncio
async def test_console_is_admin_only(async_client: AsyncClient, artisan, auth_headers):
    resp = await async_client.get("/api/v1/admin/stats", headers=auth_headers(artisan))
    assert resp.status_code == 403


# ── Seeding ─────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_seed_primary_admin_runs_once(db_session: AsyncSession):
    created = await seed_primary_admin(db_session)
    assert created is not None
    assert created.is_primary is True
    assert created.email == settings.FIRST_ADMIN_EMAIL
    assert created.permissions.can_manage_admins is True

    assert await seed_primary_admin(db_session) is None
    assert await _count(db_session, User.is_primary.is_(True)) == 1


@pytest.mark.asyncio
async def test_deleting_author_keeps_article(
    async_client: AsyncClient, db_session: AsyncSession, primary_admin, make_user, auth_headers
):
    writer = await make_user("admin", name="Writer", permissions={"can_manage_articles": True})
    created = await async_client.post(
        "/api/v1/admin/articles",
        json={"title": {"ar": "مقال", "en": "Article"}, "status": "published"},
        headers=auth_headers(writer),
    )
    assert created.status_code == 201

    resp = await async_client.delete(f"/api/v1/admin/admins/{writer.id}", headers=auth_headers(primary_admin))
    assert resp.status_code == 200
    article = await async_client.get(f"/api/v1/articles/{created.json()['id']}")
    assert article.status_code == 200
    assert article.json()["author_id"] is None
    assert article.json()["author_name"] == "Writer"
    assert await db_session.scalar(select(func.count()).select_from(Article)) == 1

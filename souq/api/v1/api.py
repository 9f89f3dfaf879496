"""
V1 API router aggregator: wires all endpoint modules together.
"""

from fastapi import APIRouter

from souq.api.v1.endpoints import (admin_accounts, admin_articles,
                                   admin_console, admin_offers,
                                   admin_products, admin_projects, articles,
                                   artisans, auth, contact, home, offers,
                                   products, projects, users)

api_router = APIRouter()

# Auth (register, login, refresh, logout, me)
api_router.include_router(auth.router)

# Public catalogue + owner-scoped artisan and account routes
api_router.include_router(home.router)
api_router.include_router(products.router)
api_router.include_router(projects.router)
api_router.include_router(artisans.router)
api_router.include_router(articles.router)
api_router.include_router(offers.router)
api_router.include_router(contact.router)
api_router.include_router(users.router)

# Admin consoles
api_router.include_router(admin_products.router)
api_router.include_router(admin_projects.router)
api_router.include_router(admin_articles.router)
api_router.include_router(admin_offers.router)
api_router.include_router(admin_accounts.router)
api_router.include_router(admin_console.router)

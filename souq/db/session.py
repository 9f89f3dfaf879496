"""
Async SQLAlchemy engine & session factory.

PostgreSQL (asyncpg) is the production backend. SQLite (aiosqlite) is
accepted for local runs and tests, with foreign keys switched on so the
ON DELETE rules of the schema behave the same on both.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession,
                                    async_sessionmaker, create_async_engine)

from souq.core.config import settings


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, **overrides: Any) -> AsyncEngine:
    """Create an async engine tuned for the backend named in ``url``."""
    engine_args: dict[str, Any] = {"echo": False, "pool_pre_ping": True}

    if url.startswith("postgresql"):
        engine_args.update(pool_size=20, max_overflow=10, pool_recycle=300)
    elif url.startswith("sqlite"):
        engine_args["connect_args"] = {"check_same_thread": False}
    engine_args.update(overrides)

    new_engine = create_async_engine(url, **engine_args)
    if url.startswith("sqlite"):
        event.listen(new_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return new_engine


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.DATABASE_URL)
async_session_factory = build_session_factory(engine)

"""
User model: authentication, role tagging and admin permissions.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (Boolean, Column, DateTime, ForeignKey, Index, Integer,
                        String, text)
from sqlalchemy.orm import relationship

from souq.db.base import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        # At most one primary admin.
        Index(
            "uq_users_single_primary",
            "is_primary",
            unique=True,
            postgresql_where=text("is_primary"),
            sqlite_where=text("is_primary = 1"),
        ),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    email: str = Column(String(320), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    hashed_password: str = Column(String(128), nullable=False)  # type: ignore[assignment]
    type: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default="user",
        server_default="user",
        index=True,
    )  # user | artisan | admin
    is_primary: bool = Column(  # type: ignore[assignment]
        Boolean, nullable=False, default=False, server_default="false"
    )
    avatar_url: str | None = Column(String(1000), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    permissions = relationship(
        "AdminPermission",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    artisan_profile = relationship(
        "ArtisanProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class AdminPermission(Base):
    __tablename__ = "admin_permissions"

    user_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    can_manage_products: bool = Column(Boolean, nullable=False, default=False)  # type: ignore[assignment]
    can_manage_projects: bool = Column(Boolean, nullable=False, default=False)  # type: ignore[assignment]
    can_manage_users: bool = Column(Boolean, nullable=False, default=False)  # type: ignore[assignment]
    can_manage_admins: bool = Column(Boolean, nullable=False, default=False)  # type: ignore[assignment]
    can_manage_articles: bool = Column(Boolean, nullable=False, default=False)  # type: ignore[assignment]

    user = relationship("User", back_populates="permissions")


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    user_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    jti: str = Column(String(64), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    expires_at: datetime = Column(DateTime(timezone=True), nullable=False)  # type: ignore[assignment]
    revoked_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

"""
Project model: an artisan portfolio entry and the products it used.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (JSON, Boolean, Column, DateTime, ForeignKey, Index,
                        Integer, String, Table)
from sqlalchemy.orm import relationship

from souq.db.base import Base, bilingual

project_products = Table(
    "project_products",
    Base.metadata,
    Column("project_id", Integer, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
    Column("product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
)


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (Index("ix_projects_artisan_status", "artisan_id", "status"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    title_ar: str = Column(String(300), nullable=False)  # type: ignore[assignment]
    title_en: str = Column(String(300), nullable=False)  # type: ignore[assignment]
    image_urls: list = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]
    artisan_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    location_ar: str = Column(String(200), nullable=False, default="")  # type: ignore[assignment]
    location_en: str = Column(String(200), nullable=False, default="")  # type: ignore[assignment]
    style_key: str = Column(String(30), nullable=False)  # type: ignore[assignment]
    # modern | classic | neo
    style_ar: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    style_en: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    status: str = Column(  # type: ignore[assignment]
        String(20), nullable=False, default="pending", server_default="pending"
    )  # pending | approved | rejected
    is_active: bool = Column(Boolean, nullable=False, default=True, server_default="true")  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    products = relationship("Product", secondary=project_products, lazy="selectin")

    title = bilingual("title")
    location = bilingual("location")
    style = bilingual("style")

    @property
    def products_used(self) -> list[int]:
        return sorted(p.id for p in self.products)

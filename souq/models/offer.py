"""
Offer model: a percentage discount on a set of products over a date range.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import (CheckConstraint, Column, Date, DateTime, ForeignKey,
                        Integer, String, Table, Text)
from sqlalchemy.orm import relationship

from souq.db.base import Base, bilingual

offer_products = Table(
    "offer_products",
    Base.metadata,
    Column("offer_id", Integer, ForeignKey("offers.id", ondelete="CASCADE"), primary_key=True),
    Column("product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
)


class Offer(Base):
    __tablename__ = "offers"
    __table_args__ = (
        CheckConstraint(
            "discount_percentage > 0 AND discount_percentage <= 100",
            name="ck_offers_discount_range",
        ),
        CheckConstraint("end_date >= start_date", name="ck_offers_date_order"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    title_ar: str = Column(String(300), nullable=False)  # type: ignore[assignment]
    title_en: str = Column(String(300), nullable=False)  # type: ignore[assignment]
    description_ar: str = Column(Text, nullable=False, default="")  # type: ignore[assignment]
    description_en: str = Column(Text, nullable=False, default="")  # type: ignore[assignment]
    discount_percentage: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    start_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    end_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    status: str = Column(  # type: ignore[assignment]
        String(20), nullable=False, default="scheduled", server_default="scheduled"
    )  # active | scheduled | expired
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    products = relationship("Product", secondary=offer_products, lazy="selectin")

    title = bilingual("title")
    description = bilingual("description")

    @property
    def product_ids(self) -> list[int]:
        return sorted(p.id for p in self.products)

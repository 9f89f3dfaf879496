"""
Product model: bilingual catalogue entry with a structured price.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import JSON, Column, DateTime, Index, Integer, Numeric, String, Text

from souq.db.base import Base, bilingual


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (Index("ix_products_status_created", "status", "created_at"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name_ar: str = Column(String(300), nullable=False)  # type: ignore[assignment]
    name_en: str = Column(String(300), nullable=False)  # type: ignore[assignment]
    category_key: str = Column(String(30), nullable=False, index=True)  # type: ignore[assignment]
    # aluminum | kitchen
    category_ar: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    category_en: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    image_urls: list = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]
    price_amount: Decimal | None = Column(Numeric(12, 2), nullable=True)  # type: ignore[assignment]
    price_currency: str = Column(String(3), nullable=False, default="EGP")  # type: ignore[assignment]
    price_unit_ar: str | None = Column(String(50), nullable=True)  # type: ignore[assignment]
    price_unit_en: str | None = Column(String(50), nullable=True)  # type: ignore[assignment]
    origin_ar: str = Column(String(200), nullable=False, default="")  # type: ignore[assignment]
    origin_en: str = Column(String(200), nullable=False, default="")  # type: ignore[assignment]
    description_ar: str = Column(Text, nullable=False, default="")  # type: ignore[assignment]
    description_en: str = Column(Text, nullable=False, default="")  # type: ignore[assignment]
    status: str = Column(  # type: ignore[assignment]
        String(20), nullable=False, default="pending", server_default="pending"
    )  # pending | approved | rejected
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    name = bilingual("name")
    category = bilingual("category")
    origin = bilingual("origin")
    description = bilingual("description")
    price_unit = bilingual("price_unit")

    @property
    def price(self) -> dict:
        return {
            "amount": self.price_amount,
            "currency": self.price_currency,
            "unit": self.price_unit,
        }

    @price.setter
    def price(self, value: dict) -> None:
        self.price_amount = value.get("amount")
        self.price_currency = (value.get("currency") or "EGP").upper()
        self.price_unit = value.get("unit")

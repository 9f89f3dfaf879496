"""Pydantic schemas for products and their structured price."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field, field_serializer, field_validator

from souq.core.config import settings
from souq.schemas.common import BilingualName, BilingualText, validate_url

CategoryKey = Literal["aluminum", "kitchen"]


class Price(BaseModel):
    """``amount`` of ``None`` means the price is given on request."""

    amount: Decimal | None = Field(
        default=None, ge=0, max_digits=12, decimal_places=2, allow_inf_nan=False
    )
    currency: str = settings.DEFAULT_CURRENCY
    unit: BilingualText | None = None

    model_config = {"from_attributes": True}

    @field_validator("currency")
    @classmethod
    def _currency(cls, v: str) -> str:
        v = v.strip().upper()
        if len(v) != 3 or not v.isalpha():
            raise ValueError("Currency must be a 3-letter ISO code")
        return v

    @field_serializer("amount", when_used="json")
    def _amount_as_number(self, v: Decimal | None) -> float | None:
        return None if v is None else float(v)


def _check_image_urls(v: list[str]) -> list[str]:
    if len(v) > 20:
        raise ValueError("At most 20 images are allowed")
    return [validate_url(u) for u in v]


class ProductCreate(BaseModel):
    name: BilingualName
    category_key: CategoryKey
    category: BilingualName
    image_urls: list[str] = []
    price: Price = Price()
    origin: BilingualText = BilingualText()
    description: BilingualText = BilingualText()

    @field_validator("image_urls")
    @classmethod
    def _images(cls, v: list[str]) -> list[str]:
        return _check_image_urls(v)


class ProductUpdate(BaseModel):
    name: BilingualName | None = None
    category_key: CategoryKey | None = None
    category: BilingualName | None = None
    image_urls: list[str] | None = None
    price: Price | None = None
    origin: BilingualText | None = None
    description: BilingualText | None = None

    @field_validator("image_urls")
    @classmethod
    def _images(cls, v: list[str] | None) -> list[str] | None:
        return None if v is None else _check_image_urls(v)


class ProductRead(BaseModel):
    id: int
    name: BilingualText
    category_key: str
    category: BilingualText
    image_urls: list[str]
    price: Price
    origin: BilingualText
    description: BilingualText
    status: str
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class AppliedOffer(BaseModel):
    id: int
    discount_percentage: int
    end_date: date
    discounted_amount: int | None = None
    discounted_display: dict[str, str] | None = None


class PublicProductRead(ProductRead):
    price_display: dict[str, str]
    offer: AppliedOffer | None = None

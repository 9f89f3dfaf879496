"""Pydantic schemas for promotional offers."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from souq.schemas.common import BilingualName, BilingualText


class OfferCreate(BaseModel):
    title: BilingualName
    description: BilingualText = BilingualText()
    discount_percentage: int = Field(gt=0, le=100)
    start_date: date
    end_date: date
    product_ids: list[int] = Field(min_length=1)

    @field_validator("product_ids")
    @classmethod
    def _unique_products(cls, v: list[int]) -> list[int]:
        return sorted(set(v))

    @model_validator(mode="after")
    def _date_order(self) -> "OfferCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class OfferUpdate(BaseModel):
    title: BilingualName | None = None
    description: BilingualText | None = None
    discount_percentage: int | None = Field(default=None, gt=0, le=100)
    start_date: date | None = None
    end_date: date | None = None
    product_ids: list[int] | None = Field(default=None, min_length=1)
    # Only "expired" is honoured as an explicit value; other states follow the dates.
    status: Literal["active", "scheduled", "expired"] | None = None

    @field_validator("product_ids")
    @classmethod
    def _unique_products(cls, v: list[int] | None) -> list[int] | None:
        return None if v is None else sorted(set(v))


class OfferRead(BaseModel):
    id: int
    title: BilingualText
    description: BilingualText
    discount_percentage: int
    start_date: date
    end_date: date
    product_ids: list[int]
    status: str
    created_at: datetime | None

    model_config = {"from_attributes": True}

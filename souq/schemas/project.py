"""Pydantic schemas for artisan projects."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, field_validator

from souq.schemas.common import BilingualName, BilingualText
from souq.schemas.product import _check_image_urls

StyleKey = Literal["modern", "classic", "neo"]


class ProjectCreate(BaseModel):
    title: BilingualName
    image_urls: list[str] = []
    location: BilingualText = BilingualText()
    style_key: StyleKey
    style: BilingualName
    products_used: list[int] = []

    @field_validator("image_urls")
    @classmethod
    def _images(cls, v: list[str]) -> list[str]:
        return _check_image_urls(v)

    @field_validator("products_used")
    @classmethod
    def _unique_products(cls, v: list[int]) -> list[int]:
        return sorted(set(v))


class AdminProjectCreate(ProjectCreate):
    artisan_id: int
    is_active: bool = True


class ProjectUpdate(BaseModel):
    title: BilingualName | None = None
    image_urls: list[str] | None = None
    location: BilingualText | None = None
    style_key: StyleKey | None = None
    style: BilingualName | None = None
    products_used: list[int] | None = None

    @field_validator("image_urls")
    @classmethod
    def _images(cls, v: list[str] | None) -> list[str] | None:
        return None if v is None else _check_image_urls(v)

    @field_validator("products_used")
    @classmethod
    def _unique_products(cls, v: list[int] | None) -> list[int] | None:
        return None if v is None else sorted(set(v))


class ActivationUpdate(BaseModel):
    is_active: bool


class ProjectRead(BaseModel):
    id: int
    title: BilingualText
    image_urls: list[str]
    artisan_id: int
    location: BilingualText
    style_key: str
    style: BilingualText
    products_used: list[int]
    status: str
    is_active: bool
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}

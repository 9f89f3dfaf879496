"""Pydantic schemas for editorial articles."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, field_validator

from souq.schemas.common import BilingualName, BilingualText, validate_url

ArticleStatusLiteral = Literal["draft", "published"]


class ArticleCreate(BaseModel):
    title: BilingualName
    summary: BilingualText = BilingualText()
    content: BilingualText = BilingualText()
    image_url: str | None = None
    status: ArticleStatusLiteral = "draft"

    @field_validator("image_url")
    @classmethod
    def _image(cls, v: str | None) -> str | None:
        return None if v is None else validate_url(v)


class ArticleUpdate(BaseModel):
    title: BilingualName | None = None
    summary: BilingualText | None = None
    content: BilingualText | None = None
    image_url: str | None = None
    status: ArticleStatusLiteral | None = None

    @field_validator("image_url")
    @classmethod
    def _image(cls, v: str | None) -> str | None:
        return None if v is None else validate_url(v)


class ArticleRead(BaseModel):
    id: int
    title: BilingualText
    summary: BilingualText
    content: BilingualText
    image_url: str | None
    author_id: int | None
    author_name: str
    status: str
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}

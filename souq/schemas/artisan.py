"""Pydantic schemas for artisan profiles."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

from souq.schemas.common import BilingualText, strip_markup
from souq.schemas.project import ProjectRead

_PHONE_RE = re.compile(r"^\+?[0-9 ()-]{6,30}$")


class ArtisanProfileUpdate(BaseModel):
    name: str | None = None
    phone: str | None = None
    bio: BilingualText | None = None
    location: BilingualText | None = None
    specialties: list[BilingualText] | None = None
    experience: int | None = Field(default=None, ge=0, le=100)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = strip_markup(v)
        if not v:
            raise ValueError("Name must not be empty")
        return v

    @field_validator("phone")
    @classmethod
    def _phone(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not _PHONE_RE.match(v):
            raise ValueError("Invalid phone number")
        return v


class ArtisanRead(BaseModel):
    id: int
    name: str
    avatar_url: str | None = None
    phone: str | None = None
    bio: BilingualText = BilingualText()
    location: BilingualText = BilingualText()
    experience: int = 0
    specialties: list[BilingualText] = []
    is_certified: bool = False


class ArtisanDetail(ArtisanRead):
    projects: list[ProjectRead] = []

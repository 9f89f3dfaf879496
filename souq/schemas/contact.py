"""Pydantic schemas for the public contact form."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

from souq.schemas.common import normalise_email, strip_markup

_LIMITS = {"name": 200, "subject": 300, "message": 5000}


class ContactCreate(BaseModel):
    name: str
    email: str
    subject: str
    message: str

    @field_validator("name", "subject", "message")
    @classmethod
    def _clean(cls, v: str, info) -> str:
        v = strip_markup(v)
        if not v:
            raise ValueError(f"{info.field_name} must not be empty")
        if len(v) > _LIMITS[info.field_name]:
            raise ValueError(f"{info.field_name} is too long")
        return v

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return normalise_email(strip_markup(v))


class ContactRead(BaseModel):
    id: int
    name: str
    email: str
    subject: str
    message: str
    created_at: datetime | None

    model_config = {"from_attributes": True}

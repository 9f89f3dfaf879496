"""Pydantic schemas for users, admins and their permissions."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, field_validator

from souq.schemas.common import normalise_email, strip_markup, validate_url


class AdminPermissions(BaseModel):
    can_manage_products: bool = False
    can_manage_projects: bool = False
    can_manage_users: bool = False
    can_manage_admins: bool = False
    can_manage_articles: bool = False

    model_config = {"from_attributes": True}


class _Credentials(BaseModel):
    name: str
    email: str
    password: str

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = strip_markup(v)
        if not v:
            raise ValueError("Name must not be empty")
        if len(v) > 200:
            raise ValueError("Name must not exceed 200 characters")
        return v

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        return normalise_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password must not exceed 72 bytes")
        return v


class UserRegister(_Credentials):
    type: Literal["user", "artisan"] = "user"


class AdminCreate(_Credentials):
    permissions: AdminPermissions = AdminPermissions()


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    type: str
    is_primary: bool
    avatar_url: str | None
    permissions: AdminPermissions | None = None
    created_at: datetime | None

    model_config = {"from_attributes": True}


class MeRead(UserRead):
    capabilities: list[str]


class AvatarUpdate(BaseModel):
    avatar_url: str

    @field_validator("avatar_url")
    @classmethod
    def _url(cls, v: str) -> str:
        return validate_url(strip_markup(v))

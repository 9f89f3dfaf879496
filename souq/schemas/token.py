"""Pydantic schemas for login and JWT tokens."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, field_validator

from souq.schemas.user import UserRead


class LoginRequest(BaseModel):
    email: str
    password: str
    type: Literal["user", "artisan", "admin"]

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        return v.strip().lower()


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginResponse(Token):
    user: UserRead


class RefreshRequest(BaseModel):
    refresh_token: str

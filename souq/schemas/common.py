"""Shared pydantic building blocks: bilingual text, status updates, replies."""

from __future__ import annotations

import re

from pydantic import BaseModel, field_validator

from souq.core.moderation import ModerationStatus

_TAG_RE = re.compile(r"<[^>]*>")
_URL_RE = re.compile(r"^https?://\S+$|^/\S*$")


def strip_markup(v: str) -> str:
    """Drop HTML tags from free text submitted by anonymous visitors."""
    return _TAG_RE.sub("", v).strip()


def normalise_email(v: str) -> str:
    v = v.strip().lower()
    local, _, domain = v.partition("@")
    if not local or "." not in domain or " " in v:
        raise ValueError("Invalid email address")
    return v


def validate_url(v: str) -> str:
    v = v.strip()
    if not _URL_RE.match(v):
        raise ValueError("Must be an http(s) URL or an absolute path")
    return v


# ── Bilingual text ──────────────────────────────────────────────────
class BilingualText(BaseModel):
    ar: str = ""
    en: str = ""

    @field_validator("ar", "en")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()


class BilingualName(BilingualText):
    """Bilingual text where both languages are mandatory."""

    ar: str
    en: str

    @field_validator("ar", "en")
    @classmethod
    def _not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Both Arabic and English values are required")
        if len(v) > 300:
            raise ValueError("Must not exceed 300 characters")
        return v


# ── Moderation ──────────────────────────────────────────────────────
class StatusUpdate(BaseModel):
    status: ModerationStatus


class StatusUpdateResponse(BaseModel):
    success: bool = True
    status: str


# ── Generic replies ─────────────────────────────────────────────────
class SuccessResponse(BaseModel):
    success: bool = True
    message: str | None = None

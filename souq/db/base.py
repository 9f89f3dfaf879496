"""
Declarative base shared by every model, plus the bilingual column helper.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    # Models annotate classic ``Column`` attributes rather than ``Mapped[]``.
    __allow_unmapped__ = True


def bilingual(field: str) -> property:
    """Expose a ``<field>_ar`` / ``<field>_en`` column pair as ``{"ar", "en"}``.

    Assigning ``None`` clears both columns.
    """

    def _get(self: Any) -> dict[str, str | None] | None:
        ar = getattr(self, f"{field}_ar")
        en = getattr(self, f"{field}_en")
        if ar is None and en is None:
            return None
        return {"ar": ar, "en": en}

    def _set(self: Any, value: dict[str, str | None] | None) -> None:
        value = value or {}
        setattr(self, f"{field}_ar", value.get("ar"))
        setattr(self, f"{field}_en", value.get("en"))

    return property(_get, _set, doc=f"Bilingual view of {field}_ar / {field}_en")

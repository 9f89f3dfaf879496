"""
ArtisanProfile 1:1 extension of an artisan-type user.
"""

from __future__ import annotations

from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from souq.db.base import Base, bilingual


class ArtisanProfile(Base):
    __tablename__ = "artisan_profiles"

    user_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    phone: str | None = Column(String(30), nullable=True)  # type: ignore[assignment]
    bio_ar: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    bio_en: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    location_ar: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    location_en: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    experience: int = Column(Integer, nullable=False, default=0)  # type: ignore[assignment]  # years
    specialties: list = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]  # [{ar, en}]
    is_certified: bool = Column(Boolean, nullable=False, default=False)  # type: ignore[assignment]

    user = relationship("User", back_populates="artisan_profile")

    bio = bilingual("bio")
    location = bilingual("location")

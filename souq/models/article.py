"""
Article model: editorial content written by admins.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from souq.db.base import Base, bilingual


class Article(Base):
    __tablename__ = "articles"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    title_ar: str = Column(String(300), nullable=False)  # type: ignore[assignment]
    title_en: str = Column(String(300), nullable=False)  # type: ignore[assignment]
    summary_ar: str = Column(String(1000), nullable=False, default="")  # type: ignore[assignment]
    summary_en: str = Column(String(1000), nullable=False, default="")  # type: ignore[assignment]
    content_ar: str = Column(Text, nullable=False, default="")  # type: ignore[assignment]
    content_en: str = Column(Text, nullable=False, default="")  # type: ignore[assignment]
    image_url: str | None = Column(String(1000), nullable=True)  # type: ignore[assignment]
    author_id: int | None = Column(  # type: ignore[assignment]
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    author_name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    status: str = Column(  # type: ignore[assignment]
        String(20), nullable=False, default="draft", server_default="draft", index=True
    )  # draft | published
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    title = bilingual("title")
    summary = bilingual("summary")
    content = bilingual("content")

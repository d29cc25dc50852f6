"""
Issue SQLAlchemy model.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from comicshelf.database.connection import Base
from comicshelf.database.models.image import ImageColumnsMixin


class Issue(ImageColumnsMixin, Base):
    """A cached issue record, optionally linked to the character it was loaded for."""

    __tablename__ = "issues"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    title: Mapped[str] = mapped_column(String(500))
    issue_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    cover_date: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    store_date: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    volume_id: Mapped[Optional[int]] = mapped_column(nullable=True)
    volume_name: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # No foreign key: issues may be cached before their character
    character_id: Mapped[Optional[int]] = mapped_column(nullable=True, index=True)

    payload: Mapped[dict] = mapped_column(JSON, nullable=False)
    cached_at: Mapped[datetime] = mapped_column()

    def __repr__(self) -> str:
        return f"<Issue(id={self.id}, title='{self.title}')>"

"""
Character SQLAlchemy model.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from comicshelf.database.connection import Base
from comicshelf.database.models.image import ImageColumnsMixin


class Character(ImageColumnsMixin, Base):
    """
    A cached character record, plus the user's favorite flag.

    Searchable fields are kept as columns; the full record is stored in
    ``payload`` so it can be rebuilt without loss.
    """

    __tablename__ = "characters"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(500), index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    deck: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    count_of_issue_appearances: Mapped[int] = mapped_column(default=0)
    friends_count: Mapped[int] = mapped_column(default=0)
    enemies_count: Mapped[int] = mapped_column(default=0)
    powers_count: Mapped[int] = mapped_column(default=0)

    date_added: Mapped[str] = mapped_column(String(32))
    date_last_updated: Mapped[str] = mapped_column(String(32))

    payload: Mapped[dict] = mapped_column(JSON, nullable=False)

    # Favorites
    is_favorite: Mapped[bool] = mapped_column(default=False)
    favorited_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)

    # Timestamps (naive UTC)
    last_updated: Mapped[datetime] = mapped_column()
    cached_at: Mapped[datetime] = mapped_column()

    __table_args__ = (
        Index("idx_characters_favorite", "is_favorite", "favorited_at"),
    )

    def __repr__(self) -> str:
        return f"<Character(id={self.id}, name='{self.name}', is_favorite={self.is_favorite})>"

"""
CacheEntry SQLAlchemy model.
"""
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from comicshelf.database.connection import Base


class CacheEntry(Base):
    """
    Cached result of a remote query, keyed by a deterministic string.

    ``data`` holds the JSON payload returned to callers; ``params`` records the
    query arguments for inspection.
    """

    __tablename__ = "cache_entries"

    key: Mapped[str] = mapped_column(String(500), primary_key=True)
    operation: Mapped[Optional[str]] = mapped_column(String(50), index=True, nullable=True)
    data: Mapped[Any] = mapped_column(JSON, nullable=False)
    params: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column()
    expires_at: Mapped[datetime] = mapped_column(index=True)
    hit_count: Mapped[int] = mapped_column(default=0)

    __table_args__ = (
        Index("idx_cache_operation_expires", "operation", "expires_at"),
    )

    def __repr__(self) -> str:
        return f"<CacheEntry(key='{self.key[:50]}', operation='{self.operation}')>"

    def is_expired(self, now: datetime) -> bool:
        """Check if the cache entry has expired at ``now``."""
        return now >= self.expires_at

"""
Cache repository for database operations.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from comicshelf.database.models.cache import CacheEntry


class CacheRepository:
    """
    Repository for CacheEntry model operations.

    CacheEntry uses a string key as primary key rather than a catalog id,
    so this doesn't extend BaseRepository.
    """

    def __init__(self, session: AsyncSession):
        """Initialize with session."""
        self.session = session

    async def get_by_key(self, key: str) -> Optional[CacheEntry]:
        return await self.session.get(CacheEntry, key)

    async def get_valid_by_key(self, key: str, now: datetime) -> Optional[CacheEntry]:
        """
        Get a non-expired cache entry by key.

        Args:
            key: Cache key
            now: Current naive UTC time

        Returns:
            CacheEntry instance or None if not found or expired
        """
        result = await self.session.execute(
            select(CacheEntry).where(
                CacheEntry.key == key,
                CacheEntry.expires_at > now
            )
        )
        return result.scalar_one_or_none()

    async def set(self, entry: CacheEntry) -> CacheEntry:
        """
        Create or update a cache entry.

        Returns:
            Created/updated CacheEntry instance
        """
        # Use merge for upsert behavior
        merged = await self.session.merge(entry)
        await self.session.flush()
        return merged

    async def set_expires_at(self, key: str, expires_at: datetime) -> bool:
        result = await self.session.execute(
            update(CacheEntry)
            .where(CacheEntry.key == key)
            .values(expires_at=expires_at)
        )
        return result.rowcount > 0

    async def delete_by_key(self, key: str) -> bool:
        """
        Delete a cache entry by key.

        Returns:
            True if deleted, False if not found
        """
        result = await self.session.execute(
            delete(CacheEntry).where(CacheEntry.key == key)
        )
        return result.rowcount > 0

    async def increment_hit_count(self, key: str) -> None:
        await self.session.execute(
            update(CacheEntry)
            .where(CacheEntry.key == key)
            .values(hit_count=CacheEntry.hit_count + 1)
        )

    async def delete_expired(self, now: datetime) -> int:
        """
        Delete all expired cache entries.

        Returns:
            Number of deleted entries
        """
        result = await self.session.execute(
            delete(CacheEntry).where(CacheEntry.expires_at <= now)
        )
        return result.rowcount

    async def delete_all(self) -> int:
        """
        Delete all cache entries.

        Returns:
            Number of deleted entries
        """
        result = await self.session.execute(delete(CacheEntry))
        return result.rowcount

    async def get_stats(self, now: datetime) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache statistics
        """
        # Total entries
        total_result = await self.session.execute(
            select(func.count()).select_from(CacheEntry)
        )
        total_entries = total_result.scalar_one()

        # Valid (non-expired) entries
        valid_result = await self.session.execute(
            select(func.count())
            .select_from(CacheEntry)
            .where(CacheEntry.expires_at > now)
        )
        valid_entries = valid_result.scalar_one()

        # Entries by operation
        by_operation_result = await self.session.execute(
            select(CacheEntry.operation, func.count())
            .group_by(CacheEntry.operation)
        )
        by_operation = {operation or "unknown": count for operation, count in by_operation_result.all()}

        # Total hits
        hits_result = await self.session.execute(
            select(func.sum(CacheEntry.hit_count))
        )
        total_hits = hits_result.scalar_one() or 0

        return {
            "total_entries": total_entries,
            "valid_entries": valid_entries,
            "expired_entries": total_entries - valid_entries,
            "total_hits": total_hits,
            "by_operation": by_operation,
        }

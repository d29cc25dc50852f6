"""
Character repository for database operations.
"""
from datetime import datetime
from typing import List

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from comicshelf.database.models.character import Character
from comicshelf.database.repositories.base import BaseRepository
from comicshelf.providers.models import CharacterRecord


class CharacterRepository(BaseRepository[Character]):
    """Repository for Character model operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Character)

    async def upsert(self, record: CharacterRecord, now: datetime) -> Character:
        """
        Insert or update a character from a catalog record.

        The favorite flag, its timestamp and the original ``cached_at`` of an
        existing row are preserved.

        Args:
            record: Catalog record
            now: Current naive UTC time

        Returns:
            The stored Character row
        """
        row = await self.get_by_id(record.id)
        if row is None:
            row = Character(id=record.id, is_favorite=False, favorited_at=None, cached_at=now)
            self.session.add(row)

        row.name = record.name
        row.description = record.description
        row.deck = record.deck
        for column, value in Character.image_values(record.image).items():
            setattr(row, column, value)
        row.count_of_issue_appearances = record.count_of_issue_appearances
        row.friends_count = len(record.character_friends or [])
        row.enemies_count = len(record.character_enemies or [])
        row.powers_count = len(record.powers or [])
        row.date_added = record.date_added
        row.date_last_updated = record.date_last_updated
        row.payload = record.model_dump(mode="json")
        row.last_updated = now

        await self.session.flush()
        return row

    async def set_favorite(self, id: int, flag: bool, now: datetime) -> bool:
        """
        Set the favorite flag of a stored character.

        Returns:
            True if the flag changed, False if it already had that value or
            the character is not stored
        """
        result = await self.session.execute(
            update(Character)
            .where(Character.id == id, Character.is_favorite != flag)
            .values(is_favorite=flag, favorited_at=now if flag else None)
        )
        return result.rowcount > 0

    async def get_favorites(self) -> List[Character]:
        """Get favorited characters, oldest favorite first."""
        result = await self.session.execute(
            select(Character)
            .where(Character.is_favorite.is_(True))
            .order_by(Character.favorited_at, Character.id)
        )
        return list(result.scalars().all())

    async def get_favorite_ids(self) -> List[int]:
        result = await self.session.execute(
            select(Character.id)
            .where(Character.is_favorite.is_(True))
            .order_by(Character.favorited_at, Character.id)
        )
        return list(result.scalars().all())

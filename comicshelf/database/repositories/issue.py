"""
Issue repository for database operations.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from comicshelf.database.models.issue import Issue
from comicshelf.database.repositories.base import BaseRepository
from comicshelf.providers.models import IssueRecord


class IssueRepository(BaseRepository[Issue]):
    """Repository for Issue model operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Issue)

    async def upsert(
        self,
        record: IssueRecord,
        now: datetime,
        character_id: Optional[int] = None,
    ) -> Issue:
        """
        Insert or update an issue from a catalog record.

        An existing character link is kept when ``character_id`` is None.
        """
        row = await self.get_by_id(record.id)
        if row is None:
            row = Issue(id=record.id, cached_at=now)
            self.session.add(row)

        row.title = record.title
        row.issue_number = record.issue_number
        row.description = record.description
        for column, value in Issue.image_values(record.image).items():
            setattr(row, column, value)
        row.cover_date = record.cover_date
        row.store_date = record.store_date
        row.volume_id = record.volume.id if record.volume else None
        row.volume_name = record.volume.name if record.volume else None
        if character_id is not None:
            row.character_id = character_id
        row.payload = record.model_dump(mode="json")
        row.cached_at = now

        await self.session.flush()
        return row

    async def find_by_character(self, character_id: int) -> List[Issue]:
        result = await self.session.execute(
            select(Issue).where(Issue.character_id == character_id)
        )
        return list(result.scalars().all())

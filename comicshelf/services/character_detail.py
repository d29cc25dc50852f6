"""
Character detail loading.
"""

import logging

from comicshelf.database.store import LocalStore
from comicshelf.providers.base import CatalogProvider
from comicshelf.providers.models import CharacterRecord

logger = logging.getLogger(__name__)


class CharacterDetailUseCase:
    """
    Load the full record of a character and keep the local copy current.

    Always asks the provider; the stored row is refreshed with the result,
    keeping its favorite flag. Errors propagate without a stale fallback.
    """

    def __init__(self, provider: CatalogProvider, store: LocalStore):
        self.provider = provider
        self.store = store

    async def execute(self, character_id: int) -> CharacterRecord:
        record = await self.provider.fetch_character(character_id)
        await self.store.characters.save(record)
        logger.debug(f"Refreshed character {character_id} ({record.name})")
        return record

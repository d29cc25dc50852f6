"""
Favorites management.

The local store is the source of truth for favorite flags. The service keeps
an in-memory mirror of favorite ids for synchronous reads by views, and
announces every actual change on the event bus.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, List, Optional, Set, TypeVar

from comicshelf.database.store import LocalStore
from comicshelf.providers.models import CharacterRecord
from comicshelf.services.events import (
    FAVORITE_STATUS_CHANGED,
    FAVORITES_CHANGED,
    EventBus,
    FavoriteStatusChanged,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FavoritesSort(str, Enum):
    """Orderings offered by the favorites list."""

    DATE_ADDED = "date_added"
    NAME = "name"
    MOST_COMICS = "most_comics"


@dataclass(frozen=True)
class FavoriteCharacterInput:
    """Summary of a character as seen in a list row, enough to favorite it."""

    id: int
    name: str
    thumbnail_url: Optional[str] = None

    @classmethod
    def from_record(cls, record: CharacterRecord) -> "FavoriteCharacterInput":
        return cls(id=record.id, name=record.name, thumbnail_url=record.image.thumbnail_url)


class FavoritesService:
    """
    Add, remove and list favorite characters.

    Mutations run one at a time and to completion even if the awaiting
    caller is cancelled. Storage errors propagate so callers can revert
    optimistic UI state.
    """

    def __init__(self, store: LocalStore, bus: Optional[EventBus] = None):
        self.store = store
        self.bus = bus or EventBus()
        self._favorite_ids: Set[int] = set()
        self._mutation_lock = asyncio.Lock()

    @property
    def favorite_ids(self) -> Set[int]:
        """Snapshot of the in-memory mirror."""
        return set(self._favorite_ids)

    def is_cached_favorite(self, character_id: int) -> bool:
        return character_id in self._favorite_ids

    async def load(self) -> Set[int]:
        """Refresh the in-memory mirror from the store."""
        self._favorite_ids = set(await self.store.characters.favorite_ids())
        logger.debug(f"Loaded {len(self._favorite_ids)} favorites")
        return self.favorite_ids

    async def is_favorite(self, character_id: int) -> bool:
        return await self.store.characters.is_favorite(character_id)

    async def _serialized(self, coro: Awaitable[T]) -> T:
        async with self._mutation_lock:
            return await coro

    async def _shielded(self, coro: Awaitable[T]) -> T:
        # check-then-act sequences span several sessions; hold the lock across all of them
        return await asyncio.shield(self._serialized(coro))

    async def _announce(self, character_id: int, is_favorite: bool) -> None:
        if is_favorite:
            self._favorite_ids.add(character_id)
        else:
            self._favorite_ids.discard(character_id)
        await self.bus.publish(FAVORITES_CHANGED)
        await self.bus.publish(
            FAVORITE_STATUS_CHANGED,
            FavoriteStatusChanged(character_id=character_id, is_favorite=is_favorite),
        )

    async def _add(self, favorite: FavoriteCharacterInput) -> bool:
        if await self.store.characters.is_favorite(favorite.id):
            return False

        if await self.store.characters.load(favorite.id) is None:
            logger.info(f"Character {favorite.id} not stored; saving a minimal record")
            record = CharacterRecord.minimal(favorite.id, favorite.name, favorite.thumbnail_url)
            await self.store.characters.save(record)

        changed = await self.store.characters.set_favorite(favorite.id, True)
        if changed:
            logger.info(f"Added favorite {favorite.id} ({favorite.name})")
            await self._announce(favorite.id, True)
        return changed

    async def add_favorite(self, favorite: FavoriteCharacterInput) -> bool:
        """
        Mark a character as favorite.

        A character that was never stored is saved first as a minimal record
        built from ``favorite``, so it can be listed later.

        Returns:
            True if the character was not a favorite before
        """
        return await self._shielded(self._add(favorite))

    async def _add_record(self, record: CharacterRecord) -> bool:
        await self.store.characters.save(record)
        return await self._add(FavoriteCharacterInput.from_record(record))

    async def add_favorite_record(self, record: CharacterRecord) -> bool:
        """Store the full ``record`` and mark it as favorite."""
        return await self._shielded(self._add_record(record))

    async def _remove(self, character_id: int, purge: bool) -> bool:
        changed = await self.store.characters.set_favorite(character_id, False)
        if purge:
            await self.store.characters.delete(character_id)
        if changed:
            logger.info(f"Removed favorite {character_id}")
            await self._announce(character_id, False)
        else:
            self._favorite_ids.discard(character_id)
        return changed

    async def remove_favorite(self, character_id: int, purge: bool = False) -> bool:
        """
        Unmark a character. Removing a non-favorite is a no-op.

        Args:
            character_id: Character to unmark
            purge: Also delete the stored character row

        Returns:
            True if the character was a favorite
        """
        return await self._shielded(self._remove(character_id, purge))

    async def _toggle(self, favorite: FavoriteCharacterInput) -> bool:
        if await self.is_favorite(favorite.id):
            await self._remove(favorite.id, purge=False)
            return False
        await self._add(favorite)
        return True

    async def toggle_favorite(self, favorite: FavoriteCharacterInput) -> bool:
        """Flip the favorite state and return the new state."""
        return await self._shielded(self._toggle(favorite))

    async def get_all_favorites(self) -> List[CharacterRecord]:
        """All favorites in the order they were added; refreshes the mirror."""
        favorites = await self.store.characters.load_favorites()
        self._favorite_ids = {record.id for record in favorites}
        return favorites

    async def filter_favorites(
        self,
        text: str = "",
        sort: FavoritesSort = FavoritesSort.DATE_ADDED,
    ) -> List[CharacterRecord]:
        """
        Favorites whose name contains ``text`` (case insensitive), in ``sort`` order.
        """
        favorites = await self.get_all_favorites()
        needle = text.strip().casefold()
        if needle:
            favorites = [record for record in favorites if needle in record.name.casefold()]

        if sort == FavoritesSort.NAME:
            return sorted(favorites, key=lambda record: record.name.casefold())
        if sort == FavoritesSort.MOST_COMICS:
            return sorted(favorites, key=lambda record: record.count_of_issue_appearances, reverse=True)
        return favorites

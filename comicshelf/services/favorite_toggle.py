"""
Optimistic favorite toggle for a single character row.
"""

import asyncio
import logging
from typing import Optional

from comicshelf.services.favorites_service import FavoriteCharacterInput, FavoritesService

logger = logging.getLogger(__name__)


class FavoriteToggle:
    """
    Holds the favorite flag shown for one character.

    :meth:`toggle` flips the flag immediately and persists the change in a
    background task. If persisting fails the flag is reverted and the error
    is kept in ``last_error``.
    """

    def __init__(
        self,
        service: FavoritesService,
        favorite: FavoriteCharacterInput,
        is_favorite: bool = False,
    ):
        self.service = service
        self.favorite = favorite
        self.is_favorite = is_favorite
        self.last_error: Optional[Exception] = None
        self._pending: Optional[asyncio.Task] = None

    @property
    def is_pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def toggle(self) -> bool:
        """
        Flip the flag and start persisting it. Must be called from a running loop.

        A toggle issued while an earlier one is still persisting runs after it,
        so the store always ends in the state of the last toggle.

        Returns:
            The new (optimistic) flag
        """
        target = not self.is_favorite
        self.is_favorite = target
        self.last_error = None
        previous = self._pending if self.is_pending else None
        self._pending = asyncio.get_running_loop().create_task(self._persist(target, previous))
        return target

    async def _persist(self, target: bool, previous: Optional[asyncio.Task] = None) -> None:
        if previous is not None:
            # _persist never raises except on cancellation
            await previous
        try:
            if target:
                await self.service.add_favorite(self.favorite)
            else:
                await self.service.remove_favorite(self.favorite.id)
        except Exception as e:
            logger.warning(f"Favorite toggle for {self.favorite.id} failed, reverting: {e}")
            if self.is_favorite == target:
                self.is_favorite = not target
            self.last_error = e

    async def wait(self) -> None:
        """Wait for the pending persist call, if any."""
        if self._pending is not None:
            await self._pending

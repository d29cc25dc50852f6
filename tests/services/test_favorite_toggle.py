"""
Tests for the optimistic favorite toggle.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from comicshelf.providers.errors import StorageFailure
from comicshelf.services.favorite_toggle import FavoriteToggle
from comicshelf.services.favorites_service import FavoriteCharacterInput, FavoritesService

BATMAN = FavoriteCharacterInput(id=1699, name="Batman")


class TestFavoriteToggle:
    """Test optimistic toggling."""

    @pytest.mark.asyncio
    async def test_flips_immediately_and_persists(self, store):
        """It should flip the flag at once and persist it in the background."""
        service = FavoritesService(store)
        toggle = FavoriteToggle(service, BATMAN)

        assert toggle.toggle() is True
        assert toggle.is_favorite is True
        await toggle.wait()
        assert await service.is_favorite(1699)

        assert toggle.toggle() is False
        await toggle.wait()
        assert not await service.is_favorite(1699)
        assert toggle.last_error is None

    @pytest.mark.asyncio
    async def test_reverts_on_failure(self):
        """It should restore the previous flag and keep the error when persisting fails."""
        service = Mock(spec=FavoritesService)
        service.add_favorite = AsyncMock(side_effect=StorageFailure("disk full"))
        toggle = FavoriteToggle(service, BATMAN, is_favorite=False)

        toggle.toggle()
        assert toggle.is_favorite is True
        await toggle.wait()

        assert toggle.is_favorite is False
        assert isinstance(toggle.last_error, StorageFailure)
        assert not toggle.is_pending

    @pytest.mark.asyncio
    async def test_remove_path(self):
        """It should call remove_favorite when un-favoriting."""
        service = Mock(spec=FavoritesService)
        service.remove_favorite = AsyncMock(return_value=True)
        toggle = FavoriteToggle(service, BATMAN, is_favorite=True)

        toggle.toggle()
        await toggle.wait()

        service.remove_favorite.assert_awaited_once_with(1699)
        assert toggle.is_favorite is False

    @pytest.mark.asyncio
    async def test_wait_without_toggle(self):
        """It should return at once when nothing is pending."""
        toggle = FavoriteToggle(Mock(spec=FavoritesService), BATMAN)
        await toggle.wait()
        assert not toggle.is_pending

    @pytest.mark.asyncio
    async def test_rapid_double_toggle_matches_store(self, store):
        """It should leave the flag, the store and the mirror agreeing after two quick toggles."""
        service = FavoritesService(store)
        favorite = FavoriteCharacterInput(id=7, name="Wolverine")
        toggle = FavoriteToggle(service, favorite)

        toggle.toggle()
        toggle.toggle()
        await toggle.wait()

        assert toggle.is_favorite is False
        assert await store.characters.is_favorite(7) is False
        assert service.favorite_ids == set()
        assert toggle.last_error is None

    @pytest.mark.asyncio
    async def test_triple_toggle_ends_on_last_state(self, store):
        """It should persist the state of the last toggle."""
        service = FavoritesService(store)
        toggle = FavoriteToggle(service, BATMAN)

        toggle.toggle()
        toggle.toggle()
        toggle.toggle()
        await toggle.wait()

        assert toggle.is_favorite is True
        assert await store.characters.is_favorite(1699) is True
        assert service.favorite_ids == {1699}

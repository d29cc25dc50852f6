"""
Tests for application wiring.
"""

from unittest.mock import AsyncMock, patch

import pytest

from comicshelf.context import ComicShelf
from comicshelf.database.store import LocalStore
from comicshelf.providers.errors import StorageFailure
from comicshelf.providers.settings import ComicShelfSettings
from tests.factories import make_character


class TestComicShelf:
    """Test creation and lifecycle of the application context."""

    @pytest.mark.asyncio
    async def test_create_wires_components(self, mock_provider, database_url):
        """It should build every use case over the same store and provider."""
        settings = ComicShelfSettings(
            database_url=database_url, cache_ttl=120, batch_size=3, batch_delay=0, page_size=4
        )
        shelf = await ComicShelf.create(settings=settings, provider=mock_provider)
        async with shelf:
            assert shelf.search_characters.store is shelf.store
            assert shelf.search_characters.ttl_seconds == 120
            assert shelf.batch_fetcher.batch_size == 3
            assert shelf.list_characters.page_size == 4
            assert shelf.character_issues.page_size == 4
            assert shelf.character_issues.batch_fetcher is shelf.batch_fetcher
            assert shelf.favorites.bus is shelf.bus

    @pytest.mark.asyncio
    async def test_initialize_loads_favorites(self, mock_provider, database_url):
        """It should load persisted favorites into the mirror."""
        settings = ComicShelfSettings(database_url=database_url)
        async with await ComicShelf.create(settings=settings, provider=mock_provider) as shelf:
            await shelf.favorites.add_favorite_record(make_character(1))

        async with await ComicShelf.create(settings=settings, provider=mock_provider) as shelf:
            assert shelf.favorites.is_cached_favorite(1)

    @pytest.mark.asyncio
    async def test_failed_initialize_closes_resources(self, mock_provider, database_url):
        """It should close the provider and the store when initialization fails."""
        settings = ComicShelfSettings(database_url=database_url)
        mock_provider.close = AsyncMock()

        with patch.object(LocalStore, "initialize", AsyncMock(side_effect=StorageFailure("locked"))), \
                patch.object(LocalStore, "close", AsyncMock()) as store_close:
            with pytest.raises(StorageFailure):
                await ComicShelf.create(settings=settings, provider=mock_provider)

        mock_provider.close.assert_awaited_once()
        store_close.assert_awaited_once()

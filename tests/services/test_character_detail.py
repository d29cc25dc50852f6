"""
Tests for character detail loading.
"""

import pytest

from comicshelf.providers.errors import NotFound
from comicshelf.services.character_detail import CharacterDetailUseCase
from tests.factories import make_character


class TestCharacterDetailUseCase:
    """Test detail refresh."""

    @pytest.mark.asyncio
    async def test_refreshes_stored_record_keeping_favorite(self, mock_provider, store):
        """It should replace the stored minimal record and keep the favorite flag."""
        await store.characters.save(make_character(1443, "Spidey", count_of_issue_appearances=0))
        await store.characters.set_favorite(1443, True)
        mock_provider.characters[1443] = make_character(1443, "Spider-Man")

        record = await CharacterDetailUseCase(mock_provider, store).execute(1443)

        assert record.name == "Spider-Man"
        stored = await store.characters.load(1443)
        assert stored.count_of_issue_appearances == 4200
        assert await store.characters.is_favorite(1443)

    @pytest.mark.asyncio
    async def test_always_asks_provider(self, mock_provider, store):
        """It should not serve stale data."""
        mock_provider.characters[1] = make_character(1)
        use_case = CharacterDetailUseCase(mock_provider, store)
        await use_case.execute(1)
        await use_case.execute(1)
        assert mock_provider.call_count == 2

    @pytest.mark.asyncio
    async def test_not_found_propagates(self, mock_provider, store):
        """It should raise NotFound and store nothing."""
        with pytest.raises(NotFound):
            await CharacterDetailUseCase(mock_provider, store).execute(404)
        assert await store.characters.load(404) is None

"""
Tests for the cache-aside use cases.
"""

import asyncio
from datetime import timedelta

import pytest

from comicshelf.providers.batch import IssueBatchFetcher
from comicshelf.providers.errors import NotFound, ServerRejected
from comicshelf.services.cache_aside import (
    CharacterIssuesUseCase,
    ListCharactersUseCase,
    ListIssuesUseCase,
    SearchCharactersUseCase,
    SearchIssuesUseCase,
)
from tests.factories import make_character, make_issue


@pytest.fixture
def search(mock_provider, store):
    mock_provider.search_results = [make_character(1, "Spider-Man"), make_character(2, "Spider-Woman")]
    return SearchCharactersUseCase(mock_provider, store, ttl_seconds=3600)


class TestSearchCharactersUseCase:
    """Test cached character search."""

    @pytest.mark.asyncio
    async def test_blank_query(self, search, mock_provider, store):
        """It should return [] for a blank query without calling the provider or caching."""
        assert await search.execute("   ") == []
        assert mock_provider.call_count == 0
        assert (await store.cache_stats())["total_entries"] == 0

    @pytest.mark.asyncio
    async def test_second_call_hits_cache(self, search, mock_provider):
        """It should serve an identical call within the TTL from the cache."""
        first = await search.execute("spider-man")
        second = await search.execute("spider-man")

        assert mock_provider.call_count == 1
        assert [record.model_dump() for record in second] == [record.model_dump() for record in first]

    @pytest.mark.asyncio
    async def test_expired_entry_refetches_once(self, search, mock_provider, store):
        """It should call the provider exactly once more after the entry expires."""
        await search.execute("spider-man")
        await store.expire("search_characters_spider-man_0_20")

        await search.execute("spider-man")
        await search.execute("spider-man")
        assert mock_provider.call_count == 2

    @pytest.mark.asyncio
    async def test_ttl_elapses(self, search, mock_provider, clock):
        """It should refetch once the TTL has passed."""
        await search.execute("spider-man")
        clock.advance(seconds=3599)
        await search.execute("spider-man")
        assert mock_provider.call_count == 1

        clock.advance(seconds=2)
        await search.execute("spider-man")
        assert mock_provider.call_count == 2

    @pytest.mark.asyncio
    async def test_key_uses_trimmed_query_and_paging(self, search, mock_provider, store):
        """It should key entries by trimmed query, offset and limit."""
        await search.execute("  spider-man ", offset=20, limit=10)
        assert await store.is_expired("search_characters_spider-man_20_10") is False

        await search.execute("spider-man", offset=0, limit=10)
        assert mock_provider.call_count == 2

    @pytest.mark.asyncio
    async def test_empty_results_are_cached(self, search, mock_provider):
        """It should cache an empty result like any other."""
        mock_provider.search_results = []
        assert await search.execute("nobody") == []
        assert await search.execute("nobody") == []
        assert mock_provider.call_count == 1

    @pytest.mark.asyncio
    async def test_errors_propagate_without_write(self, search, mock_provider, store):
        """It should surface provider errors and leave the cache untouched."""
        mock_provider.error = ServerRejected("boom", status_code=500)
        with pytest.raises(ServerRejected):
            await search.execute("spider-man")
        assert (await store.cache_stats())["total_entries"] == 0

    @pytest.mark.asyncio
    async def test_invalid_payload_is_a_miss(self, search, mock_provider, store, clock):
        """It should ignore and overwrite a cached payload that no longer decodes."""
        key = "search_characters_spider-man_0_20"
        await store.save_cache_entry(key, [{"id": "not-a-character"}], clock() + timedelta(hours=1))

        records = await search.execute("spider-man")
        assert [record.id for record in records] == [1, 2]
        assert mock_provider.call_count == 1

        await search.execute("spider-man")
        assert mock_provider.call_count == 1

    @pytest.mark.asyncio
    async def test_cancellation_leaves_store_untouched(self, search, mock_provider, store):
        """It should not write anything when cancelled before the provider answers."""
        started = asyncio.Event()

        async def hanging_search(query, offset=0, limit=20):
            started.set()
            await asyncio.sleep(10)
            return []

        mock_provider.search_characters = hanging_search
        task = asyncio.ensure_future(search.execute("spider"))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert await store.is_expired("search_characters_spider_0_20") is True


class TestOtherListUseCases:
    """Test the remaining list and search use cases."""

    @pytest.mark.asyncio
    async def test_search_issues(self, mock_provider, store):
        """It should cache issue searches under their own key."""
        mock_provider.issue_search_results = [make_issue(1)]
        use_case = SearchIssuesUseCase(mock_provider, store, ttl_seconds=60)

        assert [issue.id for issue in await use_case.execute("watchmen")] == [1]
        await use_case.execute("watchmen")
        assert mock_provider.call_count == 1
        assert await store.is_expired("search_comics_watchmen_0_20") is False

    @pytest.mark.asyncio
    async def test_list_characters(self, mock_provider, store):
        """It should cache character listings by page."""
        mock_provider.characters = {1: make_character(1), 2: make_character(2)}
        use_case = ListCharactersUseCase(mock_provider, store, ttl_seconds=60)

        assert len(await use_case.execute(0, 20)) == 2
        await use_case.execute(0, 20)
        assert mock_provider.call_count == 1
        assert await store.is_expired("characters_0_20") is False

    @pytest.mark.asyncio
    async def test_list_issues(self, mock_provider, store):
        """It should cache issue listings by page."""
        mock_provider.issues = {1: make_issue(1)}
        use_case = ListIssuesUseCase(mock_provider, store, ttl_seconds=60)

        await use_case.execute(0, 5)
        await use_case.execute(0, 5)
        assert mock_provider.call_count == 1
        assert await store.is_expired("issues_0_5") is False


class TestCharacterIssuesUseCase:
    """Test the per-character issue listing."""

    @pytest.fixture
    def use_case(self, mock_provider, store):
        mock_provider.characters[1443] = make_character(1443)
        for n in range(1, 8):
            mock_provider.issues[100 + n] = make_issue(100 + n, f"2020-0{n}-01")
        fetcher = IssueBatchFetcher(mock_provider, batch_size=5, delay_seconds=0)
        return CharacterIssuesUseCase(mock_provider, store, batch_fetcher=fetcher, ttl_seconds=3600)

    @pytest.mark.asyncio
    async def test_fetches_page_of_credits(self, use_case, mock_provider, store):
        """It should batch fetch the sliced credits and link them to the character."""
        issues = await use_case.execute(1443, offset=2, limit=3)

        assert [issue.id for issue in issues] == [105, 104, 103]
        assert ("fetch_character", 1443) in mock_provider.calls
        linked = await store.issues.load_for_character(1443)
        assert [issue.id for issue in linked] == [105, 104, 103]

    @pytest.mark.asyncio
    async def test_cached_on_second_call(self, use_case, mock_provider):
        """It should not touch the provider again within the TTL."""
        await use_case.execute(1443)
        calls = mock_provider.call_count
        assert calls == 1 + 7

        await use_case.execute(1443)
        assert mock_provider.call_count == calls

    @pytest.mark.asyncio
    async def test_offset_past_end(self, use_case):
        """It should return [] when the offset is past the credits."""
        assert await use_case.execute(1443, offset=50) == []

    @pytest.mark.asyncio
    async def test_character_without_credits(self, use_case, mock_provider):
        """It should return [] for a character with no issue credits."""
        mock_provider.characters[7] = make_character(7, issue_credits=None)
        assert await use_case.execute(7) == []

    @pytest.mark.asyncio
    async def test_unknown_character(self, use_case, store):
        """It should propagate NotFound and cache nothing."""
        with pytest.raises(NotFound):
            await use_case.execute(999)
        assert await store.is_expired("character_issues_999_0_20") is True


class TestPageSize:
    """Test the default page size for listings and searches."""

    @pytest.mark.asyncio
    async def test_default_limit_comes_from_env(self, mock_provider, store, monkeypatch):
        """It should ask the provider for COMICSHELF_PAGE_SIZE results when no limit is given."""
        from comicshelf.providers.settings import reset_settings

        monkeypatch.setenv("COMICSHELF_PAGE_SIZE", "7")
        reset_settings()
        try:
            search = SearchCharactersUseCase(mock_provider, store, ttl_seconds=3600)
            await search.execute("spider")
        finally:
            reset_settings()

        assert mock_provider.calls == [("search_characters", "spider", 0, 7)]
        assert await store.is_expired("search_characters_spider_0_7") is False

    @pytest.mark.asyncio
    async def test_explicit_limit_wins(self, mock_provider, store):
        """It should use an explicit limit over the configured page size."""
        use_case = ListCharactersUseCase(mock_provider, store, ttl_seconds=3600, page_size=7)
        await use_case.execute(limit=3)
        await use_case.execute()

        assert mock_provider.calls == [("fetch_characters", 0, 3), ("fetch_characters", 0, 7)]

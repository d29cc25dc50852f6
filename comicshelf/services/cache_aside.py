"""
Cache-aside use cases over the catalog provider.

Each use case derives a deterministic key from its arguments, returns the
stored payload while it is fresh and otherwise asks the provider, writing the
result back with a fresh expiry. Provider errors propagate unchanged and leave
the store untouched; there is no fallback to stale entries.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, Type

from comicshelf.database.store import LocalStore
from comicshelf.providers.base import CatalogProvider
from comicshelf.providers.batch import IssueBatchFetcher
from comicshelf.providers.errors import DecodeFailed
from comicshelf.providers.models import CharacterRecord, IssueRecord, RecordT, validate_record
from comicshelf.providers.settings import get_settings

logger = logging.getLogger(__name__)


class CacheAsideUseCase(Generic[RecordT]):
    """
    Base class for cached catalog queries.

    Subclasses set ``operation`` and ``model`` and call :meth:`_cached` with
    their key and a coroutine factory that hits the provider.
    """

    operation: str = "query"
    model: Type[RecordT]

    def __init__(
        self,
        provider: CatalogProvider,
        store: LocalStore,
        ttl_seconds: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
        page_size: Optional[int] = None,
    ):
        self.provider = provider
        self.store = store
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else get_settings().cache_ttl
        self.page_size = page_size if page_size is not None else get_settings().page_size
        self.clock = clock or store.clock

    def _page_limit(self, limit: Optional[int]) -> int:
        return self.page_size if limit is None else limit

    def _decode(self, key: str, payload: Any) -> Optional[List[RecordT]]:
        if not isinstance(payload, list):
            logger.warning(f"Ignoring cache entry '{key}': payload is not a list")
            return None
        try:
            return [
                validate_record(self.model, item, path=f"{key}.{index}")
                for index, item in enumerate(payload)
            ]
        except DecodeFailed as e:
            logger.warning(f"Ignoring cache entry '{key}': {e}")
            return None

    async def _cached(
        self,
        key: str,
        params: Dict[str, Any],
        fetch: Callable[[], Awaitable[List[RecordT]]],
    ) -> List[RecordT]:
        payload = await self.store.load_cache_entry(key)
        if payload is not None:
            records = self._decode(key, payload)
            if records is not None:
                logger.debug(f"Cache hit for {key} ({len(records)} records)")
                return records

        logger.debug(f"Cache miss for {key}")
        records = await fetch()

        await self.store.save_cache_entry(
            key,
            [record.model_dump(mode="json") for record in records],
            expires_at=self.clock() + timedelta(seconds=self.ttl_seconds),
            operation=self.operation,
            params=params,
        )
        return records


class SearchCharactersUseCase(CacheAsideUseCase[CharacterRecord]):
    """Search characters by name."""

    operation = "search_characters"
    model = CharacterRecord

    async def execute(self, query: str, offset: int = 0, limit: Optional[int] = None) -> List[CharacterRecord]:
        limit = self._page_limit(limit)
        term = query.strip()
        if not term:
            return []
        return await self._cached(
            f"search_characters_{term}_{offset}_{limit}",
            {"query": term, "offset": offset, "limit": limit},
            lambda: self.provider.search_characters(term, offset, limit),
        )


class SearchIssuesUseCase(CacheAsideUseCase[IssueRecord]):
    """Search issues by name."""

    operation = "search_comics"
    model = IssueRecord

    async def execute(self, query: str, offset: int = 0, limit: Optional[int] = None) -> List[IssueRecord]:
        limit = self._page_limit(limit)
        term = query.strip()
        if not term:
            return []
        return await self._cached(
            f"search_comics_{term}_{offset}_{limit}",
            {"query": term, "offset": offset, "limit": limit},
            lambda: self.provider.search_comics(term, offset, limit),
        )


class ListCharactersUseCase(CacheAsideUseCase[CharacterRecord]):
    operation = "characters"
    model = CharacterRecord

    async def execute(self, offset: int = 0, limit: Optional[int] = None) -> List[CharacterRecord]:
        limit = self._page_limit(limit)
        return await self._cached(
            f"characters_{offset}_{limit}",
            {"offset": offset, "limit": limit},
            lambda: self.provider.fetch_characters(offset, limit),
        )


class ListIssuesUseCase(CacheAsideUseCase[IssueRecord]):
    operation = "issues"
    model = IssueRecord

    async def execute(self, offset: int = 0, limit: Optional[int] = None) -> List[IssueRecord]:
        limit = self._page_limit(limit)
        return await self._cached(
            f"issues_{offset}_{limit}",
            {"offset": offset, "limit": limit},
            lambda: self.provider.fetch_issues(offset, limit),
        )


class CharacterIssuesUseCase(CacheAsideUseCase[IssueRecord]):
    """
    Issues a character appears in, one page at a time.

    The page is a slice of the character's issue credits; each credited issue
    is fetched in full through the batch fetcher and linked to the character
    in the local store.
    """

    operation = "character_issues"
    model = IssueRecord

    def __init__(
        self,
        provider: CatalogProvider,
        store: LocalStore,
        batch_fetcher: Optional[IssueBatchFetcher] = None,
        ttl_seconds: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
        page_size: Optional[int] = None,
    ):
        super().__init__(provider, store, ttl_seconds=ttl_seconds, clock=clock, page_size=page_size)
        self.batch_fetcher = batch_fetcher or IssueBatchFetcher(provider)

    async def _fetch(self, character_id: int, offset: int, limit: int) -> List[IssueRecord]:
        character = await self.provider.fetch_character(character_id)
        issue_ids = character.issue_credit_ids[offset:offset + limit]
        if not issue_ids:
            return []

        issues = await self.batch_fetcher.fetch_issues_by_ids(issue_ids)
        await self.store.issues.save_many(issues, character_id=character_id)
        logger.info(f"Loaded {len(issues)}/{len(issue_ids)} issues for character {character_id}")
        return issues

    async def execute(self, character_id: int, offset: int = 0, limit: Optional[int] = None) -> List[IssueRecord]:
        limit = self._page_limit(limit)
        return await self._cached(
            f"character_issues_{character_id}_{offset}_{limit}",
            {"character_id": character_id, "offset": offset, "limit": limit},
            lambda: self._fetch(character_id, offset, limit),
        )

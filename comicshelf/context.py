"""
Application wiring.

:class:`ComicShelf` builds the object graph once (settings, remote client,
local store, event bus, favorites service and use cases) and owns the
lifetime of the network and database resources.
"""

import logging
from typing import Optional

from comicshelf.database.store import LocalStore
from comicshelf.providers.base import CatalogProvider
from comicshelf.providers.batch import IssueBatchFetcher
from comicshelf.providers.comicvine.client import ComicVineClient
from comicshelf.providers.settings import ComicShelfSettings, get_settings
from comicshelf.services.cache_aside import (
    CharacterIssuesUseCase,
    ListCharactersUseCase,
    ListIssuesUseCase,
    SearchCharactersUseCase,
    SearchIssuesUseCase,
)
from comicshelf.services.character_detail import CharacterDetailUseCase
from comicshelf.services.events import EventBus
from comicshelf.services.favorites_service import FavoritesService

logger = logging.getLogger(__name__)


class ComicShelf:
    """Container for every long-lived comicshelf component."""

    def __init__(
        self,
        settings: ComicShelfSettings,
        provider: CatalogProvider,
        store: LocalStore,
        bus: Optional[EventBus] = None,
    ):
        self.settings = settings
        self.provider = provider
        self.store = store
        self.bus = bus or EventBus()
        self.favorites = FavoritesService(store, self.bus)

        ttl = settings.cache_ttl
        page_size = settings.page_size
        self.batch_fetcher = IssueBatchFetcher(
            provider,
            batch_size=settings.batch_size,
            delay_seconds=settings.batch_delay,
        )
        self.search_characters = SearchCharactersUseCase(provider, store, ttl_seconds=ttl, page_size=page_size)
        self.search_issues = SearchIssuesUseCase(provider, store, ttl_seconds=ttl, page_size=page_size)
        self.list_characters = ListCharactersUseCase(provider, store, ttl_seconds=ttl, page_size=page_size)
        self.list_issues = ListIssuesUseCase(provider, store, ttl_seconds=ttl, page_size=page_size)
        self.character_issues = CharacterIssuesUseCase(
            provider, store, batch_fetcher=self.batch_fetcher, ttl_seconds=ttl,
            page_size=page_size,
        )
        self.character_detail = CharacterDetailUseCase(provider, store)

    @classmethod
    async def create(
        cls,
        settings: Optional[ComicShelfSettings] = None,
        provider: Optional[CatalogProvider] = None,
        store: Optional[LocalStore] = None,
    ) -> "ComicShelf":
        """
        Build and initialize an instance.

        Args:
            settings: Defaults to the global settings
            provider: Defaults to a ComicVineClient built from ``settings``
            store: Defaults to a LocalStore at ``settings.database_url``

        Raises:
            StorageFailure: If the store cannot be initialized; the provider
                and store are closed before the error propagates
        """
        settings = settings or get_settings()
        provider = provider or ComicVineClient(settings=settings)
        store = store or LocalStore(settings.database_url)
        shelf = cls(settings, provider, store)
        try:
            await shelf.initialize()
        except BaseException:
            await shelf.close()
            raise
        return shelf

    async def initialize(self) -> None:
        """Create missing tables and load the favorites mirror."""
        await self.store.initialize()
        await self.favorites.load()
        logger.debug("comicshelf initialized")

    async def close(self) -> None:
        await self.provider.close()
        await self.store.close()

    async def __aenter__(self) -> "ComicShelf":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

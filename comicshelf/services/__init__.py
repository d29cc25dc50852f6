"""
Application services: cache-aside use cases, favorites and events.
"""

from comicshelf.services.cache_aside import (
    CacheAsideUseCase,
    CharacterIssuesUseCase,
    ListCharactersUseCase,
    ListIssuesUseCase,
    SearchCharactersUseCase,
    SearchIssuesUseCase,
)
from comicshelf.services.character_detail import CharacterDetailUseCase
from comicshelf.services.events import (
    FAVORITE_STATUS_CHANGED,
    FAVORITES_CHANGED,
    EventBus,
    FavoriteStatusChanged,
)
from comicshelf.services.favorite_toggle import FavoriteToggle
from comicshelf.services.favorites_service import FavoriteCharacterInput, FavoritesService, FavoritesSort
from comicshelf.services.pagination import PageAccumulator

__all__ = [
    "CacheAsideUseCase",
    "CharacterIssuesUseCase",
    "ListCharactersUseCase",
    "ListIssuesUseCase",
    "SearchCharactersUseCase",
    "SearchIssuesUseCase",
    "CharacterDetailUseCase",
    "FAVORITE_STATUS_CHANGED",
    "FAVORITES_CHANGED",
    "EventBus",
    "FavoriteStatusChanged",
    "FavoriteToggle",
    "FavoriteCharacterInput",
    "FavoritesService",
    "FavoritesSort",
    "PageAccumulator",
]

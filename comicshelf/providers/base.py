"""
Base interfaces for comic catalog providers.

This module defines the contract every catalog provider implements, so the
batch fetcher and the cache-aside use cases never depend on a concrete API.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List

from .models import CharacterRecord, IssueRecord


class ProviderType(Enum):
    """Supported comic catalog providers."""
    COMICVINE = "comicvine"


class CatalogProvider(ABC):
    """
    Abstract base class for comic catalog providers.

    Implementations raise the errors from :mod:`comicshelf.providers.errors`
    and never cache: caching belongs to the use cases above them.
    """

    @abstractmethod
    async def fetch_character(self, character_id: int) -> CharacterRecord:
        """
        Fetch the full record of a single character.

        Args:
            character_id: Catalog identifier

        Returns:
            The character record

        Raises:
            NotFound: If the catalog has no such character
        """
        pass

    @abstractmethod
    async def fetch_characters(self, offset: int = 0, limit: int = 20) -> List[CharacterRecord]:
        """
        List characters, most recently updated first.

        Args:
            offset: Number of records to skip (>= 0)
            limit: Page size (> 0)
        """
        pass

    @abstractmethod
    async def fetch_issue(self, issue_id: int) -> IssueRecord:
        """Fetch the full record of a single issue."""
        pass

    @abstractmethod
    async def fetch_issues(self, offset: int = 0, limit: int = 20) -> List[IssueRecord]:
        """List issues, most recently updated first."""
        pass

    @abstractmethod
    async def search_characters(self, query: str, offset: int = 0, limit: int = 20) -> List[CharacterRecord]:
        """
        Search characters by name.

        A query that is blank after trimming returns an empty list without
        touching the network.
        """
        pass

    @abstractmethod
    async def search_comics(self, query: str, offset: int = 0, limit: int = 20) -> List[IssueRecord]:
        """Search issues by name; blank queries return an empty list."""
        pass

    async def close(self) -> None:
        """Release network resources."""

    @property
    @abstractmethod
    def provider_type(self) -> ProviderType:
        """Return the provider type identifier."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

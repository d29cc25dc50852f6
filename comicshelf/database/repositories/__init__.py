"""
Database repositories for comicshelf.
"""
from comicshelf.database.repositories.base import BaseRepository
from comicshelf.database.repositories.cache import CacheRepository
from comicshelf.database.repositories.character import CharacterRepository
from comicshelf.database.repositories.issue import IssueRepository

__all__ = [
    "BaseRepository",
    "CacheRepository",
    "CharacterRepository",
    "IssueRepository",
]

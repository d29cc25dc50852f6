"""
SQLAlchemy models for comicshelf.
"""
from comicshelf.database.models.cache import CacheEntry
from comicshelf.database.models.character import Character
from comicshelf.database.models.issue import Issue

__all__ = [
    "CacheEntry",
    "Character",
    "Issue",
]

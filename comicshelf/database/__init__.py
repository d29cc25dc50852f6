"""
Database module for comicshelf.

Provides the SQLAlchemy async connection helpers, models, repositories and
the LocalStore facade used by the services.
"""
from comicshelf.database.connection import (
    Base,
    close_db,
    create_session_maker,
    create_standalone_engine,
    get_standalone_session,
    init_db,
)
from comicshelf.database.repositories import (
    BaseRepository,
    CacheRepository,
    CharacterRepository,
    IssueRepository,
)
from comicshelf.database.store import CharacterStore, IssueStore, LocalStore, utc_now

__all__ = [
    # Connection
    "Base",
    "create_standalone_engine",
    "create_session_maker",
    "get_standalone_session",
    "init_db",
    "close_db",
    # Repositories
    "BaseRepository",
    "CacheRepository",
    "CharacterRepository",
    "IssueRepository",
    # Store
    "LocalStore",
    "CharacterStore",
    "IssueStore",
    "utc_now",
]

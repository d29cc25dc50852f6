"""
Local Store: durable storage of characters, issues and cached query results.

The store owns its engine and opens one short session per operation. Writes
are serialized through an ``asyncio.Lock`` because SQLite allows a single
writer. Every SQLAlchemy error, and every stored payload that no longer
decodes, leaves as :class:`StorageFailure`.
"""

import asyncio
import logging
from contextlib import AsyncExitStack, asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncGenerator, Callable, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from comicshelf.database.connection import (
    close_db,
    create_session_maker,
    create_standalone_engine,
    get_standalone_session,
    init_db,
)
from comicshelf.database.models.cache import CacheEntry
from comicshelf.database.repositories.cache import CacheRepository
from comicshelf.database.repositories.character import CharacterRepository
from comicshelf.database.repositories.issue import IssueRepository
from comicshelf.providers.errors import DecodeFailed, StorageFailure
from comicshelf.providers.models import CharacterRecord, IssueRecord, sort_most_recent, validate_record

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as a naive UTC datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class LocalStore:
    """
    Embedded database holding catalog records, favorites and the query cache.

    Usage:
        store = LocalStore("sqlite+aiosqlite:///./data/comicshelf.db")
        await store.initialize()
        await store.characters.save(record)
        await store.close()
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        engine: Optional[AsyncEngine] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Args:
            database_url: Async SQLAlchemy URL (defaults to settings)
            engine: Pre-built engine; takes precedence over ``database_url``
            clock: Callable returning the current naive UTC time
        """
        self.engine = engine or create_standalone_engine(database_url)
        self._session_maker = create_session_maker(self.engine)
        self._write_lock = asyncio.Lock()
        self.clock: Clock = clock or utc_now
        self.characters = CharacterStore(self)
        self.issues = IssueStore(self)

    async def initialize(self) -> None:
        """Create missing tables."""
        try:
            await init_db(self.engine)
        except SQLAlchemyError as e:
            logger.error(f"Could not initialize local store: {e}")
            raise StorageFailure(f"Could not initialize local store: {e}") from e
        logger.debug(f"Local store ready at {self.engine.url.render_as_string(hide_password=True)}")

    async def close(self) -> None:
        await close_db(self.engine)

    async def __aenter__(self) -> "LocalStore":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @asynccontextmanager
    async def session(self, operation: str, write: bool = False) -> AsyncGenerator[AsyncSession, None]:
        """
        Open a session for one store operation.

        Args:
            operation: Name used in error messages and logs
            write: Hold the write lock for the duration of the session

        Raises:
            StorageFailure: If SQLAlchemy fails at any point, commit included,
                or a stored payload read in the session does not decode
        """
        try:
            async with AsyncExitStack() as stack:
                if write:
                    await stack.enter_async_context(self._write_lock)
                session = await stack.enter_async_context(get_standalone_session(self._session_maker))
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Local store {operation} failed: {e}")
            raise StorageFailure(f"Local store {operation} failed: {e}") from e
        except DecodeFailed as e:
            logger.error(f"Local store {operation} read a corrupt record: {e}")
            raise StorageFailure(f"Local store {operation} read a corrupt record: {e}") from e

    # ------------------------------------------------------------------
    # Query cache
    # ------------------------------------------------------------------

    async def save_cache_entry(
        self,
        key: str,
        payload: Any,
        expires_at: datetime,
        operation: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Store ``payload`` under ``key`` until ``expires_at``, replacing any previous entry.

        Args:
            key: Deterministic cache key
            payload: JSON-serializable value
            expires_at: Naive UTC expiry time
            operation: Use case name, for statistics
            params: Query arguments, for inspection
        """
        entry = CacheEntry(
            key=key,
            operation=operation,
            data=payload,
            params=params,
            created_at=self.clock(),
            expires_at=expires_at,
            hit_count=0,
        )
        async with self.session("save_cache_entry", write=True) as session:
            await CacheRepository(session).set(entry)

    async def load_cache_entry(self, key: str) -> Optional[Any]:
        """Return the payload under ``key``, or None when absent or expired."""
        async with self.session("load_cache_entry", write=True) as session:
            repo = CacheRepository(session)
            entry = await repo.get_valid_by_key(key, self.clock())
            if entry is None:
                return None
            data = entry.data
            await repo.increment_hit_count(key)
            return data

    async def is_expired(self, key: str) -> bool:
        """True when ``key`` is absent or its entry has expired."""
        async with self.session("is_expired") as session:
            entry = await CacheRepository(session).get_by_key(key)
            return entry is None or entry.is_expired(self.clock())

    async def expire(self, key: str) -> bool:
        """Move the expiry of ``key`` into the past. Returns False if absent."""
        past = self.clock() - timedelta(seconds=1)
        async with self.session("expire", write=True) as session:
            return await CacheRepository(session).set_expires_at(key, past)

    async def delete_cache_entry(self, key: str) -> bool:
        async with self.session("delete_cache_entry", write=True) as session:
            return await CacheRepository(session).delete_by_key(key)

    async def purge_expired(self) -> int:
        """Delete expired entries and return how many were removed."""
        async with self.session("purge_expired", write=True) as session:
            deleted = await CacheRepository(session).delete_expired(self.clock())
        if deleted:
            logger.info(f"Purged {deleted} expired cache entries")
        return deleted

    async def clear_cache(self) -> int:
        async with self.session("clear_cache", write=True) as session:
            return await CacheRepository(session).delete_all()

    async def cache_stats(self) -> Dict[str, Any]:
        async with self.session("cache_stats") as session:
            return await CacheRepository(session).get_stats(self.clock())


class CharacterStore:
    """Character records and favorite flags."""

    def __init__(self, store: LocalStore):
        self._store = store

    @staticmethod
    def _to_record(payload: Dict[str, Any], id: int) -> CharacterRecord:
        return validate_record(CharacterRecord, payload, path=f"characters.{id}.payload")

    async def save(self, record: CharacterRecord) -> None:
        """Insert or update ``record``; an existing favorite flag is kept."""
        async with self._store.session("save_character", write=True) as session:
            await CharacterRepository(session).upsert(record, self._store.clock())

    async def save_many(self, records: Iterable[CharacterRecord]) -> None:
        now = self._store.clock()
        async with self._store.session("save_characters", write=True) as session:
            repo = CharacterRepository(session)
            for record in records:
                await repo.upsert(record, now)

    async def load(self, id: int) -> Optional[CharacterRecord]:
        async with self._store.session("load_character") as session:
            row = await CharacterRepository(session).get_by_id(id)
            if row is None:
                return None
            return self._to_record(row.payload, row.id)

    async def load_all(self) -> List[CharacterRecord]:
        async with self._store.session("load_characters") as session:
            rows = await CharacterRepository(session).get_all()
            return [self._to_record(row.payload, row.id) for row in rows]

    async def delete(self, id: int) -> bool:
        async with self._store.session("delete_character", write=True) as session:
            return await CharacterRepository(session).delete_by_id(id)

    async def set_favorite(self, id: int, flag: bool) -> bool:
        """
        Set the favorite flag of a stored character.

        Returns:
            True if the flag changed. False when it already had that value or
            the character is not stored.
        """
        async with self._store.session("set_favorite", write=True) as session:
            return await CharacterRepository(session).set_favorite(id, flag, self._store.clock())

    async def is_favorite(self, id: int) -> bool:
        async with self._store.session("is_favorite") as session:
            row = await CharacterRepository(session).get_by_id(id)
            return bool(row and row.is_favorite)

    async def load_favorites(self) -> List[CharacterRecord]:
        """Favorited characters, in the order they were favorited."""
        async with self._store.session("load_favorites") as session:
            rows = await CharacterRepository(session).get_favorites()
            return [self._to_record(row.payload, row.id) for row in rows]

    async def favorite_ids(self) -> List[int]:
        async with self._store.session("favorite_ids") as session:
            return await CharacterRepository(session).get_favorite_ids()


class IssueStore:
    """Issue records, optionally linked to a character."""

    def __init__(self, store: LocalStore):
        self._store = store

    @staticmethod
    def _to_record(payload: Dict[str, Any], id: int) -> IssueRecord:
        return validate_record(IssueRecord, payload, path=f"issues.{id}.payload")

    async def save(self, record: IssueRecord, character_id: Optional[int] = None) -> None:
        async with self._store.session("save_issue", write=True) as session:
            await IssueRepository(session).upsert(record, self._store.clock(), character_id)

    async def save_many(self, records: Iterable[IssueRecord], character_id: Optional[int] = None) -> None:
        now = self._store.clock()
        async with self._store.session("save_issues", write=True) as session:
            repo = IssueRepository(session)
            for record in records:
                await repo.upsert(record, now, character_id)

    async def load(self, id: int) -> Optional[IssueRecord]:
        async with self._store.session("load_issue") as session:
            row = await IssueRepository(session).get_by_id(id)
            if row is None:
                return None
            return self._to_record(row.payload, row.id)

    async def load_all(self) -> List[IssueRecord]:
        async with self._store.session("load_issues") as session:
            rows = await IssueRepository(session).get_all()
            return [self._to_record(row.payload, row.id) for row in rows]

    async def load_for_character(self, character_id: int) -> List[IssueRecord]:
        """Issues linked to ``character_id``, most recent first."""
        async with self._store.session("load_character_issues") as session:
            rows = await IssueRepository(session).find_by_character(character_id)
            return sort_most_recent(self._to_record(row.payload, row.id) for row in rows)

    async def delete(self, id: int) -> bool:
        async with self._store.session("delete_issue", write=True) as session:
            return await IssueRepository(session).delete_by_id(id)

"""
Batch fetching of issues by identifier.

Issues are requested in consecutive chunks: every request in a chunk runs
concurrently, and a fixed pause separates chunks so upstream rate limits are
not tripped. A failed item is logged and left out; it never aborts the batch.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from .base import CatalogProvider
from .errors import InvalidRequest
from .models import IssueRecord, sort_most_recent

logger = logging.getLogger(__name__)


class IssueBatchFetcher:
    """Fetch many issues through a :class:`CatalogProvider` with bounded concurrency."""

    def __init__(
        self,
        provider: CatalogProvider,
        batch_size: int = 5,
        delay_seconds: float = 0.2,
    ):
        if batch_size < 1:
            raise InvalidRequest(f"batch_size must be >= 1, got {batch_size}")
        self.provider = provider
        self.batch_size = batch_size
        self.delay_seconds = delay_seconds

    async def _fetch_one(self, issue_id: int) -> Optional[IssueRecord]:
        try:
            return await self.provider.fetch_issue(issue_id)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Skipping issue {issue_id}: {e}")
            return None

    async def fetch_issues_by_ids(
        self,
        ids: Sequence[int],
        batch_size: Optional[int] = None,
    ) -> List[IssueRecord]:
        """
        Fetch the issues with the given identifiers.

        Args:
            ids: Issue identifiers, fetched in order chunk by chunk
            batch_size: Overrides the fetcher's chunk size for this call

        Returns:
            The issues that could be fetched, most recent first. Never longer
            than ``ids``.
        """
        size = self.batch_size if batch_size is None else batch_size
        if size < 1:
            raise InvalidRequest(f"batch_size must be >= 1, got {size}")
        if not ids:
            return []

        chunks = [list(ids[i:i + size]) for i in range(0, len(ids), size)]
        logger.debug(f"Fetching {len(ids)} issues in {len(chunks)} batches of up to {size}")

        results: List[IssueRecord] = []
        for index, chunk in enumerate(chunks):
            fetched = await asyncio.gather(*(self._fetch_one(issue_id) for issue_id in chunk))
            results.extend(issue for issue in fetched if issue is not None)
            if index < len(chunks) - 1 and self.delay_seconds > 0:
                await asyncio.sleep(self.delay_seconds)

        failed = len(ids) - len(results)
        if failed:
            logger.info(f"Fetched {len(results)}/{len(ids)} issues ({failed} failed)")
        return sort_most_recent(results)

"""
Accumulation of paginated results.
"""

from typing import Generic, List

from comicshelf.providers.models import RecordT, merge_unique


class PageAccumulator(Generic[RecordT]):
    """
    Collects successive pages of records without duplicates.

    ``offset`` is the offset of the next page to request. ``has_more`` turns
    False as soon as a page comes back shorter than ``limit``.
    """

    def __init__(self, limit: int = 20):
        self.limit = limit
        self.items: List[RecordT] = []
        self.offset = 0
        self.has_more = True

    def add_page(self, page: List[RecordT]) -> List[RecordT]:
        """Merge ``page`` and advance the offset. Returns the accumulated items."""
        self.items = merge_unique(self.items, page)
        self.offset += len(page)
        if len(page) < self.limit:
            self.has_more = False
        return self.items

    def reset(self) -> None:
        self.items = []
        self.offset = 0
        self.has_more = True

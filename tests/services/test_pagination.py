"""
Tests for page accumulation.
"""

from comicshelf.services.pagination import PageAccumulator
from tests.factories import make_character


class TestPageAccumulator:
    """Test merging of successive pages."""

    def test_merges_without_duplicates(self):
        """It should skip records already seen in earlier pages."""
        pages = PageAccumulator(limit=2)
        pages.add_page([make_character(1), make_character(2)])
        items = pages.add_page([make_character(2), make_character(3)])

        assert [record.id for record in items] == [1, 2, 3]
        assert pages.offset == 4
        assert pages.has_more is True

    def test_short_page_ends_pagination(self):
        """It should stop when a page is shorter than the limit."""
        pages = PageAccumulator(limit=20)
        pages.add_page([make_character(1)])
        assert pages.has_more is False

    def test_reset(self):
        """It should start over after reset."""
        pages = PageAccumulator(limit=1)
        pages.add_page([])
        pages.reset()
        assert pages.items == []
        assert pages.offset == 0
        assert pages.has_more is True

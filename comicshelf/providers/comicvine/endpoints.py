"""
ComicVine endpoint definitions.

Reference: https://comicvine.gamespot.com/api/documentation
"""

from dataclasses import dataclass, field
from typing import Dict

CHARACTER_FIELDS = ",".join([
    "id", "name", "description", "deck", "aliases", "image",
    "api_detail_url", "site_detail_url", "first_appeared_in_issue",
    "count_of_issue_appearances", "real_name", "birth", "date_added",
    "date_last_updated", "gender", "origin", "publisher",
    "character_enemies", "character_friends", "creators", "issue_credits",
    "powers", "teams", "volume_credits",
])

ISSUE_FIELDS = ",".join([
    "id", "name", "issue_number", "description", "deck", "image",
    "cover_date", "store_date", "api_detail_url", "site_detail_url",
    "volume", "has_staff_review", "date_added", "date_last_updated",
])

LIST_SORT = "date_last_updated:desc"

# ComicVine resource type prefixes used in detail paths
CHARACTER_TYPE_ID = "4005"
ISSUE_TYPE_ID = "4000"


@dataclass(frozen=True)
class Endpoint:
    """A ComicVine path plus its endpoint-specific query parameters."""

    path: str
    params: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def characters(cls, offset: int, limit: int) -> "Endpoint":
        return cls("/characters/", {
            "offset": str(offset),
            "limit": str(limit),
            "sort": LIST_SORT,
            "field_list": CHARACTER_FIELDS,
        })

    @classmethod
    def character(cls, character_id: int) -> "Endpoint":
        return cls(f"/character/{CHARACTER_TYPE_ID}-{character_id}/", {"field_list": CHARACTER_FIELDS})

    @classmethod
    def issues(cls, offset: int, limit: int) -> "Endpoint":
        return cls("/issues/", {
            "offset": str(offset),
            "limit": str(limit),
            "sort": LIST_SORT,
            "field_list": ISSUE_FIELDS,
        })

    @classmethod
    def issue(cls, issue_id: int) -> "Endpoint":
        return cls(f"/issue/{ISSUE_TYPE_ID}-{issue_id}/", {"field_list": ISSUE_FIELDS})

    @classmethod
    def search(cls, query: str, resources: str, offset: int, limit: int) -> "Endpoint":
        return cls("/search/", {
            "query": query,
            "resources": resources,
            "offset": str(offset),
            "limit": str(limit),
            "field_list": CHARACTER_FIELDS if resources == "character" else ISSUE_FIELDS,
        })

"""
Unified data models for comic catalog records.

These models mirror the ComicVine JSON schema closely enough to be validated
straight from API responses, and are the only shapes that flow between the
remote client, the local store and the cache-aside use cases.
"""

import html
import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import DecodeFailed

COMICVINE_SITE_URL = "https://comicvine.gamespot.com"
COMICVINE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_TAG_RE = re.compile(r"<[^>]+>")
_SPACE_RE = re.compile(r"\s+")


def strip_markup(text: Optional[str]) -> Optional[str]:
    """Return ``text`` without HTML tags or entities, whitespace collapsed."""
    if text is None:
        return None
    plain = html.unescape(_TAG_RE.sub(" ", text))
    return _SPACE_RE.sub(" ", plain).strip()


class ImageSet(BaseModel):
    """
    Ranked image URL candidates for a record.

    ComicVine ships the same artwork in several sizes; consumers ask for the
    best quality, a medium quality or a thumbnail and get the first tier that
    is actually present.
    """
    model_config = ConfigDict(frozen=True)

    icon_url: Optional[str] = None
    medium_url: Optional[str] = None
    screen_url: Optional[str] = None
    screen_large_url: Optional[str] = None
    small_url: Optional[str] = None
    super_url: Optional[str] = None
    thumb_url: Optional[str] = None
    tiny_url: Optional[str] = None
    original_url: Optional[str] = None

    @classmethod
    def single(cls, url: Optional[str]) -> "ImageSet":
        """Build an image set where every tier points at the same URL."""
        return cls(**{name: url for name in cls.model_fields})

    @staticmethod
    def _first(candidates: Iterable[Optional[str]]) -> Optional[str]:
        for url in candidates:
            if url:
                return url
        return None

    @property
    def best_quality_url(self) -> Optional[str]:
        return self._first([
            self.original_url,
            self.super_url,
            self.screen_large_url,
            self.screen_url,
            self.medium_url,
            self.small_url,
            self.thumb_url,
        ])

    @property
    def medium_quality_url(self) -> Optional[str]:
        return self._first([self.medium_url, self.screen_url, self.small_url]) or self.best_quality_url

    @property
    def thumbnail_url(self) -> Optional[str]:
        return self.thumb_url or self.medium_quality_url


class Reference(BaseModel):
    """Pointer to a related entity (team, power, issue credit, volume...)."""
    model_config = ConfigDict(frozen=True)

    id: int
    name: Optional[str] = None
    api_detail_url: Optional[str] = None
    site_detail_url: Optional[str] = None
    issue_number: Optional[str] = None


class CharacterRecord(BaseModel):
    """
    A comic book character as returned by the catalog.

    Two records with the same ``id`` are the same character, whatever their
    other fields say; this is what lets paginated pages be merged without
    duplicates.
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Catalog identifier, unique per source")
    name: str = Field(..., description="Display name")
    description: Optional[str] = Field(None, description="Long form description, may contain HTML")
    deck: Optional[str] = Field(None, description="Short summary")
    aliases: Optional[str] = None
    image: ImageSet
    api_detail_url: str
    site_detail_url: str
    first_appeared_in_issue: Optional[Reference] = None
    count_of_issue_appearances: int = Field(..., ge=0)
    real_name: Optional[str] = None
    birth: Optional[str] = None
    date_added: str
    date_last_updated: str
    gender: Optional[int] = None
    origin: Optional[Reference] = None
    publisher: Optional[Reference] = None

    character_enemies: Optional[List[Reference]] = None
    character_friends: Optional[List[Reference]] = None
    creators: Optional[List[Reference]] = None
    issue_credits: Optional[List[Reference]] = None
    powers: Optional[List[Reference]] = None
    teams: Optional[List[Reference]] = None
    volume_credits: Optional[List[Reference]] = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CharacterRecord):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(("character", self.id))

    @property
    def plain_description(self) -> Optional[str]:
        return strip_markup(self.description)

    @property
    def issue_credit_ids(self) -> List[int]:
        return [credit.id for credit in self.issue_credits or []]

    @classmethod
    def minimal(
        cls,
        id: int,
        name: str,
        image_url: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "CharacterRecord":
        """
        Synthesize the smallest valid record from summary data.

        Used when a character is favorited before its full detail was ever
        loaded, so the favorite stays resolvable later.

        Args:
            id: Catalog identifier
            name: Display name
            image_url: Best known image URL, copied into every tier
            now: Timestamp used for both source dates (defaults to current UTC time)

        Returns:
            A CharacterRecord that satisfies every required field
        """
        stamp = (now or datetime.now(timezone.utc)).strftime(COMICVINE_DATE_FORMAT)
        slug = name.lower().replace(" ", "-")
        return cls(
            id=id,
            name=name,
            image=ImageSet.single(image_url),
            api_detail_url=f"{COMICVINE_SITE_URL}/api/character/4005-{id}/",
            site_detail_url=f"{COMICVINE_SITE_URL}/{slug}/4005-{id}/",
            count_of_issue_appearances=0,
            date_added=stamp,
            date_last_updated=stamp,
        )


class IssueRecord(BaseModel):
    """A single comic issue."""
    model_config = ConfigDict(frozen=True)

    id: int
    name: Optional[str] = None
    issue_number: Optional[str] = None
    description: Optional[str] = None
    deck: Optional[str] = None
    image: ImageSet
    cover_date: Optional[str] = Field(None, description="YYYY-MM-DD, compared as an opaque string")
    store_date: Optional[str] = None
    api_detail_url: str
    site_detail_url: str
    volume: Optional[Reference] = None
    has_staff_review: Optional[Any] = None
    date_added: str
    date_last_updated: str

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IssueRecord):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(("issue", self.id))

    @property
    def title(self) -> str:
        volume_name = self.volume.name if self.volume else None
        if volume_name and self.issue_number:
            return f"{volume_name} #{self.issue_number}"
        if self.name:
            return self.name
        if volume_name:
            return volume_name
        return "Unknown Comic"

    @property
    def plain_description(self) -> Optional[str]:
        return strip_markup(self.description)


RecordT = TypeVar("RecordT", CharacterRecord, IssueRecord)


def sort_most_recent(issues: Iterable[IssueRecord]) -> List[IssueRecord]:
    """
    Order issues most recent first.

    Issues with a cover date come first, by cover date descending with id
    descending breaking ties. Issues without a cover date follow, by id
    descending.
    """
    return sorted(
        issues,
        key=lambda issue: (1 if issue.cover_date else 0, issue.cover_date or "", issue.id),
        reverse=True,
    )


def merge_unique(existing: Iterable[RecordT], incoming: Iterable[RecordT]) -> List[RecordT]:
    """Append ``incoming`` records whose id is not already in ``existing``."""
    merged = list(existing)
    seen = set(merged)
    for record in incoming:
        if record not in seen:
            seen.add(record)
            merged.append(record)
    return merged


def format_error_location(loc: Iterable[Union[int, str]], prefix: Optional[str] = None) -> str:
    parts = [str(part) for part in loc]
    if prefix:
        parts.insert(0, prefix)
    return ".".join(parts) or "<root>"


def validate_record(model: Type[RecordT], data: Any, path: Optional[str] = None) -> RecordT:
    """
    Validate ``data`` into ``model``, converting pydantic errors into DecodeFailed.

    The dotted path of the first offending field is kept so a schema change can be
    traced back to the exact key.
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        raise DecodeFailed(
            path=format_error_location(first.get("loc", ()), prefix=path),
            details=first.get("msg", str(e)),
        ) from e


class ResponseEnvelope(BaseModel):
    """
    ComicVine response envelope.

    ``results`` is a JSON array on list and search endpoints but a single JSON
    object on detail endpoints; :meth:`normalized_results` always returns a list.
    """

    error: str
    status_code: int
    limit: int = 0
    offset: int = 0
    number_of_page_results: int = 0
    number_of_total_results: int = 0
    results: Union[List[Dict[str, Any]], Dict[str, Any]] = Field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return self.status_code == 1 and self.error == "OK"

    @property
    def error_message(self) -> Optional[str]:
        if self.is_success:
            return None
        return f"ComicVine API Error (Code: {self.status_code}): {self.error}"

    def normalized_results(self) -> List[Dict[str, Any]]:
        if isinstance(self.results, dict):
            return [self.results]
        return list(self.results)

    def decode(self, model: Type[RecordT]) -> List[RecordT]:
        """Validate every result into ``model``."""
        if isinstance(self.results, dict):
            return [validate_record(model, self.results, path="results")]
        return [
            validate_record(model, item, path=f"results.{index}")
            for index, item in enumerate(self.results)
        ]

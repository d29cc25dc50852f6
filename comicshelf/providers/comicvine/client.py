"""
ComicVine API client.

Implements :class:`CatalogProvider` over the public ComicVine REST API using
``httpx``. The client validates arguments before any I/O, decodes the response
envelope and maps every failure onto the comicshelf error taxonomy.

https://comicvine.gamespot.com/api/documentation
"""

import logging
from typing import Any, Dict, List, Optional, Type

import httpx
from pydantic import ValidationError

from ..base import CatalogProvider, ProviderType
from ..errors import DecodeFailed, InvalidRequest, NotFound, ServerRejected
from ..models import CharacterRecord, IssueRecord, RecordT, ResponseEnvelope, format_error_location
from ..settings import ComicShelfSettings, get_settings
from .endpoints import Endpoint

logger = logging.getLogger(__name__)


# Keys never written to the logs verbatim
SENSITIVE_KEYS = {
    "api_key",
    "apikey",
    "key",
    "token",
}


def sanitize_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Remove sensitive information from request parameters.

    Args:
        params: Original request parameters

    Returns:
        Sanitized parameters with sensitive values redacted
    """
    if params is None:
        return None

    sanitized = {}
    for key, value in params.items():
        if key in SENSITIVE_KEYS:
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_params(value)
        else:
            sanitized[key] = value
    return sanitized


class ComicVineClient(CatalogProvider):
    """
    Client for the ComicVine API.

    The API key is required for every remote call. Requests carry the
    configured User-Agent, since ComicVine rejects anonymous agents.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        settings: Optional[ComicShelfSettings] = None,
    ):
        """
        Initialize the ComicVine client.

        Explicit arguments win over settings; settings default to the global
        instance.

        Args:
            api_key: ComicVine API key
            base_url: API root, without trailing slash
            timeout: Request timeout in seconds
            user_agent: Value of the User-Agent header
            settings: Settings to read defaults from
        """
        settings = settings or get_settings()
        self.api_key = api_key if api_key is not None else settings.comicvine_api_key
        self.base_url = (base_url or settings.comicvine_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.comicvine_timeout
        self.user_agent = user_agent or settings.comicvine_user_agent
        self._client = self._new_client()

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": self.user_agent, "Accept": "application/json"},
        )

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client.is_closed:
            self._client = self._new_client()
        return self._client

    @property
    def provider_type(self) -> ProviderType:
        return ProviderType.COMICVINE

    async def close(self) -> None:
        """Close the HTTP client."""
        if not self._client.is_closed:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_page(offset: int, limit: int) -> None:
        if offset < 0:
            raise InvalidRequest(f"offset must be >= 0, got {offset}")
        if limit <= 0:
            raise InvalidRequest(f"limit must be > 0, got {limit}")

    @staticmethod
    def _check_id(resource: str, resource_id: int) -> None:
        if resource_id <= 0:
            raise InvalidRequest(f"{resource} id must be positive, got {resource_id}")

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(self, endpoint: Endpoint) -> ResponseEnvelope:
        """
        Perform a GET against ``endpoint`` and return the decoded envelope.

        Raises:
            InvalidRequest: If no API key is configured
            ServerRejected: On timeout, transport error, non-2xx status or a
                non-success envelope
            DecodeFailed: If the body is not a valid envelope
        """
        if not self.api_key:
            raise InvalidRequest("ComicVine API key is not configured (set COMICVINE_API_KEY)")

        url = f"{self.base_url}{endpoint.path}"
        params = {"api_key": self.api_key, "format": "json", **endpoint.params}
        logger.debug(f"ComicVine GET {endpoint.path} params={sanitize_params(params)}")

        client = self._get_client()
        try:
            response = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            logger.warning(f"ComicVine timeout for {endpoint.path}")
            raise ServerRejected(f"Request to {endpoint.path} timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"ComicVine transport error for {endpoint.path}: {e}")
            raise ServerRejected(f"Request to {endpoint.path} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"ComicVine HTTP {response.status_code} for {endpoint.path}")
            raise ServerRejected(
                f"ComicVine returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise DecodeFailed(path="<root>", details=f"invalid JSON: {e}") from e

        try:
            envelope = ResponseEnvelope.model_validate(body)
        except ValidationError as e:
            first = e.errors()[0]
            raise DecodeFailed(
                path=format_error_location(first.get("loc", ())),
                details=first.get("msg", str(e)),
            ) from e

        if not envelope.is_success:
            logger.warning(f"ComicVine rejected {endpoint.path}: {envelope.error_message}")
            raise ServerRejected(envelope.error_message, status_code=envelope.status_code)

        return envelope

    async def _fetch_list(self, endpoint: Endpoint, model: Type[RecordT]) -> List[RecordT]:
        envelope = await self._request(endpoint)
        records = envelope.decode(model)
        logger.debug(f"ComicVine {endpoint.path}: {len(records)} {model.__name__} records")
        return records

    async def _fetch_one(self, endpoint: Endpoint, model: Type[RecordT], resource: str, resource_id: int) -> RecordT:
        envelope = await self._request(endpoint)
        if not envelope.normalized_results():
            raise NotFound(resource, resource_id)
        return envelope.decode(model)[0]

    # ------------------------------------------------------------------
    # CatalogProvider
    # ------------------------------------------------------------------

    async def fetch_characters(self, offset: int = 0, limit: int = 20) -> List[CharacterRecord]:
        self._check_page(offset, limit)
        return await self._fetch_list(Endpoint.characters(offset, limit), CharacterRecord)

    async def fetch_character(self, character_id: int) -> CharacterRecord:
        self._check_id("Character", character_id)
        return await self._fetch_one(Endpoint.character(character_id), CharacterRecord, "Character", character_id)

    async def fetch_issues(self, offset: int = 0, limit: int = 20) -> List[IssueRecord]:
        self._check_page(offset, limit)
        return await self._fetch_list(Endpoint.issues(offset, limit), IssueRecord)

    async def fetch_issue(self, issue_id: int) -> IssueRecord:
        self._check_id("Issue", issue_id)
        return await self._fetch_one(Endpoint.issue(issue_id), IssueRecord, "Issue", issue_id)

    async def search_characters(self, query: str, offset: int = 0, limit: int = 20) -> List[CharacterRecord]:
        term = query.strip()
        if not term:
            return []
        self._check_page(offset, limit)
        return await self._fetch_list(Endpoint.search(term, "character", offset, limit), CharacterRecord)

    async def search_comics(self, query: str, offset: int = 0, limit: int = 20) -> List[IssueRecord]:
        term = query.strip()
        if not term:
            return []
        self._check_page(offset, limit)
        return await self._fetch_list(Endpoint.search(term, "issue", offset, limit), IssueRecord)

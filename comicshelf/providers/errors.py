"""
Error taxonomy shared by the catalog client, the batch fetcher and the local store.

Every error raised by comicshelf derives from :class:`ComicCatalogError`, so callers
that only want to render a retry affordance can catch a single type.
"""

from typing import Optional


class ComicCatalogError(Exception):
    """Base class for every comicshelf error."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(ComicCatalogError):
    """Malformed URL or parameters (negative offset, non-positive limit, missing key)."""


class ServerRejected(ComicCatalogError):
    """
    The remote refused the request.

    Raised for non-2xx HTTP responses, for envelopes whose status is not a success,
    and for timeouts or transport failures.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (status {self.status_code})"
        return self.message


class DecodeFailed(ComicCatalogError):
    """The response did not match the expected schema."""

    def __init__(self, path: str, details: str):
        super().__init__(f"Could not decode '{path}': {details}")
        self.path = path
        self.details = details


class NotFound(ComicCatalogError):
    """A detail endpoint returned no record where exactly one was expected."""

    def __init__(self, resource: str, resource_id: int):
        super().__init__(f"{resource} {resource_id} not found")
        self.resource = resource
        self.resource_id = resource_id


class StorageFailure(ComicCatalogError):
    """The local store could not complete a read or a write."""

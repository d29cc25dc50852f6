"""
Comic catalog provider layer.

Defines the records exchanged with the catalog, the error taxonomy, the
provider contract and its ComicVine implementation, plus the batch fetcher
that pulls many issues at once.
"""

from .base import CatalogProvider, ProviderType
from .batch import IssueBatchFetcher
from .errors import (
    ComicCatalogError,
    DecodeFailed,
    InvalidRequest,
    NotFound,
    ServerRejected,
    StorageFailure,
)
from .models import CharacterRecord, ImageSet, IssueRecord, Reference, merge_unique, sort_most_recent

__all__ = [
    'CatalogProvider',
    'ProviderType',
    'IssueBatchFetcher',
    'ComicCatalogError',
    'DecodeFailed',
    'InvalidRequest',
    'NotFound',
    'ServerRejected',
    'StorageFailure',
    'CharacterRecord',
    'ImageSet',
    'IssueRecord',
    'Reference',
    'merge_unique',
    'sort_most_recent',
]

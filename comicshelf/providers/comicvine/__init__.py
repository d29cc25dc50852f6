"""
ComicVine catalog provider.
"""

from .client import ComicVineClient, sanitize_params
from .endpoints import Endpoint

__all__ = ['ComicVineClient', 'Endpoint', 'sanitize_params']

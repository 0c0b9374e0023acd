"""Business logic services for vinylmatch.

Public API:
    AlbumResolver - Resolution pipeline, curation and user library access
    CatalogCache - Durable album/barcode/curated link cache

Protocols (for dependency injection):
    DiscogsProtocol - Discogs API abstraction (see ``vinylmatch.client``)
"""

from vinylmatch.services.cache import CatalogCache
from vinylmatch.services.resolver import AlbumResolver

__all__ = [
    "AlbumResolver",
    "CatalogCache",
]

"""vinylmatch - Resolve streaming albums to Discogs links.

This library turns an (artist, album, year, track, barcode) tuple into a
stable Discogs URL. It consults a durable link cache before any network
call, tries progressively looser Discogs searches, and always falls back
to a Discogs web search link, so resolution never fails.

Designed for use as a library in applications (e.g., a playlist web app)
with a CLI for debugging and curation.

Examples:
    Resolve an album:
    ```python
    from vinylmatch import create_resolver, DiscogsConfig

    resolver = create_resolver(DiscogsConfig(token="..."))
    resolution = resolver.resolve("Daft Punk", "Discovery", 2001)
    print(resolution.url, resolution.source.label)
    ```

    Override a bad match:
    ```python
    resolver.save_curated_link(
        "Daft Punk", "Discovery", 2001, None, None,
        "https://www.discogs.com/master/555-Daft-Punk-Discovery",
    )
    ```
"""

# Internal imports (not exported)
from vinylmatch.client import DiscogsClient as _DiscogsClient
from vinylmatch.config import CacheConfig, DiscogsConfig
from vinylmatch.exceptions import (
    APIError,
    InvalidCatalogUrlError,
    NotConfiguredError,
    VinylMatchError,
)
from vinylmatch.models.domain import (
    AlbumResolution,
    BatchResult,
    BatchTrack,
    CuratedLink,
    CurationCandidate,
    DiscogsProfile,
    LibraryFlags,
    MatchKey,
    WishlistEntry,
    WishlistResult,
)
from vinylmatch.models.enums import NormLevel, ResolutionSource, ResultType
from vinylmatch.services.cache import CatalogCache
from vinylmatch.services.resolver import AlbumResolver
from vinylmatch.utils.url import build_web_search_url, sanitize_web_url


def create_resolver(
    config: DiscogsConfig | None = None,
    cache_config: CacheConfig | None = None,
) -> AlbumResolver:
    """Create a configured album resolver.

    This is the recommended way to create a resolver for library usage.
    It builds the Discogs client and the link cache, and loads the cache
    snapshots from disk. Create one resolver per process and share it.

    Args:
        config: Optional Discogs configuration. Without a token the resolver
            runs in fallback-only mode.
        cache_config: Optional cache configuration. Defaults to
            ``cache/discogs`` relative to the working directory.

    Returns:
        A configured AlbumResolver instance.

    Examples:
        Fallback-only (no token):
        ```python
        resolver = create_resolver()
        ```

        With a token and a custom cache directory:
        ```python
        resolver = create_resolver(
            DiscogsConfig(token="..."),
            CacheConfig(cache_dir=Path("/var/cache/vinylmatch")),
        )
        ```
    """
    client = _DiscogsClient(config=config)
    cache = CatalogCache(cache_config)
    cache.load()
    return AlbumResolver(client, cache)


__all__ = [
    "APIError",
    "AlbumResolution",
    "AlbumResolver",
    "BatchResult",
    "BatchTrack",
    "CacheConfig",
    "CatalogCache",
    "CuratedLink",
    "CurationCandidate",
    "DiscogsConfig",
    "DiscogsProfile",
    "InvalidCatalogUrlError",
    "LibraryFlags",
    "MatchKey",
    "NormLevel",
    "NotConfiguredError",
    "ResolutionSource",
    "ResultType",
    "VinylMatchError",
    "WishlistEntry",
    "WishlistResult",
    "build_web_search_url",
    "create_resolver",
    "sanitize_web_url",
]

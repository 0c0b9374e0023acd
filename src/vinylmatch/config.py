"""Configuration for vinylmatch."""

from dataclasses import dataclass
from pathlib import Path

DEFAULT_USER_AGENT = "VinylMatch/1.0"
DEFAULT_API_BASE = "https://api.discogs.com"

ALBUM_CACHE_FILE = "albums.json"
CURATED_LINKS_FILE = "curated-links.json"


@dataclass(frozen=True)
class DiscogsConfig:
    """Discogs API configuration.

    A missing or blank token is a supported mode: every remote call becomes
    a no-op and resolution falls back to a Discogs web search link.

    Attributes:
        token: Personal access token sent as ``Discogs token=<token>``.
        user_agent: User-Agent header (Discogs rejects anonymous agents).
        api_base: Base URL of the Discogs REST API.
        search_timeout: Timeout for structured database searches (seconds).
        query_timeout: Timeout for free-text searches and list endpoints.
        barcode_timeout: Timeout for barcode searches.
        lookup_timeout: Timeout for identity and master lookups.
        write_timeout: Timeout for wantlist writes.
        max_retries: Retries for idempotent GETs on 429/5xx responses.
    """

    token: str | None = None
    user_agent: str = DEFAULT_USER_AGENT
    api_base: str = DEFAULT_API_BASE
    search_timeout: float = 15.0
    query_timeout: float = 12.0
    barcode_timeout: float = 10.0
    lookup_timeout: float = 8.0
    write_timeout: float = 10.0
    max_retries: int = 2

    @property
    def has_token(self) -> bool:
        """Whether a non-blank token is configured."""
        return bool(self.token and self.token.strip())


@dataclass(frozen=True)
class CacheConfig:
    """Link cache configuration.

    Attributes:
        cache_dir: Directory holding both JSON snapshots.
        album_file: File name of the album/barcode snapshot.
        curated_file: File name of the curated links snapshot.
    """

    cache_dir: Path = Path("cache") / "discogs"
    album_file: str = ALBUM_CACHE_FILE
    curated_file: str = CURATED_LINKS_FILE

    @property
    def album_path(self) -> Path:
        return self.cache_dir / self.album_file

    @property
    def curated_path(self) -> Path:
        return self.cache_dir / self.curated_file

"""Album resolution service."""

import logging
from collections.abc import Callable, Iterable

from vinylmatch.client import DiscogsProtocol
from vinylmatch.models.domain import (
    AlbumResolution,
    BatchResult,
    BatchTrack,
    CuratedLink,
    CurationCandidate,
    DiscogsProfile,
    LibraryFlags,
    MatchKey,
    WishlistResult,
)
from vinylmatch.models.enums import NormLevel, ResolutionSource, ResultType
from vinylmatch.services.cache import CatalogCache
from vinylmatch.utils.normalize import (
    extract_primary_artist,
    normalize_artist_level,
    normalize_title_level,
)
from vinylmatch.utils.url import (
    build_web_search_url,
    parse_catalog_ref,
    sanitize_web_url,
)

logger = logging.getLogger(__name__)

# A pipeline step returns a candidate URL or None.
_Step = Callable[[], str | None]


def _strip(value: str | None) -> str | None:
    return value.strip() if value is not None else None


def _clean_barcode(barcode: str | None) -> str | None:
    if barcode is None or not barcode.strip():
        return None
    return barcode.strip()


def _join_query(*parts: str | None) -> str:
    return " ".join(part for part in parts if part).strip()


class AlbumResolver:
    """Resolve albums to stable Discogs URLs.

    Pipeline Overview:
    ==================
    1. Curated link for the barcode or the album key (no network)
    2. Barcode: barcode cache, then a remote barcode search
    3. Album cache by (primary artist, album, year)
    4. No token: web search fallback
    5. Remote passes, first hit wins:
       a. free-text, heavy artist + raw album
       b. free-text, heavy artist + light album
       c. structured master with year
       d. structured release with year
       e. structured master without year
       f. structured release without year
       g. web search fallback

    Every hit is validated and remembered in the cache. Failures in any
    remote step are logged at debug level and the pipeline moves on, so
    ``resolve`` always returns a URL and never raises.
    """

    def __init__(self, client: DiscogsProtocol, cache: CatalogCache) -> None:
        """Initialize the service.

        Args:
            client: Discogs API client.
            cache: Loaded link cache shared by every caller in the process.
        """
        self._client = client
        self._cache = cache

    @property
    def is_configured(self) -> bool:
        """Whether remote lookups are available."""
        return self._client.is_configured()

    @property
    def cache(self) -> CatalogCache:
        return self._cache

    # ============================================================================
    # RESOLUTION
    # ============================================================================

    def resolve(
        self,
        artist: str | None,
        album: str | None,
        year: int | None = None,
        track: str | None = None,
        barcode: str | None = None,
    ) -> AlbumResolution:
        """Resolve an album to a Discogs URL.

        Args:
            artist: Artist credit as reported by the streaming service.
            album: Album title.
            year: Optional release year.
            track: Optional track title.
            barcode: Optional UPC/EAN barcode.

        Returns:
            The resolved URL and the pipeline stage that produced it.
        """
        orig_artist = extract_primary_artist(artist)
        orig_album = _strip(album)
        track = _strip(track)
        code = _clean_barcode(barcode)
        key = self._cache.build_cache_key(orig_artist, orig_album, year)

        if url := self._cache.find_curated_link(key, code):
            return self._resolved(key, url, ResolutionSource.CURATED)

        if code:
            if url := self._cache.get_barcode_url(code):
                return self._resolved(key, url, ResolutionSource.BARCODE_CACHE)
            if self._client.is_configured():
                found = self._attempt(
                    "barcode search", lambda: self._client.search_by_barcode(code)
                )
                if result := self._accept(
                    key, found, code, ResolutionSource.BARCODE_SEARCH
                ):
                    return result

        if url := self._cache.get_album_url(key):
            return self._resolved(key, url, ResolutionSource.ALBUM_CACHE)

        artist_strict = normalize_artist_level(orig_artist, NormLevel.HEAVY)
        if not self._client.is_configured():
            return self._fallback(key, artist_strict, orig_album, year, code)

        for label, step in self._search_passes(artist_strict, orig_album, year, track):
            logger.debug("Trying %s for %s", label, key)
            found = self._attempt(label, step)
            if result := self._accept(key, found, code, ResolutionSource.SEARCH):
                return result

        return self._fallback(key, artist_strict, orig_album, year, code)

    def find_album_url(
        self,
        artist: str | None,
        album: str | None,
        year: int | None = None,
        track: str | None = None,
        barcode: str | None = None,
    ) -> str:
        """Resolve an album and return only the URL."""
        return self.resolve(artist, album, year, track, barcode).url

    def _search_passes(
        self,
        artist: str | None,
        album: str | None,
        year: int | None,
        track: str | None,
    ) -> list[tuple[str, _Step]]:
        client = self._client
        light_album = normalize_title_level(album, NormLevel.LIGHT)
        return [
            (
                "free-text search",
                lambda: client.search_once_q(
                    _join_query(artist, album), year, artist, album
                ),
            ),
            (
                "free-text search (light album)",
                lambda: client.search_once_q(
                    _join_query(artist, light_album), year, artist, album
                ),
            ),
            (
                "master search",
                lambda: client.search_once(
                    artist, album, year, track, prefer_master=True
                ),
            ),
            (
                "release search",
                lambda: client.search_once(
                    artist, album, year, track, prefer_master=False
                ),
            ),
            (
                "master search without year",
                lambda: client.search_once(
                    artist, album, None, track, prefer_master=True
                ),
            ),
            (
                "release search without year",
                lambda: client.search_once(
                    artist, album, None, track, prefer_master=False
                ),
            ),
        ]

    def _attempt(self, label: str, step: _Step) -> str | None:
        """Run one remote step. Any failure counts as a miss."""
        try:
            return step()
        except Exception:
            logger.debug("%s failed, trying next step", label, exc_info=True)
            return None

    def _accept(
        self,
        key: MatchKey,
        url: str | None,
        barcode: str | None,
        source: ResolutionSource,
    ) -> AlbumResolution | None:
        safe = sanitize_web_url(url)
        if safe is None:
            return None
        self._cache.remember_result(key, safe, barcode)
        return self._resolved(key, safe, source)

    def _fallback(
        self,
        key: MatchKey,
        artist: str | None,
        album: str | None,
        year: int | None,
        barcode: str | None,
    ) -> AlbumResolution:
        url = build_web_search_url(artist, album, year)
        self._cache.remember_result(key, url, barcode)
        return self._resolved(key, url, ResolutionSource.FALLBACK)

    @staticmethod
    def _resolved(
        key: MatchKey, url: str, source: ResolutionSource
    ) -> AlbumResolution:
        logger.debug("Resolved %s via %s: %s", key, source.label, url)
        return AlbumResolution(url=url, source=source)

    def peek(
        self,
        artist: str | None,
        album: str | None,
        year: int | None = None,
        barcode: str | None = None,
    ) -> str | None:
        """Return a cached URL without any network call.

        Uses the same key as ``resolve`` (primary artist, trimmed album).
        """
        return self._cache.peek_cached_uri(
            extract_primary_artist(artist), _strip(album), year, barcode
        )

    def resolve_batch(self, tracks: Iterable[BatchTrack]) -> list[BatchResult]:
        """Resolve many tracks, reusing results within the batch.

        Tracks without an artist or album get no URL. Repeats of an album
        already seen in this batch reuse its URL and are reported as cache
        hits. Otherwise a track is a cache hit when its peeked URL equals
        the resolved one.

        Args:
            tracks: Tracks to resolve. ``key`` and ``index`` are echoed back.

        Returns:
            One result per track, in input order.
        """
        seen: dict[tuple[str, str, int | None, str], str] = {}
        results: list[BatchResult] = []

        for track in tracks:
            artist = _strip(track.artist)
            album = _strip(track.album)
            if not artist or not album:
                results.append(BatchResult(key=track.key, index=track.index))
                continue

            code = _clean_barcode(track.barcode)
            lookup = (artist.casefold(), album.casefold(), track.year, code or "")
            if lookup in seen:
                results.append(
                    BatchResult(
                        key=track.key,
                        index=track.index,
                        url=seen[lookup],
                        cache_hit=True,
                    )
                )
                continue

            cached = self.peek(artist, album, track.year, code)
            url = self.find_album_url(artist, album, track.year, track.track, code)
            seen[lookup] = url
            results.append(
                BatchResult(
                    key=track.key,
                    index=track.index,
                    url=url,
                    cache_hit=cached is not None and cached == url,
                )
            )

        logger.debug("Resolved batch of %d tracks", len(results))
        return results

    # ============================================================================
    # CURATION
    # ============================================================================

    def save_curated_link(
        self,
        artist: str | None,
        album: str | None,
        year: int | None,
        track: str | None,
        barcode: str | None,
        url: str,
        thumb: str | None = None,
    ) -> CuratedLink:
        """Store an operator-verified link that overrides automated lookups.

        Raises:
            InvalidCatalogUrlError: If ``url`` is not a Discogs web URL.
        """
        key = self._cache.build_cache_key(
            extract_primary_artist(artist), _strip(album), year
        )
        return self._cache.save_curated_link(
            key, artist, album, year, track, barcode, url, thumb
        )

    def fetch_curation_candidates(
        self,
        artist: str | None,
        album: str | None,
        year: int | None = None,
        track: str | None = None,
        limit: int = 10,
    ) -> list[CurationCandidate]:
        """Releases an operator can pick a curated link from."""
        return self._client.fetch_curation_candidates(artist, album, year, track, limit)

    # ============================================================================
    # USER LIBRARY
    # ============================================================================

    def resolve_release_id(self, url: str | None) -> int | None:
        """Map a Discogs URL to a release id.

        A release URL yields its own id. A master URL is mapped to the
        master's main release. A master id is never returned in its place.

        Returns:
            The release id, or None for foreign or id-less URLs and for
            masters whose main release cannot be fetched.
        """
        ref = parse_catalog_ref(url)
        if ref is None:
            return None
        result_type, ident = ref
        if result_type is ResultType.RELEASE:
            return ident

        if not self._client.is_configured():
            return None
        return self._attempt_id(lambda: self._client.fetch_main_release_id(ident))

    def _attempt_id(self, step: Callable[[], int | None]) -> int | None:
        try:
            return step()
        except Exception:
            logger.debug("Master lookup failed", exc_info=True)
            return None

    def lookup_library_flags(
        self, username: str, release_ids: Iterable[int]
    ) -> dict[int, LibraryFlags]:
        """Report wantlist and collection membership for releases.

        Only the first page (up to 100 items) of each list is checked.
        """
        ids = {release_id for release_id in release_ids if release_id is not None}
        if not ids:
            return {}
        wanted = self._client.fetch_wishlist_release_ids(username)
        collected = self._client.fetch_collection_release_ids(username)
        return {
            release_id: LibraryFlags(
                in_wishlist=release_id in wanted,
                in_collection=release_id in collected,
            )
            for release_id in ids
        }

    def add_to_wantlist(self, username: str, url: str) -> bool:
        """Add the release behind a Discogs URL to a user's wantlist."""
        release_id = self.resolve_release_id(url)
        if release_id is None:
            return False
        return self._client.add_to_wantlist(username, release_id)

    def fetch_wishlist(
        self, username: str, page: int = 1, per_page: int = 50
    ) -> WishlistResult:
        """One page of a user's wantlist."""
        return self._client.fetch_wishlist(username, page, per_page)

    def fetch_profile(self) -> DiscogsProfile | None:
        """Identity of the token owner."""
        return self._client.fetch_profile()

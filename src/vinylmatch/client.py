"""Discogs REST API client wrapper."""

import logging
from typing import Any, Protocol
from urllib.parse import quote

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from vinylmatch.config import DEFAULT_API_BASE, DEFAULT_USER_AGENT, DiscogsConfig
from vinylmatch.exceptions import APIError
from vinylmatch.lib.matching import SearchExpectation, select_search_result
from vinylmatch.models.discogs import (
    BasicInformation,
    CollectionResponse,
    IdentityResponse,
    MasterResponse,
    SearchResponse,
    WantsResponse,
)
from vinylmatch.models.domain import (
    CurationCandidate,
    DiscogsProfile,
    WishlistEntry,
    WishlistResult,
)
from vinylmatch.models.enums import NormLevel, ResultType
from vinylmatch.utils.normalize import normalize_artist_level, normalize_title_level
from vinylmatch.utils.url import (
    WEB_BASE,
    absolutize_catalog_uri,
    is_valid_year,
    sanitize_web_url,
)

logger = logging.getLogger(__name__)

_SEARCH_PATH = "/database/search"
_RETRY_STATUSES = (429, 500, 502, 503, 504)
# Discogs answers these when the release is already in the wantlist.
_ALREADY_WANTED_STATUSES = frozenset({409, 422})

WANTLIST_NOTE = "Added via VinylMatch"
FORMAT_SEPARATOR = " • "

_STRUCTURED_PAGE_SIZE = 5
_QUERY_PAGE_SIZE = 10
_BARCODE_PAGE_SIZE = 5
_MAX_CURATION_CANDIDATES = 10
_MAX_WISHLIST_PAGE_SIZE = 50
_MAX_ID_PAGE_SIZE = 100


class DiscogsProtocol(Protocol):
    """Protocol for Discogs API clients.

    This protocol enables dependency injection and testing.
    Implement this protocol to create mock clients for testing.

    Every method fails soft: on a missing token, a transport error or a
    non-2xx response it returns None, an empty collection or False.
    """

    def is_configured(self) -> bool:
        """Whether a token is present."""
        ...

    def search_by_barcode(self, barcode: str) -> str | None:
        """Find a release by UPC/EAN barcode."""
        ...

    def search_once(
        self,
        artist: str | None,
        album: str | None,
        year: int | None,
        track: str | None,
        *,
        prefer_master: bool,
    ) -> str | None:
        """Run one structured search pass."""
        ...

    def search_once_q(
        self,
        query: str | None,
        year: int | None,
        expected_artist: str | None,
        expected_album: str | None,
    ) -> str | None:
        """Run one free-text search pass with tie-breaking."""
        ...

    def fetch_curation_candidates(
        self,
        artist: str | None,
        album: str | None,
        year: int | None,
        track: str | None,
        limit: int = 10,
    ) -> list[CurationCandidate]:
        """Fetch releases an operator can choose from."""
        ...

    def fetch_main_release_id(self, master_id: int) -> int | None:
        """Map a master to its main release."""
        ...

    def fetch_wishlist(
        self, username: str, page: int = 1, per_page: int = 50
    ) -> WishlistResult:
        """Fetch one page of a user's wantlist."""
        ...

    def fetch_wishlist_release_ids(
        self, username: str, per_page: int = 100
    ) -> set[int]:
        """Release ids on the first wantlist page."""
        ...

    def fetch_collection_release_ids(
        self, username: str, per_page: int = 100
    ) -> set[int]:
        """Release ids on the first collection page."""
        ...

    def fetch_profile(self) -> DiscogsProfile | None:
        """Identity of the token owner."""
        ...

    def add_to_wantlist(self, username: str, release_id: int) -> bool:
        """Add a release to a user's wantlist."""
        ...


class DiscogsClient:
    """Production Discogs API client.

    Wraps a ``requests.Session`` with retrying transport, fixed per-endpoint
    timeouts and lenient response parsing. Implements DiscogsProtocol.

    Transport failures surface internally as APIError and are caught by
    every public method, which then fails soft.
    """

    def __init__(
        self,
        config: DiscogsConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Optional API configuration. Uses defaults if not provided.
            session: Optional requests session. Creates a retrying session
                if not provided.
        """
        self._config = config or DiscogsConfig()
        self._token = self._config.token.strip() if self._config.has_token else None
        self._user_agent = (self._config.user_agent or "").strip() or DEFAULT_USER_AGENT
        self._api_base = (
            (self._config.api_base or "").strip() or DEFAULT_API_BASE
        ).rstrip("/")
        self._session = session or self._create_session()

        if self._token:
            logger.info("Discogs token configured, using %s", self._api_base)
        else:
            logger.info("No Discogs token configured, using web search fallback")

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        retry = Retry(
            total=self._config.max_retries,
            backoff_factor=0.5,
            status_forcelist=_RETRY_STATUSES,
            allowed_methods=frozenset({"GET"}),
            respect_retry_after_header=True,
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        return session

    def is_configured(self) -> bool:
        """Whether a non-blank token is present."""
        return self._token is not None

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self._user_agent,
            "Authorization": f"Discogs token={self._token}",
        }

    def _get(
        self, path: str, params: dict[str, Any] | None, timeout: float
    ) -> dict[str, Any] | None:
        """GET a JSON object from the API.

        Returns:
            The decoded body, or None for a non-200 response.

        Raises:
            APIError: If the request fails or the body is not a JSON object.
        """
        url = self._api_base + path
        try:
            response = self._session.get(
                url, params=params, headers=self._headers(), timeout=timeout
            )
        except requests.RequestException as e:
            raise APIError(f"Request to {path} failed: {e}") from e

        if response.status_code != 200:
            logger.debug("Discogs %s returned HTTP %d", path, response.status_code)
            return None

        try:
            data = response.json()
        except ValueError as e:
            raise APIError(f"Invalid JSON from {path}: {e}") from e
        if not isinstance(data, dict):
            raise APIError(f"Unexpected JSON from {path}: {type(data).__name__}")
        return data

    def _search(
        self, params: dict[str, Any], timeout: float
    ) -> SearchResponse | None:
        data = self._get(_SEARCH_PATH, params, timeout)
        if data is None:
            return None
        return SearchResponse.model_validate(data)

    @staticmethod
    def _first_url(response: SearchResponse | None) -> str | None:
        """First result with a valid web URL, in remote relevance order."""
        if response is None:
            return None
        for candidate in response.results:
            if url := absolutize_catalog_uri(candidate.uri):
                return url
        return None

    @staticmethod
    def _user_path(username: str, suffix: str) -> str:
        return f"/users/{quote(username.strip(), safe='')}{suffix}"

    # ------------------------------------------------------------------
    # Searches
    # ------------------------------------------------------------------

    def search_by_barcode(self, barcode: str) -> str | None:
        """Find a release by UPC/EAN barcode.

        Args:
            barcode: Barcode as printed on the sleeve.

        Returns:
            The first result's validated web URL, or None.
        """
        if not self.is_configured() or not barcode or not barcode.strip():
            return None
        params = {
            "barcode": barcode.strip(),
            "type": ResultType.RELEASE.value,
            "per_page": _BARCODE_PAGE_SIZE,
            "sort": "relevance",
        }
        logger.debug("Searching Discogs by barcode: %s", barcode)
        try:
            return self._first_url(self._search(params, self._config.barcode_timeout))
        except (APIError, ValidationError) as e:
            logger.debug("Discogs barcode search failed: %s", e)
            return None

    def search_once(
        self,
        artist: str | None,
        album: str | None,
        year: int | None,
        track: str | None,
        *,
        prefer_master: bool,
    ) -> str | None:
        """Run one structured search pass.

        Blank fields are omitted from the query and the year is sent only when
        it is plausible (1900 < year < 2100).

        Args:
            artist: Value for the ``artist`` filter.
            album: Value for the ``release_title`` filter.
            year: Optional release year filter.
            track: Optional ``track`` filter.
            prefer_master: Search masters if True, releases otherwise.

        Returns:
            The first result with a valid web URL, or None.
        """
        if not self.is_configured():
            return None
        result_type = ResultType.MASTER if prefer_master else ResultType.RELEASE
        params: dict[str, Any] = {
            "type": result_type.value,
            "per_page": _STRUCTURED_PAGE_SIZE,
            "sort": "relevance",
        }
        if artist and artist.strip():
            params["artist"] = artist
        if album and album.strip():
            params["release_title"] = album
        if track and track.strip():
            params["track"] = track
        if is_valid_year(year):
            params["year"] = year

        logger.debug("Structured %s search: %s", result_type, params)
        try:
            return self._first_url(self._search(params, self._config.search_timeout))
        except (APIError, ValidationError) as e:
            logger.debug("Discogs structured search failed: %s", e)
            return None

    def search_once_q(
        self,
        query: str | None,
        year: int | None,
        expected_artist: str | None,
        expected_album: str | None,
    ) -> str | None:
        """Run one free-text search pass and pick a result.

        The result is chosen by ``select_search_result``: an exact
        ``"Artist - Album"`` title first, then a containing master, then a
        containing release, then the top master/release.

        Args:
            query: Free-text query. When blank, ``"<artist> <album>"`` is used.
            year: Optional release year filter.
            expected_artist: Artist the result should credit.
            expected_album: Album title the result should carry.

        Returns:
            The chosen result's validated web URL, or None.
        """
        if not self.is_configured():
            return None
        if not (query and query.strip()):
            if expected_artist is None or expected_album is None:
                return None
            query = f"{expected_artist} {expected_album}"

        params: dict[str, Any] = {
            "q": query,
            "per_page": _QUERY_PAGE_SIZE,
            "sort": "relevance",
        }
        if is_valid_year(year):
            params["year"] = year

        logger.debug("Free-text search: '%s' (year=%s)", query, year)
        try:
            response = self._search(params, self._config.query_timeout)
        except (APIError, ValidationError) as e:
            logger.debug("Discogs free-text search failed: %s", e)
            return None
        if response is None:
            return None
        expected = SearchExpectation.build(expected_artist, expected_album)
        return select_search_result(response.results, expected)

    def fetch_curation_candidates(
        self,
        artist: str | None,
        album: str | None,
        year: int | None,
        track: str | None,
        limit: int = 10,
    ) -> list[CurationCandidate]:
        """Fetch releases an operator can choose a curated link from.

        Args:
            artist: Artist credit (heavy-normalized before searching).
            album: Album title (light-normalized before searching).
            year: Optional release year filter.
            track: Optional track title (light-normalized).
            limit: Maximum number of candidates, clamped to 1..10.

        Returns:
            Candidates with a valid web URL, in relevance order.
        """
        if not self.is_configured():
            return []
        limit = max(1, min(limit, _MAX_CURATION_CANDIDATES))

        params: dict[str, Any] = {}
        q_artist = normalize_artist_level(artist, NormLevel.HEAVY)
        q_album = normalize_title_level(album, NormLevel.LIGHT)
        q_track = normalize_title_level(track, NormLevel.LIGHT)
        if q_artist:
            params["artist"] = q_artist
        if q_album:
            params["release_title"] = q_album
        if q_track:
            params["track"] = q_track
        if is_valid_year(year):
            params["year"] = year
        params.update(
            type=ResultType.RELEASE.value,
            per_page=_MAX_CURATION_CANDIDATES,
            sort="relevance",
        )

        try:
            response = self._search(params, self._config.query_timeout)
        except (APIError, ValidationError) as e:
            logger.debug("Discogs curation search failed: %s", e)
            return []
        if response is None:
            return []

        candidates: list[CurationCandidate] = []
        for result in response.results:
            if len(candidates) >= limit:
                break
            url = absolutize_catalog_uri(result.uri)
            if url is None:
                continue
            candidates.append(
                CurationCandidate(
                    release_id=result.id,
                    title=result.title,
                    artist=result.artist,
                    year=result.year,
                    country=result.country,
                    format=FORMAT_SEPARATOR.join(result.format) or None,
                    thumb=sanitize_web_url(result.thumb),
                    url=url,
                )
            )
        return candidates

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def fetch_main_release_id(self, master_id: int) -> int | None:
        """Return the main release id of a master, or None."""
        if not self.is_configured():
            return None
        try:
            data = self._get(
                f"/masters/{master_id}", None, self._config.lookup_timeout
            )
            if data is None:
                return None
            return MasterResponse.model_validate(data).main_release
        except (APIError, ValidationError) as e:
            logger.debug("Discogs master lookup failed for %d: %s", master_id, e)
            return None

    def fetch_profile(self) -> DiscogsProfile | None:
        """Return the identity of the token owner, or None."""
        if not self.is_configured():
            return None
        try:
            data = self._get("/oauth/identity", None, self._config.lookup_timeout)
            if data is None:
                return None
            identity = IdentityResponse.model_validate(data)
        except (APIError, ValidationError) as e:
            logger.debug("Discogs profile fetch failed: %s", e)
            return None
        if not identity.username or not identity.username.strip():
            return None
        return DiscogsProfile(username=identity.username, name=identity.name)

    def fetch_wishlist(
        self, username: str, page: int = 1, per_page: int = 50
    ) -> WishlistResult:
        """Fetch one page of a user's wantlist, newest first.

        Args:
            username: Discogs username.
            page: 1-based page number (values below 1 are raised to 1).
            per_page: Page size, clamped to 1..50.

        Returns:
            The page's entries with valid URLs and the total wantlist size.
            An empty result on any failure.
        """
        if not self.is_configured() or not username or not username.strip():
            return WishlistResult()
        params = {
            "sort": "added",
            "sort_order": "desc",
            "page": max(1, page),
            "per_page": max(1, min(per_page, _MAX_WISHLIST_PAGE_SIZE)),
        }
        try:
            data = self._get(
                self._user_path(username, "/wants"),
                params,
                self._config.query_timeout,
            )
            if data is None:
                return WishlistResult()
            wants = WantsResponse.model_validate(data)
        except (APIError, ValidationError) as e:
            logger.debug("Discogs wishlist fetch failed: %s", e)
            return WishlistResult()

        entries = [
            entry
            for want in wants.wants
            if want.basic_information is not None
            and (entry := self._to_wishlist_entry(want.basic_information))
        ]
        return WishlistResult(items=entries, total=wants.pagination.items or 0)

    @staticmethod
    def _to_wishlist_entry(basic: BasicInformation) -> WishlistEntry | None:
        target = basic.uri if basic.uri and basic.uri.strip() else basic.resource_url
        url = absolutize_catalog_uri(target)
        if url is None and basic.id is not None:
            url = sanitize_web_url(f"{WEB_BASE}/release/{basic.id}")
        if url is None:
            return None
        return WishlistEntry(
            title=basic.title,
            artist=basic.artists[0].name if basic.artists else None,
            year=basic.year,
            thumb=sanitize_web_url(basic.thumb),
            url=url,
            release_id=basic.id,
        )

    def fetch_wishlist_release_ids(
        self, username: str, per_page: int = 100
    ) -> set[int]:
        """Release ids on the first page of a user's wantlist."""
        if not self.is_configured() or not username or not username.strip():
            return set()
        try:
            data = self._get(
                self._user_path(username, "/wants"),
                self._id_page_params(per_page),
                self._config.query_timeout,
            )
            if data is None:
                return set()
            wants = WantsResponse.model_validate(data)
        except (APIError, ValidationError) as e:
            logger.debug("Discogs wishlist ids fetch failed: %s", e)
            return set()
        return {
            want.basic_information.id
            for want in wants.wants
            if want.basic_information is not None
            and want.basic_information.id is not None
        }

    def fetch_collection_release_ids(
        self, username: str, per_page: int = 100
    ) -> set[int]:
        """Release ids on the first page of a user's collection."""
        if not self.is_configured() or not username or not username.strip():
            return set()
        try:
            data = self._get(
                self._user_path(username, "/collection/folders/0/releases"),
                self._id_page_params(per_page),
                self._config.query_timeout,
            )
            if data is None:
                return set()
            collection = CollectionResponse.model_validate(data)
        except (APIError, ValidationError) as e:
            logger.debug("Discogs collection ids fetch failed: %s", e)
            return set()
        return {
            release.id for release in collection.releases if release.id is not None
        }

    @staticmethod
    def _id_page_params(per_page: int) -> dict[str, Any]:
        return {
            "sort": "added",
            "sort_order": "desc",
            "page": 1,
            "per_page": max(1, min(per_page, _MAX_ID_PAGE_SIZE)),
        }

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add_to_wantlist(self, username: str, release_id: int) -> bool:
        """Add a release to a user's wantlist.

        Idempotent: a release that is already wanted counts as success.

        Returns:
            True on 2xx, 409 or 422. False otherwise, including when no
            token is configured.
        """
        if not self.is_configured() or not username or not username.strip():
            return False
        url = self._api_base + self._user_path(username, "/wants")
        headers = self._headers() | {
            "Content-Type": "application/x-www-form-urlencoded"
        }
        try:
            response = self._session.post(
                url,
                data={"release_id": release_id, "notes": WANTLIST_NOTE},
                headers=headers,
                timeout=self._config.write_timeout,
            )
        except requests.RequestException as e:
            logger.debug("Discogs wantlist add failed: %s", e)
            return False

        status = response.status_code
        if 200 <= status < 300:
            return True
        if status in _ALREADY_WANTED_STATUSES:
            logger.debug("Release %d already in wantlist (HTTP %d)", release_id, status)
            return True
        logger.warning(
            "Discogs rejected wantlist add of release %d: HTTP %d", release_id, status
        )
        return False

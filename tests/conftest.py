"""Test fixtures and configuration."""

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
from vinylmatch.client import DiscogsClient
from vinylmatch.config import CacheConfig, DiscogsConfig
from vinylmatch.models.domain import (
    CurationCandidate,
    DiscogsProfile,
    WishlistResult,
)
from vinylmatch.services.cache import CatalogCache
from vinylmatch.services.resolver import AlbumResolver


def make_response(status_code: int = 200, payload: Any = None) -> MagicMock:
    """Create a fake ``requests.Response``."""
    response = MagicMock()
    response.status_code = status_code
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload if payload is not None else {}
    return response


@pytest.fixture
def cache_config(tmp_path: Path) -> CacheConfig:
    """Cache configuration pointing at a temporary directory."""
    return CacheConfig(cache_dir=tmp_path / "discogs")


@pytest.fixture
def cache(cache_config: CacheConfig) -> CatalogCache:
    """Loaded, empty link cache."""
    store = CatalogCache(cache_config)
    store.load()
    return store


@pytest.fixture
def session() -> MagicMock:
    """Mocked requests session returning an empty search by default."""
    mock = MagicMock()
    mock.get.return_value = make_response(200, {"results": []})
    mock.post.return_value = make_response(201, {})
    return mock


@pytest.fixture
def discogs_client(session: MagicMock) -> DiscogsClient:
    """Configured client backed by the mocked session."""
    return DiscogsClient(DiscogsConfig(token="secret-token"), session=session)


@pytest.fixture
def sample_search_payload() -> dict[str, Any]:
    """Free-text search results where the master should win."""
    return {
        "pagination": {"items": 2},
        "results": [
            {
                "type": "master",
                "title": "Daft Punk - Discovery",
                "uri": "/master/555",
                "id": 555,
            },
            {
                "type": "release",
                "title": "Other - Something",
                "uri": "/release/556",
                "id": 556,
            },
        ],
    }


class MockDiscogsClient:
    """Mock Discogs client for testing.

    Search methods return the configured URLs and record every call.
    Set ``fail_with`` to make searches raise instead.
    """

    def __init__(
        self,
        configured: bool = True,
        barcode_url: str | None = None,
        q_results: list[str | None] | None = None,
        structured_results: list[str | None] | None = None,
        main_release_id: int | None = None,
        wishlist_ids: set[int] | None = None,
        collection_ids: set[int] | None = None,
        fail_with: Exception | None = None,
    ) -> None:
        self._configured = configured
        self._barcode_url = barcode_url
        self._q_results = list(q_results or [])
        self._structured_results = list(structured_results or [])
        self._main_release_id = main_release_id
        self._wishlist_ids = wishlist_ids or set()
        self._collection_ids = collection_ids or set()
        self._fail_with = fail_with
        self.barcode_calls: list[str] = []
        self.q_calls: list[tuple[str | None, int | None, str | None, str | None]] = []
        self.structured_calls: list[
            tuple[str | None, str | None, int | None, str | None, bool]
        ] = []
        self.master_calls: list[int] = []
        self.wantlist_calls: list[tuple[str, int]] = []
        self.library_calls: list[str] = []

    @property
    def network_calls(self) -> int:
        """Total number of remote searches issued."""
        return len(self.barcode_calls) + len(self.q_calls) + len(self.structured_calls)

    def is_configured(self) -> bool:
        return self._configured

    def search_by_barcode(self, barcode: str) -> str | None:
        """Mock search_by_barcode."""
        self.barcode_calls.append(barcode)
        if self._fail_with:
            raise self._fail_with
        return self._barcode_url

    def search_once(
        self,
        artist: str | None,
        album: str | None,
        year: int | None,
        track: str | None,
        *,
        prefer_master: bool,
    ) -> str | None:
        """Mock search_once; pops the next configured result."""
        self.structured_calls.append((artist, album, year, track, prefer_master))
        if self._fail_with:
            raise self._fail_with
        return self._structured_results.pop(0) if self._structured_results else None

    def search_once_q(
        self,
        query: str | None,
        year: int | None,
        expected_artist: str | None,
        expected_album: str | None,
    ) -> str | None:
        """Mock search_once_q; pops the next configured result."""
        self.q_calls.append((query, year, expected_artist, expected_album))
        if self._fail_with:
            raise self._fail_with
        return self._q_results.pop(0) if self._q_results else None

    def fetch_curation_candidates(
        self,
        artist: str | None,
        album: str | None,
        year: int | None,
        track: str | None,
        limit: int = 10,
    ) -> list[CurationCandidate]:
        return []

    def fetch_main_release_id(self, master_id: int) -> int | None:
        self.master_calls.append(master_id)
        if self._fail_with:
            raise self._fail_with
        return self._main_release_id

    def fetch_wishlist(
        self, username: str, page: int = 1, per_page: int = 50
    ) -> WishlistResult:
        return WishlistResult()

    def fetch_wishlist_release_ids(
        self, username: str, per_page: int = 100
    ) -> set[int]:
        self.library_calls.append(f"wants:{username}")
        return self._wishlist_ids

    def fetch_collection_release_ids(
        self, username: str, per_page: int = 100
    ) -> set[int]:
        self.library_calls.append(f"collection:{username}")
        return self._collection_ids

    def fetch_profile(self) -> DiscogsProfile | None:
        return DiscogsProfile(username="digger") if self._configured else None

    def add_to_wantlist(self, username: str, release_id: int) -> bool:
        self.wantlist_calls.append((username, release_id))
        return self._configured


@pytest.fixture
def mock_client() -> MockDiscogsClient:
    """Configured mock client whose searches all miss."""
    return MockDiscogsClient()


@pytest.fixture
def resolver(mock_client: MockDiscogsClient, cache: CatalogCache) -> AlbumResolver:
    """Resolver wired to the mock client and a temporary cache."""
    return AlbumResolver(mock_client, cache)

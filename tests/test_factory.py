"""Tests for factory functions and public API."""

from pathlib import Path

from vinylmatch import (
    AlbumResolver,
    CacheConfig,
    DiscogsConfig,
    create_resolver,
)


class TestCreateResolver:
    """Tests for create_resolver factory function."""

    def test_creates_unconfigured_resolver(self, tmp_path: Path) -> None:
        """Without a token the resolver runs in fallback-only mode."""
        resolver = create_resolver(cache_config=CacheConfig(cache_dir=tmp_path))

        assert isinstance(resolver, AlbumResolver)
        assert resolver.is_configured is False

    def test_creates_configured_resolver(self, tmp_path: Path) -> None:
        resolver = create_resolver(
            DiscogsConfig(token="abc"), CacheConfig(cache_dir=tmp_path)
        )

        assert resolver.is_configured is True

    def test_loads_existing_cache(self, tmp_path: Path) -> None:
        """A new resolver sees links remembered by an earlier one."""
        cache_config = CacheConfig(cache_dir=tmp_path)
        first = create_resolver(cache_config=cache_config)
        url = first.find_album_url("Daft Punk", "Discovery", 2001)

        second = create_resolver(cache_config=cache_config)

        assert second.peek("Daft Punk", "Discovery", 2001) == url


class TestPublicAPI:
    """Tests for public API exports."""

    def test_all_expected_exports_available(self) -> None:
        """All documented exports should be available."""
        import vinylmatch

        # Factory functions
        assert hasattr(vinylmatch, "create_resolver")

        # Services
        assert hasattr(vinylmatch, "AlbumResolver")
        assert hasattr(vinylmatch, "CatalogCache")

        # Models
        assert hasattr(vinylmatch, "AlbumResolution")
        assert hasattr(vinylmatch, "ResolutionSource")
        assert hasattr(vinylmatch, "CuratedLink")
        assert hasattr(vinylmatch, "MatchKey")
        assert hasattr(vinylmatch, "BatchTrack")
        assert hasattr(vinylmatch, "BatchResult")

        # Config
        assert hasattr(vinylmatch, "DiscogsConfig")
        assert hasattr(vinylmatch, "CacheConfig")

        # Exceptions
        assert hasattr(vinylmatch, "VinylMatchError")
        assert hasattr(vinylmatch, "InvalidCatalogUrlError")
        assert hasattr(vinylmatch, "NotConfiguredError")
        assert hasattr(vinylmatch, "APIError")

        # URL helpers
        assert hasattr(vinylmatch, "build_web_search_url")
        assert hasattr(vinylmatch, "sanitize_web_url")

    def test_all_matches_exports(self) -> None:
        import vinylmatch

        for name in vinylmatch.__all__:
            assert hasattr(vinylmatch, name), name

    def test_internal_not_exported(self) -> None:
        """Internal implementation details should not be exported."""
        import vinylmatch

        # Client is internal (use create_resolver instead)
        assert not hasattr(vinylmatch, "DiscogsClient")
        assert not hasattr(vinylmatch, "DiscogsProtocol")

        # API response models are internal
        assert not hasattr(vinylmatch, "SearchCandidate")
        assert not hasattr(vinylmatch, "select_search_result")

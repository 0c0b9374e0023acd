"""Tests for Discogs URL utilities."""

import pytest
from vinylmatch.models.enums import ResultType
from vinylmatch.utils.url import (
    absolutize_catalog_uri,
    build_web_search_url,
    is_valid_year,
    parse_catalog_ref,
    resolve_release_id_from_url,
    sanitize_web_url,
)


class TestSanitizeWebUrl:
    """Tests for sanitize_web_url."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://www.discogs.com/release/1",
            "https://discogs.com/master/555-Daft-Punk-Discovery",
            "http://www.discogs.com/search/?q=a+b&type=all",
            "https://i.discogs.com/thumb.jpg",
            "HTTPS://WWW.DISCOGS.COM/release/1",
            "https://www.discogs.com:443/release/1",
        ],
        ids=["www", "apex", "http", "image_subdomain", "uppercase", "explicit_port"],
    )
    def test_accepts_discogs_urls_unchanged(self, url: str) -> None:
        assert sanitize_web_url(url) == url

    def test_strips_surrounding_whitespace(self) -> None:
        assert (
            sanitize_web_url("  https://www.discogs.com/release/1 ")
            == "https://www.discogs.com/release/1"
        )

    @pytest.mark.parametrize(
        "url",
        [
            None,
            "",
            "   ",
            "javascript:alert(1)",
            "ftp://www.discogs.com/release/1",
            "https://evil.example/release/1",
            "https://discogs.com.evil.example/release/1",
            "https://notdiscogs.com/release/1",
            "https://www.discogs.com\\@evil.example/",
            "https://www.discogs.com/release/1 2",
            "https://www.discogs.com:notaport/release/1",
            "/release/1",
            "www.discogs.com/release/1",
            "https:///release/1",
        ],
        ids=[
            "none",
            "empty",
            "blank",
            "javascript",
            "ftp",
            "foreign_host",
            "suffix_attack",
            "lookalike_host",
            "backslash",
            "inner_space",
            "bad_port",
            "relative",
            "no_scheme",
            "no_host",
        ],
    )
    def test_rejects_unsafe_urls(self, url: str | None) -> None:
        assert sanitize_web_url(url) is None


class TestAbsolutizeCatalogUri:
    """Tests for absolutize_catalog_uri."""

    def test_prefixes_relative_path(self) -> None:
        assert (
            absolutize_catalog_uri("/master/555")
            == "https://www.discogs.com/master/555"
        )

    def test_keeps_absolute_discogs_url(self) -> None:
        url = "https://www.discogs.com/release/7"
        assert absolutize_catalog_uri(url) == url

    @pytest.mark.parametrize("uri", [None, "", "https://evil.example/x"])
    def test_rejects_missing_or_foreign(self, uri: str | None) -> None:
        assert absolutize_catalog_uri(uri) is None


class TestBuildWebSearchUrl:
    """Tests for build_web_search_url."""

    def test_with_year(self) -> None:
        url = build_web_search_url("Daft Punk", "Discovery", 2001)
        assert url == (
            "https://www.discogs.com/search/?q=Daft+Punk+Discovery"
            "&type=all&sort=relevance&year=2001"
        )

    @pytest.mark.parametrize("year", [None, 1900, 2100, 0])
    def test_implausible_year_omitted(self, year: int | None) -> None:
        assert "year=" not in build_web_search_url("A", "B", year)

    @pytest.mark.parametrize(
        ("artist", "album"),
        [("Sigur Rós", "( )"), (None, "Album"), ("Artist", None), (None, None)],
        ids=["unicode", "artist_only", "album_only", "empty"],
    )
    def test_always_valid(self, artist: str | None, album: str | None) -> None:
        url = build_web_search_url(artist, album, 1999)
        assert sanitize_web_url(url) == url

    def test_escapes_query(self) -> None:
        url = build_web_search_url("AC/DC", "Back & Black", None)
        assert "q=AC%2FDC+Back+%26+Black" in url


class TestReleaseIds:
    """Tests for parse_catalog_ref and resolve_release_id_from_url."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://www.discogs.com/release/123-Foo", 123),
            ("https://www.discogs.com/master/456-Test", 456),
            ("https://www.discogs.com/Daft-Punk-Discovery/release/789", 789),
            ("https://www.discogs.com/artist/1-Foo", None),
            ("https://evil.example/release/123", None),
            ("https://www.discogs.com/release/abc", None),
            (None, None),
        ],
        ids=[
            "release",
            "master",
            "legacy_slug",
            "artist_page",
            "foreign",
            "non_numeric",
            "none",
        ],
    )
    def test_resolve_release_id_from_url(
        self, url: str | None, expected: int | None
    ) -> None:
        assert resolve_release_id_from_url(url) == expected

    def test_parse_catalog_ref_types(self) -> None:
        assert parse_catalog_ref("https://www.discogs.com/master/9") == (
            ResultType.MASTER,
            9,
        )
        assert parse_catalog_ref("https://www.discogs.com/release/8") == (
            ResultType.RELEASE,
            8,
        )


class TestIsValidYear:
    """Tests for is_valid_year."""

    @pytest.mark.parametrize(
        ("year", "expected"),
        [(1901, True), (2099, True), (1900, False), (2100, False), (None, False)],
    )
    def test_bounds(self, year: int | None, expected: bool) -> None:
        assert is_valid_year(year) is expected

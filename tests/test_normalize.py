"""Tests for text normalization."""

import pytest
from vinylmatch.models.enums import NormLevel
from vinylmatch.utils.normalize import (
    canonicalize_whitespace,
    extract_primary_artist,
    fold_for_match,
    normalize_artist_level,
    normalize_title_level,
    strip_diacritics,
)


class TestExtractPrimaryArtist:
    """Tests for extract_primary_artist."""

    @pytest.mark.parametrize(
        ("credit", "expected"),
        [
            ("AC/DC feat. Someone", "AC/DC"),
            ("A & B", "A"),
            ("Simon and Garfunkel", "Simon"),
            ("Artist One, Artist Two", "Artist One"),
            ("Artist One; Artist Two", "Artist One"),
            ("Artist One / Artist Two", "Artist One"),
            ("Artist One + Artist Two", "Artist One"),
            ("Artist featuring Guest", "Artist"),
            ("Artist ft. Guest", "Artist"),
            ("Artist FEAT. Guest", "Artist"),
            ("Artist with Band", "Artist"),
            ("Artist x Other", "Artist"),
            ("  Daft Punk  ", "Daft Punk"),
        ],
        ids=[
            "feat_keeps_slash",
            "ampersand",
            "and",
            "comma",
            "semicolon",
            "spaced_slash",
            "plus",
            "featuring",
            "ft",
            "feat_uppercase",
            "with",
            "x",
            "trimmed",
        ],
    )
    def test_primary_artist(self, credit: str, expected: str) -> None:
        assert extract_primary_artist(credit) == expected

    def test_word_boundary_for_and(self) -> None:
        """'and' inside a word must not split."""
        assert extract_primary_artist("Band of Horses") == "Band of Horses"

    def test_empty_first_token_returns_trimmed_input(self) -> None:
        assert extract_primary_artist(" & Friends ") == "& Friends"

    def test_none(self) -> None:
        assert extract_primary_artist(None) is None


class TestNormalizeTitleLevel:
    """Tests for normalize_title_level."""

    def test_heavy_drops_parenthetical_remaster(self) -> None:
        result = normalize_title_level("Back In Black (Remastered)", NormLevel.HEAVY)
        assert result == "Back In Black"

    def test_raw_only_trims(self) -> None:
        result = normalize_title_level("  Café  (Deluxe)  ", NormLevel.RAW)
        assert result == "Café  (Deluxe)"

    def test_light_strips_diacritics_and_whitespace(self) -> None:
        result = normalize_title_level("  Café   del  Mar ", NormLevel.LIGHT)
        assert result == "Cafe del Mar"

    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("Abbey Road - Remastered 2019", "Abbey Road"),
            ("Rumours - Deluxe Edition", "Rumours"),
            ("OK Computer - 20th Anniversary", "OK Computer - 20th Anniversary"),
            ("Nevermind - Anniversary Edition", "Nevermind"),
            ("Album [Bonus Tracks]", "Album"),
            ("Album {Live}", "Album"),
            ("Love & Theft", "Love and Theft"),
        ],
        ids=[
            "remastered_suffix",
            "deluxe_suffix",
            "unknown_suffix_kept",
            "anniversary_suffix",
            "square_brackets",
            "curly_brackets",
            "ampersand",
        ],
    )
    def test_heavy(self, title: str, expected: str) -> None:
        assert normalize_title_level(title, NormLevel.HEAVY) == expected

    @pytest.mark.parametrize("level", list(NormLevel))
    def test_none_passthrough(self, level: NormLevel) -> None:
        assert normalize_title_level(None, level) is None


class TestNormalizeArtistLevel:
    """Tests for normalize_artist_level."""

    def test_raw_extracts_primary(self) -> None:
        result = normalize_artist_level("Beyoncé feat. Jay-Z", NormLevel.RAW)
        assert result == "Beyoncé"

    def test_heavy_strips_diacritics(self) -> None:
        assert normalize_artist_level("Beyoncé", NormLevel.HEAVY) == "Beyonce"

    def test_heavy_keeps_unspaced_slash(self) -> None:
        assert normalize_artist_level("AC/DC", NormLevel.HEAVY) == "AC/DC"

    def test_none(self) -> None:
        assert normalize_artist_level(None, NormLevel.HEAVY) is None


class TestHelpers:
    """Tests for the small text helpers."""

    def test_strip_diacritics(self) -> None:
        result = strip_diacritics("Sigur Rós – Ágætis byrjun")
        assert result == "Sigur Ros – Agætis byrjun"

    def test_canonicalize_whitespace(self) -> None:
        assert canonicalize_whitespace("a \t b\n\nc") == "a b c"

    def test_fold_for_match(self) -> None:
        assert fold_for_match("  Motörhead  ACE ") == " motorhead ace "

    @pytest.mark.parametrize(
        "func", [strip_diacritics, canonicalize_whitespace, fold_for_match]
    )
    def test_none_passthrough(self, func) -> None:
        assert func(None) is None

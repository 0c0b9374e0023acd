"""Enumerations for vinylmatch domain models."""

from enum import StrEnum


class NormLevel(StrEnum):
    """Text canonicalization levels, in increasing strength.

    - RAW: trim only
    - LIGHT: strip diacritics, collapse whitespace
    - HEAVY: LIGHT plus marketing suffixes, bracketed content and ``&``
    """

    RAW = "raw"
    LIGHT = "light"
    HEAVY = "heavy"


class ResultType(StrEnum):
    """Discogs database entity types that can be linked to."""

    MASTER = "master"
    RELEASE = "release"


class ResolutionSource(StrEnum):
    """Where a resolved URL came from.

    These are the terminal states of the resolution pipeline.
    """

    CURATED = "curated"
    BARCODE_CACHE = "barcode_cache"
    BARCODE_SEARCH = "barcode_search"
    ALBUM_CACHE = "album_cache"
    SEARCH = "search"
    FALLBACK = "fallback"

    @property
    def label(self) -> str:
        """Human-readable label for display."""
        match self:
            case ResolutionSource.CURATED:
                return "curated link"
            case ResolutionSource.BARCODE_CACHE:
                return "barcode cache"
            case ResolutionSource.BARCODE_SEARCH:
                return "barcode search"
            case ResolutionSource.ALBUM_CACHE:
                return "album cache"
            case ResolutionSource.SEARCH:
                return "Discogs search"
            case ResolutionSource.FALLBACK:
                return "web search fallback"

    @property
    def from_cache(self) -> bool:
        """Whether the URL was served without any network call."""
        return self in (
            ResolutionSource.CURATED,
            ResolutionSource.BARCODE_CACHE,
            ResolutionSource.ALBUM_CACHE,
        )

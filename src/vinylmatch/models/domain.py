"""Domain models for vinylmatch.

These are the public models that represent the inputs and output of the
library, plus the JSON snapshot formats of the link cache.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from vinylmatch.models.enums import ResolutionSource

_WS_RE = re.compile(r"\s+")


def utc_now_iso() -> str:
    """Current time as an ISO-8601 UTC timestamp (``2024-01-01T00:00:00Z``)."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def _key_part(value: str | None) -> str:
    if value is None:
        return ""
    return _WS_RE.sub(" ", value).strip().casefold()


@dataclass(frozen=True)
class MatchKey:
    """Normalized ``(artist, album, year)`` identity of a cache row.

    Case- and whitespace-insensitive: build keys with ``MatchKey.build``.
    ``str(key)`` is the form persisted in the snapshot files.

    Example:
        >>> str(MatchKey.build(" AC/DC ", "Back  In Black", 1980))
        'ac/dc|back in black|1980'
    """

    artist: str
    album: str
    year: int | None = None

    @classmethod
    def build(
        cls, artist: str | None, album: str | None, year: int | None = None
    ) -> MatchKey:
        return cls(artist=_key_part(artist), album=_key_part(album), year=year)

    def __str__(self) -> str:
        year = "" if self.year is None else str(self.year)
        return f"{self.artist}|{self.album}|{year}"


class CuratedLink(BaseModel):
    """Manually verified Discogs link for one album.

    Curated links outrank every automated lookup for their cache key and
    barcode. Serialized with camelCase keys.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    cache_key: str = Field(alias="cacheKey")
    artist: str | None = None
    album: str | None = None
    year: int | None = None
    track_title: str | None = Field(default=None, alias="trackTitle")
    barcode: str | None = None
    url: str
    thumb: str | None = None
    collected_at: str = Field(default_factory=utc_now_iso, alias="collectedAt")
    source: str = "manual"


class AlbumSnapshot(BaseModel):
    """On-disk format of the album and barcode indices."""

    model_config = ConfigDict(populate_by_name=True)

    updated_at: str = Field(default_factory=utc_now_iso, alias="updatedAt")
    entries: dict[str, str] = Field(default_factory=dict)
    barcodes: dict[str, str] = Field(default_factory=dict)


class CuratedLinksSnapshot(BaseModel):
    """On-disk format of the curated links table."""

    model_config = ConfigDict(populate_by_name=True)

    updated_at: str = Field(default_factory=utc_now_iso, alias="updatedAt")
    links: dict[str, CuratedLink] = Field(default_factory=dict)


@dataclass(frozen=True)
class AlbumResolution:
    """Outcome of resolving one album.

    Attributes:
        url: Validated Discogs URL. Always present.
        source: Pipeline stage that produced the URL.
    """

    url: str
    source: ResolutionSource

    @property
    def is_fallback(self) -> bool:
        return self.source is ResolutionSource.FALLBACK


class CurationCandidate(BaseModel):
    """Release offered to an operator when curating a link."""

    model_config = ConfigDict(frozen=True)

    release_id: int | None = None
    title: str | None = None
    artist: str | None = None
    year: int | None = None
    country: str | None = None
    format: str | None = None
    thumb: str | None = None
    url: str


class WishlistEntry(BaseModel):
    """Item of a user's Discogs wantlist."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    artist: str | None = None
    year: int | None = None
    thumb: str | None = None
    url: str
    release_id: int | None = None


class WishlistResult(BaseModel):
    """One page of a user's wantlist.

    Attributes:
        items: Entries on this page with a valid Discogs URL.
        total: Total wantlist size reported by Discogs.
    """

    model_config = ConfigDict(frozen=True)

    items: list[WishlistEntry] = Field(default_factory=list)
    total: int = 0


class LibraryFlags(BaseModel):
    """Whether a release is in the user's wantlist and/or collection."""

    model_config = ConfigDict(frozen=True)

    in_wishlist: bool = False
    in_collection: bool = False


class DiscogsProfile(BaseModel):
    """Identity of the token owner."""

    model_config = ConfigDict(frozen=True)

    username: str
    name: str | None = None


class BatchTrack(BaseModel):
    """One track of a batch resolution request.

    ``key`` and ``index`` are opaque to the resolver and echoed back so the
    caller can correlate results.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str | None = None
    index: int | None = None
    artist: str | None = None
    album: str | None = None
    year: int | None = Field(default=None, alias="releaseYear")
    track: str | None = None
    barcode: str | None = None


class BatchResult(BaseModel):
    """Result for one track of a batch request.

    Attributes:
        url: Resolved URL, or None when artist or album was missing.
        cache_hit: True when the URL came from the cache or an earlier
            track of the same batch.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str | None = None
    index: int | None = None
    url: str | None = None
    cache_hit: bool = Field(default=False, alias="cacheHit")

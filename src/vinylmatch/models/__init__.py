"""Data models for vinylmatch.

Public API:
    MatchKey - Normalized (artist, album, year) cache identity
    CuratedLink - Manually verified link override
    AlbumResolution - Resolved URL plus the pipeline stage that produced it
    ResolutionSource - Terminal states of the resolution pipeline

Internal (not exported):
    discogs.py - Models for parsing Discogs API responses
"""

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

__all__ = [
    "AlbumResolution",
    "BatchResult",
    "BatchTrack",
    "CuratedLink",
    "CurationCandidate",
    "DiscogsProfile",
    "LibraryFlags",
    "MatchKey",
    "NormLevel",
    "ResolutionSource",
    "ResultType",
    "WishlistEntry",
    "WishlistResult",
]

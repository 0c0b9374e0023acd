"""Utility functions for vinylmatch.

Available via `from vinylmatch.utils import ...` for power users.
Not re-exported at the top-level `vinylmatch` package.
"""

from vinylmatch.utils.normalize import (
    canonicalize_whitespace,
    extract_primary_artist,
    fold_for_match,
    normalize_artist_level,
    normalize_title_level,
    strip_diacritics,
)
from vinylmatch.utils.url import (
    absolutize_catalog_uri,
    build_web_search_url,
    parse_catalog_ref,
    resolve_release_id_from_url,
    sanitize_web_url,
)

__all__ = [
    "absolutize_catalog_uri",
    "build_web_search_url",
    "canonicalize_whitespace",
    "extract_primary_artist",
    "fold_for_match",
    "normalize_artist_level",
    "normalize_title_level",
    "parse_catalog_ref",
    "resolve_release_id_from_url",
    "sanitize_web_url",
    "strip_diacritics",
]

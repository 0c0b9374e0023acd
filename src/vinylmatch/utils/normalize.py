"""Text normalization for artist names and album titles.

Streaming services and Discogs disagree on credits, diacritics and
edition suffixes. These helpers canonicalize both sides before they are
used as search terms or compared against search results.

All functions are pure and total: they never raise and never perform I/O.
``None`` input yields ``None`` output.
"""

import re
import unicodedata

from vinylmatch.models.enums import NormLevel

# Artist credit separators. "AC/DC" stays intact: a slash only splits
# when surrounded by whitespace.
_ARTIST_SPLIT_RE = re.compile(
    r"\s*(?:,|;|\s+/\s+|&|\+|\band\b|\s+(?:feat\.?|featuring|ft\.?|with|x)\s+)\s*",
    re.IGNORECASE,
)
_TRAILING_FEATURE_RE = re.compile(
    r"\s+(?:feat\.|featuring|with|x)\s+.*$", re.IGNORECASE
)
_MARKETING_SUFFIX_RE = re.compile(
    r"\s*-\s*(?:remaster(?:ed)?|deluxe|expanded|anniversary|edition|remix|reissue).*$",
    re.IGNORECASE,
)
_BRACKETED_RES = (
    re.compile(r"\s*\([^)]*\)"),
    re.compile(r"\s*\[[^\]]*\]"),
    re.compile(r"\s*\{[^}]*\}"),
)
_WS_RE = re.compile(r"\s+")


def strip_diacritics(text: str | None) -> str | None:
    """Remove combining marks after canonical decomposition.

    Example:
        >>> strip_diacritics("Beyoncé")
        'Beyonce'
    """
    if text is None:
        return None
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def canonicalize_whitespace(text: str | None) -> str | None:
    """Collapse every whitespace run into a single space."""
    if text is None:
        return None
    return _WS_RE.sub(" ", text)


def fold_for_match(text: str | None) -> str | None:
    """Case- and diacritic-insensitive form used for comparisons."""
    if text is None:
        return None
    return canonicalize_whitespace(strip_diacritics(text)).lower()


def extract_primary_artist(artist: str | None) -> str | None:
    """Return the first credited artist from a collaboration string.

    Splits on ``,``, ``;``, ``" / "``, ``&``, ``+``, ``and`` and on
    ``feat./featuring/ft./with/x`` (case-insensitive). If the first token is
    empty the trimmed input is returned unchanged.

    Args:
        artist: Artist credit as reported by the streaming service.

    Returns:
        The primary artist, or None if artist is None.

    Example:
        >>> extract_primary_artist("AC/DC feat. Someone")
        'AC/DC'
        >>> extract_primary_artist("Simon & Garfunkel")
        'Simon'
    """
    if artist is None:
        return None
    primary = _ARTIST_SPLIT_RE.split(artist)[0].strip()
    return primary or artist.strip()


def _remove_marketing_suffixes(title: str) -> str:
    return _MARKETING_SUFFIX_RE.sub("", title)


def _remove_bracketed_content(title: str) -> str:
    for pattern in _BRACKETED_RES:
        title = pattern.sub("", title)
    return title


def normalize_title_level(title: str | None, level: NormLevel) -> str | None:
    """Normalize an album or track title at the given level.

    - RAW: trimmed.
    - LIGHT: diacritics stripped, whitespace collapsed.
    - HEAVY: LIGHT, then a trailing ``- Remastered/Deluxe/...`` suffix and
      everything after it removed, ``(...)``, ``[...]`` and ``{...}``
      dropped, and ``&`` spelled ``and``.

    Example:
        >>> normalize_title_level("Back In Black (Remastered)", NormLevel.HEAVY)
        'Back In Black'
    """
    if title is None:
        return None
    match level:
        case NormLevel.RAW:
            return title.strip()
        case NormLevel.LIGHT:
            return canonicalize_whitespace(strip_diacritics(title)).strip()
        case NormLevel.HEAVY:
            text = _remove_marketing_suffixes(strip_diacritics(title))
            text = _remove_bracketed_content(text.replace("&", "and"))
            return canonicalize_whitespace(text).strip()


def normalize_artist_level(artist: str | None, level: NormLevel) -> str | None:
    """Normalize an artist credit at the given level.

    The primary artist is always extracted first. LIGHT and HEAVY also strip
    diacritics, drop a trailing ``feat./featuring/with/x ...`` clause and
    spell ``&`` as ``and``.
    """
    primary = extract_primary_artist(artist)
    if primary is None:
        return None
    if level is NormLevel.RAW:
        return primary.strip()
    text = _TRAILING_FEATURE_RE.sub("", strip_diacritics(primary))
    return canonicalize_whitespace(text.replace("&", "and")).strip()

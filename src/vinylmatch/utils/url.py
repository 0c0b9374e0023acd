"""Discogs URL validation and construction.

Every URL that leaves this library, or is written to the link cache,
passes through ``sanitize_web_url``. Remote API payloads and
operator-entered curated links are both treated as untrusted.
"""

import re
from urllib.parse import quote_plus, urlsplit

from vinylmatch.models.enums import ResultType

CATALOG_DOMAIN = "discogs.com"
WEB_BASE = "https://www.discogs.com"

_ALLOWED_SCHEMES = frozenset({"http", "https"})

# Characters a browser may reinterpret (backslash as a path separator)
# or that cannot appear unescaped in a URI at all.
_UNSAFE_CHARS_RE = re.compile(r"[\s\x00-\x1f\x7f\\<>\"{}|^`]")

_REF_PATTERNS = (
    (ResultType.RELEASE, re.compile(r"/release/(\d+)")),
    (ResultType.MASTER, re.compile(r"/master/(\d+)")),
)

_MIN_YEAR = 1900
_MAX_YEAR = 2100


def is_valid_year(year: int | None) -> bool:
    """Whether a year is plausible enough to send as a search filter."""
    return isinstance(year, int) and _MIN_YEAR < year < _MAX_YEAR


def sanitize_web_url(url: str | None) -> str | None:
    """Validate a URL against the Discogs web domain.

    Accepts only http/https URLs whose host is ``discogs.com`` or one of its
    subdomains. A valid URL is returned unchanged apart from surrounding
    whitespace.

    Args:
        url: Candidate URL from any source.

    Returns:
        The URL if it is safe to store and return, otherwise None.

    Example:
        >>> sanitize_web_url("https://www.discogs.com/release/1")
        'https://www.discogs.com/release/1'
        >>> sanitize_web_url("https://discogs.com.evil.example/release/1") is None
        True
    """
    if not url or not url.strip():
        return None
    candidate = url.strip()
    if _UNSAFE_CHARS_RE.search(candidate):
        return None
    try:
        parts = urlsplit(candidate)
        # Accessing port validates it; a malformed port raises ValueError.
        _ = parts.port
    except ValueError:
        return None
    if parts.scheme.lower() not in _ALLOWED_SCHEMES:
        return None
    host = (parts.hostname or "").lower()
    if not host:
        return None
    if host != CATALOG_DOMAIN and not host.endswith("." + CATALOG_DOMAIN):
        return None
    return candidate


def absolutize_catalog_uri(uri: str | None) -> str | None:
    """Turn a Discogs API ``uri`` field into a validated web URL.

    Search results carry site-relative paths such as ``/release/123-Foo``.
    """
    if not uri or not uri.strip():
        return None
    uri = uri.strip()
    if uri.startswith("/"):
        uri = WEB_BASE + uri
    return sanitize_web_url(uri)


def build_web_search_url(
    artist: str | None, album: str | None, year: int | None = None
) -> str:
    """Build a link to the Discogs web search page.

    This is the guaranteed fallback of the resolution pipeline: it never
    fails and always yields a URL that passes ``sanitize_web_url``.

    Example:
        >>> build_web_search_url("Daft Punk", "Discovery", 2001)
        'https://www.discogs.com/search/?q=Daft+Punk+Discovery&type=all&sort=relevance&year=2001'
    """
    query = f"{artist or ''} {album or ''}".strip()
    url = f"{WEB_BASE}/search/?q={quote_plus(query)}&type=all&sort=relevance"
    if is_valid_year(year):
        url += f"&year={year}"
    return url


def parse_catalog_ref(url: str | None) -> tuple[ResultType, int] | None:
    """Extract the entity type and numeric id from a Discogs web URL.

    ``/release/<id>`` takes precedence over ``/master/<id>``.

    Returns:
        ``(ResultType, id)``, or None for foreign, malformed or id-less URLs.
    """
    safe = sanitize_web_url(url)
    if safe is None:
        return None
    lowered = safe.lower()
    for result_type, pattern in _REF_PATTERNS:
        if match := pattern.search(lowered):
            return result_type, int(match.group(1))
    return None


def resolve_release_id_from_url(url: str | None) -> int | None:
    """Extract the integer following ``/release/`` or ``/master/``.

    This is a pure string operation. Use ``AlbumResolver.resolve_release_id``
    to map a master to its main release.

    Example:
        >>> resolve_release_id_from_url("https://www.discogs.com/master/456-Test")
        456
    """
    ref = parse_catalog_ref(url)
    return ref[1] if ref else None

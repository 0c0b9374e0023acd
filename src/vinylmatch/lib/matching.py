"""Selection of the best Discogs search result for an expected album.

Free-text searches return masters, releases, artists and labels in the
remote engine's relevance order. This module decides which of them, if
any, to link to.

Selection order:
    1. A result titled ``"<artist> - <album>"`` whose sides equal the
       expected artist and the raw expected album (after folding) wins
       immediately, whatever its type or rank.
    2. The first master whose folded title contains both the expected
       artist and the lightly normalized expected album.
    3. The first release meeting the same containment test.
    4. The first master or release at all.

Titles that themselves contain ``" - "`` are split at the first
occurrence, so ``"Jay - Z - Album"`` compares ``"jay"`` as the artist.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from vinylmatch.models.discogs import SearchCandidate
from vinylmatch.models.enums import NormLevel
from vinylmatch.utils.normalize import fold_for_match, normalize_title_level
from vinylmatch.utils.url import absolutize_catalog_uri

logger = logging.getLogger(__name__)

_TITLE_SEPARATOR = " - "


@dataclass(frozen=True)
class SearchExpectation:
    """What a free-text search is expected to find.

    Attributes:
        artist: Folded expected artist, or None to accept any artist.
        album_raw: Folded raw expected album, used for exact title matches.
        album_light: Folded lightly normalized album, used for containment.
    """

    artist: str | None
    album_raw: str | None
    album_light: str | None

    @classmethod
    def build(cls, artist: str | None, album: str | None) -> "SearchExpectation":
        return cls(
            artist=fold_for_match(artist),
            album_raw=fold_for_match(album),
            album_light=fold_for_match(normalize_title_level(album, NormLevel.LIGHT)),
        )

    def is_exact_title(self, title: str) -> bool:
        """Whether ``title`` is exactly ``"<artist> - <album>"``."""
        if self.artist is None or self.album_raw is None:
            return False
        sep = title.find(_TITLE_SEPARATOR)
        if sep <= 0:
            return False
        title_artist = fold_for_match(title[:sep])
        title_album = fold_for_match(title[sep + len(_TITLE_SEPARATOR) :])
        return title_artist == self.artist and title_album == self.album_raw

    def is_contained_in(self, title: str) -> bool:
        """Whether the folded title contains the artist and the album."""
        folded = fold_for_match(title) or ""
        artist_ok = self.artist is None or self.artist in folded
        album_ok = self.album_light is None or self.album_light in folded
        return artist_ok and album_ok


def select_search_result(
    candidates: Iterable[SearchCandidate], expected: SearchExpectation
) -> str | None:
    """Pick the URL to link to from free-text search results.

    Results whose ``uri`` is missing or fails domain validation are skipped
    entirely.

    Args:
        candidates: Search results in remote relevance order.
        expected: Expected artist and album.

    Returns:
        The validated web URL of the chosen result, or None if no master or
        release result has a valid URL.
    """
    master_url: str | None = None
    release_url: str | None = None
    top_url: str | None = None

    for candidate in candidates:
        url = absolutize_catalog_uri(candidate.uri)
        if url is None:
            continue
        title = candidate.title or ""

        if candidate.is_linkable and top_url is None:
            top_url = url

        if expected.is_exact_title(title):
            logger.debug("Exact title match: '%s' -> %s", title, url)
            return url

        if expected.is_contained_in(title):
            if candidate.is_master and master_url is None:
                master_url = url
            elif candidate.is_release and release_url is None:
                release_url = url

    return master_url or release_url or top_url

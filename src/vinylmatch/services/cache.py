"""Persistent Discogs link cache backed by JSON snapshots."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from vinylmatch.config import CacheConfig
from vinylmatch.exceptions import InvalidCatalogUrlError
from vinylmatch.models.domain import (
    AlbumSnapshot,
    CuratedLink,
    CuratedLinksSnapshot,
    MatchKey,
)
from vinylmatch.utils.url import sanitize_web_url

logger = logging.getLogger(__name__)

_SnapshotT = TypeVar("_SnapshotT", bound=BaseModel)


def _clean_barcode(barcode: str | None) -> str | None:
    if barcode is None or not barcode.strip():
        return None
    return barcode.strip()


class CatalogCache:
    """Durable cache of resolved Discogs URLs.

    Holds three indices:

    - album index: ``MatchKey`` string to URL
    - barcode index: barcode to URL
    - curated links: manual overrides, indexed by key and by barcode

    Every URL is validated with ``sanitize_web_url`` before it is stored.
    Reads are plain dict lookups and never block. Writes replace the whole
    snapshot file atomically (temp file + rename) while holding a single
    lock, so concurrent writers never interleave partial files.

    The cache is per process. Two processes pointed at the same directory
    overwrite each other's snapshots.

    Usage::

        cache = CatalogCache(CacheConfig(cache_dir=Path("cache/discogs")))
        cache.load()
        url = cache.peek_cached_uri("Daft Punk", "Discovery", 2001, None)
    """

    def __init__(self, config: CacheConfig | None = None) -> None:
        self._config = config or CacheConfig()
        self._entries: dict[str, str] = {}
        self._barcodes: dict[str, str] = {}
        self._curated: dict[str, CuratedLink] = {}
        self._curated_by_barcode: dict[str, CuratedLink] = {}
        self._write_lock = threading.Lock()

    @property
    def cache_dir(self) -> Path:
        return self._config.cache_dir

    def load(self) -> None:
        """Load both snapshot files.

        Missing files are normal on first run. Unreadable or malformed files
        are logged and ignored; the next write replaces them.
        """
        albums = self._read_snapshot(self._config.album_path, AlbumSnapshot)
        if albums is not None:
            self._entries.update(
                {k: v for k, v in albums.entries.items() if sanitize_web_url(v)}
            )
            self._barcodes.update(
                {k: v for k, v in albums.barcodes.items() if sanitize_web_url(v)}
            )
            logger.info(
                "Loaded %d album and %d barcode links from %s",
                len(self._entries),
                len(self._barcodes),
                self._config.album_path,
            )

        curated = self._read_snapshot(self._config.curated_path, CuratedLinksSnapshot)
        if curated is not None:
            for key, link in curated.links.items():
                if sanitize_web_url(link.url) is None:
                    logger.warning("Ignoring curated link with invalid URL: %s", key)
                    continue
                self._index_curated(key, link)
            logger.info(
                "Loaded %d curated links from %s",
                len(self._curated),
                self._config.curated_path,
            )

    def _read_snapshot(
        self, path: Path, model: type[_SnapshotT]
    ) -> _SnapshotT | None:
        if not path.exists():
            logger.debug("No cache snapshot at %s", path)
            return None
        try:
            return model.model_validate_json(path.read_bytes())
        except (OSError, ValidationError):
            logger.warning(
                "Ignoring unreadable cache snapshot %s", path, exc_info=True
            )
            return None

    def _index_curated(self, key: str, link: CuratedLink) -> None:
        previous = self._curated.get(key)
        if previous is not None and (old := _clean_barcode(previous.barcode)):
            if self._curated_by_barcode.get(old) is previous:
                del self._curated_by_barcode[old]
        self._curated[key] = link
        if barcode := _clean_barcode(link.barcode):
            self._curated_by_barcode[barcode] = link

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @staticmethod
    def build_cache_key(
        artist: str | None, album: str | None, year: int | None = None
    ) -> MatchKey:
        """Build the album index key (trimmed, whitespace collapsed, casefolded)."""
        return MatchKey.build(artist, album, year)

    def peek_cached_uri(
        self,
        artist: str | None,
        album: str | None,
        year: int | None = None,
        barcode: str | None = None,
    ) -> str | None:
        """Look up a cached URL without touching the network.

        A non-blank barcode is looked up in the barcode index first. On a
        miss the album index is consulted with a key built from the inputs.
        """
        if code := _clean_barcode(barcode):
            if (url := self._barcodes.get(code)) is not None:
                return url
        return self._entries.get(str(self.build_cache_key(artist, album, year)))

    def get_album_url(self, key: MatchKey) -> str | None:
        """Album index lookup by key."""
        return self._entries.get(str(key))

    def get_barcode_url(self, barcode: str | None) -> str | None:
        """Barcode index lookup."""
        code = _clean_barcode(barcode)
        return self._barcodes.get(code) if code else None

    def find_curated_link(
        self, cache_key: MatchKey | str, barcode: str | None = None
    ) -> str | None:
        """Look up a curated URL, by barcode first, then by key."""
        if code := _clean_barcode(barcode):
            link = self._curated_by_barcode.get(code)
            if link is not None:
                return link.url
        link = self._curated.get(str(cache_key))
        return link.url if link is not None else None

    def get_curated_links(self) -> list[CuratedLink]:
        """All curated links, in insertion order."""
        return list(self._curated.values())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def remember_result(
        self, cache_key: MatchKey | str, url: str | None, barcode: str | None = None
    ) -> bool:
        """Store a resolved URL under its key and barcode, then persist.

        Args:
            cache_key: Album index key.
            url: URL to store. Revalidated; invalid URLs are dropped.
            barcode: Optional barcode to index the URL under as well.

        Returns:
            True if the URL was stored.
        """
        safe = sanitize_web_url(url)
        if safe is None:
            logger.debug("Not caching invalid URL for %s: %r", cache_key, url)
            return False
        with self._write_lock:
            self._entries[str(cache_key)] = safe
            if code := _clean_barcode(barcode):
                self._barcodes[code] = safe
            self._persist_albums()
        return True

    def save_curated_link(
        self,
        cache_key: MatchKey | str,
        artist: str | None,
        album: str | None,
        year: int | None,
        track_title: str | None,
        barcode: str | None,
        url: str,
        thumb: str | None = None,
    ) -> CuratedLink:
        """Store a manually verified link for an album.

        The link is also written to the album and barcode indices so plain
        cache lookups see it immediately.

        Args:
            cache_key: Album index key the link overrides.
            artist: Artist credit, for reference.
            album: Album title.
            year: Optional release year.
            track_title: Track the operator curated from, for reference.
            barcode: Optional barcode.
            url: Discogs URL chosen by the operator.
            thumb: Optional cover thumbnail URL.

        Returns:
            The stored CuratedLink.

        Raises:
            InvalidCatalogUrlError: If ``url`` is not a Discogs web URL.
        """
        safe = sanitize_web_url(url)
        if safe is None:
            raise InvalidCatalogUrlError(f"Not a Discogs URL: {url!r}")

        key = str(cache_key)
        link = CuratedLink(
            cache_key=key,
            artist=artist,
            album=album,
            year=year,
            track_title=track_title,
            barcode=_clean_barcode(barcode),
            url=safe,
            thumb=sanitize_web_url(thumb),
        )
        with self._write_lock:
            self._index_curated(key, link)
            self._persist_curated()
        self.remember_result(key, safe, barcode)
        logger.info("Saved curated link %s -> %s", key, safe)
        return link

    # ------------------------------------------------------------------
    # Persistence (callers hold _write_lock)
    # ------------------------------------------------------------------

    def _persist_albums(self) -> None:
        snapshot = AlbumSnapshot(
            entries=self._entries.copy(), barcodes=self._barcodes.copy()
        )
        self._write_snapshot(self._config.album_path, snapshot)

    def _persist_curated(self) -> None:
        snapshot = CuratedLinksSnapshot(links=self._curated.copy())
        self._write_snapshot(self._config.curated_path, snapshot)

    def _write_snapshot(self, path: Path, snapshot: BaseModel) -> None:
        """Write a snapshot atomically. Failures are logged, not raised."""
        tmp_path = path.with_suffix(f"{path.suffix}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                snapshot.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
            )
            tmp_path.replace(path)
        except OSError:
            logger.warning("Failed to write cache snapshot %s", path, exc_info=True)

    def __len__(self) -> int:
        return len(self._entries)

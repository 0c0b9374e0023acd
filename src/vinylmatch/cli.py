#!/usr/bin/env python3
"""Command-line interface for vinylmatch.

This CLI is primarily for debugging and curating links.
For production use, import vinylmatch as a library.
"""

import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from vinylmatch import create_resolver
from vinylmatch.config import CacheConfig, DiscogsConfig
from vinylmatch.exceptions import NotConfiguredError, VinylMatchError
from vinylmatch.models.domain import BatchResult, BatchTrack, CurationCandidate
from vinylmatch.services.resolver import AlbumResolver
from vinylmatch.settings import get_settings

logger = logging.getLogger("vinylmatch")


def setup_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Configure logging with Rich handler.

    Args:
        verbose: If True, set log level to DEBUG. Otherwise use the
            configured level (WARNING by default).
        console: Optional Console instance to use for RichHandler.
    """
    level = logging.DEBUG if verbose else get_settings().log_level

    # Clear existing handlers to allow reconfiguration
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = RichHandler(
        rich_tracebacks=True,
        show_path=False,
        console=console,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)


def build_resolver(ctx: click.Context) -> AlbumResolver:
    """Create the resolver from global options and settings."""
    settings = get_settings()
    token = ctx.obj.get("token") or settings.discogs_token
    cache_dir = ctx.obj.get("cache_dir") or settings.cache_dir
    config = DiscogsConfig(
        token=token,
        user_agent=settings.discogs_user_agent,
        api_base=settings.discogs_api_base,
    )
    return create_resolver(config, CacheConfig(cache_dir=cache_dir))


def require_configured(resolver: AlbumResolver) -> None:
    """Raise NotConfiguredError unless a Discogs token is configured."""
    if not resolver.is_configured:
        raise NotConfiguredError(
            "A Discogs token is required (--token or DISCOGS_TOKEN)"
        )


def load_batch_file(path: Path) -> list[BatchTrack]:
    """Read tracks from ``{"tracks": [...]}`` or a bare JSON list."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Cannot read {path}: {e}") from e
    if isinstance(data, dict):
        data = data.get("tracks")
    if not isinstance(data, list):
        raise click.ClickException(
            f"{path} must contain a list of tracks or {{\"tracks\": [...]}}"
        )
    try:
        return [BatchTrack.model_validate(item) for item in data]
    except ValidationError as e:
        raise click.ClickException(f"Invalid track in {path}: {e}") from e


def dump_json(data: object) -> None:
    json.dump(data, sys.stdout, indent=2, ensure_ascii=False, default=str)
    sys.stdout.write("\n")


def print_batch_table(
    console: Console, tracks: list[BatchTrack], results: list[BatchResult]
) -> None:
    table = Table(title="Batch Resolution", show_lines=False)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Artist", style="cyan")
    table.add_column("Album")
    table.add_column("Cached", justify="center")
    table.add_column("URL", overflow="fold")

    for i, (track, result) in enumerate(zip(tracks, results, strict=True), 1):
        table.add_row(
            str(i),
            track.artist or "[dim]-[/dim]",
            track.album or "[dim]-[/dim]",
            "[green]yes[/green]" if result.cache_hit else "no",
            result.url or "[dim](skipped)[/dim]",
        )
    console.print(table)


def print_candidates(console: Console, candidates: list[CurationCandidate]) -> None:
    table = Table(title="Curation Candidates")
    table.add_column("Release", style="dim", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Year", justify="right")
    table.add_column("Country")
    table.add_column("Format")
    table.add_column("URL", overflow="fold")

    for candidate in candidates:
        table.add_row(
            str(candidate.release_id or ""),
            candidate.title or "",
            str(candidate.year or ""),
            candidate.country or "",
            candidate.format or "",
            candidate.url,
        )
    console.print(table)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Link cache directory (default: VINYLMATCH_CACHE_DIR or cache/discogs).",
)
@click.option(
    "--token",
    envvar="DISCOGS_TOKEN",
    help="Discogs personal access token.",
)
@click.pass_context
def main(
    ctx: click.Context, verbose: bool, cache_dir: Path | None, token: str | None
) -> None:
    """Resolve streaming albums to Discogs links."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["cache_dir"] = cache_dir
    ctx.obj["token"] = token
    setup_logging(verbose=verbose)


@main.command(name="resolve")
@click.argument("artist")
@click.argument("album")
@click.option("--year", type=int, help="Release year.")
@click.option("--track", help="Track title.")
@click.option("--barcode", help="UPC/EAN barcode.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def resolve_cmd(
    ctx: click.Context,
    artist: str,
    album: str,
    year: int | None,
    track: str | None,
    barcode: str | None,
    as_json: bool,
) -> None:
    """Resolve an album to a Discogs URL.

    \b
    Examples:
      vinylmatch resolve "Daft Punk" "Discovery" --year 2001
      vinylmatch resolve "AC/DC" "Back In Black" --barcode 075678164422
    """
    console = Console()
    resolver = build_resolver(ctx)
    resolution = resolver.resolve(artist, album, year, track, barcode)

    if as_json:
        dump_json({"url": resolution.url, "source": resolution.source.value})
        return
    click.echo(resolution.url)
    console.print(f"[dim]via {resolution.source.label}[/dim]")


@main.command(name="peek")
@click.argument("artist")
@click.argument("album")
@click.option("--year", type=int, help="Release year.")
@click.option("--barcode", help="UPC/EAN barcode.")
@click.pass_context
def peek_cmd(
    ctx: click.Context,
    artist: str,
    album: str,
    year: int | None,
    barcode: str | None,
) -> None:
    """Look up a cached URL without any network call.

    Exits with status 1 when nothing is cached.
    """
    resolver = build_resolver(ctx)
    url = resolver.peek(artist, album, year, barcode)
    if url is None:
        Console(stderr=True).print("[yellow]Not cached[/yellow]")
        ctx.exit(1)
    click.echo(url)


@main.command(name="batch")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def batch_cmd(ctx: click.Context, file: Path, as_json: bool) -> None:
    """Resolve every track in a JSON file.

    FILE holds a list of tracks or an object with a "tracks" list. Each track
    has artist, album and optionally releaseYear, track, barcode, key, index.
    """
    tracks = load_batch_file(file)
    resolver = build_resolver(ctx)
    results = resolver.resolve_batch(tracks)

    if as_json:
        dump_json({"results": [r.model_dump(by_alias=True) for r in results]})
        return
    print_batch_table(Console(), tracks, results)


@main.command(name="curate")
@click.argument("artist")
@click.argument("album")
@click.argument("url")
@click.option("--year", type=int, help="Release year.")
@click.option("--track", help="Track title the link was curated from.")
@click.option("--barcode", help="UPC/EAN barcode.")
@click.option("--thumb", help="Cover thumbnail URL.")
@click.pass_context
def curate_cmd(
    ctx: click.Context,
    artist: str,
    album: str,
    url: str,
    year: int | None,
    track: str | None,
    barcode: str | None,
    thumb: str | None,
) -> None:
    """Save a curated link that overrides automated lookups."""
    console = Console()
    resolver = build_resolver(ctx)
    try:
        link = resolver.save_curated_link(
            artist, album, year, track, barcode, url, thumb
        )
    except VinylMatchError as e:
        logger.error(e.message)
        raise click.ClickException(e.message) from e
    console.print(f"[green]Saved[/green] {link.cache_key} -> {link.url}")


@main.command(name="candidates")
@click.argument("artist")
@click.argument("album")
@click.option("--year", type=int, help="Release year.")
@click.option("--track", help="Track title.")
@click.option("--limit", type=click.IntRange(1, 10), default=5, show_default=True)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def candidates_cmd(
    ctx: click.Context,
    artist: str,
    album: str,
    year: int | None,
    track: str | None,
    limit: int,
    as_json: bool,
) -> None:
    """List Discogs releases to choose a curated link from."""
    console = Console()
    resolver = build_resolver(ctx)
    try:
        require_configured(resolver)
    except VinylMatchError as e:
        raise click.ClickException(e.message) from e
    candidates = resolver.fetch_curation_candidates(
        artist, album, year, track, limit
    )
    if as_json:
        dump_json([c.model_dump() for c in candidates])
        return
    if not candidates:
        console.print("[yellow]No candidates found[/yellow]")
        return
    print_candidates(console, candidates)


@main.command(name="release-id")
@click.argument("url")
@click.pass_context
def release_id_cmd(ctx: click.Context, url: str) -> None:
    """Print the release id behind a Discogs release or master URL."""
    resolver = build_resolver(ctx)
    release_id = resolver.resolve_release_id(url)
    if release_id is None:
        raise click.ClickException(f"No release id in {url}")
    click.echo(str(release_id))


@main.command(name="wishlist")
@click.argument("username")
@click.option("--page", type=click.IntRange(min=1), default=1, show_default=True)
@click.option(
    "--per-page", type=click.IntRange(1, 50), default=25, show_default=True
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def wishlist_cmd(
    ctx: click.Context, username: str, page: int, per_page: int, as_json: bool
) -> None:
    """Show a page of a user's Discogs wantlist."""
    console = Console()
    resolver = build_resolver(ctx)
    try:
        require_configured(resolver)
    except VinylMatchError as e:
        raise click.ClickException(e.message) from e
    result = resolver.fetch_wishlist(username, page, per_page)

    if as_json:
        dump_json(result.model_dump())
        return

    table = Table(title=f"Wantlist of {username} ({result.total} items)")
    table.add_column("Artist", style="cyan")
    table.add_column("Title")
    table.add_column("Year", justify="right")
    table.add_column("URL", overflow="fold")
    for entry in result.items:
        table.add_row(
            entry.artist or "", entry.title or "", str(entry.year or ""), entry.url
        )
    console.print(table)


if __name__ == "__main__":
    main()

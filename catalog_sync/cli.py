"""
Command-line interface for catalog-sync.

This module implements the CLI using Click, with rich-click for the
help output colors.

Commands:
    catalog-sync                      Sync every configured catalog
    catalog-sync --config <file>      Sync using an explicit config file
    catalog-sync stats                Show visitor and play counters

Without a config file the catalogs are the code-configured defaults:
data/playlists.json, root keys "quarterly" and "genres".

Exit Codes:
    0   Success (individual playlist failures do not change this)
    1   Primary catalog could not be read, parsed or written,
        or the configuration is invalid
    2   Realtime database error (stats command)
    130 Interrupted by user
"""

import sys
from pathlib import Path
from typing import Optional

import rich_click as click

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.MAX_WIDTH = 100

from catalog_sync import __version__
from catalog_sync.core import (
    CatalogSyncError,
    Config,
    ConfigError,
    StatsError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from catalog_sync.stats import StatsClient
from catalog_sync.stats.counters import VISITORS_PATH
from catalog_sync.sync import CatalogSyncer, SyncReport
from catalog_sync.youtube import YtDlpTrackLister

logger = get_logger(__name__)


@click.group(invoke_without_command=True)
@click.option(
    "--config", "config_path",
    type=click.Path(path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml if present)"
)
@click.option(
    "--no-progress",
    is_flag=True,
    help="Hide progress bars"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    no_progress: bool,
    version: bool
) -> None:
    """
    catalog-sync: Refresh playlist tracklists in JSON catalogs.

    Reads each configured catalog, fetches the current video titles of
    every playlist with yt-dlp, and writes the updated tracklists back.
    Playlists that fail to fetch, or come back empty, keep their tracks.

    \b
    USAGE:
        catalog-sync                         # Sync configured catalogs
        catalog-sync --config sync.yaml      # Use another config file
        catalog-sync stats                   # Show play counters
    """
    if version:
        click.echo(f"catalog-sync {__version__}")
        ctx.exit(0)

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path

    if ctx.invoked_subcommand is None:
        _run_sync(config_path, show_progress=not no_progress)


@cli.command()
@click.option(
    "--top",
    type=click.IntRange(min=1),
    default=3,
    show_default=True,
    help="Number of top playlists to show"
)
@click.pass_context
def stats(ctx: click.Context, top: int) -> None:
    """Show visitor and play counters from the realtime database."""
    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    if config.stats.database_url is None:
        click.echo("Configuration error: 'stats.database_url' is not set", err=True)
        sys.exit(1)

    client = StatsClient(config.stats.database_url, timeout=config.stats.timeout)
    try:
        visitors = client.get_value(VISITORS_PATH) or 0
        music = client.init_music_stats(limit=top)
    except StatsError as e:
        click.echo(f"Stats error: {e.message}", err=True)
        sys.exit(2)

    click.echo(f"Visitors:    {visitors:,}")
    click.echo(f"Total plays: {music.total_plays:,}")
    for rank, playlist in enumerate(music.top_playlists, start=1):
        click.echo(f"  #{rank} {playlist.name} ({playlist.plays:,} plays)")


def _run_sync(config_path: Optional[Path], show_progress: bool) -> None:
    """
    Execute the sync workflow.

    1. Load configuration
    2. Set up logging
    3. Sync every catalog job in order
    4. Report results and choose the exit code

    Raises:
        SystemExit: On fatal errors (with appropriate exit code).
    """
    try:
        config = load_config(config_path)

        setup_logging(config.logging.directory)
        logger.info("=== YouTube Playlist Sync ===")

        syncer = _create_syncer(config, show_progress)
        reports = syncer.sync_all(config.catalogs)

        _print_summary(reports)

        if not reports[0].ok:
            logger.error(f"Primary catalog failed: {reports[0].error}")
            sys.exit(1)

        logger.info("Done!")

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    except CatalogSyncError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        sys.exit(1)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        sys.exit(130)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)

    finally:
        shutdown_logging()


def _create_syncer(config: Config, show_progress: bool) -> CatalogSyncer:
    lister = YtDlpTrackLister.from_config(config.tracklister)
    return CatalogSyncer(lister, show_progress=show_progress)


def _print_summary(reports: list[SyncReport]) -> None:
    """Log one summary line per catalog."""
    logger.info("--- Summary ---")
    for report in reports:
        if report.ok:
            logger.info(report.summary())
        else:
            logger.error(report.summary())


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `catalog-sync` from the command line.
    """
    cli(obj={})


if __name__ == "__main__":
    main()

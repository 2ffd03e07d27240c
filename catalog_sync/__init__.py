"""
catalog-sync: keep a JSON playlist catalog in step with YouTube.

This package refreshes the tracklists of a JSON catalog of playlists by
asking yt-dlp for the current video titles of each playlist, and keeps
visitor and play counters in a hosted realtime database.

Catalog format:
    Any nesting of objects (and arrays). Every object with an "id" and a
    "tracks" array is a playlist; everything else is a group.

        {
          "quarterly": {
            "q1": {"id": "PLxxxx", "name": "Q1 2025", "tracks": ["Song A"]}
          },
          "genres": {
            "jazz": {"id": "PLyyyy", "tracks": []}
          }
        }

Sync policy:
    - Fetch failed      -> existing tracks kept, failure reported
    - Empty result      -> existing tracks kept, warning reported
    - Titles returned   -> tracks replaced wholesale, in playlist order
    The catalog is written back after every run that managed to load it.

Modules:
    core/       - Configuration, logging, exceptions
    catalog/    - Catalog node model, load/save/traverse
    youtube/    - yt-dlp track lister
    sync/       - CatalogSyncer and sync reports
    stats/      - Realtime database counters
    cli.py      - Command-line interface

Usage:
    Command Line:
        catalog-sync
        catalog-sync --config config.yaml
        catalog-sync stats

    Python API:
        from catalog_sync import CatalogSyncer, YtDlpTrackLister

        syncer = CatalogSyncer(YtDlpTrackLister(timeout=120))
        reports = syncer.sync_all([(Path("data/playlists.json"), ["quarterly", "genres"])])

Dependencies:
    - yt-dlp: playlist title extraction
    - click / rich-click: CLI
    - tqdm: progress bars
    - pyyaml: configuration file parsing
    - requests: realtime database REST API
"""

__version__ = "0.1.0"
__author__ = "catalog-sync"
__license__ = "MIT"

from catalog_sync.catalog import CatalogDocument, PlaylistEntry, load_document, save_document
from catalog_sync.core import (
    CatalogJob,
    CatalogParseError,
    CatalogReadError,
    CatalogSyncError,
    CatalogWriteError,
    Config,
    ConfigError,
    FetchError,
    StatsError,
    get_logger,
    load_config,
    setup_logging,
)
from catalog_sync.sync import CatalogSyncer, SyncReport, TrackUpdateOutcome
from catalog_sync.youtube import TrackLister, YtDlpTrackLister

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "CatalogJob",
    "load_config",
    "setup_logging",
    "get_logger",
    # Exceptions
    "CatalogSyncError",
    "ConfigError",
    "CatalogReadError",
    "CatalogParseError",
    "CatalogWriteError",
    "FetchError",
    "StatsError",
    # Catalog
    "CatalogDocument",
    "PlaylistEntry",
    "load_document",
    "save_document",
    # Sync
    "CatalogSyncer",
    "SyncReport",
    "TrackUpdateOutcome",
    "TrackLister",
    "YtDlpTrackLister",
]

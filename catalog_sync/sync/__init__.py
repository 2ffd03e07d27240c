"""
Catalog synchronization.

Usage:
    from catalog_sync.sync import CatalogSyncer
    from catalog_sync.youtube import YtDlpTrackLister

    syncer = CatalogSyncer(YtDlpTrackLister())
    report = syncer.sync_document(Path("data/playlists.json"), ["quarterly", "genres"])
    print(report.summary())
"""

from catalog_sync.sync.models import EntryResult, SyncReport, TrackUpdateOutcome
from catalog_sync.sync.syncer import CatalogSyncer

__all__ = [
    "CatalogSyncer",
    "EntryResult",
    "SyncReport",
    "TrackUpdateOutcome",
]

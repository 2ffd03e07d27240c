"""
YouTube track listing.

Usage:
    from catalog_sync.youtube import YtDlpTrackLister

    lister = YtDlpTrackLister(timeout=120)
    titles = lister.list_tracks("PLxxxx")
"""

from catalog_sync.youtube.lister import (
    TrackLister,
    YtDlpTrackLister,
    parse_titles,
)

__all__ = [
    "TrackLister",
    "YtDlpTrackLister",
    "parse_titles",
]

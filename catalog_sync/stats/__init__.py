"""
Visitor and play counters kept in a hosted realtime database.
"""

from catalog_sync.stats.counters import (
    MusicStats,
    PlaylistPlays,
    StatsClient,
    sanitize_key,
)

__all__ = [
    "MusicStats",
    "PlaylistPlays",
    "StatsClient",
    "sanitize_key",
]

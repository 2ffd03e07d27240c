"""
Result models for catalog synchronization.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class TrackUpdateOutcome(Enum):
    """
    What happened to one playlist entry during a sync.

    UNCHANGED:    fetch failed, existing tracks kept
    EMPTY_RESULT: fetch returned no titles, existing tracks kept (warning)
    UPDATED:      tracks replaced with the fetched titles
    """
    UNCHANGED = "unchanged"
    EMPTY_RESULT = "empty_result"
    UPDATED = "updated"


@dataclass(frozen=True)
class EntryResult:
    """
    Outcome of refreshing one playlist entry.

    Attributes:
        path: Dotted path of the entry in the document (e.g. "quarterly.q1").
        playlist_id: The entry's external id.
        outcome: What the syncer did with the entry.
        old_count: Number of tracks before the refresh.
        new_count: Number of tracks after the refresh.
        error: Fetch error message for UNCHANGED outcomes.
    """
    path: str
    playlist_id: Any
    outcome: TrackUpdateOutcome
    old_count: int
    new_count: int
    error: str | None = None


@dataclass
class SyncReport:
    """
    Summary of syncing one catalog document.

    Attributes:
        path: The catalog file.
        root_keys: Root keys that were requested.
        loaded: True if the document was read and parsed.
        saved: True if the document was written back.
        error: Load or write error message, if any.
        entries: Per-entry results in visitation order.
    """
    path: Path
    root_keys: tuple[str, ...]
    loaded: bool = False
    saved: bool = False
    error: str | None = None
    entries: list[EntryResult] = field(default_factory=list)

    def _count(self, outcome: TrackUpdateOutcome) -> int:
        return sum(1 for entry in self.entries if entry.outcome is outcome)

    @property
    def total(self) -> int:
        return len(self.entries)

    @property
    def updated(self) -> int:
        return self._count(TrackUpdateOutcome.UPDATED)

    @property
    def unchanged(self) -> int:
        return self._count(TrackUpdateOutcome.UNCHANGED)

    @property
    def empty(self) -> int:
        return self._count(TrackUpdateOutcome.EMPTY_RESULT)

    @property
    def ok(self) -> bool:
        """True when the document was loaded and written back."""
        return self.loaded and self.saved

    def summary(self) -> str:
        if not self.loaded:
            return f"{self.path}: not loaded ({self.error})"
        status = "saved" if self.saved else f"NOT saved ({self.error})"
        return (
            f"{self.path}: {self.total} playlists, {self.updated} updated, "
            f"{self.empty} empty, {self.unchanged} failed, {status}"
        )

"""
Catalog synchronizer.

Refreshes every playlist entry of one or more catalog documents from a
TrackLister, then writes each document back.

Workflow per document:
    1. Load the document (a failure ends this document's job only)
    2. For each configured root key, walk its subtree in document order
    3. For each playlist entry, fetch titles and apply the update policy
    4. Write the document back, whatever the per-entry outcomes were

Update policy per entry:
    - Fetch failed        -> keep existing tracks, log error
    - Fetch returned []   -> keep existing tracks, log warning
    - Fetch returned [..] -> replace tracks wholesale, re-assert name

Fetches run one at a time so every log line belongs to exactly one entry.
Nothing is retried within a run.
"""

from pathlib import Path
from typing import Iterable, Sequence, Union

from tqdm import tqdm

from catalog_sync.catalog.document import CatalogDocument, load_document, save_document
from catalog_sync.catalog.models import PlaylistEntry
from catalog_sync.core.config import CatalogJob
from catalog_sync.core.exceptions import (
    CatalogParseError,
    CatalogReadError,
    CatalogWriteError,
    FetchError,
)
from catalog_sync.core.logger import get_logger, log_fetch_failure
from catalog_sync.sync.models import EntryResult, SyncReport, TrackUpdateOutcome
from catalog_sync.youtube.lister import TrackLister

logger = get_logger(__name__)


Job = Union[CatalogJob, tuple[Path, Sequence[str]]]


class CatalogSyncer:
    """
    Syncs catalog documents against a TrackLister.

    Attributes:
        lister: Source of fresh track titles.
        show_progress: Show a tqdm progress bar per root key.

    Example:
        syncer = CatalogSyncer(YtDlpTrackLister())
        reports = syncer.sync_all([
            (Path("data/playlists.json"), ["quarterly", "genres"]),
        ])
    """

    def __init__(self, lister: TrackLister, show_progress: bool = False) -> None:
        self.lister = lister
        self.show_progress = show_progress

    def refresh_entry(self, entry: PlaylistEntry, path: str | None = None) -> TrackUpdateOutcome:
        """
        Refresh one playlist entry in place.

        Args:
            entry: The entry to refresh.
            path: Dotted path used in log messages. Defaults to the entry key.

        Returns:
            The outcome of the refresh.
        """
        return self._refresh(path or entry.key, entry).outcome

    def _refresh(self, path: str, entry: PlaylistEntry) -> EntryResult:
        old_count = len(entry.tracks)

        try:
            titles = self.lister.list_tracks(entry.id)
        except FetchError as e:
            log_fetch_failure(logger, path, self.lister.playlist_url(entry.id), e.message)
            logger.info(f"  Keeping existing {old_count} tracks (fetch failed)")
            return EntryResult(
                path=path,
                playlist_id=entry.id,
                outcome=TrackUpdateOutcome.UNCHANGED,
                old_count=old_count,
                new_count=old_count,
                error=e.message,
            )

        if not titles:
            logger.warning("  Playlist appears empty, keeping existing tracks")
            return EntryResult(
                path=path,
                playlist_id=entry.id,
                outcome=TrackUpdateOutcome.EMPTY_RESULT,
                old_count=old_count,
                new_count=old_count,
            )

        entry.replace_tracks(titles, name=entry.name)

        if len(titles) != old_count:
            logger.info(f"  Updated: {old_count} → {len(titles)} tracks")
        else:
            logger.info(f"  Track count unchanged: {len(titles)}")

        return EntryResult(
            path=path,
            playlist_id=entry.id,
            outcome=TrackUpdateOutcome.UPDATED,
            old_count=old_count,
            new_count=len(titles),
        )

    def refresh_document(self, document: CatalogDocument, root_keys: Sequence[str]) -> list[EntryResult]:
        """
        Refresh every playlist entry under root_keys, in traversal order.

        Returns:
            One EntryResult per entry visited.
        """
        results = []

        for root_key in root_keys:
            if root_key not in document.root.children:
                logger.debug(f"No '{root_key}' section in {document.path}")
                continue

            logger.info(f"--- {root_key.replace('_', ' ').title()} Playlists ---")

            entries = tqdm(
                document.traverse([root_key]),
                desc=root_key,
                unit="playlist",
                leave=False,
                disable=not self.show_progress,
            )
            for path, entry in entries:
                logger.info(f"Processing: {path}")
                results.append(self._refresh(path, entry))

        return results

    def sync_document(self, path: Path, root_keys: Sequence[str]) -> SyncReport:
        """
        Load, refresh and write back one catalog document.

        The document is written back whenever it was loaded, even if every
        fetch failed. Load and write failures are recorded in the report,
        never raised.

        Args:
            path: Catalog file location.
            root_keys: Root keys to traverse, in order.

        Returns:
            SyncReport for this document.
        """
        report = SyncReport(path=path, root_keys=tuple(root_keys))

        logger.info(f"Reading: {path}")
        try:
            document = load_document(path)
        except (CatalogReadError, CatalogParseError) as e:
            logger.error(f"Error reading {path}: {e.message}")
            report.error = e.message
            return report

        report.loaded = True
        report.entries = self.refresh_document(document, root_keys)

        logger.info(f"Writing updated {path.name}...")
        try:
            save_document(document, path)
        except CatalogWriteError as e:
            logger.error(f"Error writing {path}: {e.message}")
            report.error = e.message
            return report

        report.saved = True
        return report

    def sync_all(self, jobs: Iterable[Job]) -> list[SyncReport]:
        """
        Run sync_document for each job, in order and independently.

        A failure in one job never stops the following ones.

        Args:
            jobs: CatalogJob objects or (path, root_keys) pairs.
        """
        reports = []
        for job in jobs:
            if isinstance(job, CatalogJob):
                path, root_keys = job.path, job.root_keys
            else:
                path, root_keys = job
            reports.append(self.sync_document(Path(path), root_keys))
        return reports

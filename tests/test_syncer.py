"""Test the catalog synchronizer"""

import json
import logging

import pytest

from catalog_sync.catalog import parse_node
from catalog_sync.core.config import CatalogJob
from catalog_sync.core.exceptions import FetchError
from catalog_sync.sync import CatalogSyncer, TrackUpdateOutcome


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


class TestRefreshEntry:
    """Test the per-entry update policy"""

    def test_fetch_failure_preserves_tracks(self, stub_lister):
        """A failed fetch leaves the tracks exactly as they were"""
        entry = parse_node("q2", {"id": "PL2", "tracks": ["A", "B", "A"]})
        syncer = CatalogSyncer(stub_lister({"PL2": FetchError("timeout")}))

        outcome = syncer.refresh_entry(entry)

        assert outcome is TrackUpdateOutcome.UNCHANGED
        assert entry.tracks == ["A", "B", "A"]

    def test_empty_result_preserves_tracks(self, stub_lister, caplog):
        """An empty fetch keeps the tracks and logs a warning, not an error"""
        entry = parse_node("q1", {"id": "PL1", "tracks": ["old"]})
        syncer = CatalogSyncer(stub_lister({"PL1": []}))

        with caplog.at_level(logging.DEBUG):
            outcome = syncer.refresh_entry(entry)

        assert outcome is TrackUpdateOutcome.EMPTY_RESULT
        assert entry.tracks == ["old"]
        levels = {record.levelno for record in caplog.records}
        assert logging.WARNING in levels
        assert logging.ERROR not in levels

    def test_fetch_failure_logs_error(self, stub_lister, caplog):
        """A failed fetch is logged as an error with report fields"""
        entry = parse_node("q1", {"id": "PL1", "tracks": ["old"]})
        syncer = CatalogSyncer(stub_lister({"PL1": FetchError("boom")}))

        with caplog.at_level(logging.DEBUG):
            syncer.refresh_entry(entry, path="quarterly.q1")

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert errors[0].sync_failed_path == "quarterly.q1"
        assert errors[0].sync_failed_url.endswith("list=PL1")

    def test_success_replaces_not_merges(self, stub_lister):
        """New titles replace old ones wholesale"""
        entry = parse_node("q2", {"id": "PL2", "tracks": ["A", "B"]})
        syncer = CatalogSyncer(stub_lister({"PL2": ["X"]}))

        outcome = syncer.refresh_entry(entry)

        assert outcome is TrackUpdateOutcome.UPDATED
        assert entry.tracks == ["X"]

    def test_duplicates_are_kept(self, stub_lister):
        """Duplicate titles from the source are not de-duplicated"""
        entry = parse_node("q1", {"id": "PL1", "tracks": []})
        syncer = CatalogSyncer(stub_lister({"PL1": ["Same", "Same", "Other"]}))

        syncer.refresh_entry(entry)

        assert entry.tracks == ["Same", "Same", "Other"]

    def test_name_and_id_kept_on_update(self, stub_lister):
        """The known label is re-asserted and the id never changes"""
        entry = parse_node("q1", {"id": "PL1", "name": "Q1 2025", "tracks": []})
        syncer = CatalogSyncer(stub_lister({"PL1": ["new"]}))

        syncer.refresh_entry(entry)

        assert entry.id == "PL1"
        assert entry.name == "Q1 2025"


class TestSyncDocument:
    """Test syncing a whole catalog file"""

    def test_quarterly_scenario(self, temp_dir, stub_lister):
        """A single quarterly entry gets the fetched titles and keeps its name"""
        path = temp_dir / "playlists.json"
        path.write_text(json.dumps(
            {"quarterly": {"q1": {"id": "PL1", "name": "Q1", "tracks": ["old"]}}}
        ), encoding="utf-8")
        syncer = CatalogSyncer(stub_lister({"PL1": ["new1", "new2"]}))

        report = syncer.sync_document(path, ["quarterly", "genres"])

        assert report.ok
        assert _read(path) == {
            "quarterly": {"q1": {"id": "PL1", "name": "Q1", "tracks": ["new1", "new2"]}}
        }

    def test_mixed_outcomes(self, catalog_file, sample_catalog, stub_lister):
        """Each entry follows its own outcome; the rest of the document is untouched"""
        lister = stub_lister({
            "PL1": ["n1", "n2"],
            "PL2": FetchError("unavailable"),
            "PL3": [],
            "PL4": ["j1"],
        })
        syncer = CatalogSyncer(lister)

        report = syncer.sync_document(catalog_file, ["quarterly", "genres"])

        data = _read(catalog_file)
        assert data["quarterly"]["q1"]["tracks"] == ["n1", "n2"]
        assert data["quarterly"]["q2"]["tracks"] == ["A", "B"]
        assert data["genres"]["electronic"]["house"] == sample_catalog["genres"]["electronic"]["house"]
        assert data["genres"]["jazz"]["tracks"] == ["j1"]
        assert data["title"] == sample_catalog["title"]

        assert (report.total, report.updated, report.unchanged, report.empty) == (4, 2, 1, 1)
        assert [e.path for e in report.entries] == [
            "quarterly.q1", "quarterly.q2", "genres.electronic.house", "genres.jazz",
        ]

    def test_id_without_tracks_never_fetched(self, catalog_file, stub_lister):
        """Nodes with an id but no tracks are never passed to the lister"""
        lister = stub_lister({"PL1": ["x"], "PL2": ["x"], "PL3": ["x"], "PL4": ["x"]})
        CatalogSyncer(lister).sync_document(catalog_file, ["quarterly", "genres"])

        assert "not-a-playlist" not in lister.calls
        assert lister.calls == ["PL1", "PL2", "PL3", "PL4"]

    def test_idempotent(self, catalog_file, stub_lister):
        """Two runs with the same fetch results give byte-identical files"""
        lister = stub_lister({"PL1": ["a"], "PL2": ["b", "c"], "PL3": ["d"], "PL4": ["e"]})
        syncer = CatalogSyncer(lister)

        syncer.sync_document(catalog_file, ["quarterly", "genres"])
        first = catalog_file.read_bytes()
        syncer.sync_document(catalog_file, ["quarterly", "genres"])

        assert catalog_file.read_bytes() == first

    def test_persists_even_when_every_fetch_fails(self, catalog_file, sample_catalog, stub_lister):
        """The document is written back (unchanged) when all fetches fail"""
        catalog_file.write_text(json.dumps(sample_catalog), encoding="utf-8")
        syncer = CatalogSyncer(stub_lister())

        report = syncer.sync_document(catalog_file, ["quarterly", "genres"])

        assert report.saved
        assert report.unchanged == 4
        assert _read(catalog_file) == sample_catalog
        # Rewritten in the persisted format
        assert catalog_file.read_text(encoding="utf-8").endswith("}\n")

    def test_load_failure_is_reported(self, temp_dir, stub_lister):
        """A missing file is reported, not raised"""
        report = CatalogSyncer(stub_lister()).sync_document(temp_dir / "missing.json", ["quarterly"])

        assert not report.loaded
        assert not report.saved
        assert "not found" in report.error

    def test_write_failure_is_reported(self, catalog_file, stub_lister, monkeypatch):
        """A failed write is recorded in the report"""
        def failing_replace(*args, **kwargs):
            raise OSError("read-only file system")

        monkeypatch.setattr("catalog_sync.catalog.document.os.replace", failing_replace)
        report = CatalogSyncer(stub_lister({"PL1": ["x"]})).sync_document(catalog_file, ["quarterly"])

        assert report.loaded
        assert not report.saved
        assert "read-only" in report.error


class TestSyncAll:
    """Test running several independent catalog jobs"""

    def test_first_fails_second_still_synced(self, temp_dir, stub_lister):
        """A broken first catalog does not stop the second one"""
        broken = temp_dir / "broken.json"
        broken.write_text("{oops", encoding="utf-8")
        good = temp_dir / "good.json"
        good.write_text(json.dumps({"genres": {"rock": {"id": "PL5", "tracks": []}}}), encoding="utf-8")

        syncer = CatalogSyncer(stub_lister({"PL5": ["r1"]}))
        reports = syncer.sync_all([
            CatalogJob(path=broken, root_keys=("quarterly",)),
            (good, ["genres"]),
        ])

        assert [r.loaded for r in reports] == [False, True]
        assert reports[1].ok
        assert _read(good)["genres"]["rock"]["tracks"] == ["r1"]
        assert broken.read_text(encoding="utf-8") == "{oops"

    @pytest.mark.parametrize("count", [0, 1, 3])
    def test_one_report_per_job(self, temp_dir, stub_lister, count):
        """sync_all returns one report per job, in order"""
        jobs = []
        for i in range(count):
            path = temp_dir / f"c{i}.json"
            path.write_text("{}", encoding="utf-8")
            jobs.append((path, ["quarterly"]))

        reports = CatalogSyncer(stub_lister()).sync_all(jobs)

        assert [r.path for r in reports] == [path for path, _ in jobs]

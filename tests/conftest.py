"""Test configuration and fixtures"""

import json
import tempfile
from pathlib import Path

import pytest

from catalog_sync.core.exceptions import FetchError


class StubTrackLister:
    """
    In-memory TrackLister.

    results maps playlist id to a list of titles, or to an exception
    instance that list_tracks() raises. Unknown ids raise FetchError.
    """

    def __init__(self, results=None):
        self.results = dict(results or {})
        self.calls = []

    def playlist_url(self, playlist_id):
        return f"https://www.youtube.com/playlist?list={playlist_id}"

    def list_tracks(self, playlist_id):
        self.calls.append(playlist_id)
        result = self.results.get(playlist_id)
        if result is None:
            raise FetchError(f"no stub for {playlist_id}", details={"playlist_id": playlist_id})
        if isinstance(result, Exception):
            raise result
        return list(result)


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def sample_catalog():
    """Sample catalog with nested groups, a named entry and a non-playlist node"""
    return {
        "title": "Run The Code playlists",
        "quarterly": {
            "q1": {"id": "PL1", "name": "Q1 2025", "tracks": ["old"]},
            "q2": {"id": "PL2", "name": "Q2 2025", "tracks": ["A", "B"]},
        },
        "genres": {
            "electronic": {
                "house": {"id": "PL3", "tracks": ["House 1"], "cover": "house.jpg"},
                "meta": {"id": "not-a-playlist", "description": "no tracks field"},
            },
            "jazz": {"id": "PL4", "name": "Jazz", "tracks": []},
        },
    }


@pytest.fixture
def catalog_file(temp_dir, sample_catalog):
    """Write sample_catalog to disk and return its path"""
    path = temp_dir / "playlists.json"
    path.write_text(json.dumps(sample_catalog, indent=2) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def stub_lister():
    """Factory for StubTrackLister instances"""
    return StubTrackLister

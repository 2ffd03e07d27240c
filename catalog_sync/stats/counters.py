"""
Visitor and play counters in a Firebase Realtime Database.

Counters live under `stats/` in the database:

    stats/visitors                 total visitors (one per session)
    stats/total_plays              total playlist plays
    stats/playlists/<safe-name>    {"name": <playlist name>, "plays": <count>}

Increments are atomic: the value is read together with its ETag and
written back with an `if-match` condition, retrying when another writer
got there first (HTTP 412). This is the REST counterpart of the
database's client-side transactions.

Usage:
    client = StatsClient("https://<project>-default-rtdb.firebaseio.com")
    session = {}
    client.init_visitor_counter(session)   # increments once per session
    client.track_play("Summer Vibes 2025")
    stats = client.init_music_stats()
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, MutableMapping

import requests

from catalog_sync.core.exceptions import StatsError
from catalog_sync.core.logger import get_logger

logger = get_logger(__name__)


VISITORS_PATH = "stats/visitors"
TOTAL_PLAYS_PATH = "stats/total_plays"
PLAYLISTS_PATH = "stats/playlists"

# Session flag that limits visitor increments to one per session
SESSION_KEY = "rtc_visited"

# Characters not allowed in database keys
_UNSAFE_KEY_CHARS = re.compile(r"[.#$\[\]]")


def sanitize_key(name: str) -> str:
    """
    Make a playlist name usable as a database key.

    Replaces each of `. # $ [ ]` with an underscore.

    Example:
        sanitize_key("Vol. 2 [Live]")  # "Vol_ 2 _Live_"
    """
    return _UNSAFE_KEY_CHARS.sub("_", name)


@dataclass(frozen=True)
class PlaylistPlays:
    """Play count of one playlist."""
    name: str
    plays: int


@dataclass(frozen=True)
class MusicStats:
    """
    Snapshot of the music counters.

    Attributes:
        total_plays: Plays across all playlists.
        top_playlists: Most played playlists, most played first.
    """
    total_plays: int
    top_playlists: list[PlaylistPlays] = field(default_factory=list)


class StatsClient:
    """
    Client for the counters stored in a Firebase Realtime Database.

    Attributes:
        database_url: Base URL of the database, without trailing slash.
        timeout: HTTP timeout in seconds for every request.
        max_attempts: Conditional-write attempts before giving up.
    """

    def __init__(
        self,
        database_url: str,
        timeout: float = 10.0,
        max_attempts: int = 10,
        session: requests.Session | None = None
    ) -> None:
        self.database_url = database_url.rstrip("/")
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.database_url}/{path}.json"

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        try:
            return self.session.request(
                method, self._url(path), timeout=self.timeout, **kwargs
            )
        except requests.exceptions.RequestException as e:
            raise StatsError(
                f"Realtime database request failed: {e}",
                details={"method": method, "path": path}
            ) from e

    @staticmethod
    def _check(response: requests.Response, path: str) -> None:
        if not response.ok:
            raise StatsError(
                f"Realtime database returned HTTP {response.status_code} for {path}",
                details={"path": path, "body": response.text[:200]},
                status_code=response.status_code
            )

    def get_value(self, path: str) -> Any:
        """Read the value stored at path (None when absent)."""
        response = self._request("GET", path)
        self._check(response, path)
        return response.json()

    def transaction(self, path: str, update: Callable[[Any], Any]) -> Any:
        """
        Atomically replace the value at path with update(current).

        Args:
            path: Database path, e.g. "stats/visitors".
            update: Receives the current value (None when absent) and
                    returns the new one.

        Returns:
            The value written.

        Raises:
            StatsError: On HTTP errors, or if the write still conflicts
                        after max_attempts.
        """
        response = self._request("GET", path, headers={"X-Firebase-ETag": "true"})
        self._check(response, path)

        for attempt in range(1, self.max_attempts + 1):
            etag = response.headers.get("ETag")
            new_value = update(response.json())

            response = self._request(
                "PUT",
                path,
                json=new_value,
                headers={"if-match": etag, "X-Firebase-ETag": "true"}
            )
            if response.status_code != 412:
                self._check(response, path)
                return new_value

            # Conflict: the 412 response carries the current value and ETag
            logger.debug(f"Write conflict on {path} (attempt {attempt}), retrying")

        raise StatsError(
            f"Gave up updating {path} after {self.max_attempts} conflicting writes",
            details={"path": path, "attempts": self.max_attempts}
        )

    def increment(self, path: str) -> int:
        """Atomically add one to the counter at path and return the new value."""
        return self.transaction(path, lambda count: (count or 0) + 1)

    def init_visitor_counter(self, session_storage: MutableMapping[str, str]) -> int:
        """
        Count this visitor once per session and return the visitor total.

        Args:
            session_storage: Session-scoped mapping. The first call for a
                             session sets a flag in it; later calls with
                             the same mapping only read the counter.
        """
        if not session_storage.get(SESSION_KEY):
            count = self.increment(VISITORS_PATH)
            session_storage[SESSION_KEY] = "true"
            return count
        return self.get_value(VISITORS_PATH) or 0

    def track_play(self, playlist_name: str) -> PlaylistPlays | None:
        """
        Record one play of a playlist.

        Increments the total play counter and the playlist's own counter,
        storing the human-readable name next to the count. Empty names
        are ignored.

        Returns:
            The playlist's updated counter, or None for an empty name.
        """
        if not playlist_name:
            return None

        self.increment(TOTAL_PLAYS_PATH)

        def bump(data: Any) -> dict[str, Any]:
            if not data:
                return {"name": playlist_name, "plays": 1}
            data["plays"] = (data.get("plays") or 0) + 1
            data["name"] = playlist_name
            return data

        result = self.transaction(f"{PLAYLISTS_PATH}/{sanitize_key(playlist_name)}", bump)
        return PlaylistPlays(name=result["name"], plays=result["plays"])

    def init_music_stats(self, limit: int = 3) -> MusicStats:
        """
        Read total plays and the `limit` most played playlists.
        """
        total = self.get_value(TOTAL_PLAYS_PATH) or 0

        response = self._request(
            "GET",
            PLAYLISTS_PATH,
            params={"orderBy": '"plays"', "limitToLast": limit}
        )
        self._check(response, PLAYLISTS_PATH)
        playlists = response.json() or {}

        # The REST API filters but does not order the returned object
        top = sorted(
            (
                PlaylistPlays(name=item.get("name", key), plays=item.get("plays") or 0)
                for key, item in playlists.items()
                if isinstance(item, dict)
            ),
            key=lambda p: p.plays,
            reverse=True
        )
        return MusicStats(total_plays=total, top_playlists=top[:limit])

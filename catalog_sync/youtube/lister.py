"""
Track listing for YouTube playlists via yt-dlp.

The syncer only depends on the TrackLister protocol: give it a playlist
id, get back the ordered video titles, or a FetchError. YtDlpTrackLister
implements it by running yt-dlp as a subprocess:

    yt-dlp --flat-playlist --print title --ignore-errors <playlist-url>

    --flat-playlist: list entries without resolving each video
    --print title:   one title per line on stdout
    --ignore-errors: skip unavailable videos instead of aborting

The call is blocking and bounded by a timeout. By default yt-dlp is run
through the current interpreter (`python -m yt_dlp`) so the installed
yt-dlp package is the one used.
"""

import subprocess
import sys
from typing import Protocol, Sequence

from catalog_sync.core.config import TrackListerConfig
from catalog_sync.core.exceptions import FetchError
from catalog_sync.core.logger import get_logger

logger = get_logger(__name__)


YT_DLP_ARGS = ("--flat-playlist", "--print", "title", "--ignore-errors")


class TrackLister(Protocol):
    """Source of ordered track titles for a playlist id."""

    def playlist_url(self, playlist_id: str) -> str:
        ...

    def list_tracks(self, playlist_id: str) -> list[str]:
        """
        Return the playlist's titles in playlist order.

        Raises:
            FetchError: If the titles could not be fetched.
        """
        ...


def parse_titles(output: str) -> list[str]:
    """
    Split yt-dlp output into titles.

    Lines are stripped and empty lines dropped; order and duplicates
    are kept.
    """
    return [line.strip() for line in output.splitlines() if line.strip()]


class YtDlpTrackLister:
    """
    TrackLister backed by the yt-dlp command line.

    Attributes:
        command: Executable and leading arguments for yt-dlp.
        timeout: Maximum seconds to wait per playlist.
        max_output_bytes: Output larger than this is treated as a failure.
        url_template: Playlist URL with an `{id}` placeholder.
    """

    def __init__(
        self,
        command: Sequence[str] | None = None,
        timeout: float = 120.0,
        max_output_bytes: int = 10 * 1024 * 1024,
        url_template: str = "https://www.youtube.com/playlist?list={id}"
    ) -> None:
        self.command = tuple(command) if command else (sys.executable, "-m", "yt_dlp")
        self.timeout = timeout
        self.max_output_bytes = max_output_bytes
        self.url_template = url_template

    @classmethod
    def from_config(cls, config: TrackListerConfig) -> "YtDlpTrackLister":
        return cls(
            command=config.command,
            timeout=config.timeout,
            max_output_bytes=config.max_output_bytes,
            url_template=config.url_template,
        )

    def playlist_url(self, playlist_id: str) -> str:
        return self.url_template.format(id=playlist_id)

    def list_tracks(self, playlist_id: str) -> list[str]:
        """
        Fetch the titles of a playlist.

        Args:
            playlist_id: YouTube playlist id (e.g. "PLxxxx").

        Returns:
            Ordered titles. May be empty if yt-dlp succeeded but printed
            nothing; the caller decides what an empty result means.

        Raises:
            FetchError: yt-dlp missing, timed out, exited non-zero, or
                        produced more output than max_output_bytes.
        """
        url = self.playlist_url(playlist_id)
        cmd = [*self.command, *YT_DLP_ARGS, url]
        details = {"playlist_id": playlist_id, "url": url}

        logger.info(f"  Fetching playlist: {playlist_id}")
        logger.debug(f"  Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                timeout=self.timeout,
                check=False
            )
        except subprocess.TimeoutExpired as e:
            raise FetchError(
                f"yt-dlp timed out after {self.timeout:g}s",
                details={**details, "timeout": self.timeout}
            ) from e
        except FileNotFoundError as e:
            raise FetchError(
                f"yt-dlp command not found: {self.command[0]}",
                details={**details, "command": list(self.command)}
            ) from e
        except OSError as e:
            raise FetchError(
                f"Failed to run yt-dlp: {e}",
                details={**details, "original_error": str(e)}
            ) from e

        if len(result.stdout) > self.max_output_bytes:
            raise FetchError(
                f"yt-dlp output exceeded {self.max_output_bytes} bytes",
                details={**details, "output_bytes": len(result.stdout)}
            )

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            last_line = stderr.splitlines()[-1] if stderr else ""
            raise FetchError(
                f"yt-dlp exited with status {result.returncode}"
                + (f": {last_line}" if last_line else ""),
                details={**details, "returncode": result.returncode, "stderr": stderr}
            )

        titles = parse_titles(result.stdout.decode("utf-8", errors="replace"))
        logger.info(f"  Found {len(titles)} tracks")
        return titles

"""
Logging configuration for catalog-sync.

This module sets up the logging system with multiple outputs:
    - Console: Real-time progress with tqdm-compatible, colored formatting
    - log_full_<timestamp>.log: Complete log of all events (DEBUG and above)
    - log_errors_<timestamp>.log: Only ERROR and CRITICAL level messages
    - sync_failures_<timestamp>.log: Playlists whose tracks could not be fetched

Everything shown on screen is also saved to file, then filtered into
specialized files.

Usage:
    from catalog_sync.core.logger import setup_logging, get_logger

    setup_logging(log_dir)  # Call once at startup
    logger = get_logger(__name__)  # Get logger for each module

    logger.info("Processing: quarterly.q1")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


LOG_FULL_PREFIX = "log_full"
LOG_ERRORS_PREFIX = "log_errors"
SYNC_FAILURES_PREFIX = "sync_failures"

# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that adds colors to console output.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        colored_levelname = f"{color}{record.levelname}{Colors.RESET}"
        return f"{colored_levelname}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to console without breaking tqdm progress bars.

    Uses tqdm.write(), which prints above any active progress bar instead
    of overwriting it.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self.stream = stream or sys.stderr

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
        except Exception:
            self.handleError(record)


class SyncFailedPlaylistHandler(logging.Handler):
    """
    Handler that captures failed playlist fetches for the sync report file.

    Writes a human-readable list to sync_failures_<timestamp>.log:

        quarterly.q1
        https://www.youtube.com/playlist?list=PLxxxx
        yt-dlp exited with status 1

        genres.jazz
        https://www.youtube.com/playlist?list=PLyyyy
        yt-dlp timed out after 120s

    Only records carrying a 'sync_failed_path' extra field are written;
    use log_fetch_failure() to produce them.

    Attributes:
        report_path: Path to the report file.
        report_file: Open file handle, set by open().
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """Open the report file for writing (overwrites existing content)."""
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, "sync_failed_path"):
            return

        if self.report_file is None:
            return

        try:
            entry_path = getattr(record, "sync_failed_path", "unknown")
            url = getattr(record, "sync_failed_url", "")
            reason = getattr(record, "sync_failed_reason", "")

            self.report_file.write(f"{entry_path}\n")
            self.report_file.write(f"{url}\n")
            self.report_file.write(f"{reason}\n\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """Close the report file handle. Safe to call multiple times."""
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """Filter that only allows ERROR and CRITICAL level records."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(log_dir: Path, console_level: int = logging.INFO) -> None:
    """
    Configure the logging system for the application.

    Call ONCE at application startup, after the configuration is loaded.

    Args:
        log_dir: Directory where log files will be created. Created if
                 it doesn't exist.
        console_level: Minimum level shown on the console.

    Behavior:
        1. Create log_dir if needed
        2. Configure root logger level to DEBUG, replacing existing handlers
        3. Console handler (TqdmLoggingHandler, colored, console_level)
        4. Full log file handler (DEBUG)
        5. Error-only log file handler (ERROR+)
        6. Sync failures report handler
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    full_log_path = log_dir / f"{LOG_FULL_PREFIX}_{timestamp}.log"
    full_handler = logging.FileHandler(full_log_path, mode="w", encoding="utf-8")
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_log_path = log_dir / f"{LOG_ERRORS_PREFIX}_{timestamp}.log"
    error_handler = logging.FileHandler(error_log_path, mode="w", encoding="utf-8")
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    failures_path = log_dir / f"{SYNC_FAILURES_PREFIX}_{timestamp}.log"
    failures_handler = SyncFailedPlaylistHandler(failures_path)
    failures_handler.open()
    root_logger.addHandler(failures_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Note:
        Loggers obtained before setup_logging() is called have no handlers
        of their own and only propagate to the root logger.
    """
    return logging.getLogger(name)


def log_fetch_failure(
    logger: logging.Logger,
    entry_path: str,
    playlist_url: str,
    error_message: str
) -> None:
    """
    Log a playlist whose tracks could not be fetched.

    Logs at ERROR level and attaches the extra fields that
    SyncFailedPlaylistHandler writes to the sync failures report.

    Example:
        log_fetch_failure(
            logger,
            entry_path="quarterly.q1",
            playlist_url="https://www.youtube.com/playlist?list=PLxxxx",
            error_message="yt-dlp timed out after 120s"
        )
    """
    logger.error(
        f"  Error fetching playlist {entry_path}: {error_message}",
        extra={
            "sync_failed_path": entry_path,
            "sync_failed_url": playlist_url,
            "sync_failed_reason": error_message,
        }
    )


def shutdown_logging() -> None:
    """
    Flush and close every handler on the root logger, then remove them.

    Typically called in a finally block at application exit.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except OSError:
            pass
        root_logger.removeHandler(handler)

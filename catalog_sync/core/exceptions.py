"""
Exception classes for catalog-sync.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message plus an optional details
dictionary, so callers can log context without parsing strings.

Exception Hierarchy:
    CatalogSyncError (base)
        ConfigError - Configuration file issues
        CatalogReadError - Catalog document missing or unreadable
        CatalogParseError - Catalog document is not valid JSON
        CatalogWriteError - Catalog document could not be written back
        FetchError - External track lister failed for one playlist
        StatsError - Realtime database counter issues
"""


class CatalogSyncError(Exception):
    """
    Base exception for all catalog-sync errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context
                 (e.g., file path, playlist id, exit code).

    Example:
        try:
            syncer.sync_all(jobs)
        except CatalogSyncError as e:
            logger.error(f"Sync failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(CatalogSyncError):
    """
    Raised when there's an issue with the configuration file.

    This is a CRITICAL error that should stop program execution.

    Common causes:
        - config.yaml has invalid YAML syntax
        - A section has the wrong type (e.g., catalogs is not a list)
        - Invalid field values (e.g., negative timeout)
    """
    pass


class CatalogReadError(CatalogSyncError):
    """
    Raised when a catalog document cannot be read from disk.

    Fatal for the document's job only. When it happens to the first
    configured catalog the process still runs the remaining jobs, then
    exits with a non-zero code.

    Common causes:
        - File does not exist
        - Permission denied
        - File is not valid UTF-8
    """
    pass


class CatalogParseError(CatalogSyncError):
    """
    Raised when a catalog document is not valid JSON, or its top level
    is not a JSON object.

    Same propagation rules as CatalogReadError.
    """
    pass


class CatalogWriteError(CatalogSyncError):
    """
    Raised when an updated catalog document cannot be written back.

    NON-CRITICAL: the syncer records it in the document's report. The
    original file is left untouched because writes go through a temporary
    file that is moved into place only after it has been fully written.
    """
    pass


class FetchError(CatalogSyncError):
    """
    Raised when the track lister cannot produce titles for a playlist.

    This is always a NON-CRITICAL error: the syncer keeps the playlist's
    existing tracks and continues with the next playlist. Fetches are
    never retried within a run.

    Common causes:
        - yt-dlp exited with a non-zero status
        - The call exceeded the configured timeout
        - yt-dlp is not installed / command not found
        - Output exceeded the maximum allowed size

    Example:
        raise FetchError(
            "yt-dlp timed out after 120s",
            details={'playlist_id': 'PLxxxx', 'timeout': 120}
        )
    """
    pass


class StatsError(CatalogSyncError):
    """
    Raised when the realtime database cannot be read or updated.

    Common causes:
        - Network connectivity issues
        - Database rules reject the request (HTTP 401/403)
        - Conditional write kept conflicting with concurrent writers

    Attributes:
        status_code: HTTP status code of the failing response, if any.
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        status_code: int | None = None
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code

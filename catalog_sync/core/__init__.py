"""
Core module for catalog-sync.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging system with multiple outputs

Usage:
    from catalog_sync.core import (
        Config, load_config,
        setup_logging, get_logger,
        CatalogSyncError, ConfigError, FetchError
    )
"""

from catalog_sync.core.config import (
    CatalogJob,
    Config,
    LoggingConfig,
    StatsConfig,
    TrackListerConfig,
    default_config,
    load_config,
)
from catalog_sync.core.exceptions import (
    CatalogParseError,
    CatalogReadError,
    CatalogSyncError,
    CatalogWriteError,
    ConfigError,
    FetchError,
    StatsError,
)
from catalog_sync.core.logger import (
    get_logger,
    log_fetch_failure,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "CatalogJob",
    "TrackListerConfig",
    "LoggingConfig",
    "StatsConfig",
    "default_config",
    "load_config",
    # Exceptions
    "CatalogSyncError",
    "ConfigError",
    "CatalogReadError",
    "CatalogParseError",
    "CatalogWriteError",
    "FetchError",
    "StatsError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_fetch_failure",
    "shutdown_logging",
]

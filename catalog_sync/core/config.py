"""
Configuration management for catalog-sync.

This module handles loading, validating, and providing access to the
application configuration. Every setting has a built-in default, so the
tool runs without any configuration file: it then syncs the
code-configured catalog jobs below.

An optional config.yaml in the current working directory (or a file given
with --config) overrides the defaults:

    catalogs:
      - path: data/playlists.json
        root_keys: [quarterly, genres]
      - path: data/archive.json
        root_keys: [years]

    tracklister:
      command: null            # null runs the installed yt-dlp as `python -m yt_dlp`
      timeout: 120             # seconds per playlist
      max_output_bytes: 10485760
      url_template: "https://www.youtube.com/playlist?list={id}"

    logging:
      directory: logs

    stats:
      database_url: "https://<project>-default-rtdb.firebaseio.com"
      timeout: 10

The first entry of `catalogs` is the primary catalog: failing to read or
parse it makes the run exit with a non-zero status.
"""

import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from catalog_sync.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

# Code-configured catalog jobs used when no config file overrides them
DEFAULT_CATALOG_PATH = Path("data") / "playlists.json"
DEFAULT_ROOT_KEYS = ("quarterly", "genres")

DEFAULT_TIMEOUT = 120.0
DEFAULT_MAX_OUTPUT_BYTES = 10 * 1024 * 1024
DEFAULT_URL_TEMPLATE = "https://www.youtube.com/playlist?list={id}"
DEFAULT_LOG_DIRECTORY = Path("logs")
DEFAULT_STATS_TIMEOUT = 10.0


@dataclass(frozen=True)
class CatalogJob:
    """
    One catalog document to sync.

    Attributes:
        path: Location of the JSON catalog. Read and overwritten in place.
        root_keys: Top-level keys whose subtrees are traversed, in order.
                   Keys missing from the document are skipped.
    """
    path: Path
    root_keys: tuple[str, ...]


@dataclass(frozen=True)
class TrackListerConfig:
    """
    Settings for the yt-dlp track lister.

    Attributes:
        command: Executable plus leading arguments used to run yt-dlp.
                 None means the running interpreter's `-m yt_dlp`.
        timeout: Maximum wait per playlist, in seconds.
        max_output_bytes: Maximum size of yt-dlp's standard output.
        url_template: Playlist URL with an `{id}` placeholder.
    """
    command: tuple[str, ...] | None
    timeout: float
    max_output_bytes: int
    url_template: str


@dataclass(frozen=True)
class LoggingConfig:
    """
    Attributes:
        directory: Where the per-run log files are written.
    """
    directory: Path


@dataclass(frozen=True)
class StatsConfig:
    """
    Realtime database settings for the stats counters.

    Attributes:
        database_url: Base URL of the database, or None when unconfigured.
        timeout: HTTP request timeout in seconds.
    """
    database_url: str | None
    timeout: float


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and treated as immutable.

    Example:
        config = load_config()
        for job in config.catalogs:
            print(f"{job.path}: {', '.join(job.root_keys)}")
    """
    catalogs: tuple[CatalogJob, ...]
    tracklister: TrackListerConfig
    logging: LoggingConfig
    stats: StatsConfig


def default_config() -> Config:
    """Return the configuration used when no config file is present."""
    return Config(
        catalogs=(CatalogJob(path=DEFAULT_CATALOG_PATH, root_keys=DEFAULT_ROOT_KEYS),),
        tracklister=TrackListerConfig(
            command=None,
            timeout=DEFAULT_TIMEOUT,
            max_output_bytes=DEFAULT_MAX_OUTPUT_BYTES,
            url_template=DEFAULT_URL_TEMPLATE,
        ),
        logging=LoggingConfig(directory=DEFAULT_LOG_DIRECTORY),
        stats=StatsConfig(database_url=None, timeout=DEFAULT_STATS_TIMEOUT),
    )


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration.

    Args:
        config_path: Optional explicit path to a config file. If None,
                     config.yaml in the current working directory is used
                     when it exists, otherwise the built-in defaults.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is missing, or the file
                     has invalid YAML syntax or invalid values.
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
        if not config_path.exists():
            return default_config()
    elif not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file means "all defaults"
    if raw_config is None:
        raw_config = {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    defaults = default_config()

    return Config(
        catalogs=_parse_catalogs(raw_config.get("catalogs"), defaults.catalogs),
        tracklister=_parse_tracklister_config(
            _section(raw_config, "tracklister"), defaults.tracklister
        ),
        logging=_parse_logging_config(_section(raw_config, "logging"), defaults.logging),
        stats=_parse_stats_config(_section(raw_config, "stats"), defaults.stats),
    )


def _section(raw_config: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw_config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section '{name}' must be a dictionary",
            details={"section": name}
        )
    return section


def _parse_catalogs(
    raw_catalogs: Any,
    default: tuple[CatalogJob, ...]
) -> tuple[CatalogJob, ...]:
    """
    Parse the `catalogs` list.

    Raises:
        ConfigError: If the list is empty or an item lacks a path or has
                     a malformed root_keys list.
    """
    if raw_catalogs is None:
        return default

    if not isinstance(raw_catalogs, list) or not raw_catalogs:
        raise ConfigError(
            "'catalogs' must be a non-empty list",
            details={"field": "catalogs"}
        )

    jobs = []
    for index, item in enumerate(raw_catalogs):
        field = f"catalogs[{index}]"
        if not isinstance(item, dict):
            raise ConfigError(f"'{field}' must be a dictionary", details={"field": field})

        path = item.get("path")
        if not isinstance(path, str) or not path.strip():
            raise ConfigError(
                f"'{field}.path' must be a non-empty string",
                details={"field": f"{field}.path"}
            )

        root_keys = item.get("root_keys", list(DEFAULT_ROOT_KEYS))
        if (
            not isinstance(root_keys, list)
            or not root_keys
            or not all(isinstance(key, str) and key for key in root_keys)
        ):
            raise ConfigError(
                f"'{field}.root_keys' must be a non-empty list of strings",
                details={"field": f"{field}.root_keys", "value": root_keys}
            )

        jobs.append(CatalogJob(
            path=Path(path.strip()).expanduser(),
            root_keys=tuple(root_keys)
        ))

    return tuple(jobs)


def _parse_tracklister_config(
    section: dict[str, Any],
    default: TrackListerConfig
) -> TrackListerConfig:
    command = default.command
    raw_command = section.get("command")
    if raw_command is not None:
        if isinstance(raw_command, str) and raw_command.strip():
            command = tuple(shlex.split(raw_command))
        elif (
            isinstance(raw_command, list)
            and raw_command
            and all(isinstance(part, str) for part in raw_command)
        ):
            command = tuple(raw_command)
        else:
            raise ConfigError(
                "'tracklister.command' must be a string, a list of strings or null",
                details={"field": "tracklister.command"}
            )

    timeout = _positive_number(section, "timeout", default.timeout, "tracklister")

    max_output_bytes = section.get("max_output_bytes", default.max_output_bytes)
    if (
        not isinstance(max_output_bytes, int)
        or isinstance(max_output_bytes, bool)
        or max_output_bytes < 1
    ):
        raise ConfigError(
            "'tracklister.max_output_bytes' must be a positive integer",
            details={"field": "tracklister.max_output_bytes", "value": max_output_bytes}
        )

    url_template = section.get("url_template", default.url_template)
    if not isinstance(url_template, str) or "{id}" not in url_template:
        raise ConfigError(
            "'tracklister.url_template' must be a string containing '{id}'",
            details={"field": "tracklister.url_template"}
        )

    return TrackListerConfig(
        command=command,
        timeout=timeout,
        max_output_bytes=max_output_bytes,
        url_template=url_template
    )


def _parse_logging_config(section: dict[str, Any], default: LoggingConfig) -> LoggingConfig:
    directory = section.get("directory")
    if directory is None:
        return default
    if not isinstance(directory, str) or not directory.strip():
        raise ConfigError(
            "'logging.directory' must be a non-empty string",
            details={"field": "logging.directory"}
        )
    return LoggingConfig(directory=Path(directory.strip()).expanduser())


def _parse_stats_config(section: dict[str, Any], default: StatsConfig) -> StatsConfig:
    database_url = section.get("database_url", default.database_url)
    if database_url is not None:
        if not isinstance(database_url, str) or not database_url.startswith("https://"):
            raise ConfigError(
                "'stats.database_url' must be an https:// URL or null",
                details={"field": "stats.database_url"}
            )
        database_url = database_url.rstrip("/")

    return StatsConfig(
        database_url=database_url,
        timeout=_positive_number(section, "timeout", default.timeout, "stats")
    )


def _positive_number(section: dict[str, Any], key: str, default: float, prefix: str) -> float:
    value = section.get(key, default)
    if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
        raise ConfigError(
            f"'{prefix}.{key}' must be a positive number",
            details={"field": f"{prefix}.{key}", "value": value}
        )
    return float(value)

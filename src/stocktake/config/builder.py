"""Configuration builder with explicit layering.

ConfigBuilder composes StocktakeConfig from several ConfigSources. Later
sources override earlier ones for every value they specify.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from stocktake.config.env import EnvReader
from stocktake.config.models import LoggingConfig, StocktakeConfig, SyncConfig


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None values indicate "not specified in this source" and do not
    override values from lower-precedence sources.
    """

    # Record store
    database_path: Path | None = None

    # Logging config
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None

    # Sync config
    sync_probe_url: str | None = None
    sync_timeout_seconds: float | None = None
    sync_probe_timeout_seconds: float | None = None
    sync_watch_interval_seconds: float | None = None


class ConfigBuilder:
    """Builds StocktakeConfig by layering ConfigSources with precedence.

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(reader))
        builder.apply(cli_source)
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def apply(self, source: ConfigSource) -> None:
        """Apply a configuration source, overriding existing values."""
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> StocktakeConfig:
        """Build the final StocktakeConfig with defaults for unset values.

        Raises:
            ValueError: If a layered value fails model validation.
        """
        logging_defaults = LoggingConfig()
        logging_config = LoggingConfig(
            level=self._get("logging_level", logging_defaults.level),
            file=self._get("logging_file", logging_defaults.file),
            format=self._get("logging_format", logging_defaults.format),
            include_stderr=self._get(
                "logging_include_stderr", logging_defaults.include_stderr
            ),
            max_bytes=self._get("logging_max_bytes", logging_defaults.max_bytes),
            backup_count=self._get("logging_backup_count", logging_defaults.backup_count),
        )

        sync_defaults = SyncConfig()
        sync_config = SyncConfig(
            probe_url=self._get("sync_probe_url", sync_defaults.probe_url),
            timeout_seconds=self._get(
                "sync_timeout_seconds", sync_defaults.timeout_seconds
            ),
            probe_timeout_seconds=self._get(
                "sync_probe_timeout_seconds", sync_defaults.probe_timeout_seconds
            ),
            watch_interval_seconds=self._get(
                "sync_watch_interval_seconds", sync_defaults.watch_interval_seconds
            ),
        )

        return StocktakeConfig(
            database_path=self._get("database_path", None),
            logging=logging_config,
            sync=sync_config,
        )


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create ConfigSource from a parsed TOML config file.

    Expected layout:
        database_path = "~/stock/stocktake.db"

        [logging]
        level = "debug"

        [sync]
        probe_url = "https://inventory.example.com/health"
        timeout_seconds = 10
    """
    logging_conf = file_config.get("logging", {})
    sync_conf = file_config.get("sync", {})

    database_path_str = file_config.get("database_path")
    log_file_str = logging_conf.get("file")

    return ConfigSource(
        database_path=Path(database_path_str).expanduser() if database_path_str else None,
        logging_level=logging_conf.get("level"),
        logging_file=Path(log_file_str).expanduser() if log_file_str else None,
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
        sync_probe_url=sync_conf.get("probe_url"),
        sync_timeout_seconds=sync_conf.get("timeout_seconds"),
        sync_probe_timeout_seconds=sync_conf.get("probe_timeout_seconds"),
        sync_watch_interval_seconds=sync_conf.get("watch_interval_seconds"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create ConfigSource from STOCKTAKE_* environment variables."""
    return ConfigSource(
        database_path=reader.get_path("STOCKTAKE_DATABASE_PATH"),
        logging_level=reader.get_str("STOCKTAKE_LOG_LEVEL"),
        logging_file=reader.get_path("STOCKTAKE_LOG_FILE"),
        sync_probe_url=reader.get_str("STOCKTAKE_PROBE_URL"),
        sync_timeout_seconds=reader.get_float("STOCKTAKE_SYNC_TIMEOUT"),
    )

"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (STOCKTAKE_*)
3. Config file (~/.stocktake/config.toml)
4. Default values

Environment variables:
- STOCKTAKE_DATA_DIR: Data directory (overrides ~/.stocktake/)
- STOCKTAKE_CONFIG_PATH: Config file (overrides <data dir>/config.toml)
- STOCKTAKE_DATABASE_PATH: Record store database file
- STOCKTAKE_LOG_LEVEL: debug, info, warning or error
- STOCKTAKE_LOG_FILE: Log file path
- STOCKTAKE_PROBE_URL: URL used to check connectivity
- STOCKTAKE_SYNC_TIMEOUT: Seconds before a remote call counts as failed
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from stocktake.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from stocktake.config.env import EnvReader
from stocktake.config.models import StocktakeConfig

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".stocktake"
CONFIG_FILE_NAME = "config.toml"
DATABASE_FILE_NAME = "stocktake.db"


class ConfigFileError(Exception):
    """Raised when a config file cannot be parsed in strict mode."""


def get_data_dir(env_reader: EnvReader | None = None) -> Path:
    """Get the stocktake data directory (~/.stocktake/ by default)."""
    reader = env_reader or EnvReader()
    return reader.get_path("STOCKTAKE_DATA_DIR", DEFAULT_DATA_DIR)


def get_default_config_path(env_reader: EnvReader | None = None) -> Path:
    """Get the config file path, honoring STOCKTAKE_CONFIG_PATH."""
    reader = env_reader or EnvReader()
    env_path = reader.get_path("STOCKTAKE_CONFIG_PATH")
    if env_path is not None:
        return env_path
    return get_data_dir(reader) / CONFIG_FILE_NAME


def load_config_file(path: Path, *, strict: bool = False) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Config file location.
        strict: If True, raise ConfigFileError on parse failures.
                If False (default), return an empty dict on errors.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist.
    """
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with path.open("rb") as f:
            config = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            raise ConfigFileError(f"Cannot parse {path}: {e}") from e
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}

    logger.debug("Loaded config from %s", path)
    return config


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    database_path: Path | None = None,
    log_level: str | None = None,
    log_file: Path | None = None,
    log_format: str | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> StocktakeConfig:
    """Get stocktake configuration with full precedence handling.

    Args:
        config_path: Config file (overrides STOCKTAKE_CONFIG_PATH).
        database_path: CLI override for the database file.
        log_level: CLI override for the log level.
        log_file: CLI override for the log file.
        log_format: CLI override for the log format ("text" or "json").
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise ConfigFileError on config file parse failures.

    Returns:
        StocktakeConfig with merged configuration. When no database path is
        configured anywhere, it defaults to <data dir>/stocktake.db.
    """
    reader = env_reader or EnvReader()
    path = config_path if config_path is not None else get_default_config_path(reader)

    file_config = load_config_file(path, strict=strict)

    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config))
    builder.apply(source_from_env(reader))
    builder.apply(
        ConfigSource(
            database_path=database_path,
            logging_level=log_level,
            logging_file=log_file,
            logging_format=log_format,
        )
    )
    config = builder.build()

    if config.database_path is None:
        config.database_path = get_data_dir(reader) / DATABASE_FILE_NAME
    return config

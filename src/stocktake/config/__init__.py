"""Configuration management for stocktake.

Configuration is loaded with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (STOCKTAKE_*)
3. Config file (~/.stocktake/config.toml)
4. Default values (lowest priority)
"""

from stocktake.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from stocktake.config.env import EnvReader
from stocktake.config.loader import (
    ConfigFileError,
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from stocktake.config.models import LoggingConfig, StocktakeConfig, SyncConfig

__all__ = [
    # Models
    "LoggingConfig",
    "StocktakeConfig",
    "SyncConfig",
    # Loader
    "ConfigFileError",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
    # Builder
    "ConfigBuilder",
    "ConfigSource",
    "EnvReader",
    "source_from_env",
    "source_from_file",
]

"""Configuration data models.

This module defines dataclasses for stocktake configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class SyncConfig:
    """Configuration for synchronization with the remote authority."""

    # URL probed to decide whether the remote is reachable (None = always offline)
    probe_url: str | None = None

    # Upper bound for each remote push/pull call
    timeout_seconds: float = 30.0

    # Upper bound for one connectivity probe
    probe_timeout_seconds: float = 5.0

    # Seconds between connectivity checks of the background watcher
    watch_interval_seconds: float = 30.0

    def __post_init__(self) -> None:
        """Validate configuration."""
        for name in ("timeout_seconds", "probe_timeout_seconds", "watch_interval_seconds"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be > 0, got {value}")


@dataclass
class StocktakeConfig:
    """Main configuration container."""

    # Record store location (None = ~/.stocktake/stocktake.db)
    database_path: Path | None = None

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)

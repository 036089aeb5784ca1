"""Root logger setup for the stocktake CLI.

Log records go to a rotating file when one is configured, otherwise to
stderr. Command output itself is written with click.echo on stdout and is
never routed through logging.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from stocktake.logging.context import ListContextFilter
from stocktake.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from stocktake.config.models import LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(list_tag)s%(name)s: %(message)s"


def _make_formatter(config: LoggingConfig) -> logging.Formatter:
    if config.format.lower() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")


def _open_log_file(config: LoggingConfig) -> logging.Handler | None:
    """Open the rotating log file, or return None if it cannot be opened."""
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        # Logging is not set up yet, so say it directly.
        print(
            f"stocktake: cannot write log file {path} ({e}), logging to stderr",
            file=sys.stderr,
        )
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to config.

    Args:
        config: Logging configuration.
    """
    handlers: list[logging.Handler] = []
    if config.file:
        file_handler = _open_log_file(config)
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = _make_formatter(config)
    list_filter = ListContextFilter()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(list_filter)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(config.level.upper())
    for handler in handlers:
        root.addHandler(handler)

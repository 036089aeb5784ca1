"""Structured logging module for stocktake.

Provides configurable logging with JSON format support and file rotation.
Log records are tagged with the inventory list being worked on.
"""

from stocktake.logging.config import configure_logging
from stocktake.logging.context import (
    ListContextFilter,
    get_list_context,
    list_context,
    set_list_context,
)
from stocktake.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "ListContextFilter",
    "configure_logging",
    "get_list_context",
    "list_context",
    "set_list_context",
]

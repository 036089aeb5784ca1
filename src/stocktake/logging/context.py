"""List context for structured logging.

Provides context propagation using contextvars, so every log record emitted
while working on a list carries that list's id.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_list_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "list_id", default=None
)


def set_list_context(list_id: str | None) -> None:
    """Set the list id attached to subsequent log records."""
    _list_id.set(list_id)


def get_list_context() -> str | None:
    """Get the current list id, or None."""
    return _list_id.get()


@contextmanager
def list_context(list_id: str) -> Generator[None, None, None]:
    """Context manager that tags log records with a list id.

    Restores the previous list id on exit. Safe across asyncio tasks via
    contextvars.

    Example:
        with list_context("L1"):
            logger.info("Scan recorded")  # Rendered as "[L:L1] Scan recorded"
    """
    token = _list_id.set(list_id)
    try:
        yield
    finally:
        _list_id.reset(token)


class ListContextFilter(logging.Filter):
    """Logging filter that injects the list context into log records.

    Adds a list_id attribute for JSON output and a compact list_tag such as
    "[L:L1] " for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject list context into the log record. Never filters records out."""
        list_id = _list_id.get()
        record.list_id = list_id
        record.list_tag = f"[L:{list_id}] " if list_id else ""
        return True

"""Domain enums for stocktake.

These enums are the result values of the reconciliation and sync operations.
"Not found" and "not connected" are ordinary outcomes, not exceptions.
"""

from enum import Enum


class ScanResult(Enum):
    """Outcome of recording one scan event."""

    RECORDED = "recorded"  # Count for the article was incremented
    NOT_FOUND = "not_found"  # No active list, or article not in the active list


class ListSelection(Enum):
    """Outcome of selecting the active inventory list."""

    SELECTED = "selected"
    NOT_FOUND = "not_found"


class SyncOutcome(Enum):
    """Outcome of a synchronization attempt.

    Only SYNCED updates the persisted sync state. Every other outcome leaves
    local data untouched and is retried on the next opportunity.
    """

    SYNCED = "synced"
    NOT_CONNECTED = "not_connected"
    SYNC_FAILED = "sync_failed"
    NOTHING_TO_PUSH = "nothing_to_push"  # Connected, but no list is active

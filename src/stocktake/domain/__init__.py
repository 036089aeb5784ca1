"""Domain models and enums for stocktake.

This package contains the core domain types that are independent of storage:

- Domain models: InventoryList, ExpectedItem, ScanLedger, MissingItem,
  SyncState, SyncPayload
- Domain enums: ScanResult, ListSelection, SyncOutcome

Usage:
    from stocktake.domain import InventoryList, ScanLedger
    from stocktake.domain import ScanResult, SyncOutcome
"""

from .enums import ListSelection, ScanResult, SyncOutcome
from .models import (
    ExpectedItem,
    InventoryList,
    MissingItem,
    ScanLedger,
    SyncPayload,
    SyncState,
)

__all__ = [
    # Models
    "ExpectedItem",
    "InventoryList",
    "MissingItem",
    "ScanLedger",
    "SyncPayload",
    "SyncState",
    # Enums
    "ListSelection",
    "ScanResult",
    "SyncOutcome",
]

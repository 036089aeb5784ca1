"""Typed record access for stocktake.

Usage:
    from stocktake.repository import ListRepository

    repository = ListRepository(store)
    ledger = await repository.get_scan_ledger("L1")
"""

from stocktake.repository.importer import (
    load_inventory_lists_file,
    parse_inventory_lists,
)
from stocktake.repository.lists import (
    INVENTORY_LISTS_KEY,
    LAST_SYNC_KEY,
    ListRepository,
    missing_items_key,
    scanned_items_key,
    validate_inventory_lists,
)

__all__ = [
    "INVENTORY_LISTS_KEY",
    "LAST_SYNC_KEY",
    "ListRepository",
    "load_inventory_lists_file",
    "missing_items_key",
    "parse_inventory_lists",
    "scanned_items_key",
    "validate_inventory_lists",
]

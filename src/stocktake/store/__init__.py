"""Durable record storage for stocktake.

Usage:
    from stocktake.store import PersistentStore

    store = PersistentStore(db_path)
    await store.write("inventory_lists", payload)
"""

from stocktake.store.connection import (
    DEFAULT_DB_PATH,
    execute_with_retry,
    get_connection,
    get_default_db_path,
)
from stocktake.store.records import PersistentStore
from stocktake.store.schema import SCHEMA_VERSION, create_schema

__all__ = [
    "DEFAULT_DB_PATH",
    "PersistentStore",
    "SCHEMA_VERSION",
    "create_schema",
    "execute_with_retry",
    "get_connection",
    "get_default_db_path",
]

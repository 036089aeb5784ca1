"""Record store schema for stocktake.

The store is a single key/value table. Each logical record (an inventory
list collection, one list's ledger, one list's report, the sync state) is
one row, so writes to different records never touch the same row.
"""

import sqlite3

SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- Schema version tracking
CREATE TABLE IF NOT EXISTS _meta (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

-- Logical records keyed by name, e.g. "scanned_items_<listId>"
CREATE TABLE IF NOT EXISTS records (
    key TEXT PRIMARY KEY,
    value BLOB NOT NULL,
    updated_at TEXT NOT NULL  -- ISO 8601 UTC timestamp
);
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the record store schema if it doesn't exist.

    Args:
        conn: An open database connection.
    """
    conn.executescript(SCHEMA_SQL)
    conn.execute(
        "INSERT OR IGNORE INTO _meta (key, value) VALUES ('schema_version', ?)",
        (str(SCHEMA_VERSION),),
    )
    # executescript() commits implicitly; the INSERT above opens a new
    # transaction that must be closed before callers start their own.
    conn.commit()

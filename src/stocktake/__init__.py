"""Offline inventory reconciliation engine.

Counts scanned articles against an expected inventory list while offline,
persists every count locally, and synchronizes with a remote authority when
connectivity returns.
"""

__version__ = "0.1.0"

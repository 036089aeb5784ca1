"""Synchronization with the remote authority.

Usage:
    from stocktake.sync import HttpConnectivityProbe, SyncCoordinator

    coordinator = SyncCoordinator(repository, HttpConnectivityProbe(url), remote)
"""

from stocktake.sync.connectivity import HttpConnectivityProbe, StaticConnectivity
from stocktake.sync.coordinator import SyncCoordinator, SyncReport
from stocktake.sync.interfaces import ConnectivityProbe, RemoteCollaborator
from stocktake.sync.watcher import ConnectivityWatcher

__all__ = [
    "ConnectivityProbe",
    "ConnectivityWatcher",
    "HttpConnectivityProbe",
    "RemoteCollaborator",
    "StaticConnectivity",
    "SyncCoordinator",
    "SyncReport",
]

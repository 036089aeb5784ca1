"""Composition root.

Wires one PersistentStore, ListRepository, SyncCoordinator and
ReconciliationService together from a StocktakeConfig. Consumers receive the
service explicitly instead of reaching for a process-wide instance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from stocktake.config.models import StocktakeConfig
from stocktake.reconciliation.service import ReconciliationService
from stocktake.repository.lists import ListRepository
from stocktake.store.records import PersistentStore
from stocktake.sync.connectivity import HttpConnectivityProbe, StaticConnectivity
from stocktake.sync.coordinator import SyncCoordinator
from stocktake.sync.interfaces import ConnectivityProbe, RemoteCollaborator
from stocktake.sync.watcher import ConnectivityWatcher

logger = logging.getLogger(__name__)


@dataclass
class Stocktake:
    """The wired object graph for one device."""

    config: StocktakeConfig
    store: PersistentStore
    repository: ListRepository
    connectivity: ConnectivityProbe
    coordinator: SyncCoordinator
    service: ReconciliationService

    def create_watcher(self) -> ConnectivityWatcher:
        """Create a background watcher that syncs when connectivity returns."""
        return ConnectivityWatcher(
            self.service,
            self.connectivity,
            interval_seconds=self.config.sync.watch_interval_seconds,
        )

    async def aclose(self) -> None:
        """Release network resources held by the connectivity probe."""
        if isinstance(self.connectivity, HttpConnectivityProbe):
            await self.connectivity.aclose()


def build_connectivity(config: StocktakeConfig) -> ConnectivityProbe:
    """Create the connectivity probe described by the config."""
    if config.sync.probe_url:
        return HttpConnectivityProbe(
            config.sync.probe_url,
            timeout_seconds=config.sync.probe_timeout_seconds,
        )
    logger.debug("No probe URL configured, treating the device as offline")
    return StaticConnectivity(connected=False)


def build_stocktake(
    config: StocktakeConfig,
    *,
    remote: RemoteCollaborator | None = None,
    connectivity: ConnectivityProbe | None = None,
) -> Stocktake:
    """Wire the object graph.

    Args:
        config: Resolved configuration.
        remote: Remote collaborator; None means sync can never succeed.
        connectivity: Probe override; defaults to build_connectivity(config).
    """
    store = PersistentStore(config.database_path)
    repository = ListRepository(store)
    probe = connectivity if connectivity is not None else build_connectivity(config)
    coordinator = SyncCoordinator(
        repository,
        probe,
        remote,
        timeout_seconds=config.sync.timeout_seconds,
    )
    service = ReconciliationService(repository, coordinator)
    return Stocktake(
        config=config,
        store=store,
        repository=repository,
        connectivity=probe,
        coordinator=coordinator,
        service=service,
    )

"""Reconciliation service: the active list and its scan ledger.

The service holds at most one active inventory list together with its
in-memory ledger. Every mutation is persisted before it becomes visible in
memory, so a failed write leaves the count exactly as it was and a crash
loses at most the single scan in flight.

Operations on the same list id (scan, clear, report computation, list
activation and the sync snapshot) are serialized with one asyncio.Lock per
list id. Sync talks to the remote without holding that lock.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from stocktake.domain.enums import ListSelection, ScanResult, SyncOutcome
from stocktake.domain.models import (
    ExpectedItem,
    InventoryList,
    MissingItem,
    ScanLedger,
    SyncPayload,
)
from stocktake.logging.context import list_context
from stocktake.reconciliation.report import compute_missing_items
from stocktake.repository.lists import ListRepository
from stocktake.sync.coordinator import SyncCoordinator

logger = logging.getLogger(__name__)


@dataclass
class _ActiveList:
    """State of the ActiveList slot."""

    inventory_list: InventoryList
    ledger: ScanLedger
    items_by_article: dict[str, ExpectedItem] = field(init=False)

    def __post_init__(self) -> None:
        self.items_by_article = {
            item.article_number: item for item in self.inventory_list.items
        }

    @property
    def list_id(self) -> str:
        return self.inventory_list.id


class ReconciliationService:
    """Owns the active inventory list and records scans against it.

    Construct one per device and pass it to every consumer:

        store = PersistentStore(db_path)
        repository = ListRepository(store)
        service = ReconciliationService(repository, SyncCoordinator(...))
    """

    def __init__(
        self,
        repository: ListRepository,
        sync_coordinator: SyncCoordinator | None = None,
    ) -> None:
        self._repository = repository
        self._sync = sync_coordinator
        self._active: _ActiveList | None = None
        self._list_locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, list_id: str) -> asyncio.Lock:
        lock = self._list_locks.get(list_id)
        if lock is None:
            lock = self._list_locks[list_id] = asyncio.Lock()
        return lock

    @property
    def repository(self) -> ListRepository:
        """The repository this service persists through."""
        return self._repository

    # List selection

    async def load_inventory_lists(self) -> list[InventoryList]:
        """Return every inventory list known locally."""
        return await self._repository.get_inventory_lists()

    async def set_current_list(self, list_id: str) -> ListSelection:
        """Activate a list and load its ledger from the store.

        Calling this again with the active id reloads the ledger, so the
        persisted ledger is always the source of truth.

        Returns:
            SELECTED, or NOT_FOUND if no list has this id. In the NOT_FOUND
            case no list is active afterwards.
        """
        inventory_list = await self._repository.get_inventory_list(list_id)
        if inventory_list is None:
            logger.warning("Inventory list %r not found, no list is active", list_id)
            self._active = None
            return ListSelection.NOT_FOUND

        async with self._lock_for(list_id):
            ledger = await self._repository.get_scan_ledger(list_id)
            self._active = _ActiveList(inventory_list, ledger)

        with list_context(list_id):
            logger.info(
                "Activated list %r (%d item(s), %d scan(s) recorded)",
                inventory_list.name,
                len(inventory_list.items),
                ledger.total,
            )
        return ListSelection.SELECTED

    def get_current_list(self) -> InventoryList | None:
        """Return the active list, or None."""
        return self._active.inventory_list if self._active is not None else None

    def get_expected_items(self) -> list[ExpectedItem]:
        """Return the active list's expected items, [] if no list is active."""
        if self._active is None:
            return []
        return list(self._active.inventory_list.items)

    def find_item(self, article_number: str) -> ExpectedItem | None:
        """Look up an article in the active list."""
        if self._active is None:
            return None
        return self._active.items_by_article.get(article_number)

    def get_scanned_count(self, article_number: str) -> int:
        """Return the in-memory count for an article of the active list."""
        if self._active is None:
            return 0
        return self._active.ledger.count(article_number)

    # Counting

    async def scan(self, article_number: str) -> ScanResult:
        """Record one observation of an article.

        Returns:
            RECORDED if the count was incremented and persisted, NOT_FOUND
            if no list is active or the article is not on the active list.

        Raises:
            StorageFailure: If the ledger could not be persisted. The
                in-memory count is unchanged in that case.
        """
        while True:
            active = self._active
            if active is None:
                logger.info("Scan of %r ignored: no active list", article_number)
                return ScanResult.NOT_FOUND

            with list_context(active.list_id):
                if article_number not in active.items_by_article:
                    logger.info("Scan of %r not recorded: not on list", article_number)
                    return ScanResult.NOT_FOUND

                async with self._lock_for(active.list_id):
                    if self._active is not active:
                        # The list was switched or reloaded while waiting.
                        continue
                    updated = active.ledger.copy()
                    count = updated.increment(article_number)
                    await self._repository.save_scan_ledger(active.list_id, updated)
                    active.ledger = updated

                logger.debug("Recorded %r (count %d)", article_number, count)
                return ScanResult.RECORDED

    async def get_missing_items(self) -> list[MissingItem]:
        """Compute, persist and return the report for the active list.

        Returns:
            One line per expected item, or [] if no list is active.

        Raises:
            StorageFailure: If the report snapshot could not be persisted.
        """
        while True:
            active = self._active
            if active is None:
                return []

            async with self._lock_for(active.list_id):
                if self._active is not active:
                    continue
                items = compute_missing_items(active.inventory_list, active.ledger)
                await self._repository.save_missing_items(active.list_id, items)
                return items

    async def clear_current_list_data(self) -> None:
        """Reset the active list's ledger and report to empty.

        The list definition is kept. Does nothing if no list is active.

        Raises:
            StorageFailure: If the reset could not be persisted.
        """
        while True:
            active = self._active
            if active is None:
                return

            async with self._lock_for(active.list_id):
                if self._active is not active:
                    continue
                await self._repository.delete_scan_ledger(active.list_id)
                active.ledger = ScanLedger.empty(active.list_id)
                await self._repository.delete_missing_items(active.list_id)

            with list_context(active.list_id):
                logger.info("Cleared scan data for list %r", active.inventory_list.name)
            return

    # Sync

    async def sync(self) -> SyncOutcome:
        """Synchronize with the remote authority via the sync coordinator.

        Returns:
            The sync outcome. NOT_CONNECTED if no coordinator is configured.
        """
        if self._sync is None:
            logger.info("Sync skipped: no sync coordinator configured")
            return SyncOutcome.NOT_CONNECTED

        payload = await self._snapshot()
        report = await self._sync.sync(payload)
        if report.lists_pulled:
            await self._refresh_active_definition()
        return report.outcome

    async def _snapshot(self) -> SyncPayload | None:
        """Take a consistent copy of the active ledger and its report."""
        while True:
            active = self._active
            if active is None:
                return None

            async with self._lock_for(active.list_id):
                if self._active is not active:
                    continue
                return SyncPayload(
                    list_id=active.list_id,
                    scanned_items=active.ledger.to_record(),
                    missing_items=compute_missing_items(
                        active.inventory_list, active.ledger
                    ),
                )

    async def _refresh_active_definition(self) -> None:
        """Swap in a pulled definition of the active list, keeping its ledger."""
        active = self._active
        if active is None:
            return

        refreshed = await self._repository.get_inventory_list(active.list_id)
        if refreshed is None or refreshed == active.inventory_list:
            return

        async with self._lock_for(active.list_id):
            current = self._active
            if current is None or current.list_id != refreshed.id:
                return
            self._active = _ActiveList(refreshed, current.ledger)

        with list_context(refreshed.id):
            logger.info("Active list definition updated from remote")

    async def get_last_sync_timestamp(self) -> str | None:
        """Return the ISO-8601 time of the last successful sync, or None."""
        state = await self._repository.get_sync_state()
        return state.last_sync_timestamp

    # Maintenance

    async def clear_all_data(self) -> None:
        """Delete all persisted data and deactivate the current list.

        Raises:
            StorageFailure: If the store could not be cleared.
        """
        await self._repository.clear_all_data()
        self._active = None

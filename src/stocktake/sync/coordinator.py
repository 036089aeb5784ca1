"""Opportunistic synchronization with the remote authority.

SyncCoordinator pushes a snapshot of the active list's counts and pulls the
canonical list definitions. It only reads and writes local state through the
ListRepository, and it never holds a ledger lock: the caller hands it an
already-consistent SyncPayload.

Every failure mode (offline, remote error, timeout) is non-fatal and leaves
local data as it was. The next attempt simply pushes the newest snapshot.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from stocktake.domain.enums import SyncOutcome
from stocktake.domain.models import SyncPayload
from stocktake.exceptions import InvalidInventoryListError, StorageFailure
from stocktake.repository.lists import ListRepository
from stocktake.sync.interfaces import ConnectivityProbe, RemoteCollaborator

logger = logging.getLogger(__name__)

DEFAULT_SYNC_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class SyncReport:
    """Result of one sync attempt.

    Attributes:
        outcome: What happened to the push.
        lists_pulled: True if remote list definitions were merged locally.
        last_sync_timestamp: Timestamp recorded on success, else None.
    """

    outcome: SyncOutcome
    lists_pulled: bool = False
    last_sync_timestamp: str | None = None


class SyncCoordinator:
    """Bridges local state to a remote collaborator when connectivity allows."""

    def __init__(
        self,
        repository: ListRepository,
        connectivity: ConnectivityProbe,
        remote: RemoteCollaborator | None = None,
        *,
        timeout_seconds: float = DEFAULT_SYNC_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the coordinator.

        Args:
            repository: Repository used for sync state and list definitions.
            connectivity: Probe queried before any remote call.
            remote: Remote collaborator, or None when none is configured.
            timeout_seconds: Upper bound for each remote call.
        """
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {timeout_seconds}")
        self._repository = repository
        self._connectivity = connectivity
        self._remote = remote
        self._timeout = timeout_seconds

    @property
    def has_remote(self) -> bool:
        """True if a remote collaborator is configured."""
        return self._remote is not None

    async def is_connected(self) -> bool:
        """Query the connectivity probe, treating errors and timeouts as offline."""
        try:
            return bool(
                await asyncio.wait_for(
                    self._connectivity.is_connected(), timeout=self._timeout
                )
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Connectivity probe timed out after %.1fs, assuming offline",
                self._timeout,
            )
            return False
        except Exception as e:  # a broken probe must not break sync callers
            logger.warning("Connectivity probe failed, assuming offline: %s", e)
            return False

    async def sync(self, payload: SyncPayload | None) -> SyncReport:
        """Attempt one push/pull cycle.

        Args:
            payload: Snapshot of the active list, or None if no list is active.

        Returns:
            SyncReport describing the attempt.
        """
        if not await self.is_connected():
            logger.info("Sync skipped: not connected")
            return SyncReport(SyncOutcome.NOT_CONNECTED)

        if payload is None:
            logger.info("Sync: no active list, pulling list definitions only")
            return SyncReport(
                SyncOutcome.NOTHING_TO_PUSH, lists_pulled=await self.pull_lists()
            )

        if not await self._push(payload):
            return SyncReport(SyncOutcome.SYNC_FAILED)

        try:
            state = await self._repository.update_sync_state()
        except StorageFailure as e:
            # The remote has the data; the next sync pushes it again.
            logger.error("Sync pushed but last sync time was not saved: %s", e)
            return SyncReport(SyncOutcome.SYNC_FAILED)

        logger.info(
            "Synced list %s (%d article(s) counted)",
            payload.list_id,
            len(payload.scanned_items),
        )
        lists_pulled = await self.pull_lists()
        return SyncReport(
            SyncOutcome.SYNCED,
            lists_pulled=lists_pulled,
            last_sync_timestamp=state.last_sync_timestamp,
        )

    async def _push(self, payload: SyncPayload) -> bool:
        """Push a snapshot, returning True only on confirmed success."""
        if self._remote is None:
            logger.warning("Sync failed: no remote collaborator configured")
            return False

        try:
            confirmed = await asyncio.wait_for(
                self._remote.push_pending_changes(payload), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Sync push for list %s timed out after %.1fs",
                payload.list_id,
                self._timeout,
            )
            return False
        except Exception as e:  # remote faults are retried on the next sync
            logger.warning("Sync push for list %s failed: %s", payload.list_id, e)
            return False

        if not confirmed:
            logger.warning("Sync push for list %s was rejected", payload.list_id)
            return False
        return True

    async def pull_lists(self) -> bool:
        """Pull remote list definitions and merge them locally.

        Remote definitions replace local ones with the same id. Ledgers and
        reports are never touched, so in-progress counts survive a pull.

        Returns:
            True if remote definitions were merged and saved.
        """
        if self._remote is None:
            return False

        try:
            remote_lists = await asyncio.wait_for(
                self._remote.pull_latest_lists(), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            logger.warning("Pulling list definitions timed out after %.1fs", self._timeout)
            return False
        except Exception as e:  # remote faults are retried on the next sync
            logger.warning("Pulling list definitions failed: %s", e)
            return False

        if remote_lists is None:
            logger.warning("Remote returned no list definitions")
            return False

        try:
            merged = await self._repository.merge_inventory_lists(remote_lists)
        except InvalidInventoryListError as e:
            logger.warning("Rejected remote list definitions: %s", e)
            return False
        except StorageFailure as e:
            logger.error("Could not save pulled list definitions: %s", e)
            return False

        logger.info(
            "Pulled %d list definition(s), %d known locally",
            len(remote_lists),
            len(merged),
        )
        return True

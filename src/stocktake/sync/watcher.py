"""Background connectivity watcher.

ConnectivityWatcher polls a connectivity probe and triggers a sync every
time the network comes back (offline -> online). It runs as an asyncio task
next to normal scanning and never blocks it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from stocktake.domain.enums import SyncOutcome
from stocktake.exceptions import StocktakeError
from stocktake.sync.interfaces import ConnectivityProbe

if TYPE_CHECKING:
    from stocktake.reconciliation.service import ReconciliationService

logger = logging.getLogger(__name__)


class ConnectivityWatcher:
    """Triggers ReconciliationService.sync() when connectivity returns."""

    def __init__(
        self,
        service: ReconciliationService,
        probe: ConnectivityProbe,
        *,
        interval_seconds: float = 30.0,
    ) -> None:
        """Initialize the watcher.

        Args:
            service: Service whose sync() is triggered.
            probe: Connectivity probe polled every interval.
            interval_seconds: Seconds between probes.
        """
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")
        self.interval_seconds = interval_seconds
        self._service = service
        self._probe = probe
        self._stop_event = asyncio.Event()
        self._state_lock = asyncio.Lock()
        self._running = False
        self._was_connected = False
        self._last_outcome: SyncOutcome | None = None
        self._sync_count = 0

    async def run(self) -> None:
        """Run the watch loop until stop() is called.

        It should be run as an asyncio task.
        """
        async with self._state_lock:
            if self._running:
                logger.warning("Connectivity watcher already running")
                return
            self._running = True
            self._stop_event.clear()

        logger.info(
            "Connectivity watcher started (interval %.1f seconds)",
            self.interval_seconds,
        )

        try:
            while not self._stop_event.is_set():
                await self.check_once()

                try:
                    await asyncio.wait_for(
                        self._stop_event.wait(),
                        timeout=self.interval_seconds,
                    )
                    break
                except asyncio.TimeoutError:
                    pass  # Normal case - interval elapsed
        except asyncio.CancelledError:
            pass
        finally:
            async with self._state_lock:
                self._running = False
            logger.info("Connectivity watcher stopped")

    async def check_once(self) -> SyncOutcome | None:
        """Probe once and sync on an offline -> online transition.

        Returns:
            The sync outcome if a sync was triggered, else None.
        """
        try:
            connected = bool(
                await asyncio.wait_for(
                    self._probe.is_connected(), timeout=self.interval_seconds
                )
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Connectivity probe timed out after %.1fs", self.interval_seconds
            )
            connected = False
        except Exception as e:  # a broken probe counts as offline
            logger.warning("Connectivity probe failed: %s", e)
            connected = False

        came_online = connected and not self._was_connected
        self._was_connected = connected
        if not came_online:
            return None

        logger.info("Connectivity restored, starting sync")
        try:
            outcome = await self._service.sync()
        except StocktakeError as e:
            logger.error("Sync after reconnect failed: %s", e)
            outcome = SyncOutcome.SYNC_FAILED

        if outcome is not SyncOutcome.SYNCED and outcome is not SyncOutcome.NOTHING_TO_PUSH:
            # Retry on the next check instead of waiting for another transition
            self._was_connected = False

        self._last_outcome = outcome
        self._sync_count += 1
        return outcome

    def stop(self) -> None:
        """Signal the watcher to stop."""
        self._stop_event.set()

    @property
    def is_running(self) -> bool:
        """Check if the watcher loop is running."""
        return self._running

    @property
    def last_outcome(self) -> SyncOutcome | None:
        """Outcome of the most recent triggered sync."""
        return self._last_outcome

    @property
    def sync_count(self) -> int:
        """Number of syncs triggered so far."""
        return self._sync_count

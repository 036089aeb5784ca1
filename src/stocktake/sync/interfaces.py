"""Capabilities the sync coordinator consumes.

The remote authority and the network probe live outside stocktake; these
protocols are the whole contract. The wire format behind them is up to the
implementation.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from stocktake.domain.models import InventoryList, SyncPayload


@runtime_checkable
class ConnectivityProbe(Protocol):
    """Answers whether the remote authority is currently reachable."""

    async def is_connected(self) -> bool:
        """Return True if connectivity is confirmed."""
        ...


@runtime_checkable
class RemoteCollaborator(Protocol):
    """Remote authority that accepts counts and serves list definitions.

    Both methods may also signal failure by raising; the coordinator treats
    any exception as a failed attempt.
    """

    async def push_pending_changes(self, payload: SyncPayload) -> bool:
        """Send a snapshot of one list's counts.

        Returns:
            True if the remote confirmed receipt.
        """
        ...

    async def pull_latest_lists(self) -> list[InventoryList] | None:
        """Fetch the canonical inventory list definitions.

        Returns:
            The remote lists, or None on failure.
        """
        ...

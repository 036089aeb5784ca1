"""Tests for SyncCoordinator."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from stocktake.domain.enums import SyncOutcome
from stocktake.domain.models import ExpectedItem, InventoryList, ScanLedger, SyncPayload
from stocktake.exceptions import StorageFailure
from stocktake.repository.lists import ListRepository
from stocktake.sync.connectivity import StaticConnectivity
from stocktake.sync.coordinator import SyncCoordinator
from stocktake.sync.interfaces import ConnectivityProbe

LAST_SYNC = "2024-01-01T00:00:00+00:00"


def _payload() -> SyncPayload:
    return SyncPayload(list_id="L1", scanned_items={"100": 1}, missing_items=[])


def _remote(push=True, pull=None) -> AsyncMock:
    remote = AsyncMock()
    remote.push_pending_changes.return_value = push
    remote.pull_latest_lists.return_value = pull
    return remote


class TestSyncCoordinatorInit:
    """Tests for construction."""

    def test_rejects_non_positive_timeout(self, repository: ListRepository) -> None:
        with pytest.raises(ValueError, match="timeout_seconds"):
            SyncCoordinator(repository, StaticConnectivity(), timeout_seconds=0)

    def test_has_remote(self, repository: ListRepository) -> None:
        assert not SyncCoordinator(repository, StaticConnectivity()).has_remote
        assert SyncCoordinator(repository, StaticConnectivity(), _remote()).has_remote

    def test_static_connectivity_satisfies_protocol(self) -> None:
        assert isinstance(StaticConnectivity(), ConnectivityProbe)


@pytest.mark.asyncio
class TestSyncOutcomes:
    """Tests for each sync() outcome."""

    async def test_not_connected(self, repository: ListRepository) -> None:
        await repository.update_sync_state(LAST_SYNC)
        remote = _remote()
        coordinator = SyncCoordinator(repository, StaticConnectivity(False), remote)

        report = await coordinator.sync(_payload())

        assert report.outcome is SyncOutcome.NOT_CONNECTED
        assert (await repository.get_sync_state()).last_sync_timestamp == LAST_SYNC
        remote.push_pending_changes.assert_not_awaited()

    async def test_probe_error_counts_as_offline(self, repository: ListRepository) -> None:
        probe = AsyncMock()
        probe.is_connected.side_effect = RuntimeError("no radio")
        coordinator = SyncCoordinator(repository, probe, _remote())

        report = await coordinator.sync(_payload())

        assert report.outcome is SyncOutcome.NOT_CONNECTED

    async def test_hanging_probe_counts_as_offline(
        self, repository: ListRepository
    ) -> None:
        class HangingProbe:
            async def is_connected(self) -> bool:
                await asyncio.sleep(10)
                return True

        remote = _remote()
        coordinator = SyncCoordinator(
            repository, HangingProbe(), remote, timeout_seconds=0.05
        )

        report = await asyncio.wait_for(coordinator.sync(_payload()), timeout=5)

        assert report.outcome is SyncOutcome.NOT_CONNECTED
        remote.push_pending_changes.assert_not_awaited()

    async def test_synced(self, repository: ListRepository) -> None:
        coordinator = SyncCoordinator(repository, StaticConnectivity(True), _remote())

        report = await coordinator.sync(_payload())

        assert report.outcome is SyncOutcome.SYNCED
        assert report.last_sync_timestamp is not None
        state = await repository.get_sync_state()
        assert state.last_sync_timestamp == report.last_sync_timestamp

    async def test_no_remote_fails(self, repository: ListRepository) -> None:
        coordinator = SyncCoordinator(repository, StaticConnectivity(True))
        report = await coordinator.sync(_payload())
        assert report.outcome is SyncOutcome.SYNC_FAILED

    async def test_rejected_push_fails(self, repository: ListRepository) -> None:
        await repository.update_sync_state(LAST_SYNC)
        coordinator = SyncCoordinator(
            repository, StaticConnectivity(True), _remote(push=False)
        )

        report = await coordinator.sync(_payload())

        assert report.outcome is SyncOutcome.SYNC_FAILED
        assert (await repository.get_sync_state()).last_sync_timestamp == LAST_SYNC

    async def test_push_exception_fails(self, repository: ListRepository) -> None:
        remote = _remote()
        remote.push_pending_changes.side_effect = ConnectionError("reset by peer")
        coordinator = SyncCoordinator(repository, StaticConnectivity(True), remote)

        report = await coordinator.sync(_payload())

        assert report.outcome is SyncOutcome.SYNC_FAILED
        remote.pull_latest_lists.assert_not_awaited()

    async def test_push_timeout_fails(self, repository: ListRepository) -> None:
        remote = _remote()

        async def hang(payload):
            await asyncio.sleep(10)
            return True

        remote.push_pending_changes.side_effect = hang
        coordinator = SyncCoordinator(
            repository, StaticConnectivity(True), remote, timeout_seconds=0.05
        )

        report = await asyncio.wait_for(coordinator.sync(_payload()), timeout=5)

        assert report.outcome is SyncOutcome.SYNC_FAILED
        assert (await repository.get_sync_state()).last_sync_timestamp is None

    async def test_unsaved_timestamp_fails(self, repository: ListRepository) -> None:
        coordinator = SyncCoordinator(repository, StaticConnectivity(True), _remote())
        with patch.object(
            repository,
            "update_sync_state",
            AsyncMock(side_effect=StorageFailure("last_sync", "write")),
        ):
            report = await coordinator.sync(_payload())
        assert report.outcome is SyncOutcome.SYNC_FAILED

    async def test_nothing_to_push_still_pulls(
        self, provisioned: ListRepository
    ) -> None:
        remote = _remote(pull=[InventoryList(id="L9", name="Remote only")])
        coordinator = SyncCoordinator(provisioned, StaticConnectivity(True), remote)

        report = await coordinator.sync(None)

        assert report.outcome is SyncOutcome.NOTHING_TO_PUSH
        assert report.lists_pulled is True
        remote.push_pending_changes.assert_not_awaited()
        assert (await provisioned.get_inventory_list("L9")) is not None
        assert (await provisioned.get_sync_state()).last_sync_timestamp is None


@pytest.mark.asyncio
class TestPullLists:
    """Tests for pulling canonical list definitions."""

    async def test_pull_replaces_by_id_and_keeps_ledgers(
        self, provisioned: ListRepository
    ) -> None:
        await provisioned.save_scan_ledger("L1", ScanLedger("L1", {"100": 2}))
        remote_l1 = InventoryList(
            id="L1", name="Remote A", items=(ExpectedItem("100", expected_quantity=9),)
        )
        coordinator = SyncCoordinator(
            provisioned, StaticConnectivity(True), _remote(pull=[remote_l1])
        )

        report = await coordinator.sync(_payload())

        assert report.lists_pulled is True
        assert await provisioned.get_inventory_list("L1") == remote_l1
        assert (await provisioned.get_inventory_list("L2")).name == "Shelf B"
        assert (await provisioned.get_scan_ledger("L1")).count("100") == 2

    async def test_pull_failure_does_not_fail_sync(
        self, provisioned: ListRepository
    ) -> None:
        remote = _remote()
        remote.pull_latest_lists.side_effect = ConnectionError("gone")
        coordinator = SyncCoordinator(provisioned, StaticConnectivity(True), remote)

        report = await coordinator.sync(_payload())

        assert report.outcome is SyncOutcome.SYNCED
        assert report.lists_pulled is False
        assert len(await provisioned.get_inventory_lists()) == 2

    async def test_invalid_remote_lists_are_rejected(
        self, provisioned: ListRepository, shelf_a: InventoryList
    ) -> None:
        bad = InventoryList(
            id="L1", name="Bad", items=(ExpectedItem("1"), ExpectedItem("1"))
        )
        coordinator = SyncCoordinator(
            provisioned, StaticConnectivity(True), _remote(pull=[bad])
        )

        assert await coordinator.pull_lists() is False
        assert await provisioned.get_inventory_list("L1") == shelf_a

    async def test_none_from_remote(self, provisioned: ListRepository) -> None:
        coordinator = SyncCoordinator(
            provisioned, StaticConnectivity(True), _remote(pull=None)
        )
        assert await coordinator.pull_lists() is False

    async def test_unreadable_local_lists_are_not_overwritten(
        self, provisioned: ListRepository
    ) -> None:
        coordinator = SyncCoordinator(
            provisioned,
            StaticConnectivity(True),
            _remote(pull=[InventoryList(id="L9", name="Remote only")]),
        )
        with patch.object(
            provisioned.store,
            "read",
            AsyncMock(side_effect=StorageFailure("inventory_lists", "read")),
        ):
            assert await coordinator.pull_lists() is False

        lists = await provisioned.get_inventory_lists()
        assert [lst.id for lst in lists] == ["L1", "L2"]

"""Typed access to inventory lists, scan ledgers, reports and sync state.

ListRepository marshals the four record kinds onto PersistentStore keys.

Error policy:
- Save paths propagate StorageFailure. Serialization faults on a save path
  are converted to StorageFailure as well, since a silently dropped write
  would corrupt the count.
- Read paths never raise. A missing, unreadable or corrupt record resolves
  to an empty default and a logged warning; list definitions can be
  re-provisioned and an empty ledger is the same as "nothing scanned yet".
- merge_inventory_lists() is a read-modify-write and reads strictly: it
  raises StorageFailure rather than merge over a collection it could not
  read whole.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from pydantic import ValidationError

from stocktake.core.datetime_utils import utc_now_iso
from stocktake.core.json_utils import dump_json_bytes, parse_json_with_schema
from stocktake.domain.models import InventoryList, MissingItem, ScanLedger, SyncState
from stocktake.exceptions import InvalidInventoryListError, StorageFailure
from stocktake.repository.json_schemas import (
    InventoryListSchema,
    InventoryListsRecord,
    MissingItemSchema,
    MissingItemsRecord,
    RawInventoryListsRecord,
    ScanLedgerRecord,
    SyncStateRecord,
)
from stocktake.store.records import PersistentStore

logger = logging.getLogger(__name__)

INVENTORY_LISTS_KEY = "inventory_lists"
SCANNED_ITEMS_PREFIX = "scanned_items"
MISSING_ITEMS_PREFIX = "missing_items"
LAST_SYNC_KEY = "last_sync"


def scanned_items_key(list_id: str) -> str:
    """Return the record key of a list's scan ledger."""
    return f"{SCANNED_ITEMS_PREFIX}_{list_id}"


def missing_items_key(list_id: str) -> str:
    """Return the record key of a list's missing-items report."""
    return f"{MISSING_ITEMS_PREFIX}_{list_id}"


def validate_inventory_lists(lists: Sequence[InventoryList]) -> InventoryListsRecord:
    """Validate list definitions and return their record form.

    Raises:
        InvalidInventoryListError: On duplicate ids, duplicate article
            numbers within a list, or other schema violations.
    """
    try:
        return InventoryListsRecord(
            [InventoryListSchema.from_domain(inventory_list) for inventory_list in lists]
        )
    except ValidationError as e:
        raise InvalidInventoryListError(_describe_validation_error(e)) from e


def _describe_validation_error(error: ValidationError) -> str:
    errors = error.errors()
    if not errors:
        return str(error)
    first = errors[0]
    location = ".".join(str(loc) for loc in first.get("loc", ()))
    message = first.get("msg", "validation error")
    return f"{location}: {message}" if location else message


class ListRepository:
    """Typed accessor over a PersistentStore."""

    def __init__(self, store: PersistentStore) -> None:
        self._store = store

    @property
    def store(self) -> PersistentStore:
        """The underlying record store."""
        return self._store

    async def _read(self, key: str) -> bytes | None:
        """Read a record, degrading storage faults to None."""
        try:
            return await self._store.read(key)
        except StorageFailure as e:
            logger.warning("Reading %s failed, using default: %s", key, e)
            return None

    async def _write_json(self, key: str, data: object) -> None:
        """Serialize and durably write a record."""
        try:
            payload = dump_json_bytes(data, context=key)
        except TypeError as e:
            raise StorageFailure(key, "serialize", str(e)) from e
        await self._store.write(key, payload)

    # Inventory lists

    async def get_inventory_lists(self) -> list[InventoryList]:
        """Return all stored inventory lists, or [] if none can be read.

        Entries that fail validation are skipped with a warning. When an id
        repeats, the first entry wins.
        """
        raw = await self._read(INVENTORY_LISTS_KEY)
        result = parse_json_with_schema(
            raw, RawInventoryListsRecord, context=INVENTORY_LISTS_KEY
        )
        if not result.success or result.value is None:
            return []

        lists: list[InventoryList] = []
        seen_ids: set[str] = set()
        for index, entry in enumerate(result.value.root):
            try:
                schema = InventoryListSchema.model_validate(entry)
            except ValidationError as e:
                logger.warning(
                    "Skipping invalid inventory list at index %d: %s",
                    index,
                    _describe_validation_error(e),
                )
                continue
            if schema.id in seen_ids:
                logger.warning("Skipping duplicate inventory list id %r", schema.id)
                continue
            seen_ids.add(schema.id)
            lists.append(schema.to_domain())
        return lists

    async def get_inventory_list(self, list_id: str) -> InventoryList | None:
        """Return one stored inventory list by id, or None."""
        for inventory_list in await self.get_inventory_lists():
            if inventory_list.id == list_id:
                return inventory_list
        return None

    async def _read_inventory_lists_strict(self) -> list[InventoryList]:
        """Read the stored collection for a read-modify-write.

        Unlike get_inventory_lists(), nothing is skipped or defaulted: a
        collection that cannot be read back whole must not be overwritten.

        Raises:
            StorageFailure: If the record cannot be read or fails validation.
        """
        raw = await self._store.read(INVENTORY_LISTS_KEY)
        result = parse_json_with_schema(
            raw, InventoryListsRecord, context=INVENTORY_LISTS_KEY
        )
        if not result.success:
            raise StorageFailure(
                INVENTORY_LISTS_KEY, "merge into", result.error or "corrupt record"
            )
        if result.value is None:
            return []
        return [schema.to_domain() for schema in result.value.root]

    async def save_inventory_lists(self, lists: Sequence[InventoryList]) -> None:
        """Replace the stored collection of inventory lists.

        Raises:
            InvalidInventoryListError: If the definitions are invalid.
            StorageFailure: If the collection could not be written.
        """
        record = validate_inventory_lists(lists)
        await self._write_json(INVENTORY_LISTS_KEY, record.model_dump(by_alias=True))
        logger.info("Saved %d inventory list(s)", len(lists))

    async def merge_inventory_lists(
        self, incoming: Iterable[InventoryList]
    ) -> list[InventoryList]:
        """Merge list definitions into the stored collection and save it.

        Incoming definitions replace stored lists with the same id, lists
        with new ids are appended, and stored lists absent from incoming are
        kept. Ledgers and reports are never touched.

        Returns:
            The merged collection as saved.

        Raises:
            InvalidInventoryListError: If the incoming definitions are invalid.
            StorageFailure: If the collection could not be written. It is also raised
                if the stored collection cannot be read or is corrupt, in
                which case nothing is written.
        """
        incoming_by_id: dict[str, InventoryList] = {}
        for inventory_list in incoming:
            if inventory_list.id in incoming_by_id:
                raise InvalidInventoryListError(
                    f"duplicate inventory list id: {inventory_list.id!r}"
                )
            incoming_by_id[inventory_list.id] = inventory_list

        merged: list[InventoryList] = []
        for existing in await self._read_inventory_lists_strict():
            merged.append(incoming_by_id.pop(existing.id, existing))
        merged.extend(incoming_by_id.values())

        await self.save_inventory_lists(merged)
        return merged

    # Scan ledgers

    async def get_scan_ledger(self, list_id: str) -> ScanLedger:
        """Return the scan ledger for a list, empty if none is stored."""
        key = scanned_items_key(list_id)
        raw = await self._read(key)
        result = parse_json_with_schema(raw, ScanLedgerRecord, context=key)
        if not result.success or result.value is None:
            return ScanLedger.empty(list_id)
        return ScanLedger.from_record(list_id, result.value.root)

    async def save_scan_ledger(self, list_id: str, ledger: ScanLedger) -> None:
        """Durably store the scan ledger for a list.

        Raises:
            StorageFailure: If the ledger could not be written.
        """
        if ledger.list_id != list_id:
            raise ValueError(
                f"Ledger belongs to list {ledger.list_id!r}, not {list_id!r}"
            )
        await self._write_json(scanned_items_key(list_id), ledger.to_record())

    async def delete_scan_ledger(self, list_id: str) -> None:
        """Remove a list's ledger so that it reads back as empty.

        Raises:
            StorageFailure: If the deletion could not be committed.
        """
        await self._store.delete(scanned_items_key(list_id))

    async def get_counted_list_ids(self) -> list[str]:
        """Return the ids of lists that have a stored scan ledger, sorted."""
        prefix = f"{SCANNED_ITEMS_PREFIX}_"
        try:
            keys = await self._store.keys(prefix)
        except StorageFailure as e:
            logger.warning("Listing scan ledgers failed: %s", e)
            return []
        return [key[len(prefix):] for key in keys]

    # Missing-items reports

    async def get_missing_items(self, list_id: str) -> list[MissingItem]:
        """Return the last persisted report for a list, [] if none."""
        key = missing_items_key(list_id)
        raw = await self._read(key)
        result = parse_json_with_schema(raw, MissingItemsRecord, context=key)
        if not result.success or result.value is None:
            return []
        return [item.to_domain() for item in result.value.root]

    async def save_missing_items(
        self, list_id: str, items: Sequence[MissingItem]
    ) -> None:
        """Durably store the report snapshot for a list.

        Raises:
            StorageFailure: If the report could not be written.
        """
        record = MissingItemsRecord([MissingItemSchema.from_domain(item) for item in items])
        await self._write_json(missing_items_key(list_id), record.model_dump(by_alias=True))

    async def delete_missing_items(self, list_id: str) -> None:
        """Remove a list's report snapshot so that it reads back as [].

        Raises:
            StorageFailure: If the deletion could not be committed.
        """
        await self._store.delete(missing_items_key(list_id))

    # Sync state

    async def get_sync_state(self) -> SyncState:
        """Return the persisted sync state."""
        raw = await self._read(LAST_SYNC_KEY)
        result = parse_json_with_schema(raw, SyncStateRecord, context=LAST_SYNC_KEY)
        if not result.success or result.value is None:
            return SyncState()
        return SyncState(last_sync_timestamp=result.value.root)

    async def update_sync_state(self, timestamp: str | None = None) -> SyncState:
        """Record a successful sync.

        Args:
            timestamp: ISO-8601 timestamp. Defaults to now (UTC).

        Returns:
            The new sync state.

        Raises:
            StorageFailure: If the timestamp could not be written.
        """
        state = SyncState(last_sync_timestamp=timestamp or utc_now_iso())
        await self._write_json(LAST_SYNC_KEY, state.last_sync_timestamp)
        return state

    # Maintenance

    async def clear_all_data(self) -> None:
        """Delete every record, including sync state.

        Raises:
            StorageFailure: If the store could not be cleared.
        """
        await self._store.clear_all()
        logger.warning("All stocktake data was cleared")

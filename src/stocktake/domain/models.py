"""Domain models for stocktake.

This module contains the core domain types shared by the repository, the
reconciliation service and the sync coordinator. They are independent of the
on-disk record layout, which lives in stocktake.repository.json_schemas.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class ExpectedItem:
    """An article that is expected to be found during a stock count."""

    article_number: str  # Join key for scan events, unique within a list
    description: str = ""
    expected_quantity: int = 0
    image_path: str = ""

    def __post_init__(self) -> None:
        """Validate the expected quantity."""
        if self.expected_quantity < 0:
            raise ValueError(
                f"expected_quantity must be >= 0, got {self.expected_quantity} "
                f"for article {self.article_number!r}"
            )


@dataclass(frozen=True)
class InventoryList:
    """A named manifest of expected items.

    Lists are provisioned externally and are immutable for a session, except
    for whole-list replacement by id when a sync pulls newer definitions.
    """

    id: str
    name: str
    description: str = ""
    items: tuple[ExpectedItem, ...] = ()


class ScanLedger:
    """Scanned counts per article number for exactly one inventory list.

    Absence of an article is equivalent to a count of zero. Counts only grow
    through increment(); a ledger is reset by replacing it with an empty one.
    """

    __slots__ = ("list_id", "_counts")

    def __init__(self, list_id: str, counts: Mapping[str, int] | None = None) -> None:
        self.list_id = list_id
        self._counts: dict[str, int] = {}
        for article_number, count in (counts or {}).items():
            if count < 0:
                raise ValueError(
                    f"Scanned count for {article_number!r} must be >= 0, got {count}"
                )
            self._counts[article_number] = count

    @classmethod
    def empty(cls, list_id: str) -> ScanLedger:
        """Create an empty ledger for a list."""
        return cls(list_id)

    @classmethod
    def from_record(cls, list_id: str, record: Mapping[str, int]) -> ScanLedger:
        """Rebuild a ledger from its plain key/value record."""
        return cls(list_id, record)

    def to_record(self) -> dict[str, int]:
        """Return the plain key/value record for persistence."""
        return dict(self._counts)

    def count(self, article_number: str) -> int:
        """Return the scanned count for an article (0 when never scanned)."""
        return self._counts.get(article_number, 0)

    def increment(self, article_number: str) -> int:
        """Add exactly one scan for an article and return the new count."""
        new_count = self._counts.get(article_number, 0) + 1
        self._counts[article_number] = new_count
        return new_count

    def copy(self) -> ScanLedger:
        """Return an independent copy of this ledger."""
        return ScanLedger(self.list_id, self._counts)

    @property
    def total(self) -> int:
        """Total number of recorded scans across all articles."""
        return sum(self._counts.values())

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, article_number: object) -> bool:
        return article_number in self._counts

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScanLedger):
            return NotImplemented
        return self.list_id == other.list_id and self._counts == other._counts

    def __repr__(self) -> str:
        return f"ScanLedger(list_id={self.list_id!r}, counts={self._counts!r})"


@dataclass(frozen=True)
class MissingItem:
    """Report line for one expected item: expected versus scanned quantity.

    missing is expected_quantity - scanned_quantity and is never clamped, so
    a negative value signals an over-scan.
    """

    article_number: str
    description: str
    expected_quantity: int
    image_path: str
    scanned_quantity: int
    missing: int

    @classmethod
    def from_expected(cls, item: ExpectedItem, scanned_quantity: int) -> MissingItem:
        """Derive the report line for an expected item."""
        return cls(
            article_number=item.article_number,
            description=item.description,
            expected_quantity=item.expected_quantity,
            image_path=item.image_path,
            scanned_quantity=scanned_quantity,
            missing=item.expected_quantity - scanned_quantity,
        )


@dataclass(frozen=True)
class SyncState:
    """Process-wide synchronization metadata."""

    last_sync_timestamp: str | None = None  # ISO-8601 UTC, None if never synced


@dataclass(frozen=True)
class SyncPayload:
    """Consistent snapshot of one list's counts handed to the remote side."""

    list_id: str
    scanned_items: dict[str, int]
    missing_items: list[MissingItem]
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

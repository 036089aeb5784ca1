"""Missing-items report computation.

The report is a pure function of an inventory list and a scan ledger at the
moment of computation. Nothing here touches storage.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from stocktake.domain.models import InventoryList, MissingItem, ScanLedger


@dataclass(frozen=True)
class ReportSummary:
    """Totals over one missing-items report."""

    article_count: int
    expected_total: int
    scanned_total: int
    missing_total: int  # Sum of positive shortfalls only
    short_articles: int  # Articles with missing > 0
    over_scanned_articles: int  # Articles with missing < 0

    @property
    def is_complete(self) -> bool:
        """True when every article was counted exactly as expected."""
        return self.short_articles == 0 and self.over_scanned_articles == 0


def compute_missing_items(
    inventory_list: InventoryList, ledger: ScanLedger
) -> list[MissingItem]:
    """Compute the report line for every expected item, in list order.

    Ledger entries for articles that are not in the list are ignored.
    """
    if ledger.list_id != inventory_list.id:
        raise ValueError(
            f"Ledger for list {ledger.list_id!r} cannot be applied to "
            f"list {inventory_list.id!r}"
        )
    return [
        MissingItem.from_expected(item, ledger.count(item.article_number))
        for item in inventory_list.items
    ]


def summarize_report(items: Sequence[MissingItem]) -> ReportSummary:
    """Aggregate a report into totals for display."""
    return ReportSummary(
        article_count=len(items),
        expected_total=sum(item.expected_quantity for item in items),
        scanned_total=sum(item.scanned_quantity for item in items),
        missing_total=sum(item.missing for item in items if item.missing > 0),
        short_articles=sum(1 for item in items if item.missing > 0),
        over_scanned_articles=sum(1 for item in items if item.missing < 0),
    )

"""Scan counting and missing-items reporting.

Usage:
    from stocktake.reconciliation import ReconciliationService

    service = ReconciliationService(repository)
    await service.set_current_list("L1")
    await service.scan("100")
    report = await service.get_missing_items()
"""

from stocktake.reconciliation.report import (
    ReportSummary,
    compute_missing_items,
    summarize_report,
)
from stocktake.reconciliation.service import ReconciliationService

__all__ = [
    "ReconciliationService",
    "ReportSummary",
    "compute_missing_items",
    "summarize_report",
]

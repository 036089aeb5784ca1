"""Tests for stocktake domain models."""

import pytest

from stocktake.domain.models import (
    ExpectedItem,
    MissingItem,
    ScanLedger,
)


class TestExpectedItem:
    """Tests for ExpectedItem validation."""

    def test_defaults(self) -> None:
        item = ExpectedItem("100")
        assert item.description == ""
        assert item.expected_quantity == 0
        assert item.image_path == ""

    def test_rejects_negative_quantity(self) -> None:
        with pytest.raises(ValueError, match="expected_quantity"):
            ExpectedItem("100", expected_quantity=-1)


class TestScanLedger:
    """Tests for ScanLedger counting."""

    def test_absent_article_counts_zero(self) -> None:
        ledger = ScanLedger.empty("L1")
        assert ledger.count("100") == 0
        assert "100" not in ledger
        assert len(ledger) == 0

    def test_increment_adds_exactly_one(self) -> None:
        ledger = ScanLedger.empty("L1")
        assert ledger.increment("100") == 1
        assert ledger.increment("100") == 2
        assert ledger.count("100") == 2
        assert ledger.total == 2

    def test_rejects_negative_counts(self) -> None:
        with pytest.raises(ValueError, match="must be >= 0"):
            ScanLedger("L1", {"100": -1})

    def test_copy_is_independent(self) -> None:
        ledger = ScanLedger("L1", {"100": 1})
        copied = ledger.copy()
        copied.increment("100")
        assert ledger.count("100") == 1
        assert copied.count("100") == 2

    def test_record_round_trip(self) -> None:
        ledger = ScanLedger("L1", {"100": 3, "200": 1})
        assert ScanLedger.from_record("L1", ledger.to_record()) == ledger

    def test_equality_includes_list_id(self) -> None:
        assert ScanLedger("L1", {"100": 1}) != ScanLedger("L2", {"100": 1})


class TestMissingItem:
    """Tests for MissingItem derivation."""

    def test_shortfall(self) -> None:
        item = ExpectedItem("100", description="Widget", expected_quantity=3)
        line = MissingItem.from_expected(item, 1)
        assert line.scanned_quantity == 1
        assert line.missing == 2
        assert line.description == "Widget"

    def test_over_scan_is_not_clamped(self) -> None:
        item = ExpectedItem("100", expected_quantity=1)
        assert MissingItem.from_expected(item, 3).missing == -2

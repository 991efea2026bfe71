"""Tests for domain entities."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from eventledger.domain.entities import (
    AutoReconcileResult,
    BatchResult,
    CategoryCode,
    EventPricing,
    LedgerEntry,
    LedgerStatus,
    ReconciliationAssignment,
    TransactionType,
    category_label,
)
from eventledger.domain.errors import ValidationError


class TestCategoryCode:
    """Tests for category code validation."""

    def test_normalizes(self):
        assert CategoryCode("  Other-Income ").value == "other-income"
        assert str(CategoryCode("venue")) == "venue"

    @pytest.mark.parametrize("value", ["", "   ", "-venue", "food & drink", None, 12])
    def test_rejects_malformed(self, value):
        with pytest.raises(ValidationError):
            CategoryCode(value)

    def test_equal_codes_are_interchangeable(self):
        assert CategoryCode("Venue") == CategoryCode("venue")
        assert len({CategoryCode("venue"), CategoryCode("VENUE")}) == 1

    def test_label(self):
        assert category_label(CategoryCode("food")) == "Food & Beverage"
        assert category_label(CategoryCode("photography")) == "photography"
        assert category_label(None) == "Uncategorized"


class TestLedgerEntry:
    """Tests for LedgerEntry entity."""

    def make(self, linked):
        now = datetime.now(UTC)
        return LedgerEntry(
            id=1,
            account_id=1,
            transaction_date=date(2025, 3, 1),
            type=TransactionType.INCOME,
            category=CategoryCode("ticket"),
            description="Ticket",
            amount=Decimal("80"),
            status=LedgerStatus.PENDING,
            created_at=now,
            updated_at=now,
            reconciled_bank_transaction_id=linked,
        )

    def test_is_reconciled(self):
        assert self.make(7).is_reconciled
        assert not self.make(None).is_reconciled

    def test_immutable(self):
        entry = self.make(None)
        with pytest.raises(AttributeError):
            entry.amount = Decimal("1")


def test_pricing_tier_order():
    pricing = EventPricing(regular_price=Decimal("100"), member_price=Decimal("80"))
    assert list(pricing.tiers()) == ["member", "regular", "alumni", "early-bird", "committee"]


def test_batch_result_summary():
    result = BatchResult(succeeded=(1, 2), failed=(("row 3", "Missing required field: amount"),))

    assert result.success_count == 2
    assert result.failure_count == 1
    assert result.summary() == "2 succeeded, 1 failed"


def test_auto_reconcile_result_counts_unmatched_as_failures():
    result = AutoReconcileResult(
        account_id=1,
        linked=(ReconciliationAssignment(1, 10),),
        unmatched_entry_ids=(2, 3),
        failed=((4, "boom"),),
        skipped_entry_ids=(5,),
    )

    assert result.success_count == 1
    assert result.failure_count == 3

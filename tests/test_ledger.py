"""Tests for ledger entry and planned item services."""

from datetime import date
from decimal import Decimal

import pytest

from eventledger.domain.entities import (
    CategoryCode,
    LedgerStatus,
    PlanStatus,
    TransactionType,
)
from eventledger.domain.errors import NotFoundError, ValidationError


class TestLedgerService:
    def test_create_entry(self, ledger_service, sample_account):
        entry_id = ledger_service.create_entry(
            account_id=sample_account.id,
            type="Income",
            category="ticket",
            description="Ticket John",
            amount="RM 80.00",
            transaction_date="2025-03-01",
            payer_payee="John",
            user_id="alice",
        )

        entry = ledger_service.get_entry(entry_id)
        assert entry.type == TransactionType.INCOME
        assert entry.category == CategoryCode("ticket")
        assert entry.amount == Decimal("80.00")
        assert entry.transaction_date == date(2025, 3, 1)
        assert entry.status == LedgerStatus.PENDING
        assert entry.created_by == "alice"
        assert not entry.is_reconciled

    @pytest.mark.parametrize(
        "overrides",
        [
            {"amount": "-5"},
            {"amount": "abc"},
            {"type": "transfer"},
            {"category": "bad code!"},
            {"description": "  "},
            {"transaction_date": "not a date"},
            {"status": "archived"},
        ],
    )
    def test_invalid_input(self, ledger_service, sample_account, overrides):
        fields = {
            "account_id": sample_account.id,
            "type": "income",
            "category": "ticket",
            "description": "Ticket",
            "amount": "80",
        }
        fields.update(overrides)
        with pytest.raises(ValidationError):
            ledger_service.create_entry(**fields)

    def test_unknown_account(self, ledger_service):
        with pytest.raises(NotFoundError):
            ledger_service.create_entry(9, "income", "ticket", "Ticket", Decimal("1"))

    def test_bulk_create_keeps_good_rows(self, ledger_service, sample_account):
        rows = [
            {"type": "income", "category": "ticket", "description": "Ticket A", "amount": "80"},
            {"type": "income", "category": "ticket", "description": "Ticket B"},
            {"type": "income", "category": "ticket", "description": "Ticket C", "amount": "-1"},
            {"type": "expense", "category": "venue", "description": "Hall", "amount": "500",
             "transaction_date": "2025-03-10"},
            {"type": "income", "category": "ticket", "description": "Ticket D", "amount": "1", "colour": "x"},
        ]

        result = ledger_service.bulk_create(sample_account.id, rows)

        assert result.success_count == 2
        assert [label for label, _ in result.failed] == ["row 2", "row 3", "row 5"]
        assert "amount" in result.failed[0][1]
        assert result.summary() == "2 succeeded, 3 failed"
        assert [entry.description for entry in ledger_service.list_entries(sample_account.id)] == [
            "Ticket A", "Hall"
        ]

    def test_list_unreconciled_only(self, ledger_service, reconciliation_service, sample_account,
                                    temp_db, add_entry, add_bank):
        linked_id = add_entry(temp_db, sample_account.id, "80", "Ticket John")
        open_id = add_entry(temp_db, sample_account.id, "90", "Ticket Mary")
        reconciliation_service.reconcile(linked_id, add_bank(temp_db, "80", "IBG Ticket John"))

        entries = ledger_service.list_entries(sample_account.id, unreconciled_only=True)

        assert [entry.id for entry in entries] == [open_id]

    def test_update_fields(self, ledger_service, sample_account, temp_db, add_entry):
        entry_id = add_entry(temp_db, sample_account.id, "80", "Ticket John")

        ledger_service.update_entry(entry_id, amount="85.50", notes="late fee", user_id="bob")

        entry = ledger_service.get_entry(entry_id)
        assert entry.amount == Decimal("85.50")
        assert entry.notes == "late fee"
        assert entry.description == "Ticket John"
        assert entry.updated_by == "bob"

    def test_reconciled_entry_must_stay_completed(self, ledger_service, reconciliation_service,
                                                  sample_account, temp_db, add_entry, add_bank):
        entry_id = add_entry(temp_db, sample_account.id, "80", "Ticket John")
        reconciliation_service.reconcile(entry_id, add_bank(temp_db, "80", "IBG Ticket John"))

        with pytest.raises(ValidationError, match="must stay completed"):
            ledger_service.update_entry(entry_id, status="pending")
        ledger_service.update_entry(entry_id, status="completed", notes="ok")

        assert ledger_service.get_entry(entry_id).status == LedgerStatus.COMPLETED

    def test_delete_entries(self, ledger_service, sample_account, temp_db, add_entry):
        first = add_entry(temp_db, sample_account.id, "80", "Ticket John")
        second = add_entry(temp_db, sample_account.id, "90", "Ticket Mary")

        result = ledger_service.delete_entries([first, 999, second])

        assert result.succeeded == (first, second)
        assert result.failed[0][0] == "999"
        assert ledger_service.list_entries(sample_account.id) == []


class TestPlannedItemService:
    def test_create_and_list(self, planned_item_service, sample_account):
        later = planned_item_service.create_item(
            sample_account.id, "expense", "venue", "Hall", "500", expected_date="2025-03-15"
        )
        undated = planned_item_service.create_item(sample_account.id, "income", "ticket", "Tickets", "2000")
        earlier = planned_item_service.create_item(
            sample_account.id, "expense", "food", "Catering", "800", expected_date=date(2025, 3, 1)
        )

        items = planned_item_service.list_items(sample_account.id)

        assert [item.id for item in items] == [earlier, later, undated]
        assert items[0].status == PlanStatus.PLANNED
        assert items[0].amount == Decimal("800")

    def test_update_status_and_amount(self, planned_item_service, sample_account):
        item_id = planned_item_service.create_item(sample_account.id, "expense", "venue", "Hall", "500")

        planned_item_service.update_item(item_id, amount="650", status="confirmed", remark="deposit paid")

        item = planned_item_service.get_item(item_id)
        assert item.amount == Decimal("650")
        assert item.status == PlanStatus.CONFIRMED
        assert item.remark == "deposit paid"

    def test_invalid_status(self, planned_item_service, sample_account):
        item_id = planned_item_service.create_item(sample_account.id, "expense", "venue", "Hall", "500")
        with pytest.raises(ValidationError):
            planned_item_service.update_item(item_id, status="done")

    def test_unknown_item(self, planned_item_service):
        with pytest.raises(NotFoundError):
            planned_item_service.update_item(7, amount="1")
        with pytest.raises(NotFoundError):
            planned_item_service.delete_item(7)

    def test_list_unknown_account(self, planned_item_service):
        with pytest.raises(NotFoundError):
            planned_item_service.list_items(7)

    def test_delete_items(self, planned_item_service, sample_account):
        item_id = planned_item_service.create_item(sample_account.id, "expense", "venue", "Hall", "500")

        result = planned_item_service.delete_items([item_id, item_id])

        assert result.succeeded == (item_id,)
        assert result.failure_count == 1
        assert planned_item_service.list_items(sample_account.id) == []

"""Tests for reconciliation links between ledger entries and bank transactions."""

import pytest

from eventledger.domain.account import AccountService
from eventledger.domain.entities import LedgerStatus
from eventledger.domain.errors import (
    DuplicateReconciliationError,
    NotFoundError,
    ValidationError,
)
from eventledger.domain.reconciliation import LINK_FIELD, ReconciliationService


@pytest.fixture
def account_id(any_db):
    return AccountService(any_db).create_account("Annual Dinner", financial_account_id="MBB-001")


class TestReconcile:
    def test_links_entry_and_completes_it(self, any_db, account_id, add_entry, add_bank):
        entry_id = add_entry(any_db, account_id, "80", "Ticket John")
        bank_id = add_bank(any_db, "80", "IBG Ticket John")
        service = ReconciliationService(any_db)

        service.reconcile(entry_id, bank_id, user_id="alice")

        entry = any_db.get_ledger_entry(entry_id)
        assert entry.reconciled_bank_transaction_id == bank_id
        assert entry.status == LedgerStatus.COMPLETED
        assert entry.updated_by == "alice"
        assert service.is_reconciled(entry_id)
        assert service.consumed_bank_transaction_ids() == {bank_id}

    def test_same_pair_twice_is_a_no_op(self, any_db, account_id, add_entry, add_bank):
        entry_id = add_entry(any_db, account_id, "80", "Ticket John")
        bank_id = add_bank(any_db, "80", "IBG Ticket John")
        service = ReconciliationService(any_db)

        service.reconcile(entry_id, bank_id)
        first = any_db.get_ledger_entry(entry_id)
        service.reconcile(entry_id, bank_id)
        second = any_db.get_ledger_entry(entry_id)

        assert second.reconciled_bank_transaction_id == bank_id
        assert second.updated_at == first.updated_at

    def test_bank_transaction_backs_only_one_entry(self, any_db, account_id, add_entry, add_bank):
        first_id = add_entry(any_db, account_id, "80", "Ticket John")
        second_id = add_entry(any_db, account_id, "80", "Ticket Mary")
        bank_id = add_bank(any_db, "80", "IBG Ticket")
        service = ReconciliationService(any_db)
        service.reconcile(first_id, bank_id)

        with pytest.raises(DuplicateReconciliationError) as exc_info:
            service.reconcile(second_id, bank_id)

        assert exc_info.value.existing_ledger_entry_id == first_id
        assert not service.is_reconciled(second_id)
        assert any_db.get_ledger_entry(second_id).status == LedgerStatus.PENDING

    def test_entry_linked_elsewhere_is_rejected(self, any_db, account_id, add_entry, add_bank):
        entry_id = add_entry(any_db, account_id, "80", "Ticket John")
        first_bank = add_bank(any_db, "80", "IBG Ticket John")
        second_bank = add_bank(any_db, "80", "IBG Ticket John again")
        service = ReconciliationService(any_db)
        service.reconcile(entry_id, first_bank)

        with pytest.raises(ValidationError, match="already reconciled"):
            service.reconcile(entry_id, second_bank)

        assert any_db.get_ledger_entry(entry_id).reconciled_bank_transaction_id == first_bank

    def test_cancelled_entry_is_rejected(self, any_db, account_id, add_entry, add_bank):
        entry_id = add_entry(any_db, account_id, "80", "Ticket John", status="cancelled")
        bank_id = add_bank(any_db, "80", "IBG Ticket John")

        with pytest.raises(ValidationError, match="cancelled"):
            ReconciliationService(any_db).reconcile(entry_id, bank_id)

    def test_missing_records(self, any_db, account_id, add_entry, add_bank):
        entry_id = add_entry(any_db, account_id, "80", "Ticket John")
        bank_id = add_bank(any_db, "80", "IBG Ticket John")
        service = ReconciliationService(any_db)

        with pytest.raises(NotFoundError):
            service.reconcile(999, bank_id)
        with pytest.raises(NotFoundError):
            service.reconcile(entry_id, 999)

    def test_bank_transaction_of_other_financial_account_is_rejected(self, any_db, account_id, add_entry,
                                                                    add_bank):
        entry_id = add_entry(any_db, account_id, "80", "Ticket John")
        bank_id = add_bank(any_db, "80", "IBG Ticket John", financial_account_id="CIMB-002")

        with pytest.raises(ValidationError, match="CIMB-002"):
            ReconciliationService(any_db).reconcile(entry_id, bank_id)

        assert not any_db.get_ledger_entry(entry_id).is_reconciled

    def test_account_without_financial_account_is_rejected(self, any_db, add_entry, add_bank):
        account_id = AccountService(any_db).create_account("Workshop")
        entry_id = add_entry(any_db, account_id, "80", "Ticket John")
        bank_id = add_bank(any_db, "80", "IBG Ticket John")

        with pytest.raises(ValidationError, match="no linked financial account"):
            ReconciliationService(any_db).reconcile(entry_id, bank_id)


class TestClearReconciliation:
    def test_round_trip_restores_unreconciled_state(self, any_db, account_id, add_entry, add_bank):
        entry_id = add_entry(any_db, account_id, "80", "Ticket John")
        bank_id = add_bank(any_db, "80", "IBG Ticket John")
        service = ReconciliationService(any_db)

        service.reconcile(entry_id, bank_id)
        assert service.clear_reconciliation(entry_id, user_id="bob") is True

        entry = any_db.get_ledger_entry(entry_id)
        assert entry.reconciled_bank_transaction_id is None
        assert entry.status == LedgerStatus.PENDING
        assert entry.updated_by == "bob"
        assert not service.is_reconciled(entry_id)
        assert service.consumed_bank_transaction_ids() == set()

    def test_bank_transaction_is_free_again(self, any_db, account_id, add_entry, add_bank):
        first_id = add_entry(any_db, account_id, "80", "Ticket John")
        second_id = add_entry(any_db, account_id, "80", "Ticket Mary")
        bank_id = add_bank(any_db, "80", "IBG Ticket")
        service = ReconciliationService(any_db)

        service.reconcile(first_id, bank_id)
        service.clear_reconciliation(first_id)
        service.reconcile(second_id, bank_id)

        assert any_db.get_ledger_entry(second_id).reconciled_bank_transaction_id == bank_id

    def test_not_reconciled(self, any_db, account_id, add_entry):
        entry_id = add_entry(any_db, account_id, "80", "Ticket John")
        assert ReconciliationService(any_db).clear_reconciliation(entry_id) is False

    def test_missing_entry(self, any_db):
        with pytest.raises(NotFoundError):
            ReconciliationService(any_db).clear_reconciliation(42)


def test_link_field_is_removed_from_document(memory_db, add_entry, add_bank):
    account_id = AccountService(memory_db).create_account("Gala", financial_account_id="MBB-001")
    entry_id = add_entry(memory_db, account_id, "80", "Ticket John")
    bank_id = add_bank(memory_db, "80", "IBG Ticket John")
    service = ReconciliationService(memory_db)

    assert LINK_FIELD not in memory_db.raw_document("ledger_entries", entry_id)
    service.reconcile(entry_id, bank_id)
    assert memory_db.raw_document("ledger_entries", entry_id)[LINK_FIELD] == bank_id
    service.clear_reconciliation(entry_id)

    assert LINK_FIELD not in memory_db.raw_document("ledger_entries", entry_id)


def test_deleting_entry_frees_bank_transaction(any_db, account_id, add_entry, add_bank):
    entry_id = add_entry(any_db, account_id, "80", "Ticket John")
    bank_id = add_bank(any_db, "80", "IBG Ticket John")
    service = ReconciliationService(any_db)
    service.reconcile(entry_id, bank_id)

    any_db.delete_ledger_entry(entry_id)

    assert service.consumed_bank_transaction_ids() == set()

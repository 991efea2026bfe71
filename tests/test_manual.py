"""Tests for the manual reconciliation workflow."""

from datetime import date

import pytest

from eventledger.domain.account import AccountService
from eventledger.domain.entities import BankVerificationStatus, LedgerStatus
from eventledger.domain.errors import DuplicateReconciliationError, NotFoundError, ValidationError
from eventledger.domain.manual import ManualReconciliationService


@pytest.fixture
def account_id(any_db):
    return AccountService(any_db).create_account("Annual Dinner", financial_account_id="MBB-001")


class TestListCandidates:
    def test_same_type_and_amount_any_date(self, any_db, account_id, add_entry, add_bank):
        entry_id = add_entry(any_db, account_id, "80", "Ticket John")
        same_day = add_bank(any_db, "80", "Transfer")
        later = add_bank(any_db, "80.00", "Unrelated text", day=date(2025, 4, 20))
        add_bank(any_db, "81", "Ticket John")
        add_bank(any_db, "80", "Refund", type="expense")

        candidates = ManualReconciliationService(any_db).list_candidates(entry_id)

        assert [txn.id for txn in candidates] == [same_day, later]

    def test_excludes_linked_and_verified(self, any_db, account_id, add_entry, add_bank):
        entry_id = add_entry(any_db, account_id, "80", "Ticket John")
        other_id = add_entry(any_db, account_id, "80", "Ticket Mary")
        taken = add_bank(any_db, "80", "IBG Ticket Mary")
        add_bank(any_db, "80", "IBG Ticket", verification_status=BankVerificationStatus.VERIFIED)
        free = add_bank(any_db, "80", "IBG Ticket John")
        service = ManualReconciliationService(any_db)
        service.confirm(other_id, taken)

        assert [txn.id for txn in service.list_candidates(entry_id)] == [free]

    def test_entry_keeps_its_own_transaction_as_candidate(self, any_db, account_id, add_entry, add_bank):
        entry_id = add_entry(any_db, account_id, "80", "Ticket John")
        bank_id = add_bank(any_db, "80", "IBG Ticket John")
        service = ManualReconciliationService(any_db)
        service.confirm(entry_id, bank_id)

        assert [txn.id for txn in service.list_candidates(entry_id)] == [bank_id]

    def test_account_without_financial_account(self, any_db, add_entry, add_bank):
        account_id = AccountService(any_db).create_account("Workshop")
        entry_id = add_entry(any_db, account_id, "80", "Ticket John")
        add_bank(any_db, "80", "IBG Ticket John")

        assert ManualReconciliationService(any_db).list_candidates(entry_id) == []

    def test_unknown_entry(self, any_db):
        with pytest.raises(NotFoundError):
            ManualReconciliationService(any_db).list_candidates(5)


class TestConfirmAndCancel:
    def test_confirm_then_cancel(self, any_db, account_id, add_entry, add_bank):
        entry_id = add_entry(any_db, account_id, "80", "Ticket John")
        bank_id = add_bank(any_db, "80", "IBG Ticket John")
        service = ManualReconciliationService(any_db)

        service.confirm(entry_id, bank_id, user_id="alice")
        assert any_db.get_ledger_entry(entry_id).status == LedgerStatus.COMPLETED

        assert service.cancel(entry_id, user_id="alice") is True
        entry = any_db.get_ledger_entry(entry_id)
        assert entry.reconciled_bank_transaction_id is None
        assert entry.status == LedgerStatus.PENDING

    def test_second_entry_cannot_take_the_same_transaction(self, any_db, account_id, add_entry, add_bank):
        first_id = add_entry(any_db, account_id, "80", "Ticket John")
        second_id = add_entry(any_db, account_id, "80", "Ticket Mary")
        bank_id = add_bank(any_db, "80", "IBG Ticket")
        service = ManualReconciliationService(any_db)
        service.confirm(first_id, bank_id)

        with pytest.raises(DuplicateReconciliationError):
            service.confirm(second_id, bank_id)

        assert any_db.get_ledger_entry(second_id).reconciled_bank_transaction_id is None

    def test_confirm_rejects_transaction_from_other_financial_account(self, any_db, account_id, add_entry,
                                                                     add_bank):
        entry_id = add_entry(any_db, account_id, "80", "Ticket John")
        foreign = add_bank(any_db, "80", "IBG Ticket John", financial_account_id="CIMB-002")
        service = ManualReconciliationService(any_db)

        assert service.list_candidates(entry_id) == []
        with pytest.raises(ValidationError, match="CIMB-002"):
            service.confirm(entry_id, foreign)

"""Reconciliation ledger: links between ledger entries and bank transactions."""

from typing import Optional

from eventledger.database.base import Database
from eventledger.domain.entities import LedgerStatus
from eventledger.domain.errors import (
    DuplicateReconciliationError,
    NotFoundError,
    ValidationError,
    account_without_financial_account,
    already_reconciled,
    bank_transaction_not_found,
    bank_transaction_outside_account,
    cancelled_entry_not_reconcilable,
    ledger_entry_not_found,
)
from eventledger.logger import get_logger

logger = get_logger(__name__)

LINK_FIELD = "reconciled_bank_transaction_id"


class ReconciliationService:
    """Service maintaining reconciliation links.

    A bank transaction backs at most one ledger entry. The check runs
    against the stored links on every call; nothing is cached.
    """

    def __init__(self, db: Database):
        """Initialize reconciliation service.

        Args:
            db: Database instance
        """
        self.db = db

    def reconcile(self, entry_id: int, bank_transaction_id: int, user_id: Optional[str] = None) -> None:
        """Link a ledger entry to a bank transaction and mark it completed.

        Calling it again with the same pair changes nothing.

        Args:
            entry_id: Ledger entry ID
            bank_transaction_id: Bank transaction ID
            user_id: Actor recorded in the audit fields

        Raises:
            NotFoundError: If the entry or the bank transaction doesn't exist
            ValidationError: If the entry is cancelled, already linked to another
                bank transaction, or the bank transaction is not on the financial
                account linked to the entry's account
            DuplicateReconciliationError: If another entry already holds the bank
                transaction
        """
        entry = self.db.get_ledger_entry(entry_id)
        if entry is None:
            raise NotFoundError(ledger_entry_not_found(entry_id))

        if entry.reconciled_bank_transaction_id == bank_transaction_id:
            logger.debug("Reconciliation already in place", entry_id=entry_id,
                         bank_transaction_id=bank_transaction_id)
            return

        if entry.is_reconciled:
            raise ValidationError(already_reconciled(entry_id, entry.reconciled_bank_transaction_id))

        if entry.status == LedgerStatus.CANCELLED:
            raise ValidationError(cancelled_entry_not_reconcilable(entry_id))

        txn = self.db.get_bank_transaction(bank_transaction_id)
        if txn is None:
            raise NotFoundError(bank_transaction_not_found(bank_transaction_id))

        account = self.db.get_account(entry.account_id)
        if account is None or account.financial_account_id is None:
            raise ValidationError(account_without_financial_account(entry.account_id))
        if txn.financial_account_id != account.financial_account_id:
            raise ValidationError(
                bank_transaction_outside_account(bank_transaction_id, txn.financial_account_id, entry.account_id)
            )

        holders = [
            other
            for other in self.db.list_ledger_entries_by_bank_transaction(bank_transaction_id)
            if other.id != entry_id
        ]
        if holders:
            logger.warning(
                "Duplicate reconciliation rejected",
                entry_id=entry_id,
                bank_transaction_id=bank_transaction_id,
                existing_entry_id=holders[0].id,
            )
            raise DuplicateReconciliationError(bank_transaction_id, entry_id, holders[0].id)

        self.db.update_ledger_entry(
            entry_id,
            {
                LINK_FIELD: bank_transaction_id,
                "status": LedgerStatus.COMPLETED,
                "updated_by": user_id,
            },
        )
        logger.info("Ledger entry reconciled", entry_id=entry_id, bank_transaction_id=bank_transaction_id)

    def clear_reconciliation(self, entry_id: int, user_id: Optional[str] = None) -> bool:
        """Remove the link from a ledger entry and revert it to pending.

        The link field is removed from the stored record, not set to null.

        Returns:
            True if a link was removed, False if the entry was not reconciled

        Raises:
            NotFoundError: If the entry doesn't exist
        """
        entry = self.db.get_ledger_entry(entry_id)
        if entry is None:
            raise NotFoundError(ledger_entry_not_found(entry_id))

        if not entry.is_reconciled:
            return False

        self.db.update_ledger_entry(
            entry_id,
            {"status": LedgerStatus.PENDING, "updated_by": user_id},
            remove=(LINK_FIELD,),
        )
        logger.info(
            "Reconciliation cleared",
            entry_id=entry_id,
            bank_transaction_id=entry.reconciled_bank_transaction_id,
        )
        return True

    def is_reconciled(self, entry_id: int) -> bool:
        """Check whether a ledger entry carries a reconciliation link.

        Raises:
            NotFoundError: If the entry doesn't exist
        """
        entry = self.db.get_ledger_entry(entry_id)
        if entry is None:
            raise NotFoundError(ledger_entry_not_found(entry_id))
        return entry.is_reconciled

    def consumed_bank_transaction_ids(self) -> set[int]:
        """Return the IDs of all bank transactions already linked, account-wide."""
        return set(self.db.list_reconciled_bank_transaction_ids())

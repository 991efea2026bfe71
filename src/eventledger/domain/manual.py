"""Manual reconciliation workflow."""

from typing import Optional

from eventledger.database.base import Database
from eventledger.domain.entities import BankTransaction, BankVerificationStatus
from eventledger.domain.errors import (
    NotFoundError,
    account_not_found,
    ledger_entry_not_found,
)
from eventledger.domain.matching import quantize_amount
from eventledger.domain.reconciliation import ReconciliationService


class ManualReconciliationService:
    """Service letting a user pick the bank transaction for one ledger entry."""

    def __init__(self, db: Database, reconciliation: Optional[ReconciliationService] = None):
        """Initialize manual reconciliation service.

        Args:
            db: Database instance
            reconciliation: Service used to commit links, built from db if omitted
        """
        self.db = db
        self.reconciliation = reconciliation or ReconciliationService(db)

    def list_candidates(self, entry_id: int) -> list[BankTransaction]:
        """List bank transactions a user may link to a ledger entry.

        Candidates have the entry's type and amount (to the cent), are not
        linked to any other ledger entry, and are not already verified by
        the bank ledger. Date and description are not compared.

        Args:
            entry_id: Ledger entry ID

        Returns:
            Candidate bank transactions ordered by ID

        Raises:
            NotFoundError: If the entry or its account doesn't exist
        """
        entry = self.db.get_ledger_entry(entry_id)
        if entry is None:
            raise NotFoundError(ledger_entry_not_found(entry_id))

        account = self.db.get_account(entry.account_id)
        if account is None:
            raise NotFoundError(account_not_found(entry.account_id))
        if not account.financial_account_id:
            return []

        consumed = self.reconciliation.consumed_bank_transaction_ids()
        consumed.discard(entry.reconciled_bank_transaction_id)
        amount = quantize_amount(entry.amount)

        return [
            txn
            for txn in self.db.list_bank_transactions(account.financial_account_id)
            if txn.type == entry.type
            and quantize_amount(txn.amount) == amount
            and txn.id not in consumed
            and txn.verification_status != BankVerificationStatus.VERIFIED
        ]

    def confirm(self, entry_id: int, bank_transaction_id: int, user_id: Optional[str] = None) -> None:
        """Link the chosen bank transaction to the ledger entry.

        Raises:
            NotFoundError: If the entry or the bank transaction doesn't exist
            DuplicateReconciliationError: If another entry already holds the bank
                transaction
        """
        self.reconciliation.reconcile(entry_id, bank_transaction_id, user_id=user_id)

    def cancel(self, entry_id: int, user_id: Optional[str] = None) -> bool:
        """Remove the reconciliation link of a ledger entry."""
        return self.reconciliation.clear_reconciliation(entry_id, user_id=user_id)

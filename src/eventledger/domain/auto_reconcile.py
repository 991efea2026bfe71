"""Auto-reconcile orchestrator.

Matching is greedy first-fit: ledger entries are visited in ascending ID
order and each takes the first eligible bank transaction (also in ascending
ID order). When several entries could take the same bank transaction, the
earliest entry wins; no global assignment is attempted.
"""

import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from eventledger.database.base import Database
from eventledger.domain.entities import (
    AutoReconcileResult,
    BankTransaction,
    LedgerEntry,
    LedgerStatus,
    ReconciliationAssignment,
)
from eventledger.domain.errors import (
    DomainError,
    NotFoundError,
    ReconciliationInProgressError,
    account_not_found,
    reconcile_in_progress,
)
from eventledger.domain.matching import keyword_overlap, match_key
from eventledger.domain.reconciliation import ReconciliationService
from eventledger.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AssignmentPlan:
    """Links chosen for one run, before anything is written."""

    assignments: tuple[ReconciliationAssignment, ...] = ()
    unmatched_entry_ids: tuple[int, ...] = ()
    skipped_entry_ids: tuple[int, ...] = ()


def _is_eligible(entry: LedgerEntry, txn: BankTransaction) -> bool:
    entry_key = match_key(entry.transaction_date, entry.amount, entry.type)
    if entry_key is None:
        return False
    if entry_key != match_key(txn.transaction_date, txn.amount, txn.type):
        return False
    return keyword_overlap(entry.description, txn.description)


def plan_assignments(
    entries: Iterable[LedgerEntry],
    bank_transactions: Iterable[BankTransaction],
    consumed: Iterable[int],
) -> AssignmentPlan:
    """Choose a bank transaction for every unreconciled ledger entry.

    Args:
        entries: Ledger entries of the account
        bank_transactions: Bank transactions of the account's financial account
        consumed: Bank transaction IDs already linked anywhere

    Returns:
        AssignmentPlan. Entries that already carry a link are left out
        entirely; cancelled entries are reported as skipped; entries with no
        eligible bank transaction are reported as unmatched.
    """
    taken = set(consumed)
    candidates = sorted(bank_transactions, key=lambda txn: txn.id)
    assignments = []
    unmatched = []
    skipped = []

    for entry in sorted(entries, key=lambda e: e.id):
        if entry.is_reconciled:
            continue
        if entry.status == LedgerStatus.CANCELLED:
            skipped.append(entry.id)
            continue

        found = next(
            (txn for txn in candidates if txn.id not in taken and _is_eligible(entry, txn)),
            None,
        )
        if found is None:
            unmatched.append(entry.id)
            continue

        # Claimed immediately so later entries in this pass can't reuse it
        taken.add(found.id)
        assignments.append(ReconciliationAssignment(ledger_entry_id=entry.id, bank_transaction_id=found.id))

    return AssignmentPlan(
        assignments=tuple(assignments),
        unmatched_entry_ids=tuple(unmatched),
        skipped_entry_ids=tuple(skipped),
    )


class AutoReconcileService:
    """Service running batch auto-reconcile per account."""

    def __init__(self, db: Database, reconciliation: Optional[ReconciliationService] = None):
        """Initialize auto-reconcile service.

        Args:
            db: Database instance
            reconciliation: Service used to commit links, built from db if omitted
        """
        self.db = db
        self.reconciliation = reconciliation or ReconciliationService(db)
        self._registry_lock = threading.Lock()
        self._account_locks: dict[int, threading.Lock] = {}

    def _account_lock(self, account_id: int) -> threading.Lock:
        with self._registry_lock:
            return self._account_locks.setdefault(account_id, threading.Lock())

    def plan(self, account_id: int) -> AssignmentPlan:
        """Compute the links a run would make, without writing anything.

        Raises:
            NotFoundError: If the account doesn't exist
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))

        entries = self.db.list_ledger_entries(account_id)
        if account.financial_account_id:
            bank_transactions = self.db.list_bank_transactions(account.financial_account_id)
        else:
            bank_transactions = []
        consumed = self.reconciliation.consumed_bank_transaction_ids()
        return plan_assignments(entries, bank_transactions, consumed)

    def run(self, account_id: int, user_id: Optional[str] = None) -> AutoReconcileResult:
        """Link every unreconciled ledger entry of an account that has a match.

        All assignments are computed first, then written one by one. A failed
        write is recorded and the rest continue; writes already made stay.

        Args:
            account_id: Account ID
            user_id: Actor recorded in the audit fields

        Returns:
            AutoReconcileResult with linked, unmatched, failed and skipped entries

        Raises:
            NotFoundError: If the account doesn't exist
            ReconciliationInProgressError: If a run for the account is in flight
        """
        lock = self._account_lock(account_id)
        if not lock.acquire(blocking=False):
            raise ReconciliationInProgressError(reconcile_in_progress(account_id))

        try:
            plan = self.plan(account_id)

            linked = []
            failed = []
            for assignment in plan.assignments:
                try:
                    self.reconciliation.reconcile(
                        assignment.ledger_entry_id, assignment.bank_transaction_id, user_id=user_id
                    )
                except DomainError as e:
                    logger.warning(
                        "Auto-reconcile link failed",
                        account_id=account_id,
                        entry_id=assignment.ledger_entry_id,
                        bank_transaction_id=assignment.bank_transaction_id,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    failed.append((assignment.ledger_entry_id, str(e)))
                else:
                    linked.append(assignment)
        finally:
            lock.release()

        result = AutoReconcileResult(
            account_id=account_id,
            linked=tuple(linked),
            unmatched_entry_ids=plan.unmatched_entry_ids,
            failed=tuple(failed),
            skipped_entry_ids=plan.skipped_entry_ids,
        )
        logger.info(
            "Auto-reconcile finished",
            account_id=account_id,
            succeeded=result.success_count,
            failed=result.failure_count,
            skipped=len(result.skipped_entry_ids),
        )
        return result

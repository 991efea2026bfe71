"""Ledger entry domain service."""

from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from typing import Optional, Any, Union

from eventledger.database.base import Database
from eventledger.domain.entities import (
    BatchResult,
    CategoryCode,
    LedgerEntry,
    LedgerStatus,
    TransactionType,
)
from eventledger.domain.errors import (
    DomainError,
    NotFoundError,
    ValidationError,
    account_not_found,
    ledger_entry_not_found,
    missing_field,
    reconciled_status_locked,
)
from eventledger.domain.validation import (
    optional_date,
    require_amount,
    require_category,
    require_text,
    require_type,
)
from eventledger.logger import get_logger

logger = get_logger(__name__)

BULK_FIELDS = frozenset(
    {"transaction_date", "type", "category", "description", "amount", "payer_payee", "notes", "status"}
)
BULK_REQUIRED = ("type", "category", "description", "amount")


def _require_status(value: Union[str, LedgerStatus]) -> LedgerStatus:
    try:
        return LedgerStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid ledger entry status: {value}")


class LedgerService:
    """Service for managing an account's ledger entries.

    The reconciliation link is never set here; ReconciliationService owns it.
    """

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_entry(
        self,
        account_id: int,
        type: Union[str, TransactionType],
        category: Union[str, CategoryCode],
        description: str,
        amount: Decimal,
        transaction_date: Optional[date] = None,
        status: Union[str, LedgerStatus] = LedgerStatus.PENDING,
        payer_payee: Optional[str] = None,
        notes: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> int:
        """Create a ledger entry.

        Args:
            account_id: Account ID
            type: income or expense
            category: Category code
            description: Description
            amount: Amount, not negative
            transaction_date: Optional date, may be set later
            status: Initial status
            payer_payee: Optional counterparty
            notes: Optional notes
            user_id: Actor recorded in the audit fields

        Returns:
            Ledger entry ID

        Raises:
            NotFoundError: If the account doesn't exist
            ValidationError: If any field is missing or malformed
        """
        txn_type = require_type(type)
        category_code = require_category(category)
        description = require_text(description, "description")
        amount = require_amount(amount)
        status = _require_status(status)

        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

        return self.db.create_ledger_entry(
            account_id=account_id,
            type=txn_type,
            category=category_code,
            description=description,
            amount=amount,
            transaction_date=optional_date(transaction_date),
            status=status,
            payer_payee=payer_payee,
            notes=notes,
            user_id=user_id,
        )

    def bulk_create(
        self,
        account_id: int,
        rows: Iterable[Mapping[str, Any]],
        user_id: Optional[str] = None,
    ) -> BatchResult:
        """Create many ledger entries, continuing past bad rows.

        Args:
            account_id: Account ID
            rows: Mappings with create_entry's field names
            user_id: Actor recorded in the audit fields

        Returns:
            BatchResult with created IDs; failures are keyed "row N" (1-based)

        Raises:
            NotFoundError: If the account doesn't exist
        """
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

        succeeded = []
        failed = []
        for index, row in enumerate(rows, start=1):
            label = f"row {index}"
            try:
                unknown = set(row) - BULK_FIELDS
                if unknown:
                    raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")
                missing = [name for name in BULK_REQUIRED if name not in row]
                if missing:
                    raise ValidationError(missing_field(missing[0]))
                entry_id = self.create_entry(account_id=account_id, user_id=user_id, **row)
            except DomainError as e:
                logger.warning("Bulk ledger row rejected", account_id=account_id, row=index,
                               error=str(e), error_type=type(e).__name__)
                failed.append((label, str(e)))
            else:
                succeeded.append(entry_id)

        logger.info("Bulk ledger input finished", account_id=account_id,
                    succeeded=len(succeeded), failed=len(failed))
        return BatchResult(succeeded=tuple(succeeded), failed=tuple(failed))

    def get_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        """Get ledger entry by ID, or None if not found."""
        return self.db.get_ledger_entry(entry_id)

    def list_entries(self, account_id: int, unreconciled_only: bool = False) -> list[LedgerEntry]:
        """List an account's ledger entries ordered by ID.

        Raises:
            NotFoundError: If the account doesn't exist
        """
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        entries = self.db.list_ledger_entries(account_id)
        if unreconciled_only:
            entries = [entry for entry in entries if not entry.is_reconciled]
        return entries

    def update_entry(
        self,
        entry_id: int,
        transaction_date: Optional[date] = None,
        type: Optional[Union[str, TransactionType]] = None,
        category: Optional[Union[str, CategoryCode]] = None,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        payer_payee: Optional[str] = None,
        notes: Optional[str] = None,
        status: Optional[Union[str, LedgerStatus]] = None,
        user_id: Optional[str] = None,
    ) -> None:
        """Update ledger entry fields. Fields left as None are not changed.

        A reconciled entry must stay completed; cancel its reconciliation
        before changing the status.

        Raises:
            NotFoundError: If the entry doesn't exist
            ValidationError: If a field is malformed or the status change is
                not allowed
        """
        entry = self.db.get_ledger_entry(entry_id)
        if entry is None:
            raise NotFoundError(ledger_entry_not_found(entry_id))

        fields: dict[str, Any] = {}
        if transaction_date is not None:
            fields["transaction_date"] = optional_date(transaction_date)
        if type is not None:
            fields["type"] = require_type(type)
        if category is not None:
            fields["category"] = require_category(category)
        if description is not None:
            fields["description"] = require_text(description, "description")
        if amount is not None:
            fields["amount"] = require_amount(amount)
        if payer_payee is not None:
            fields["payer_payee"] = payer_payee
        if notes is not None:
            fields["notes"] = notes
        if status is not None:
            new_status = _require_status(status)
            if entry.is_reconciled and new_status != LedgerStatus.COMPLETED:
                raise ValidationError(reconciled_status_locked(entry_id))
            fields["status"] = new_status

        if not fields:
            return
        fields["updated_by"] = user_id
        self.db.update_ledger_entry(entry_id, fields)

    def delete_entry(self, entry_id: int) -> None:
        """Delete a ledger entry. Its bank transaction, if any, becomes free again.

        Raises:
            NotFoundError: If the entry doesn't exist
        """
        if self.db.get_ledger_entry(entry_id) is None:
            raise NotFoundError(ledger_entry_not_found(entry_id))
        self.db.delete_ledger_entry(entry_id)

    def delete_entries(self, entry_ids: Iterable[int]) -> BatchResult:
        """Delete several ledger entries, continuing past failures."""
        succeeded = []
        failed = []
        for entry_id in entry_ids:
            try:
                self.delete_entry(entry_id)
            except DomainError as e:
                logger.warning("Ledger entry delete failed", entry_id=entry_id, error=str(e),
                               error_type=type(e).__name__)
                failed.append((str(entry_id), str(e)))
            else:
                succeeded.append(entry_id)
        return BatchResult(succeeded=tuple(succeeded), failed=tuple(failed))

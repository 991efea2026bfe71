"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DuplicateReconciliationError(ConflictError):
    """A bank transaction is already linked to another ledger entry."""

    def __init__(
        self,
        bank_transaction_id: int,
        ledger_entry_id: int,
        existing_ledger_entry_id: int,
    ):
        self.bank_transaction_id = bank_transaction_id
        self.ledger_entry_id = ledger_entry_id
        self.existing_ledger_entry_id = existing_ledger_entry_id
        super().__init__(
            f"Bank transaction {bank_transaction_id} is already reconciled with "
            f"ledger entry {existing_ledger_entry_id}"
        )


class ReconciliationInProgressError(ConflictError):
    """Another auto-reconcile run holds the account."""


class PersistenceError(DomainError):
    """The storage collaborator failed (connection, permission, constraint)."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Storage failure during {operation}{detail}")


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def event_not_found(event_id: int) -> str:
    """Return message for missing event."""
    return f"Event {event_id} not found"


def ledger_entry_not_found(entry_id: int) -> str:
    """Return message for missing ledger entry."""
    return f"Ledger entry {entry_id} not found"


def planned_item_not_found(item_id: int) -> str:
    """Return message for missing planned item."""
    return f"Planned item {item_id} not found"


def bank_transaction_not_found(bank_transaction_id: int) -> str:
    """Return message for missing bank transaction."""
    return f"Bank transaction {bank_transaction_id} not found"


def duplicate_account_name(name: str) -> str:
    """Return message for an account name that is already taken."""
    return f"Account with name '{name}' already exists"


def invalid_category(value: object) -> str:
    return f"Invalid category code {value!r}"


def negative_amount(amount: object) -> str:
    return f"Amount must not be negative (got {amount})"


def missing_field(field_name: str) -> str:
    return f"Missing required field: {field_name}"


def already_reconciled(entry_id: int, bank_transaction_id: int) -> str:
    """Return message when an entry is linked to a different bank transaction."""
    return (
        f"Ledger entry {entry_id} is already reconciled with bank transaction "
        f"{bank_transaction_id}. Cancel the reconciliation first."
    )


def reconciled_status_locked(entry_id: int) -> str:
    """Return message when a reconciled entry would leave completed status."""
    return (
        f"Ledger entry {entry_id} is reconciled and must stay completed. "
        "Cancel the reconciliation first."
    )


def reconcile_in_progress(account_id: int) -> str:
    return f"Auto-reconcile is already running for account {account_id}"


def cancelled_entry_not_reconcilable(entry_id: int) -> str:
    return f"Ledger entry {entry_id} is cancelled and cannot be reconciled"


def account_without_financial_account(account_id: int) -> str:
    return f"Account {account_id} has no linked financial account"


def bank_transaction_outside_account(bank_transaction_id: int, financial_account_id: str, account_id: int) -> str:
    """Return message when a bank transaction belongs to another financial account."""
    return (
        f"Bank transaction {bank_transaction_id} belongs to financial account "
        f"{financial_account_id}, not to the one linked to account {account_id}"
    )

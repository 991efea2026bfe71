"""Abstract database interface."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Optional, Any
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from eventledger.domain.entities import (
    Account,
    BankTransaction,
    BankVerificationStatus,
    CategoryCode,
    Event,
    EventPricing,
    LedgerEntry,
    LedgerStatus,
    PlannedItem,
    PlanStatus,
    TransactionType,
)

# Fields a caller may pass to update_planned_item / update_ledger_entry.
PLANNED_ITEM_FIELDS = frozenset(
    {"type", "category", "description", "remark", "amount", "expected_date", "status", "updated_by"}
)
LEDGER_ENTRY_FIELDS = frozenset(
    {
        "transaction_date",
        "type",
        "category",
        "description",
        "amount",
        "payer_payee",
        "notes",
        "status",
        "reconciled_bank_transaction_id",
        "updated_by",
    }
)


class Database(ABC):
    """Abstract persistence collaborator for eventledger.

    Implementations return domain entities and raise ``PersistenceError``
    for storage failures.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(self, name: str, financial_account_id: Optional[str] = None) -> int:
        """Create a new event account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts ordered by name."""
        pass

    # Event operations
    @abstractmethod
    def create_event(self, name: str, start_date: date, pricing: EventPricing) -> int:
        """Create an event with its price table. Returns event ID."""
        pass

    @abstractmethod
    def get_event(self, event_id: int) -> Optional[Event]:
        """Get event by ID."""
        pass

    @abstractmethod
    def list_events(self) -> list[Event]:
        """List all events, most recent start date first."""
        pass

    # Planned item operations
    @abstractmethod
    def create_planned_item(
        self,
        account_id: int,
        type: TransactionType,
        category: CategoryCode,
        description: str,
        amount: Decimal,
        expected_date: Optional[date] = None,
        status: PlanStatus = PlanStatus.PLANNED,
        remark: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> int:
        """Create a planned item. Returns planned item ID."""
        pass

    @abstractmethod
    def get_planned_item(self, item_id: int) -> Optional[PlannedItem]:
        """Get planned item by ID."""
        pass

    @abstractmethod
    def list_planned_items(self, account_id: int) -> list[PlannedItem]:
        """List planned items of an account ordered by expected date, then ID."""
        pass

    @abstractmethod
    def update_planned_item(self, item_id: int, fields: dict[str, Any]) -> None:
        """Set the given fields (see PLANNED_ITEM_FIELDS) and stamp updated_at."""
        pass

    @abstractmethod
    def delete_planned_item(self, item_id: int) -> None:
        """Delete a planned item."""
        pass

    # Ledger entry operations
    @abstractmethod
    def create_ledger_entry(
        self,
        account_id: int,
        type: TransactionType,
        category: CategoryCode,
        description: str,
        amount: Decimal,
        transaction_date: Optional[date] = None,
        status: LedgerStatus = LedgerStatus.PENDING,
        payer_payee: Optional[str] = None,
        notes: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> int:
        """Create a ledger entry. Returns ledger entry ID."""
        pass

    @abstractmethod
    def get_ledger_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        """Get ledger entry by ID."""
        pass

    @abstractmethod
    def list_ledger_entries(self, account_id: int) -> list[LedgerEntry]:
        """List ledger entries of an account ordered by ID."""
        pass

    @abstractmethod
    def update_ledger_entry(
        self, entry_id: int, fields: dict[str, Any], remove: Iterable[str] = ()
    ) -> None:
        """Set the given fields and remove the named ones, stamping updated_at.

        Removing a field deletes it from the stored record; it is not the same
        as setting it to None on backends that keep documents.
        """
        pass

    @abstractmethod
    def delete_ledger_entry(self, entry_id: int) -> None:
        """Delete a ledger entry."""
        pass

    @abstractmethod
    def list_ledger_entries_by_bank_transaction(self, bank_transaction_id: int) -> list[LedgerEntry]:
        """List ledger entries (any account) linked to a bank transaction."""
        pass

    @abstractmethod
    def list_reconciled_bank_transaction_ids(self) -> set[int]:
        """Return every bank transaction ID currently linked to a ledger entry."""
        pass

    # Bank transaction operations
    @abstractmethod
    def create_bank_transaction(
        self,
        financial_account_id: str,
        transaction_date: date,
        type: TransactionType,
        amount: Decimal,
        description: str,
        payer_payee: Optional[str] = None,
        verification_status: BankVerificationStatus = BankVerificationStatus.PENDING,
        category: Optional[CategoryCode] = None,
    ) -> int:
        """Record a bank transaction supplied by the bank feed. Returns its ID."""
        pass

    @abstractmethod
    def get_bank_transaction(self, bank_transaction_id: int) -> Optional[BankTransaction]:
        """Get bank transaction by ID."""
        pass

    @abstractmethod
    def list_bank_transactions(self, financial_account_id: str) -> list[BankTransaction]:
        """List bank transactions of a financial account ordered by ID."""
        pass

    @abstractmethod
    def list_unclassified_bank_transactions(self) -> list[BankTransaction]:
        """List bank transactions without a category, ordered by ID."""
        pass

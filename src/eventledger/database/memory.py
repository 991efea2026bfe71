"""In-memory document store implementation of the Database interface.

Records are plain dicts keyed by integer ID, one dict per collection. A field
missing from a document and a field holding ``None`` are different states
here, which is what ``update_ledger_entry(..., remove=...)`` relies on.
"""

from collections.abc import Iterable
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Optional, Any

from eventledger.database.base import Database, LEDGER_ENTRY_FIELDS, PLANNED_ITEM_FIELDS
from eventledger.database.mappers import (
    bank_transaction_from_document,
    ledger_entry_from_document,
    planned_item_from_document,
    to_storage_value,
)
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
from eventledger.domain.errors import (
    NotFoundError,
    ValidationError,
    ledger_entry_not_found,
    planned_item_not_found,
)


class MemoryDatabase(Database):
    """Dict-backed database, used for tests and embedding."""

    def __init__(self):
        self._collections: dict[str, dict[int, dict[str, Any]]] = {}
        self._next_ids: dict[str, int] = {}
        self.initialize_schema()

    def _insert(self, collection: str, document: dict[str, Any]) -> int:
        doc_id = self._next_ids[collection]
        self._next_ids[collection] = doc_id + 1
        self._collections[collection][doc_id] = document
        return doc_id

    def _documents(self, collection: str) -> list[tuple[int, dict[str, Any]]]:
        return sorted(self._collections[collection].items())

    def raw_document(self, collection: str, doc_id: int) -> Optional[dict[str, Any]]:
        """Return a copy of a stored document, exactly as persisted."""
        document = self._collections[collection].get(doc_id)
        return dict(document) if document is not None else None

    def connect(self) -> None:
        pass

    def disconnect(self) -> None:
        pass

    def initialize_schema(self) -> None:
        for collection in ("accounts", "events", "planned_items", "ledger_entries", "bank_transactions"):
            self._collections.setdefault(collection, {})
            self._next_ids.setdefault(collection, 1)

    # Account operations
    def create_account(self, name: str, financial_account_id: Optional[str] = None) -> int:
        return self._insert(
            "accounts",
            {"name": name, "financial_account_id": financial_account_id, "created_at": datetime.now(UTC)},
        )

    def get_account(self, account_id: int) -> Optional[Account]:
        doc = self._collections["accounts"].get(account_id)
        if doc is None:
            return None
        return Account(id=account_id, **doc)

    def list_accounts(self) -> list[Account]:
        accounts = [Account(id=doc_id, **doc) for doc_id, doc in self._documents("accounts")]
        return sorted(accounts, key=lambda acc: acc.name)

    # Event operations
    def create_event(self, name: str, start_date: date, pricing: EventPricing) -> int:
        return self._insert(
            "events",
            {"name": name, "start_date": start_date, "pricing": pricing, "created_at": datetime.now(UTC)},
        )

    def get_event(self, event_id: int) -> Optional[Event]:
        doc = self._collections["events"].get(event_id)
        if doc is None:
            return None
        return Event(id=event_id, **doc)

    def list_events(self) -> list[Event]:
        events = [Event(id=doc_id, **doc) for doc_id, doc in self._documents("events")]
        return sorted(events, key=lambda evt: (-evt.start_date.toordinal(), evt.id))

    # Planned item operations
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
        now = datetime.now(UTC)
        return self._insert(
            "planned_items",
            {
                "account_id": account_id,
                "type": to_storage_value(type),
                "category": to_storage_value(category),
                "description": description,
                "remark": remark,
                "amount": amount,
                "expected_date": expected_date,
                "status": to_storage_value(status),
                "created_at": now,
                "updated_at": now,
                "created_by": user_id,
                "updated_by": user_id,
            },
        )

    def get_planned_item(self, item_id: int) -> Optional[PlannedItem]:
        doc = self._collections["planned_items"].get(item_id)
        return planned_item_from_document(item_id, doc) if doc is not None else None

    def list_planned_items(self, account_id: int) -> list[PlannedItem]:
        items = [
            planned_item_from_document(doc_id, doc)
            for doc_id, doc in self._documents("planned_items")
            if doc["account_id"] == account_id
        ]
        return sorted(
            items,
            key=lambda item: (item.expected_date is None, item.expected_date or date.min, item.id),
        )

    def update_planned_item(self, item_id: int, fields: dict[str, Any]) -> None:
        unknown = set(fields) - PLANNED_ITEM_FIELDS
        if unknown:
            raise ValidationError(f"Unknown planned item fields: {', '.join(sorted(unknown))}")
        doc = self._collections["planned_items"].get(item_id)
        if doc is None:
            raise NotFoundError(planned_item_not_found(item_id))
        for name, value in fields.items():
            doc[name] = to_storage_value(value)
        doc["updated_at"] = datetime.now(UTC)

    def delete_planned_item(self, item_id: int) -> None:
        if self._collections["planned_items"].pop(item_id, None) is None:
            raise NotFoundError(planned_item_not_found(item_id))

    # Ledger entry operations
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
        now = datetime.now(UTC)
        return self._insert(
            "ledger_entries",
            {
                "account_id": account_id,
                "transaction_date": transaction_date,
                "type": to_storage_value(type),
                "category": to_storage_value(category),
                "description": description,
                "amount": amount,
                "payer_payee": payer_payee,
                "notes": notes,
                "status": to_storage_value(status),
                "created_at": now,
                "updated_at": now,
                "created_by": user_id,
                "updated_by": user_id,
            },
        )

    def get_ledger_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        doc = self._collections["ledger_entries"].get(entry_id)
        return ledger_entry_from_document(entry_id, doc) if doc is not None else None

    def list_ledger_entries(self, account_id: int) -> list[LedgerEntry]:
        return [
            ledger_entry_from_document(doc_id, doc)
            for doc_id, doc in self._documents("ledger_entries")
            if doc["account_id"] == account_id
        ]

    def update_ledger_entry(
        self, entry_id: int, fields: dict[str, Any], remove: Iterable[str] = ()
    ) -> None:
        remove = tuple(remove)
        unknown = (set(fields) | set(remove)) - LEDGER_ENTRY_FIELDS
        if unknown:
            raise ValidationError(f"Unknown ledger entry fields: {', '.join(sorted(unknown))}")
        doc = self._collections["ledger_entries"].get(entry_id)
        if doc is None:
            raise NotFoundError(ledger_entry_not_found(entry_id))
        for name, value in fields.items():
            doc[name] = to_storage_value(value)
        for name in remove:
            doc.pop(name, None)
        doc["updated_at"] = datetime.now(UTC)

    def delete_ledger_entry(self, entry_id: int) -> None:
        if self._collections["ledger_entries"].pop(entry_id, None) is None:
            raise NotFoundError(ledger_entry_not_found(entry_id))

    def list_ledger_entries_by_bank_transaction(self, bank_transaction_id: int) -> list[LedgerEntry]:
        return [
            ledger_entry_from_document(doc_id, doc)
            for doc_id, doc in self._documents("ledger_entries")
            if doc.get("reconciled_bank_transaction_id") == bank_transaction_id
        ]

    def list_reconciled_bank_transaction_ids(self) -> set[int]:
        return {
            doc["reconciled_bank_transaction_id"]
            for doc in self._collections["ledger_entries"].values()
            if doc.get("reconciled_bank_transaction_id") is not None
        }

    # Bank transaction operations
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
        document = {
            "financial_account_id": financial_account_id,
            "transaction_date": transaction_date,
            "type": to_storage_value(type),
            "amount": amount,
            "description": description,
            "payer_payee": payer_payee,
            "verification_status": to_storage_value(verification_status),
        }
        if category is not None:
            document["category"] = to_storage_value(category)
        return self._insert("bank_transactions", document)

    def get_bank_transaction(self, bank_transaction_id: int) -> Optional[BankTransaction]:
        doc = self._collections["bank_transactions"].get(bank_transaction_id)
        return bank_transaction_from_document(bank_transaction_id, doc) if doc is not None else None

    def list_bank_transactions(self, financial_account_id: str) -> list[BankTransaction]:
        return [
            bank_transaction_from_document(doc_id, doc)
            for doc_id, doc in self._documents("bank_transactions")
            if doc["financial_account_id"] == financial_account_id
        ]

    def list_unclassified_bank_transactions(self) -> list[BankTransaction]:
        return [
            bank_transaction_from_document(doc_id, doc)
            for doc_id, doc in self._documents("bank_transactions")
            if not doc.get("category")
        ]

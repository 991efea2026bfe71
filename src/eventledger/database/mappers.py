"""Mapper functions to convert stored records into domain entities.

ORM rows (SQLAlchemy backend) and plain documents (memory backend) both
land here, so the conversion rules for enums, category codes and optional
fields live in one place.
"""

from decimal import Decimal
from typing import Any, Optional

from eventledger.domain import entities as domain
from eventledger.database.models import (
    Account as ORMAccount,
    BankTransaction as ORMBankTransaction,
    Event as ORMEvent,
    LedgerEntry as ORMLedgerEntry,
    PlannedItem as ORMPlannedItem,
)


def _category_or_none(value: Optional[str]) -> Optional[domain.CategoryCode]:
    if value is None or value == "":
        return None
    return domain.CategoryCode(value)


def _decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        financial_account_id=orm_account.financial_account_id,
        created_at=orm_account.created_at,
    )


def event_to_domain(orm_event: ORMEvent) -> domain.Event:
    """Convert SQLAlchemy Event model to domain Event entity."""
    return domain.Event(
        id=orm_event.id,
        name=orm_event.name,
        start_date=orm_event.start_date,
        pricing=domain.EventPricing(
            regular_price=_decimal(orm_event.regular_price),
            member_price=_decimal(orm_event.member_price),
            alumni_price=_decimal(orm_event.alumni_price),
            early_bird_price=_decimal(orm_event.early_bird_price),
            committee_price=_decimal(orm_event.committee_price),
            currency=orm_event.currency,
        ),
        created_at=orm_event.created_at,
    )


def planned_item_to_domain(orm_item: ORMPlannedItem) -> domain.PlannedItem:
    """Convert SQLAlchemy PlannedItem model to domain PlannedItem entity."""
    return domain.PlannedItem(
        id=orm_item.id,
        account_id=orm_item.account_id,
        type=domain.TransactionType(orm_item.type),
        category=domain.CategoryCode(orm_item.category),
        description=orm_item.description,
        remark=orm_item.remark,
        amount=_decimal(orm_item.amount),
        expected_date=orm_item.expected_date,
        status=domain.PlanStatus(orm_item.status),
        created_at=orm_item.created_at,
        updated_at=orm_item.updated_at,
        created_by=orm_item.created_by,
        updated_by=orm_item.updated_by,
    )


def ledger_entry_to_domain(orm_entry: ORMLedgerEntry) -> domain.LedgerEntry:
    """Convert SQLAlchemy LedgerEntry model to domain LedgerEntry entity."""
    return domain.LedgerEntry(
        id=orm_entry.id,
        account_id=orm_entry.account_id,
        transaction_date=orm_entry.transaction_date,
        type=domain.TransactionType(orm_entry.type),
        category=domain.CategoryCode(orm_entry.category),
        description=orm_entry.description,
        amount=_decimal(orm_entry.amount),
        payer_payee=orm_entry.payer_payee,
        notes=orm_entry.notes,
        status=domain.LedgerStatus(orm_entry.status),
        reconciled_bank_transaction_id=orm_entry.reconciled_bank_transaction_id,
        created_at=orm_entry.created_at,
        updated_at=orm_entry.updated_at,
        created_by=orm_entry.created_by,
        updated_by=orm_entry.updated_by,
    )


def bank_transaction_to_domain(orm_txn: ORMBankTransaction) -> domain.BankTransaction:
    """Convert SQLAlchemy BankTransaction model to domain BankTransaction entity."""
    return domain.BankTransaction(
        id=orm_txn.id,
        financial_account_id=orm_txn.financial_account_id,
        transaction_date=orm_txn.transaction_date,
        type=domain.TransactionType(orm_txn.type),
        amount=_decimal(orm_txn.amount),
        description=orm_txn.description or "",
        payer_payee=orm_txn.payer_payee,
        verification_status=domain.BankVerificationStatus(orm_txn.verification_status),
        category=_category_or_none(orm_txn.category),
    )


def ledger_entry_from_document(doc_id: int, doc: dict[str, Any]) -> domain.LedgerEntry:
    """Convert a stored ledger entry document to a domain LedgerEntry.

    A missing ``reconciled_bank_transaction_id`` key means the entry is not
    reconciled.
    """
    return domain.LedgerEntry(
        id=doc_id,
        account_id=doc["account_id"],
        transaction_date=doc.get("transaction_date"),
        type=domain.TransactionType(doc["type"]),
        category=domain.CategoryCode(doc["category"]),
        description=doc["description"],
        amount=_decimal(doc["amount"]),
        payer_payee=doc.get("payer_payee"),
        notes=doc.get("notes"),
        status=domain.LedgerStatus(doc["status"]),
        reconciled_bank_transaction_id=doc.get("reconciled_bank_transaction_id"),
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
        created_by=doc.get("created_by"),
        updated_by=doc.get("updated_by"),
    )


def planned_item_from_document(doc_id: int, doc: dict[str, Any]) -> domain.PlannedItem:
    """Convert a stored planned item document to a domain PlannedItem."""
    return domain.PlannedItem(
        id=doc_id,
        account_id=doc["account_id"],
        type=domain.TransactionType(doc["type"]),
        category=domain.CategoryCode(doc["category"]),
        description=doc["description"],
        remark=doc.get("remark"),
        amount=_decimal(doc["amount"]),
        expected_date=doc.get("expected_date"),
        status=domain.PlanStatus(doc["status"]),
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
        created_by=doc.get("created_by"),
        updated_by=doc.get("updated_by"),
    )


def bank_transaction_from_document(doc_id: int, doc: dict[str, Any]) -> domain.BankTransaction:
    """Convert a stored bank transaction document to a domain BankTransaction."""
    return domain.BankTransaction(
        id=doc_id,
        financial_account_id=doc["financial_account_id"],
        transaction_date=doc["transaction_date"],
        type=domain.TransactionType(doc["type"]),
        amount=_decimal(doc["amount"]),
        description=doc.get("description") or "",
        payer_payee=doc.get("payer_payee"),
        verification_status=domain.BankVerificationStatus(
            doc.get("verification_status", domain.BankVerificationStatus.PENDING.value)
        ),
        category=_category_or_none(doc.get("category")),
    )


def to_storage_value(value: Any) -> Any:
    """Convert a domain value to its stored scalar form."""
    if isinstance(value, domain.CategoryCode):
        return value.value
    if isinstance(value, (domain.TransactionType, domain.PlanStatus, domain.LedgerStatus,
                          domain.BankVerificationStatus)):
        return value.value
    return value

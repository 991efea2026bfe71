"""Bank transaction domain service.

Bank transactions come from the bank feed and are read-only to the
reconciliation core. ``record_transaction`` is the intake used to feed them.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Union

from eventledger.database.base import Database
from eventledger.domain.entities import (
    BankTransaction,
    BankVerificationStatus,
    CategoryCode,
    TransactionType,
)
from eventledger.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    account_without_financial_account,
    missing_field,
)
from eventledger.domain.validation import (
    optional_date,
    require_amount,
    require_category,
    require_text,
    require_type,
)


class BankTransactionService:
    """Service for reading and recording bank transactions."""

    def __init__(self, db: Database):
        """Initialize bank transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def record_transaction(
        self,
        financial_account_id: str,
        transaction_date: date,
        type: Union[str, TransactionType],
        amount: Decimal,
        description: str = "",
        payer_payee: Optional[str] = None,
        verification_status: Union[str, BankVerificationStatus] = BankVerificationStatus.PENDING,
        category: Optional[Union[str, CategoryCode]] = None,
    ) -> int:
        """Record a bank transaction from the feed.

        Returns:
            Bank transaction ID

        Raises:
            ValidationError: If the account reference, date, type or amount is invalid
        """
        financial_account_id = require_text(financial_account_id, "financial_account_id")
        transaction_date = optional_date(transaction_date)
        if transaction_date is None:
            raise ValidationError(missing_field("transaction_date"))
        try:
            status = BankVerificationStatus(verification_status)
        except ValueError:
            raise ValidationError(f"Invalid verification status: {verification_status}")

        return self.db.create_bank_transaction(
            financial_account_id=financial_account_id,
            transaction_date=transaction_date,
            type=require_type(type),
            amount=require_amount(amount),
            description=description or "",
            payer_payee=payer_payee,
            verification_status=status,
            category=require_category(category) if category else None,
        )

    def get_transaction(self, bank_transaction_id: int) -> Optional[BankTransaction]:
        return self.db.get_bank_transaction(bank_transaction_id)

    def list_for_financial_account(self, financial_account_id: str) -> list[BankTransaction]:
        return self.db.list_bank_transactions(financial_account_id)

    def list_for_account(self, account_id: int) -> list[BankTransaction]:
        """List bank transactions of the financial account linked to an event account.

        Raises:
            NotFoundError: If the account doesn't exist
            ValidationError: If the account has no linked financial account
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        if not account.financial_account_id:
            raise ValidationError(account_without_financial_account(account_id))
        return self.db.list_bank_transactions(account.financial_account_id)

    def list_unclassified(self) -> list[BankTransaction]:
        return self.db.list_unclassified_bank_transactions()

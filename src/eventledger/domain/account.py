"""Account domain service."""

from typing import Optional

from eventledger.database.base import Database
from eventledger.domain.entities import Account as AccountEntity
from eventledger.domain.errors import ConflictError, duplicate_account_name
from eventledger.domain.validation import require_text


class AccountService:
    """Service for managing event accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(self, name: str, financial_account_id: Optional[str] = None) -> int:
        """Create a new event account.

        Args:
            name: Account name
            financial_account_id: Bank account whose transactions back this account

        Returns:
            Account ID

        Raises:
            ValidationError: If name is blank
            ConflictError: If account name already exists
        """
        name = require_text(name, "name")
        for acc in self.db.list_accounts():
            if acc.name == name:
                raise ConflictError(duplicate_account_name(name))

        if financial_account_id is not None:
            financial_account_id = financial_account_id.strip() or None

        return self.db.create_account(name=name, financial_account_id=financial_account_id)

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.db.list_accounts()

"""Utility for resolving account names to IDs."""

from typing import Union

from eventledger.domain.account import AccountService
from eventledger.domain.errors import NotFoundError, account_not_found


def resolve_account(account_service: AccountService, account: Union[str, int]) -> int:
    """Resolve account name or ID to account ID.

    A value that parses as an integer is treated as an ID; anything else is
    matched against account names.

    Args:
        account_service: AccountService instance
        account: Account name, or ID as int or numeric string

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
    """
    if isinstance(account, int) or str(account).strip().isdecimal():
        account_id = int(account)
        if account_service.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        return account_id

    name = str(account).strip()
    for acc in account_service.list_accounts():
        if acc.name == name:
            return acc.id

    raise NotFoundError(f"Account '{name}' not found")

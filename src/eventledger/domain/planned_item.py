"""Planned item domain service."""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from typing import Optional, Any, Union

from eventledger.database.base import Database
from eventledger.domain.entities import (
    BatchResult,
    CategoryCode,
    PlannedItem,
    PlanStatus,
    TransactionType,
)
from eventledger.domain.errors import (
    DomainError,
    NotFoundError,
    ValidationError,
    account_not_found,
    planned_item_not_found,
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


def _require_status(value: Union[str, PlanStatus]) -> PlanStatus:
    try:
        return PlanStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid planned item status: {value}")


class PlannedItemService:
    """Service for managing an account's planned (forecast) line items."""

    def __init__(self, db: Database):
        """Initialize planned item service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_item(
        self,
        account_id: int,
        type: Union[str, TransactionType],
        category: Union[str, CategoryCode],
        description: str,
        amount: Decimal,
        expected_date: Optional[date] = None,
        status: Union[str, PlanStatus] = PlanStatus.PLANNED,
        remark: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> int:
        """Create a planned item.

        Args:
            account_id: Account ID
            type: income or expense
            category: Category code
            description: Description
            amount: Planned amount, not negative
            expected_date: Optional expected date
            status: Initial status
            remark: Optional remark
            user_id: Actor recorded in the audit fields

        Returns:
            Planned item ID

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

        return self.db.create_planned_item(
            account_id=account_id,
            type=txn_type,
            category=category_code,
            description=description,
            amount=amount,
            expected_date=optional_date(expected_date),
            status=status,
            remark=remark,
            user_id=user_id,
        )

    def get_item(self, item_id: int) -> Optional[PlannedItem]:
        """Get planned item by ID, or None if not found."""
        return self.db.get_planned_item(item_id)

    def list_items(self, account_id: int) -> list[PlannedItem]:
        """List an account's planned items.

        Raises:
            NotFoundError: If the account doesn't exist
        """
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        return self.db.list_planned_items(account_id)

    def update_item(
        self,
        item_id: int,
        type: Optional[Union[str, TransactionType]] = None,
        category: Optional[Union[str, CategoryCode]] = None,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        expected_date: Optional[date] = None,
        status: Optional[Union[str, PlanStatus]] = None,
        remark: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> None:
        """Update planned item fields. Fields left as None are not changed.

        Raises:
            NotFoundError: If the item doesn't exist
            ValidationError: If a given field is malformed
        """
        if self.db.get_planned_item(item_id) is None:
            raise NotFoundError(planned_item_not_found(item_id))

        fields: dict[str, Any] = {}
        if type is not None:
            fields["type"] = require_type(type)
        if category is not None:
            fields["category"] = require_category(category)
        if description is not None:
            fields["description"] = require_text(description, "description")
        if amount is not None:
            fields["amount"] = require_amount(amount)
        if expected_date is not None:
            fields["expected_date"] = optional_date(expected_date)
        if status is not None:
            fields["status"] = _require_status(status)
        if remark is not None:
            fields["remark"] = remark

        if not fields:
            return
        fields["updated_by"] = user_id
        self.db.update_planned_item(item_id, fields)

    def delete_item(self, item_id: int) -> None:
        """Delete a planned item.

        Raises:
            NotFoundError: If the item doesn't exist
        """
        if self.db.get_planned_item(item_id) is None:
            raise NotFoundError(planned_item_not_found(item_id))
        self.db.delete_planned_item(item_id)

    def delete_items(self, item_ids: Iterable[int]) -> BatchResult:
        """Delete several planned items, continuing past failures.

        Returns:
            BatchResult listing deleted IDs and failures by ID
        """
        succeeded = []
        failed = []
        for item_id in item_ids:
            try:
                self.delete_item(item_id)
            except DomainError as e:
                logger.warning("Planned item delete failed", item_id=item_id, error=str(e),
                               error_type=type(e).__name__)
                failed.append((str(item_id), str(e)))
            else:
                succeeded.append(item_id)
        return BatchResult(succeeded=tuple(succeeded), failed=tuple(failed))

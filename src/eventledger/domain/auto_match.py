"""Auto-match service: suggest events and planned items for bank transactions."""

from typing import Optional

from eventledger.database.base import Database
from eventledger.domain.entities import MatchOutcome, MatchStatistics
from eventledger.domain.errors import (
    NotFoundError,
    account_not_found,
    bank_transaction_not_found,
)
from eventledger.domain.matching import (
    MatchingConfig,
    load_matching_config,
    match_events,
    match_planned_items,
    match_statistics,
)
from eventledger.logger import get_logger

logger = get_logger(__name__)


class AutoMatchService:
    """Service scoring unclassified bank transactions against candidates.

    Nothing here writes; outcomes are previews for a person to accept.
    """

    def __init__(self, db: Database, config: Optional[MatchingConfig] = None):
        """Initialize auto-match service.

        Args:
            db: Database instance
            config: Matching parameters, read from the environment if omitted
        """
        self.db = db
        self.config = config or load_matching_config()

    def preview(self) -> list[MatchOutcome]:
        """Match every unclassified bank transaction against all events.

        Returns:
            One outcome per unclassified bank transaction, in ID order
        """
        transactions = self.db.list_unclassified_bank_transactions()
        events = self.db.list_events()
        outcomes = [match_events(txn, events, self.config) for txn in transactions]
        logger.info(
            "Auto-match preview built",
            transactions=len(transactions),
            events=len(events),
            auto_applicable=sum(1 for outcome in outcomes if outcome.can_auto_apply),
        )
        return outcomes

    def statistics(self, outcomes: Optional[list[MatchOutcome]] = None) -> MatchStatistics:
        """Summarize preview outcomes, building the preview if none are given."""
        if outcomes is None:
            outcomes = self.preview()
        return match_statistics(outcomes)

    def match_planned_items(self, bank_transaction_id: int, account_id: int) -> MatchOutcome:
        """Rank an account's planned items of the same type for one bank transaction.

        Raises:
            NotFoundError: If the bank transaction or the account doesn't exist
        """
        txn = self.db.get_bank_transaction(bank_transaction_id)
        if txn is None:
            raise NotFoundError(bank_transaction_not_found(bank_transaction_id))
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        return match_planned_items(txn, self.db.list_planned_items(account_id), self.config)

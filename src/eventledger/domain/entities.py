"""Domain model entities for eventledger.

These are pure data classes representing business concepts, independent of
the storage backend. Services receive and return these; the database layer
maps its own records onto them.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

from eventledger.domain.errors import ValidationError, invalid_category


class TransactionType(str, Enum):
    """Direction of a money movement."""

    INCOME = "income"
    EXPENSE = "expense"


class PlanStatus(str, Enum):
    """Lifecycle of a planned (forecast) line item."""

    PLANNED = "planned"
    PENDING_APPROVAL = "pending-approval"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class LedgerStatus(str, Enum):
    """Lifecycle of a ledger entry."""

    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BankVerificationStatus(str, Enum):
    """Verification flag maintained by the external bank-ledger process."""

    PENDING = "pending"
    VERIFIED = "verified"


class ConfidenceTier(str, Enum):
    """Bucket derived from a numeric match score."""

    HIGH = "high"
    MEDIUM = "medium"
    NONE = "none"


class ComparisonStatus(str, Enum):
    """Progress of a category's actual amount against its forecast."""

    COMPLETED = "completed"
    PARTIAL = "partial"
    PENDING = "pending"
    EXCEEDED = "exceeded"


class CandidateKind(str, Enum):
    """What a bank transaction was scored against."""

    EVENT = "event"
    PLANNED_ITEM = "planned-item"


_CATEGORY_PATTERN = re.compile(r"^[^\W_][\w-]*$")


@dataclass(frozen=True, order=True)
class CategoryCode:
    """Validated category code such as ``venue`` or ``other-income``.

    Codes are stripped and lower-cased; they must start with a letter or
    digit and contain only word characters and hyphens.
    """

    value: str

    def __post_init__(self):
        normalized = self.value.strip().lower() if isinstance(self.value, str) else ""
        if not normalized or not _CATEGORY_PATTERN.match(normalized):
            raise ValidationError(invalid_category(self.value))
        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        return self.value


CATEGORY_LABELS: dict[str, str] = {
    "ticket": "Ticket Sales",
    "sponsorship": "Sponsorship",
    "donation": "Donation",
    "other-income": "Other Income",
    "venue": "Venue",
    "food": "Food & Beverage",
    "marketing": "Marketing",
    "equipment": "Equipment",
    "materials": "Materials",
    "transportation": "Transportation",
    "other-expense": "Other Expense",
}


def category_label(code: Optional[CategoryCode]) -> str:
    """Return the display label for a category code."""
    if code is None:
        return "Uncategorized"
    return CATEGORY_LABELS.get(code.value, code.value)


@dataclass(frozen=True)
class Account:
    """Event account domain entity.

    ``financial_account_id`` references the bank account whose transactions
    back this event's ledger.
    """

    id: int
    name: str
    financial_account_id: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class EventPricing:
    """Ticket price table of an event."""

    regular_price: Decimal = Decimal("0")
    member_price: Decimal = Decimal("0")
    alumni_price: Decimal = Decimal("0")
    early_bird_price: Decimal = Decimal("0")
    committee_price: Decimal = Decimal("0")
    currency: str = "RM"

    def tiers(self) -> dict[str, Decimal]:
        """Return price tiers keyed by tier name, in a fixed order."""
        return {
            "member": self.member_price,
            "regular": self.regular_price,
            "alumni": self.alumni_price,
            "early-bird": self.early_bird_price,
            "committee": self.committee_price,
        }


@dataclass(frozen=True)
class Event:
    """Event domain entity, used as an auto-match candidate."""

    id: int
    name: str
    start_date: date
    pricing: EventPricing
    created_at: datetime


@dataclass(frozen=True)
class PlannedItem:
    """Forecast line item of an event account. Never reconciled."""

    id: int
    account_id: int
    type: TransactionType
    category: CategoryCode
    description: str
    amount: Decimal
    expected_date: Optional[date]
    status: PlanStatus
    created_at: datetime
    updated_at: datetime
    remark: Optional[str] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None


@dataclass(frozen=True)
class LedgerEntry:
    """Actual income/expense record of an event account."""

    id: int
    account_id: int
    transaction_date: Optional[date]
    type: TransactionType
    category: CategoryCode
    description: str
    amount: Decimal
    status: LedgerStatus
    created_at: datetime
    updated_at: datetime
    payer_payee: Optional[str] = None
    notes: Optional[str] = None
    reconciled_bank_transaction_id: Optional[int] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None

    @property
    def is_reconciled(self) -> bool:
        return self.reconciled_bank_transaction_id is not None


@dataclass(frozen=True)
class BankTransaction:
    """Externally sourced bank transaction. Read-only to the reconciliation core."""

    id: int
    financial_account_id: str
    transaction_date: date
    type: TransactionType
    amount: Decimal
    description: str
    verification_status: BankVerificationStatus = BankVerificationStatus.PENDING
    payer_payee: Optional[str] = None
    category: Optional[CategoryCode] = None


@dataclass(frozen=True)
class MatchResult:
    """Score of one bank transaction against one candidate. Never persisted."""

    candidate_kind: CandidateKind
    candidate_id: int
    candidate_name: str
    candidate_date: Optional[date]
    date_score: int
    price_score: int
    name_score: int
    total_score: int
    days_difference: Optional[int]
    confidence: ConfidenceTier
    explanation: str
    matched_price_label: Optional[str] = None
    matched_price: Optional[Decimal] = None


@dataclass(frozen=True)
class MatchOutcome:
    """Ranked matches for one bank transaction.

    ``best_match`` clears the review floor; ``top_attempt`` is the closest
    candidate when nothing does, shown for manual review only.
    """

    bank_transaction: BankTransaction
    matches: tuple[MatchResult, ...]
    best_match: Optional[MatchResult]
    top_attempt: Optional[MatchResult]

    @property
    def can_auto_apply(self) -> bool:
        return self.best_match is not None and self.best_match.confidence == ConfidenceTier.HIGH


@dataclass(frozen=True)
class MatchStatistics:
    """Counts over a set of match outcomes."""

    total: int = 0
    has_match: int = 0
    high_confidence: int = 0
    medium_confidence: int = 0
    low_confidence: int = 0
    no_match: int = 0


@dataclass(frozen=True)
class ReconciliationAssignment:
    """A ledger entry to bank transaction link chosen by auto-reconcile."""

    ledger_entry_id: int
    bank_transaction_id: int


@dataclass(frozen=True)
class AutoReconcileResult:
    """Outcome of one auto-reconcile run on an account."""

    account_id: int
    linked: tuple[ReconciliationAssignment, ...] = ()
    unmatched_entry_ids: tuple[int, ...] = ()
    failed: tuple[tuple[int, str], ...] = ()
    skipped_entry_ids: tuple[int, ...] = ()

    @property
    def success_count(self) -> int:
        return len(self.linked)

    @property
    def failure_count(self) -> int:
        return len(self.unmatched_entry_ids) + len(self.failed)


@dataclass(frozen=True)
class BatchResult:
    """Outcome of a collect-errors-and-continue batch operation."""

    succeeded: tuple[int, ...] = ()
    failed: tuple[tuple[str, str], ...] = ()

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    def summary(self) -> str:
        return f"{self.success_count} succeeded, {self.failure_count} failed"


@dataclass(frozen=True)
class CategoryComparison:
    """Forecast against actual for one category of one transaction type."""

    type: TransactionType
    category: CategoryCode
    category_label: str
    forecast: Decimal
    actual: Decimal
    variance: Decimal
    percentage: Decimal
    status: ComparisonStatus


@dataclass(frozen=True)
class ConsolidationSnapshot:
    """Forecast-vs-actual comparison of an account. Recomputed, never stored."""

    income_comparison: tuple[CategoryComparison, ...] = ()
    expense_comparison: tuple[CategoryComparison, ...] = ()
    forecast_income: Decimal = Decimal("0")
    forecast_expense: Decimal = Decimal("0")
    forecast_profit: Decimal = Decimal("0")
    actual_income: Decimal = Decimal("0")
    actual_expense: Decimal = Decimal("0")
    actual_profit: Decimal = Decimal("0")
    bank_income_total: Decimal = Decimal("0")
    bank_expense_total: Decimal = Decimal("0")
    bank_income_count: int = 0
    bank_expense_count: int = 0
    unreconciled_income_total: Decimal = Decimal("0")
    unreconciled_expense_total: Decimal = Decimal("0")
    unreconciled_income_count: int = 0
    unreconciled_expense_count: int = 0


@dataclass(frozen=True)
class RiskFinding:
    """Observation about a consolidation snapshot: a risk or a recommendation."""

    level: str
    code: str
    message: str


@dataclass(frozen=True)
class CategorySuggestion:
    """Category guessed from a free-text description."""

    category: Optional[CategoryCode]
    confidence: float
    matched_keyword: Optional[str]
    reason: str = field(default="")

"""Consolidation: forecast against actual, per category and per account."""

import csv
import io
from collections.abc import Iterable
from decimal import Decimal, ROUND_HALF_UP

from eventledger.database.base import Database
from eventledger.domain.entities import (
    BankTransaction,
    CategoryCode,
    CategoryComparison,
    ComparisonStatus,
    ConsolidationSnapshot,
    LedgerEntry,
    LedgerStatus,
    PlannedItem,
    RiskFinding,
    TransactionType,
    category_label,
)
from eventledger.domain.errors import NotFoundError, account_not_found

ZERO = Decimal("0")
HUNDRED = Decimal("100")
_CENT = Decimal("0.01")
_TENTH = Decimal("0.1")

# Ledger statuses that count towards actual totals
ACTIVE_LEDGER_STATUSES = frozenset({LedgerStatus.PENDING, LedgerStatus.COMPLETED})


def _percentage(actual: Decimal, forecast: Decimal) -> Decimal:
    if forecast <= 0:
        return ZERO
    return (actual / forecast * HUNDRED).quantize(_CENT, rounding=ROUND_HALF_UP)


def comparison_status(forecast: Decimal, actual: Decimal, percentage: Decimal) -> ComparisonStatus:
    """Derive a category's status, first rule that applies wins."""
    if actual == 0:
        return ComparisonStatus.PENDING
    if actual >= forecast:
        return ComparisonStatus.EXCEEDED
    if percentage >= 100:
        return ComparisonStatus.COMPLETED
    if percentage >= 50:
        return ComparisonStatus.PARTIAL
    return ComparisonStatus.PENDING


def _compare(
    type: TransactionType,
    planned_items: list[PlannedItem],
    bank_transactions: list[BankTransaction],
) -> tuple[CategoryComparison, ...]:
    forecast: dict[CategoryCode, Decimal] = {}
    actual: dict[CategoryCode, Decimal] = {}

    for item in planned_items:
        if item.type == type:
            forecast[item.category] = forecast.get(item.category, ZERO) + item.amount

    for txn in bank_transactions:
        if txn.type == type and txn.category is not None:
            actual[txn.category] = actual.get(txn.category, ZERO) + txn.amount

    rows = []
    for category in sorted(set(forecast) | set(actual)):
        category_forecast = forecast.get(category, ZERO)
        category_actual = actual.get(category, ZERO)
        percentage = _percentage(category_actual, category_forecast)
        rows.append(
            CategoryComparison(
                type=type,
                category=category,
                category_label=category_label(category),
                forecast=category_forecast,
                actual=category_actual,
                variance=category_actual - category_forecast,
                percentage=percentage,
                status=comparison_status(category_forecast, category_actual, percentage),
            )
        )
    return tuple(rows)


def build_consolidation(
    planned_items: Iterable[PlannedItem],
    ledger_entries: Iterable[LedgerEntry],
    bank_transactions: Iterable[BankTransaction],
) -> ConsolidationSnapshot:
    """Compute the consolidation snapshot from the three input collections.

    Pure: the same inputs always give an equal snapshot.

    Args:
        planned_items: Planned items of the account, whatever their status
        ledger_entries: Ledger entries of the account
        bank_transactions: Bank transactions of the account's financial account

    Returns:
        ConsolidationSnapshot
    """
    planned = list(planned_items)
    active_entries = [entry for entry in ledger_entries if entry.status in ACTIVE_LEDGER_STATUSES]
    bank = list(bank_transactions)

    def planned_total(type: TransactionType) -> Decimal:
        return sum((item.amount for item in planned if item.type == type), ZERO)

    def entries_of(type: TransactionType, unreconciled_only: bool = False) -> list[LedgerEntry]:
        return [
            entry
            for entry in active_entries
            if entry.type == type and not (unreconciled_only and entry.is_reconciled)
        ]

    def bank_of(type: TransactionType) -> list[BankTransaction]:
        return [txn for txn in bank if txn.type == type]

    forecast_income = planned_total(TransactionType.INCOME)
    forecast_expense = planned_total(TransactionType.EXPENSE)
    actual_income = sum((e.amount for e in entries_of(TransactionType.INCOME)), ZERO)
    actual_expense = sum((e.amount for e in entries_of(TransactionType.EXPENSE)), ZERO)
    unreconciled_income = entries_of(TransactionType.INCOME, unreconciled_only=True)
    unreconciled_expense = entries_of(TransactionType.EXPENSE, unreconciled_only=True)
    bank_income = bank_of(TransactionType.INCOME)
    bank_expense = bank_of(TransactionType.EXPENSE)

    return ConsolidationSnapshot(
        income_comparison=_compare(TransactionType.INCOME, planned, bank),
        expense_comparison=_compare(TransactionType.EXPENSE, planned, bank),
        forecast_income=forecast_income,
        forecast_expense=forecast_expense,
        forecast_profit=forecast_income - forecast_expense,
        actual_income=actual_income,
        actual_expense=actual_expense,
        actual_profit=actual_income - actual_expense,
        bank_income_total=sum((txn.amount for txn in bank_income), ZERO),
        bank_expense_total=sum((txn.amount for txn in bank_expense), ZERO),
        bank_income_count=len(bank_income),
        bank_expense_count=len(bank_expense),
        unreconciled_income_total=sum((e.amount for e in unreconciled_income), ZERO),
        unreconciled_expense_total=sum((e.amount for e in unreconciled_expense), ZERO),
        unreconciled_income_count=len(unreconciled_income),
        unreconciled_expense_count=len(unreconciled_expense),
    )


def _fmt_pct(value: Decimal) -> str:
    return f"{value.quantize(_TENTH, rounding=ROUND_HALF_UP)}%"


def analyze_risks(snapshot: ConsolidationSnapshot) -> list[RiskFinding]:
    """Flag totals and categories that are off plan.

    Income completion and expense overrun are only judged when there is a
    forecast to judge against.
    """
    findings = []

    if snapshot.forecast_income > 0:
        completion = snapshot.actual_income / snapshot.forecast_income * HUNDRED
        if completion < 70:
            findings.append(RiskFinding(
                "error", "income-completion",
                f"Income completion is only {_fmt_pct(completion)}, far below forecast",
            ))
        elif completion < 90:
            findings.append(RiskFinding(
                "warning", "income-completion",
                f"Income completion is {_fmt_pct(completion)}, below forecast",
            ))

    if snapshot.forecast_expense > 0:
        overrun = (snapshot.actual_expense - snapshot.forecast_expense) / snapshot.forecast_expense * HUNDRED
        if overrun > 20:
            findings.append(RiskFinding(
                "error", "expense-overrun", f"Expenses exceed budget by {_fmt_pct(overrun)}",
            ))
        elif overrun > 10:
            findings.append(RiskFinding(
                "warning", "expense-overrun", f"Expenses exceed budget by {_fmt_pct(overrun)}",
            ))

    if snapshot.actual_profit < 0:
        findings.append(RiskFinding(
            "error", "negative-profit",
            f"Net result is a loss of {abs(snapshot.actual_profit).quantize(_CENT)}",
        ))
    elif snapshot.actual_profit < snapshot.forecast_profit * Decimal("0.5"):
        ratio = snapshot.actual_profit / snapshot.forecast_profit * HUNDRED
        findings.append(RiskFinding(
            "warning", "profit-shortfall", f"Net profit is only {_fmt_pct(ratio)} of forecast",
        ))

    weak_income = [
        row for row in snapshot.income_comparison
        if row.forecast > 0 and 0 < row.actual / row.forecast < Decimal("0.5")
    ]
    if weak_income:
        findings.append(RiskFinding(
            "warning", "income-categories-under",
            f"{len(weak_income)} income categories are below half of forecast",
        ))

    overspent = [
        row for row in snapshot.expense_comparison
        if row.forecast > 0 and row.actual > row.forecast * Decimal("1.3")
    ]
    if overspent:
        findings.append(RiskFinding(
            "warning", "expense-categories-over",
            f"{len(overspent)} expense categories are more than 30% over budget",
        ))

    return findings


def _labels(rows: Iterable[CategoryComparison]) -> str:
    return ", ".join(row.category_label for row in rows)


def analyze_recommendations(snapshot: ConsolidationSnapshot) -> list[RiskFinding]:
    """Suggest follow-ups for a snapshot: targets met, savings, categories to watch.

    Findings are "success" or "info". At most three categories are named
    per category finding, the furthest from plan first.
    """
    findings = []

    if snapshot.forecast_income > 0:
        completion = snapshot.actual_income / snapshot.forecast_income * HUNDRED
        if 90 < completion < 100:
            findings.append(RiskFinding(
                "info", "income-near-target",
                f"Income is close to target ({_fmt_pct(completion)}); look for extra income sources",
            ))
        elif completion >= 100:
            findings.append(RiskFinding(
                "success", "income-target-met",
                f"Income target met, {_fmt_pct(completion - HUNDRED)} above forecast",
            ))

    if snapshot.forecast_expense > 0:
        variance = (snapshot.actual_expense - snapshot.forecast_expense) / snapshot.forecast_expense * HUNDRED
        if variance < -10:
            findings.append(RiskFinding(
                "success", "expense-savings", f"Expenses came in {_fmt_pct(-variance)} under budget",
            ))

    if snapshot.forecast_profit > 0:
        variance = (snapshot.actual_profit - snapshot.forecast_profit) / snapshot.forecast_profit * HUNDRED
        if variance > 20:
            findings.append(RiskFinding(
                "success", "profit-above-forecast", f"Net profit is {_fmt_pct(variance)} above forecast",
            ))

    lagging = sorted(
        (
            row for row in snapshot.income_comparison
            if row.forecast > 0 and row.actual / row.forecast < Decimal("0.8")
        ),
        key=lambda row: row.actual / row.forecast,
    )[:3]
    if lagging:
        findings.append(RiskFinding(
            "info", "income-categories-focus",
            f"Focus on these income categories, they are furthest behind: {_labels(lagging)}",
        ))

    over_budget = sorted(
        (
            row for row in snapshot.expense_comparison
            if row.forecast > 0 and row.actual / row.forecast > Decimal("1.2")
        ),
        key=lambda row: row.actual / row.forecast,
        reverse=True,
    )[:3]
    if over_budget:
        findings.append(RiskFinding(
            "info", "expense-categories-review",
            f"Review these expense categories, they are well over budget: {_labels(over_budget)}",
        ))

    return findings


def _money(value: Decimal) -> str:
    return str(value.quantize(_CENT, rounding=ROUND_HALF_UP))


def _comparison_rows(rows: Iterable[CategoryComparison]) -> list[list[str]]:
    lines = [["Category", "Forecast", "Actual", "Variance", "Completion", "Status"]]
    for row in rows:
        lines.append([
            row.category_label,
            _money(row.forecast),
            _money(row.actual),
            _money(row.variance),
            _fmt_pct(row.percentage),
            row.status.value,
        ])
    return lines


def export_consolidation_csv(snapshot: ConsolidationSnapshot) -> str:
    """Render a snapshot as CSV text: overall totals, then income and expense rows."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow(["Overall"])
    writer.writerow(["Forecast income", _money(snapshot.forecast_income)])
    writer.writerow(["Actual income", _money(snapshot.actual_income)])
    writer.writerow(["Income variance", _money(snapshot.actual_income - snapshot.forecast_income)])
    writer.writerow(["Income completion", _fmt_pct(_percentage(snapshot.actual_income, snapshot.forecast_income))])
    writer.writerow([])
    writer.writerow(["Forecast expense", _money(snapshot.forecast_expense)])
    writer.writerow(["Actual expense", _money(snapshot.actual_expense)])
    writer.writerow(["Expense variance", _money(snapshot.actual_expense - snapshot.forecast_expense)])
    writer.writerow(["Expense completion", _fmt_pct(_percentage(snapshot.actual_expense, snapshot.forecast_expense))])
    writer.writerow([])
    writer.writerow(["Forecast profit", _money(snapshot.forecast_profit)])
    writer.writerow(["Actual profit", _money(snapshot.actual_profit)])
    writer.writerow(["Profit variance", _money(snapshot.actual_profit - snapshot.forecast_profit)])
    writer.writerow([])
    writer.writerow(["Income comparison"])
    writer.writerows(_comparison_rows(snapshot.income_comparison))
    writer.writerow([])
    writer.writerow(["Expense comparison"])
    writer.writerows(_comparison_rows(snapshot.expense_comparison))

    return buffer.getvalue()


class ConsolidationService:
    """Service building consolidation snapshots from stored data."""

    def __init__(self, db: Database):
        """Initialize consolidation service.

        Args:
            db: Database instance
        """
        self.db = db

    def snapshot(self, account_id: int) -> ConsolidationSnapshot:
        """Recompute the consolidation snapshot of an account.

        Raises:
            NotFoundError: If the account doesn't exist
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))

        bank_transactions = []
        if account.financial_account_id:
            bank_transactions = self.db.list_bank_transactions(account.financial_account_id)

        return build_consolidation(
            self.db.list_planned_items(account_id),
            self.db.list_ledger_entries(account_id),
            bank_transactions,
        )

"""Matching engine: score bank transactions against events and planned items.

Weights:
    date   0-40  same day scores full points, decaying by day difference
    price  0-40  exact price tier, group multiples of a tier, or within range
    name   0-20  keyword overlap between bank description and candidate name

Scoring is pure and never raises on odd input; a candidate that cannot be
compared on some axis just scores zero there.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from eventledger.config import env_int
from eventledger.domain.entities import (
    BankTransaction,
    CandidateKind,
    ConfidenceTier,
    Event,
    MatchOutcome,
    MatchResult,
    MatchStatistics,
    PlannedItem,
    TransactionType,
    category_label,
)

DATE_SCORE_MAX = 40
PRICE_SCORE_MAX = 40
NAME_SCORE_MAX = 20
TOTAL_SCORE_MAX = DATE_SCORE_MAX + PRICE_SCORE_MAX + NAME_SCORE_MAX

PRICE_EXACT_SCORE = 40
PRICE_MULTIPLE_SCORE = 33
PRICE_RANGE_SCORE = 20

NAME_MIN_SCORE = 5

_CENT = Decimal("0.01")
_TOKEN_PATTERN = re.compile(r"[^\W_]+")


@dataclass(frozen=True)
class MatchingConfig:
    """Tunable parameters of the matching engine.

    ``date_tiers`` pairs a maximum day difference with the points it earns,
    checked in order. A difference beyond ``date_cutoff_days`` scores zero;
    one within the cutoff but past every tier earns the last tier's points.
    """

    date_cutoff_days: int = 30
    date_tiers: tuple[tuple[int, int], ...] = ((0, 40), (3, 35), (7, 30), (14, 25), (30, 20))
    auto_accept_threshold: int = 80
    review_threshold: int = 60
    attempt_window_days: int = 90
    max_group_multiple: int = 5


DEFAULT_MATCHING_CONFIG = MatchingConfig()


def load_matching_config() -> MatchingConfig:
    """Build a MatchingConfig from defaults and EVENTLEDGER_* overrides.

    Returns a fresh object on every call.
    """
    defaults = DEFAULT_MATCHING_CONFIG
    return MatchingConfig(
        date_cutoff_days=env_int("EVENTLEDGER_DATE_CUTOFF_DAYS", defaults.date_cutoff_days),
        date_tiers=defaults.date_tiers,
        auto_accept_threshold=env_int("EVENTLEDGER_AUTO_ACCEPT_THRESHOLD", defaults.auto_accept_threshold),
        review_threshold=env_int("EVENTLEDGER_REVIEW_THRESHOLD", defaults.review_threshold),
        attempt_window_days=env_int("EVENTLEDGER_ATTEMPT_WINDOW_DAYS", defaults.attempt_window_days),
        max_group_multiple=defaults.max_group_multiple,
    )


def quantize_amount(amount: Decimal) -> Decimal:
    """Round an amount to cents, half up."""
    return Decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)


def tokenize(text: Optional[str]) -> set[str]:
    """Split text into lower-cased tokens of length >= 2.

    Tokens break on anything that is not a letter or digit, so CJK runs
    stay together as one token.
    """
    if not text:
        return set()
    return {token for token in _TOKEN_PATTERN.findall(text.lower()) if len(token) >= 2}


def keyword_overlap(first: Optional[str], second: Optional[str]) -> bool:
    """Return True when two texts share at least one token."""
    return bool(tokenize(first) & tokenize(second))


def match_key(
    transaction_date: Optional[date], amount: Decimal, type: TransactionType
) -> Optional[tuple[date, Decimal, TransactionType]]:
    """Exact-join key used by auto-reconcile: (day, amount in cents, type).

    Returns None when there is no date, so undated records never join.
    """
    if transaction_date is None:
        return None
    return (transaction_date, quantize_amount(amount), type)


def confidence_for(score: int, config: MatchingConfig = DEFAULT_MATCHING_CONFIG) -> ConfidenceTier:
    """Map a total score onto a confidence tier."""
    if score >= config.auto_accept_threshold:
        return ConfidenceTier.HIGH
    if score >= config.review_threshold:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.NONE


def score_date(
    transaction_date: Optional[date],
    candidate_date: Optional[date],
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> tuple[int, Optional[int], str]:
    """Score date proximity.

    Returns:
        Tuple of (score, days difference or None, reason)
    """
    if transaction_date is None or candidate_date is None:
        return 0, None, "no date"

    days = abs((candidate_date - transaction_date).days)
    if days > config.date_cutoff_days or not config.date_tiers:
        return 0, days, f"{days} days apart, out of range"

    points = config.date_tiers[-1][1]
    for max_days, tier_points in config.date_tiers:
        if days <= max_days:
            points = tier_points
            break

    points = max(0, min(DATE_SCORE_MAX, points))
    if days == 0:
        return points, days, "same day"
    return points, days, f"{days} days apart"


def score_price(
    amount: Decimal,
    tiers: Mapping[str, Decimal],
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> tuple[int, Optional[str], Optional[Decimal]]:
    """Score an amount against a price table.

    Tiers are checked in mapping order. An exact tier hit wins, then a
    multiple (2 up to ``max_group_multiple``) of a non-zero tier, then an
    amount inside the span of the non-zero tiers.

    Returns:
        Tuple of (score, matched label or None, matched tier price or None)
    """
    value = quantize_amount(abs(amount))
    prices = {label: quantize_amount(price) for label, price in tiers.items()}

    for label, price in prices.items():
        if value == price:
            return PRICE_EXACT_SCORE, label, price

    for label, price in prices.items():
        if price <= 0:
            continue
        for multiple in range(2, config.max_group_multiple + 1):
            if value == price * multiple:
                return PRICE_MULTIPLE_SCORE, f"{label} x{multiple}", price

    paid = [price for price in prices.values() if price > 0]
    if paid and min(paid) <= value <= max(paid):
        return PRICE_RANGE_SCORE, "within range", None

    return 0, None, None


def score_name(description: Optional[str], candidate_tokens: set[str]) -> tuple[int, str]:
    """Score keyword overlap between a bank description and candidate tokens.

    Any shared token earns at least NAME_MIN_SCORE; the score then grows
    with the share of candidate tokens found, up to NAME_SCORE_MAX.
    """
    if not candidate_tokens:
        return 0, "no name"
    matched = tokenize(description) & candidate_tokens
    if not matched:
        return 0, "no keyword match"
    score = NAME_SCORE_MAX * len(matched) // len(candidate_tokens)
    score = max(NAME_MIN_SCORE, min(NAME_SCORE_MAX, score))
    return score, f"keywords {len(matched)}/{len(candidate_tokens)}"


def _build_result(
    transaction: BankTransaction,
    kind: CandidateKind,
    candidate_id: int,
    candidate_name: str,
    candidate_date: Optional[date],
    tiers: Mapping[str, Decimal],
    candidate_tokens: set[str],
    config: MatchingConfig,
) -> MatchResult:
    date_points, days, date_reason = score_date(transaction.transaction_date, candidate_date, config)
    price_points, price_label, matched_price = score_price(transaction.amount, tiers, config)
    description = " ".join(part for part in (transaction.description, transaction.payer_payee) if part)
    name_points, name_reason = score_name(description, candidate_tokens)

    total = max(0, min(TOTAL_SCORE_MAX, date_points + price_points + name_points))

    parts = []
    if name_points > 0:
        parts.append(f"name: {name_reason}")
    if price_points > 0:
        parts.append(f"price: {price_label}")
    if date_points > 0:
        parts.append(f"date: {date_reason}")

    return MatchResult(
        candidate_kind=kind,
        candidate_id=candidate_id,
        candidate_name=candidate_name,
        candidate_date=candidate_date,
        date_score=date_points,
        price_score=price_points,
        name_score=name_points,
        total_score=total,
        days_difference=days,
        confidence=confidence_for(total, config),
        explanation="; ".join(parts),
        matched_price_label=price_label,
        matched_price=matched_price,
    )


def score_event(
    transaction: BankTransaction, event: Event, config: MatchingConfig = DEFAULT_MATCHING_CONFIG
) -> MatchResult:
    """Score a bank transaction against an event and its price table."""
    return _build_result(
        transaction,
        CandidateKind.EVENT,
        event.id,
        event.name,
        event.start_date,
        event.pricing.tiers(),
        tokenize(event.name),
        config,
    )


def score_planned_item(
    transaction: BankTransaction, item: PlannedItem, config: MatchingConfig = DEFAULT_MATCHING_CONFIG
) -> MatchResult:
    """Score a bank transaction against a planned item.

    The planned amount is the item's single price tier; its name tokens come
    from the description and the category label.
    """
    tokens = tokenize(item.description) | tokenize(category_label(item.category))
    return _build_result(
        transaction,
        CandidateKind.PLANNED_ITEM,
        item.id,
        item.description,
        item.expected_date,
        {"planned": item.amount},
        tokens,
        config,
    )


def _rank_key(result: MatchResult) -> tuple:
    days = result.days_difference
    return (-result.total_score, days is None, days if days is not None else 0, result.candidate_id)


def _attempt_key(result: MatchResult) -> tuple:
    return (result.days_difference, -result.total_score, result.candidate_id)


def rank_results(
    transaction: BankTransaction,
    results: Iterable[MatchResult],
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> MatchOutcome:
    """Rank scored candidates for one bank transaction.

    Matches at or above the review threshold are ordered by score, then
    day difference (undated last), then candidate ID. When none qualifies,
    the top attempt is the closest candidate within the attempt window,
    ordered by day difference and then score.
    """
    results = list(results)
    matches = sorted(
        (result for result in results if result.total_score >= config.review_threshold),
        key=_rank_key,
    )
    best_match = matches[0] if matches else None

    top_attempt = None
    if best_match is None:
        attempts = sorted(
            (
                result
                for result in results
                if result.days_difference is not None
                and result.days_difference <= config.attempt_window_days
            ),
            key=_attempt_key,
        )
        top_attempt = attempts[0] if attempts else None

    return MatchOutcome(
        bank_transaction=transaction,
        matches=tuple(matches),
        best_match=best_match,
        top_attempt=top_attempt,
    )


def match_events(
    transaction: BankTransaction,
    events: Iterable[Event],
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> MatchOutcome:
    """Score and rank every event for one bank transaction."""
    return rank_results(transaction, (score_event(transaction, event, config) for event in events), config)


def match_planned_items(
    transaction: BankTransaction,
    items: Iterable[PlannedItem],
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> MatchOutcome:
    """Score and rank planned items of the transaction's type."""
    return rank_results(
        transaction,
        (score_planned_item(transaction, item, config) for item in items if item.type == transaction.type),
        config,
    )


def match_statistics(outcomes: Iterable[MatchOutcome]) -> MatchStatistics:
    """Count outcomes by the confidence of their best match."""
    total = has_match = high = medium = low = no_match = 0
    for outcome in outcomes:
        total += 1
        if outcome.best_match is None:
            no_match += 1
            continue
        has_match += 1
        if outcome.best_match.confidence == ConfidenceTier.HIGH:
            high += 1
        elif outcome.best_match.confidence == ConfidenceTier.MEDIUM:
            medium += 1
        else:
            low += 1
    return MatchStatistics(
        total=total,
        has_match=has_match,
        high_confidence=high,
        medium_confidence=medium,
        low_confidence=low,
        no_match=no_match,
    )

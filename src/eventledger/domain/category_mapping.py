"""Keyword-based category suggestion for free-text descriptions."""

from collections.abc import Iterable, Mapping

from eventledger.domain.entities import (
    BankTransaction,
    CategoryCode,
    CategorySuggestion,
    TransactionType,
)

KeywordTable = Mapping[TransactionType, Mapping[str, tuple[str, ...]]]

DEFAULT_KEYWORDS: KeywordTable = {
    TransactionType.INCOME: {
        "ticket": ("报名", "票务", "参加费", "注册", "入场", "registration", "ticket", "entry"),
        "sponsorship": ("赞助", "sponsor", "捐助", "资助"),
        "donation": ("捐款", "捐献", "善款", "donation", "gift"),
        "other-income": ("其他收入", "misc", "other"),
    },
    TransactionType.EXPENSE: {
        "venue": ("场地", "租金", "会议室", "场馆", "venue", "rental", "hall", "room"),
        "food": ("餐饮", "午餐", "茶点", "饮料", "晚餐", "food", "catering", "lunch", "dinner", "snack"),
        "marketing": ("宣传", "广告", "海报", "推广", "市场", "marketing", "promotion", "banner", "ad"),
        "equipment": ("设备", "租赁", "音响", "投影", "器材", "equipment", "projector", "audio", "rental"),
        "materials": ("物料", "印刷", "讲义", "材料", "证书", "materials", "printing", "handout", "certificate"),
        "transportation": ("交通", "车费", "油费", "停车", "transport", "petrol", "parking", "travel"),
        "other-expense": ("其他支出", "misc", "other"),
    },
}

# Suggestions below this confidence should be confirmed by a person
REVIEW_CONFIDENCE = 0.8


def _confidence(keyword: str, description: str) -> float:
    return min(len(keyword) / len(description) * 2, 1.0)


def category_suggestions(
    description: str,
    type: TransactionType,
    top_n: int = 3,
    keywords: KeywordTable = DEFAULT_KEYWORDS,
) -> list[CategorySuggestion]:
    """List every keyword hit in a description, most confident first.

    Ties keep table order.
    """
    if not description:
        return []
    lowered = description.lower()
    hits = []
    for category, words in keywords.get(type, {}).items():
        for word in words:
            if word.lower() in lowered:
                hits.append(
                    CategorySuggestion(
                        category=CategoryCode(category),
                        confidence=_confidence(word, description),
                        matched_keyword=word,
                        reason=f'Contains keyword "{word}"',
                    )
                )
    hits.sort(key=lambda hit: -hit.confidence)
    return hits[:top_n]


def suggest_category(
    description: str,
    type: TransactionType,
    keywords: KeywordTable = DEFAULT_KEYWORDS,
) -> CategorySuggestion:
    """Suggest the single best category for a description.

    Confidence is ``min(2 * len(keyword) / len(description), 1)``; the first
    keyword reaching the highest confidence wins.
    """
    hits = category_suggestions(description, type, top_n=1, keywords=keywords)
    if hits:
        best = hits[0]
        return CategorySuggestion(
            category=best.category,
            confidence=best.confidence,
            matched_keyword=best.matched_keyword,
            reason=f'Matched keyword "{best.matched_keyword}"',
        )
    return CategorySuggestion(category=None, confidence=0.0, matched_keyword=None, reason="No keyword matched")


def needs_review(suggestion: CategorySuggestion) -> bool:
    return suggestion.category is None or suggestion.confidence < REVIEW_CONFIDENCE


def with_keyword(
    keywords: KeywordTable, type: TransactionType, category: str, keyword: str
) -> KeywordTable:
    """Return a copy of a keyword table with one extra keyword.

    Unknown categories are left alone, as are keywords already listed.
    """
    table = {t: dict(categories) for t, categories in keywords.items()}
    words = table.get(type, {}).get(category)
    if words is not None and keyword not in words:
        table[type][category] = tuple(words) + (keyword,)
    return table


def suggest_for_transactions(
    transactions: Iterable[BankTransaction],
    keywords: KeywordTable = DEFAULT_KEYWORDS,
) -> list[tuple[BankTransaction, CategorySuggestion]]:
    """Suggest a category for each bank transaction from its description."""
    results = []
    for txn in transactions:
        text = " ".join(part for part in (txn.description, txn.payer_payee) if part)
        results.append((txn, suggest_category(text, txn.type, keywords)))
    return results

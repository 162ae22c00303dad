"""
Local rollups over a transaction set
Monthly income/expense series, totals and category breakdowns
"""
from collections import defaultdict
from typing import Iterable, Optional
from models.schemas import (
    AIInsights,
    CategoryShare,
    MonthlyRollup,
    RiskClassifiedSpend,
    RiskLevel,
    Transaction,
    TransactionSummary,
    TransactionType,
)


def aggregate_monthly(transactions: Iterable[Transaction]) -> tuple[MonthlyRollup, ...]:
    """
    Group transactions by calendar month.

    Credits sum into income and debits into expense. Any other type is
    counted in neither. Months come back in chronological order.
    """
    income: dict[tuple[int, int], float] = defaultdict(float)
    expense: dict[tuple[int, int], float] = defaultdict(float)
    labels: dict[tuple[int, int], str] = {}

    for t in transactions:
        key = (t.date.year, t.date.month)
        if key not in labels:
            labels[key] = t.date.strftime("%b %Y")
        if t.type == TransactionType.CREDIT:
            income[key] += t.amount
        elif t.type == TransactionType.DEBIT:
            expense[key] += t.amount

    return tuple(
        MonthlyRollup(
            month_key=f"{year:04d}-{month:02d}",
            month_label=labels[(year, month)],
            income=income[(year, month)],
            expense=expense[(year, month)],
        )
        for year, month in sorted(labels)
    )


def total_debits(transactions: Iterable[Transaction]) -> float:
    return sum(t.amount for t in transactions if t.type == TransactionType.DEBIT)


def total_credits(transactions: Iterable[Transaction]) -> float:
    return sum(t.amount for t in transactions if t.type == TransactionType.CREDIT)


def summarize(transactions: list[Transaction]) -> TransactionSummary:
    """Generate summary statistics from transactions"""
    if not transactions:
        return TransactionSummary()

    total_income = total_credits(transactions)
    total_spending = total_debits(transactions)

    dates = [t.date for t in transactions]

    return TransactionSummary(
        total_income=round(total_income, 2),
        total_spending=round(total_spending, 2),
        net_flow=round(total_income - total_spending, 2),
        transaction_count=len(transactions),
        date_range=(min(dates), max(dates)),
    )


def category_breakdown(insights: Optional[AIInsights]) -> list[CategoryShare]:
    """Categorized spend, largest first, with each category's share of the total"""
    if insights is None:
        return []

    totals: dict[str, float] = defaultdict(float)
    for expense in insights.categorized_expenses:
        totals[expense.category] += expense.amount

    grand_total = sum(totals.values())
    ordered = sorted(totals.items(), key=lambda x: x[1], reverse=True)

    return [
        CategoryShare(
            category=category,
            amount=amount,
            share=round(amount / grand_total * 100, 2) if grand_total > 0 else 0.0,
        )
        for category, amount in ordered
    ]


def high_risk_spends(insights: Optional[AIInsights]) -> list[RiskClassifiedSpend]:
    if insights is None:
        return []
    return [s for s in insights.risk_classified_spends if s.level == RiskLevel.HIGH]


def flag_transactions(
    transactions: Iterable[Transaction],
    insights: Optional[AIInsights],
) -> list[str]:
    """
    Ids of transactions matching a high risk spend item.

    A match is a case-insensitive substring test in either direction, since
    the oracle may shorten or expand descriptions.
    """
    items = [s.item.lower() for s in high_risk_spends(insights) if s.item.strip()]
    if not items:
        return []

    flagged = []
    for t in transactions:
        desc = t.description.lower()
        if not desc:
            continue
        if any(item in desc or desc in item for item in items):
            flagged.append(t.id)
    return flagged

"""
Budget Tracker
Progress against the monthly budget goal and validated goal edits
"""
import logging
import math
from typing import Iterable, Mapping, Optional, Union
from models.schemas import (
    AIInsights,
    BudgetGoal,
    BudgetProgress,
    CategoryProgress,
)

logger = logging.getLogger(__name__)

LimitValue = Union[str, int, float, None]
CategoryEdits = Union[Mapping[str, LimitValue], Iterable[tuple[str, LimitValue]]]


def parse_limit(value: LimitValue) -> Optional[float]:
    """Return a positive finite limit, or None if the value cannot be one"""
    if value is None or isinstance(value, bool):
        return None

    try:
        limit = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return None

    if not math.isfinite(limit) or limit <= 0:
        return None
    return limit


def _progress(spent: float, limit: float) -> tuple[float, bool]:
    ratio = spent / limit * 100
    # is_over uses the raw ratio so it can be true while percent sits at 100
    return min(max(ratio, 0.0), 100.0), spent > limit


def compute_progress(goal: BudgetGoal, total_spent: float) -> BudgetProgress:
    """Overall progress of total spend against the monthly limit"""
    limit = goal.total_monthly_limit
    percent, is_over = _progress(total_spent, limit)
    return BudgetProgress(
        limit=limit,
        spent=total_spent,
        percent=percent,
        is_over=is_over,
        remaining=limit - total_spent,
    )


def compute_category_progress(
    goal: BudgetGoal,
    insights: Optional[AIInsights] = None,
) -> list[CategoryProgress]:
    """
    Progress for each category limit in the goal.

    Spend per category comes from the oracle's categorized expenses; a
    category the oracle did not report counts as 0.
    """
    spent_by_category: dict[str, float] = {}
    if insights is not None:
        for expense in insights.categorized_expenses:
            # First entry wins when the oracle repeats a category
            spent_by_category.setdefault(expense.category, expense.amount)

    results = []
    for category, limit in goal.category_limits.items():
        spent = spent_by_category.get(category, 0.0)
        percent, is_over = _progress(spent, limit)
        results.append(CategoryProgress(
            category=category,
            limit=limit,
            spent=spent,
            percent=percent,
            is_over=is_over,
        ))
    return results


def _iter_edits(edits: CategoryEdits) -> Iterable[tuple[str, LimitValue]]:
    if isinstance(edits, Mapping):
        return edits.items()
    return edits


def update_goal(
    current: BudgetGoal,
    total_limit: LimitValue,
    category_edits: Optional[CategoryEdits] = None,
) -> BudgetGoal:
    """
    Apply a budget edit and return the goal to save.

    A total limit that is not a positive number rejects the whole edit and
    `current` is returned unchanged. Category names are trimmed and the last
    value for a name wins. Categories whose limit is not a positive number
    are left out, which is how a category gets removed. Without edits the
    current category limits are kept.
    """
    limit = parse_limit(total_limit)
    if limit is None:
        logger.info("Rejected budget edit with total limit %r", total_limit)
        return current

    if category_edits is None:
        category_edits = current.category_limits

    category_limits: dict[str, float] = {}
    for raw_name, raw_value in _iter_edits(category_edits):
        name = raw_name.strip()
        if not name:
            continue
        category_limits.pop(name, None)
        value = parse_limit(raw_value)
        if value is not None:
            category_limits[name] = value

    return BudgetGoal(total_monthly_limit=limit, category_limits=category_limits)


def edits_from_goal(goal: BudgetGoal) -> dict[str, str]:
    """Seed an edit session with the goal's current category limits"""
    return {category: str(limit) for category, limit in goal.category_limits.items()}


def add_category(edits: Mapping[str, str], name: str) -> dict[str, str]:
    """New categories start at "0" so they are dropped on save unless given a limit"""
    name = name.strip()
    updated = dict(edits)
    if name and name not in updated:
        updated[name] = "0"
    return updated


def remove_category(edits: Mapping[str, str], name: str) -> dict[str, str]:
    updated = dict(edits)
    updated.pop(name.strip(), None)
    return updated


def editable_categories(
    edits: Mapping[str, str],
    insights: Optional[AIInsights] = None,
) -> list[str]:
    """Categories detected by the oracle followed by user-defined ones, without repeats"""
    detected = [c.category for c in insights.categorized_expenses] if insights else []
    return list(dict.fromkeys([*detected, *edits.keys()]))

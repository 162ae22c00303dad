"""
RiskRadar Tools
"""
from tools.transaction_parser import (
    normalize_transactions,
    TransactionParser,
    EmptyResultError,
    SAMPLE_CSV,
)
from tools.aggregation import (
    aggregate_monthly,
    total_debits,
    total_credits,
    summarize,
    category_breakdown,
    high_risk_spends,
    flag_transactions,
)
from tools.budget_tracker import (
    compute_progress,
    compute_category_progress,
    update_goal,
    add_category,
    remove_category,
    edits_from_goal,
    editable_categories,
)
from tools.state_store import (
    StateStore,
    InMemoryStateStore,
    JsonFileStateStore,
    AppStateRepository,
)

__all__ = [
    # Normalizer
    "normalize_transactions",
    "TransactionParser",
    "EmptyResultError",
    "SAMPLE_CSV",
    # Aggregation
    "aggregate_monthly",
    "total_debits",
    "total_credits",
    "summarize",
    "category_breakdown",
    "high_risk_spends",
    "flag_transactions",
    # Budget
    "compute_progress",
    "compute_category_progress",
    "update_goal",
    "add_category",
    "remove_category",
    "edits_from_goal",
    "editable_categories",
    # State
    "StateStore",
    "InMemoryStateStore",
    "JsonFileStateStore",
    "AppStateRepository",
]

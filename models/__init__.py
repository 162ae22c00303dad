"""RiskRadar Data Models"""
from models.schemas import (
    Transaction,
    TransactionType,
    TransactionSummary,
    BudgetGoal,
    DEFAULT_BUDGET,
    CategorizedExpense,
    RiskLevel,
    RiskImpact,
    RiskFactor,
    RiskClassifiedSpend,
    AIInsights,
    MonthlyRollup,
    BudgetProgress,
    CategoryProgress,
    CategoryShare,
    User,
    AppTheme,
    CompactRecord,
    InsightRequest,
    Dashboard,
)

__all__ = [
    "Transaction",
    "TransactionType",
    "TransactionSummary",
    "BudgetGoal",
    "DEFAULT_BUDGET",
    "CategorizedExpense",
    "RiskLevel",
    "RiskImpact",
    "RiskFactor",
    "RiskClassifiedSpend",
    "AIInsights",
    "MonthlyRollup",
    "BudgetProgress",
    "CategoryProgress",
    "CategoryShare",
    "User",
    "AppTheme",
    "CompactRecord",
    "InsightRequest",
    "Dashboard",
]

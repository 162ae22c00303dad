"""
Pydantic models for RiskRadar
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Annotated, Optional
from datetime import date
from enum import Enum


class SnapshotModel(BaseModel):
    """Immutable snapshot, camelCase on the wire"""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class TransactionType(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class RiskImpact(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


class AppTheme(str, Enum):
    WHITE = "white"
    DARK_GREY = "dark-grey"
    DARK_BLUE = "dark-blue"


class Transaction(SnapshotModel):
    """Single transaction record"""
    id: str
    date: date
    amount: float = Field(ge=0)  # Sign lives in `type`, never in amount
    type: str  # Normally credit/debit, unrecognized values kept verbatim
    description: str
    owner_ref: str = Field(default="current-user", alias="userId")


PositiveLimit = Annotated[float, Field(gt=0, allow_inf_nan=False)]


class BudgetGoal(SnapshotModel):
    """User configured monthly spending ceiling"""
    total_monthly_limit: PositiveLimit
    category_limits: dict[str, PositiveLimit] = Field(default_factory=dict)


DEFAULT_BUDGET = BudgetGoal(total_monthly_limit=50000, category_limits={})


class OracleModel(SnapshotModel):
    """Oracle response part; strict, so mistyped values are rejected, not coerced"""
    model_config = ConfigDict(strict=True)


class CategorizedExpense(OracleModel):
    category: str
    amount: float = Field(ge=0)


class RiskFactor(OracleModel):
    """Factor contributing to the risk score"""
    name: str
    impact: RiskImpact
    weight: int = Field(ge=1, le=5)
    description: str


class RiskClassifiedSpend(OracleModel):
    """Individual spend flagged by the oracle"""
    item: str
    amount: float = Field(ge=0)
    level: RiskLevel
    reason: str


class AIInsights(OracleModel):
    """
    Complete risk assessment returned by the oracle.

    Every field is required and unknown keys are rejected, so a response
    that drifts from the schema fails validation as a whole.
    """
    model_config = ConfigDict(extra="forbid")

    summary: str
    risks: list[str]
    health_insight: str
    risk_level: RiskLevel
    risk_score: int = Field(ge=0, le=100)
    risk_factors: list[RiskFactor]
    reasoning: str
    categorized_expenses: list[CategorizedExpense]
    risk_classified_spends: list[RiskClassifiedSpend]


class MonthlyRollup(SnapshotModel):
    """Income and expense totals for one calendar month"""
    month_key: str  # YYYY-MM
    month_label: str  # e.g. "Jan 2024"
    income: float = 0.0
    expense: float = 0.0

    @property
    def net(self) -> float:
        return self.income - self.expense


class TransactionSummary(SnapshotModel):
    """Aggregated transaction analysis"""
    total_income: float = 0.0
    total_spending: float = 0.0
    net_flow: float = 0.0
    transaction_count: int = 0
    date_range: tuple[date, date] | None = None


class BudgetProgress(SnapshotModel):
    limit: float
    spent: float
    percent: float  # Clamped to 0..100
    is_over: bool  # From the unclamped ratio
    remaining: float


class CategoryProgress(SnapshotModel):
    category: str
    limit: float
    spent: float
    percent: float
    is_over: bool


class CategoryShare(SnapshotModel):
    category: str
    amount: float
    share: float  # Percentage of all categorized spend


class User(SnapshotModel):
    id: str
    email: str


class CompactRecord(BaseModel):
    """Size-bounded transaction as sent to the oracle"""
    d: date
    a: float
    t: str
    desc: str


class InsightRequest(BaseModel):
    """Everything the oracle receives for one analysis cycle"""
    prompt: str
    records: list[CompactRecord]
    total_spent: float
    budget_limit: Optional[float] = None


class Dashboard(SnapshotModel):
    """Derived views for one transaction set"""
    transactions: list[Transaction]
    monthly: tuple[MonthlyRollup, ...]
    summary: TransactionSummary
    budget: BudgetProgress
    categories: list[CategoryProgress] = Field(default_factory=list)
    insights: Optional[AIInsights] = None
    flagged_ids: list[str] = Field(default_factory=list)

"""
RiskRadar - upload pipeline
Wires normalization, local rollups, budget tracking and the insight
orchestrator to the persisted application state
"""
import logging
from typing import Optional

from agents import config
from agents.oracle import build_oracle
from agents.orchestrator import InsightOrchestrator, OrchestrationBusyError
from models.schemas import (
    AIInsights,
    AppTheme,
    BudgetGoal,
    Dashboard,
    Transaction,
    User,
)
from tools.aggregation import aggregate_monthly, flag_transactions, summarize, total_debits
from tools.budget_tracker import (
    CategoryEdits,
    LimitValue,
    compute_category_progress,
    compute_progress,
    update_goal,
)
from tools.state_store import AppStateRepository, JsonFileStateStore
from tools.transaction_parser import normalize_transactions

logger = logging.getLogger(__name__)


def build_dashboard(
    transactions: list[Transaction],
    goal: BudgetGoal,
    insights: Optional[AIInsights] = None,
) -> Dashboard:
    """Derived views for one transaction snapshot"""
    return Dashboard(
        transactions=transactions,
        monthly=aggregate_monthly(transactions),
        summary=summarize(transactions),
        budget=compute_progress(goal, total_debits(transactions)),
        categories=compute_category_progress(goal, insights),
        insights=insights,
        flagged_ids=flag_transactions(transactions, insights),
    )


class RiskRadarSession:
    """Main interface for RiskRadar"""

    def __init__(
        self,
        repository: Optional[AppStateRepository] = None,
        orchestrator: Optional[InsightOrchestrator] = None,
    ):
        self.repository = repository or AppStateRepository(JsonFileStateStore(config.STATE_FILE))
        self.orchestrator = orchestrator or InsightOrchestrator(build_oracle())
        # Insights live for the session only
        self.insights: Optional[AIInsights] = None

    @property
    def busy(self) -> bool:
        return self.orchestrator.busy

    def sign_in(self, user: User) -> None:
        self.repository.save_user(user)

    def logout(self) -> None:
        self.repository.logout()
        self.insights = None

    def set_theme(self, theme: AppTheme) -> None:
        self.repository.save_theme(theme)

    async def process_upload(self, raw_text: str) -> Dashboard:
        """
        Process an uploaded statement

        The new transaction set replaces the stored one before the oracle is
        asked, so local rollups and insights describe the same snapshot.

        Raises:
            EmptyResultError: no valid rows; stored state is left untouched
            OrchestrationBusyError: an upload is still being analysed
        """
        if self.busy:
            raise OrchestrationBusyError()

        user = self.repository.load_user()
        owner_ref = user.id if user else "current-user"
        transactions = normalize_transactions(raw_text, owner_ref=owner_ref)
        logger.info("Normalized %d transactions", len(transactions))

        self.repository.save_transactions(transactions)
        self.insights = None
        goal = self.repository.load_budget()
        local = build_dashboard(transactions, goal)

        self.insights = await self.orchestrator.request_insights(transactions, goal)
        return local.model_copy(update={
            "insights": self.insights,
            "categories": compute_category_progress(goal, self.insights),
            "flagged_ids": flag_transactions(transactions, self.insights),
        })

    def update_budget(
        self,
        total_limit: LimitValue,
        category_edits: Optional[CategoryEdits] = None,
    ) -> BudgetGoal:
        """
        Apply and persist a budget edit; invalid totals leave the goal as it was.
        Omitting `category_edits` keeps the saved category limits.
        """
        current = self.repository.load_budget()
        goal = update_goal(current, total_limit, category_edits)
        if goal is not current:
            self.repository.save_budget(goal)
        return goal

    def dashboard(self) -> Dashboard:
        """Current derived views rebuilt from stored state"""
        return build_dashboard(
            self.repository.load_transactions(),
            self.repository.load_budget(),
            self.insights,
        )

"""
RiskRadar - Insight Orchestrator
Builds the bounded oracle request, validates the response and degrades to a
fixed fallback assessment when the oracle is unavailable
"""
import json
import logging
from enum import Enum
from typing import Optional

from pydantic import ValidationError

from agents.oracle import OracleError, OraclePayload, RiskOracle, build_prompt
from models.schemas import (
    AIInsights,
    BudgetGoal,
    CompactRecord,
    InsightRequest,
    RiskFactor,
    RiskImpact,
    RiskLevel,
    Transaction,
)
from tools.aggregation import total_debits

logger = logging.getLogger(__name__)

MAX_RECORDS = 100
MAX_DESCRIPTION_LENGTH = 30


class OrchestrationBusyError(RuntimeError):
    """An insight request is already in flight"""

    def __init__(self):
        super().__init__("An insight request is already in progress.")


class OrchestratorState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"


def fallback_insights() -> AIInsights:
    """Deterministic assessment used whenever the oracle cannot answer"""
    return AIInsights(
        summary="Analysis cycle interrupted.",
        risks=["System connectivity disruption."],
        health_insight="Recalibrating diagnostic sensors.",
        risk_level=RiskLevel.MEDIUM,
        risk_score=50,
        risk_factors=[
            RiskFactor(
                name="Connectivity Issue",
                impact=RiskImpact.NEGATIVE,
                weight=3,
                description="AI engine failed to connect to live data streams.",
            )
        ],
        reasoning="Analysis cycle interrupted by network timeout.",
        categorized_expenses=[],
        risk_classified_spends=[],
    )


def select_recent(transactions: list[Transaction], limit: int = MAX_RECORDS) -> list[Transaction]:
    """The `limit` most recent transactions, oldest first; ties keep upload order"""
    ordered = sorted(transactions, key=lambda t: t.date)
    return ordered[-limit:] if limit > 0 else []


def compact(t: Transaction) -> CompactRecord:
    return CompactRecord(
        d=t.date,
        a=t.amount,
        t=t.type,
        desc=t.description[:MAX_DESCRIPTION_LENGTH],
    )


def validate_payload(payload: OraclePayload) -> AIInsights:
    """
    Validate an oracle payload against the AIInsights schema

    Raises:
        OracleError: if the payload is empty
        ValidationError: if it does not match the schema
    """
    if isinstance(payload, AIInsights):
        return AIInsights.model_validate_json(payload.model_dump_json(by_alias=True))
    if not payload or (isinstance(payload, str) and not payload.strip()):
        raise OracleError("Empty response from oracle")
    if not isinstance(payload, str):
        # Strict mode accepts enum values only from JSON, so mappings go through it too
        payload = json.dumps(payload)
    return AIInsights.model_validate_json(payload)


class InsightOrchestrator:
    """
    Runs one analysis cycle per call.

    At most one cycle may be in flight; the guard moves Idle -> Requesting
    -> Idle and a second call while requesting raises OrchestrationBusyError.
    Oracle failures never propagate: the caller always gets an AIInsights.
    """

    def __init__(self, oracle: RiskOracle):
        self.oracle = oracle
        self.state = OrchestratorState.IDLE

    @property
    def busy(self) -> bool:
        return self.state == OrchestratorState.REQUESTING

    def build_request(
        self,
        transactions: list[Transaction],
        goal: Optional[BudgetGoal] = None,
    ) -> InsightRequest:
        # Spend covers the whole set, not just the records sent
        total_spent = total_debits(transactions)
        records = [compact(t) for t in select_recent(transactions)]
        budget_limit = goal.total_monthly_limit if goal is not None else None

        return InsightRequest(
            prompt=build_prompt(records, total_spent, budget_limit),
            records=records,
            total_spent=total_spent,
            budget_limit=budget_limit,
        )

    async def request_insights(
        self,
        transactions: list[Transaction],
        goal: Optional[BudgetGoal] = None,
    ) -> AIInsights:
        if self.busy:
            raise OrchestrationBusyError()

        self.state = OrchestratorState.REQUESTING
        try:
            request = self.build_request(transactions, goal)
            try:
                payload = await self.oracle.classify(request)
                insights = validate_payload(payload)
            except ValidationError as e:
                logger.warning("Oracle response failed schema validation: %s", e)
                return fallback_insights()
            except Exception:
                logger.exception("Risk oracle request failed")
                return fallback_insights()

            logger.info(
                "Received insights: score=%d level=%s",
                insights.risk_score,
                insights.risk_level.value,
            )
            return insights
        finally:
            self.state = OrchestratorState.IDLE

"""
Risk classification oracles
The external capability that turns transaction context into an AIInsights payload
"""
import json
import logging
from typing import Any, Optional, Protocol, Union

import httpx
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from agents import config
from models.schemas import AIInsights, CompactRecord, InsightRequest

logger = logging.getLogger(__name__)

OraclePayload = Union[str, dict, AIInsights]


class OracleError(Exception):
    """The oracle could not produce a response"""
    pass


class RiskOracle(Protocol):
    async def classify(self, request: InsightRequest) -> OraclePayload:
        ...


SYSTEM_PROMPT = """You are RiskRadar, a financial risk analyst for individuals and small businesses.

You receive bank transactions as compact JSON records:
  d = date, a = amount (always positive), t = type (credit or debit), desc = description

Respond with a single JSON object matching the required schema exactly.
Never add fields that are not in the schema. All amounts are in INR."""


def _level_enum() -> dict:
    return {"type": "string", "enum": ["Low", "Medium", "High"]}


# Strict JSON schema mirroring AIInsights, sent as the response format
INSIGHTS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "summary": {"type": "string"},
        "risks": {"type": "array", "items": {"type": "string"}},
        "healthInsight": {"type": "string"},
        "riskLevel": _level_enum(),
        "riskScore": {"type": "integer"},
        "riskFactors": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "impact": {"type": "string", "enum": ["positive", "negative"]},
                    "weight": {"type": "integer"},
                    "description": {"type": "string"},
                },
                "required": ["name", "impact", "weight", "description"],
                "additionalProperties": False,
            },
        },
        "reasoning": {"type": "string"},
        "categorizedExpenses": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "category": {"type": "string"},
                    "amount": {"type": "number"},
                },
                "required": ["category", "amount"],
                "additionalProperties": False,
            },
        },
        "riskClassifiedSpends": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "item": {"type": "string"},
                    "amount": {"type": "number"},
                    "level": _level_enum(),
                    "reason": {"type": "string"},
                },
                "required": ["item", "amount", "level", "reason"],
                "additionalProperties": False,
            },
        },
    },
    "required": [
        "summary",
        "risks",
        "healthInsight",
        "riskLevel",
        "riskScore",
        "riskFactors",
        "reasoning",
        "categorizedExpenses",
        "riskClassifiedSpends",
    ],
    "additionalProperties": False,
}

RESPONSE_FORMAT = {
    "type": "json_schema",
    "json_schema": {"name": "ai_insights", "strict": True, "schema": INSIGHTS_SCHEMA},
}


def build_prompt(
    records: list[CompactRecord],
    total_spent: float,
    budget_limit: Optional[float] = None,
) -> str:
    """Natural-language instruction followed by the serialized records"""
    if budget_limit is not None:
        budget_context = (
            f"The user has set a total monthly budget limit of ₹{budget_limit:,.2f}. "
            f"They have already spent ₹{total_spent:,.2f}."
        )
    else:
        budget_context = "No specific budget limit set."

    data = json.dumps([r.model_dump(mode="json") for r in records], separators=(",", ":"))

    return f"""Analyze this user's bank transaction data (Currency: INR).
{budget_context}

TASKS:
1. CALCULATE A NUMERICAL RISK SCORE (0 to 100):
   - 100: Flawless (High savings, consistent income, no budget breaches).
   - 0: Dangerous (Severe overspending, negative cash flow, high volatility).
2. IDENTIFY 3-5 SPECIFIC RISK FACTORS with a weight from 1 to 5:
   - Factors that contributed positively (e.g., "Stable Income Stream") or negatively (e.g., "Subscription Proliferation").
3. Categorize spendings and identify "High" risk individual behaviors.
4. Provide a high-level "Health Directive" for the user.

Data: {data}"""


def _message_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    # Content blocks
    return "".join(
        part if isinstance(part, str) else part.get("text", "")
        for part in content or []
    )


class OpenAIRiskOracle:
    """Chat model oracle constrained to the AIInsights JSON schema"""

    def __init__(
        self,
        model: str = config.MODEL_NAME,
        temperature: float = config.TEMPERATURE,
        api_key: Optional[str] = None,
        llm=None,
    ):
        if llm is None:
            llm = ChatOpenAI(
                model=model,
                temperature=temperature,
                api_key=api_key or config.OPENAI_API_KEY,
            )
        self.llm = llm.bind(response_format=RESPONSE_FORMAT)

    async def classify(self, request: InsightRequest) -> str:
        messages = [
            SystemMessage(content=SYSTEM_PROMPT),
            HumanMessage(content=request.prompt),
        ]
        response = await self.llm.ainvoke(messages)
        text = _message_text(response.content)
        if not text.strip():
            raise OracleError("Empty response from model")
        return text


class HTTPRiskOracle:
    """
    Oracle served over HTTP

    POSTs the InsightRequest as JSON and expects an AIInsights JSON body.
    The timeout belongs to the transport; the orchestrator never enforces one.
    """

    def __init__(
        self,
        url: str,
        timeout: float = config.HTTP_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._client = client

    async def _post(self, client: httpx.AsyncClient, request: InsightRequest) -> httpx.Response:
        response = await client.post(self.url, json=request.model_dump(mode="json"))
        response.raise_for_status()
        return response

    async def classify(self, request: InsightRequest) -> str:
        if self._client is not None:
            response = await self._post(self._client, request)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await self._post(client, request)

        if not response.text.strip():
            raise OracleError(f"Empty response from {self.url}")
        return response.text


def build_oracle() -> RiskOracle:
    """Oracle selected by configuration"""
    if config.ORACLE_URL:
        logger.info("Using HTTP risk oracle at %s", config.ORACLE_URL)
        return HTTPRiskOracle(config.ORACLE_URL)
    return OpenAIRiskOracle()

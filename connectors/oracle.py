"""
Module: connectors.oracle

The external generative-language service ("oracle") behind one method per
request shape. `InventoryOracle` is the interface the orchestrators depend
on; `OpenAIOracle` implements it with JSON-schema constrained chat
completions. Tests inject a deterministic stub instead.
"""

import json
import logging
from collections.abc import Sequence
from datetime import date
from typing import Any, Protocol

from openai import AsyncOpenAI
from pydantic import BaseModel, TypeAdapter, ValidationError

from agents.prompts import (
    build_assistant_system_prompt,
    build_demand_prompt,
    build_forecast_prompt,
    build_historical_prompt,
)
from config.config import OracleConfig
from models.errors import ConfigurationError, TransientOracleFailure
from models.forecast import DailyPrediction, ForecastResponse, HistoricalProductData
from models.inventory import Product
from utils.openai_utils import completion_text, safe_chat_completion

logger = logging.getLogger(__name__)


class OracleSession(Protocol):
    """A persistent conversation seeded with a system instruction."""

    async def send(self, message: str) -> str: ...


class InventoryOracle(Protocol):
    async def forecast(self, products: Sequence[Product], location: str) -> ForecastResponse: ...

    async def predict_demand(
        self, products: Sequence[Product], location: str, history_summary: str
    ) -> list[DailyPrediction]: ...

    async def historical_analysis(
        self, products: Sequence[Product], location: str
    ) -> list[HistoricalProductData]: ...

    def start_session(self, products: Sequence[Product], location: str) -> OracleSession: ...


# --- Declared response shapes --- #

_TREND_SCHEMA = {
    "type": "object",
    "properties": {
        "productName": {"type": "string"},
        "category": {"type": "string"},
        "demandScore": {"type": "integer"},
        "reason": {"type": "string"},
    },
    "required": ["productName", "category", "demandScore", "reason"],
    "additionalProperties": False,
}

FORECAST_SCHEMA = {
    "type": "object",
    "properties": {
        "location": {"type": "string"},
        "marketSummary": {"type": "string"},
        "trendingProducts": {"type": "array", "items": _TREND_SCHEMA},
    },
    "required": ["location", "marketSummary", "trendingProducts"],
    "additionalProperties": False,
}

_DAY_SCHEMA = {
    "type": "object",
    "properties": {
        "date": {"type": "string", "description": "YYYY-MM-DD"},
        "predictions": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "productName": {"type": "string"},
                    "predictedSales": {"type": "integer"},
                    "reasoning": {"type": "string"},
                },
                "required": ["productName", "predictedSales", "reasoning"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["date", "predictions"],
    "additionalProperties": False,
}

_MONTH_SCHEMA = {
    "type": "object",
    "properties": {
        "month": {"type": "string"},
        "unitsSold": {"type": "integer"},
        "revenue": {"type": "number"},
        "averagePrice": {"type": "number"},
    },
    "required": ["month", "unitsSold", "revenue", "averagePrice"],
    "additionalProperties": False,
}

_HISTORY_SCHEMA = {
    "type": "object",
    "properties": {
        "productName": {"type": "string"},
        "totalUnitsSold": {"type": "integer"},
        "totalRevenue": {"type": "number"},
        "insight": {"type": "string"},
        "monthlyHistory": {"type": "array", "items": _MONTH_SCHEMA},
    },
    "required": ["productName", "totalUnitsSold", "totalRevenue", "insight", "monthlyHistory"],
    "additionalProperties": False,
}

# Structured outputs need an object at the root, so arrays travel under "items".
DEMAND_SCHEMA = {
    "type": "object",
    "properties": {"items": {"type": "array", "items": _DAY_SCHEMA}},
    "required": ["items"],
    "additionalProperties": False,
}

HISTORICAL_SCHEMA = {
    "type": "object",
    "properties": {"items": {"type": "array", "items": _HISTORY_SCHEMA}},
    "required": ["items"],
    "additionalProperties": False,
}

_DAYS = TypeAdapter(list[DailyPrediction])
_HISTORY = TypeAdapter(list[HistoricalProductData])


def _response_format(name: str, schema: dict[str, Any]) -> dict[str, Any]:
    return {"type": "json_schema", "json_schema": {"name": name, "schema": schema, "strict": True}}


def parse_structured_reply(text: str, adapter: TypeAdapter | type[BaseModel], *, unwrap: str | None = None) -> Any:
    """
    Decode an oracle JSON reply and validate it against a model.

    Raises:
        TransientOracleFailure: if the reply is empty, not JSON, or does not
            match the declared shape.
    """
    if not text:
        raise TransientOracleFailure("Oracle returned no data")
    try:
        data = json.loads(text)
        if unwrap is not None and isinstance(data, dict):
            data = data.get(unwrap)
        if isinstance(adapter, TypeAdapter):
            return adapter.validate_python(data)
        return adapter.model_validate(data)
    except (ValueError, ValidationError) as exc:
        raise TransientOracleFailure(f"Malformed oracle reply: {exc}") from exc


class OpenAIChatSession:
    """Assistant session backed by chat completions; keeps the full message list."""

    def __init__(self, oracle: "OpenAIOracle", system_prompt: str):
        self._oracle = oracle
        self.messages: list[dict[str, str]] = [{"role": "system", "content": system_prompt}]

    async def send(self, message: str) -> str:
        """Send a user turn and return the reply text ("" when the model said nothing)."""
        self.messages.append({"role": "user", "content": message})
        try:
            reply = await self._oracle._complete(list(self.messages), temperature=0.7)
        except BaseException:
            # a failed or cancelled turn never reached the model's history
            self.messages.pop()
            raise
        self.messages.append({"role": "assistant", "content": reply})
        return reply


class OpenAIOracle:
    """
    Oracle implementation on the OpenAI chat completions API.

    A missing or placeholder API key raises ConfigurationError from every
    request method before any network call is attempted.
    """

    def __init__(self, config: OracleConfig, client: AsyncOpenAI | None = None):
        self.config = config
        self._client = client
        if self._client is None and config.has_credentials:
            self._client = AsyncOpenAI(api_key=config.api_key)
            logger.info("AsyncOpenAI client initialized successfully.")
        elif self._client is None:
            logger.warning("OpenAI API key missing or placeholder. Oracle features will fall back.")

    def _require_client(self) -> AsyncOpenAI:
        if self._client is None:
            raise ConfigurationError("API Key is missing.")
        return self._client

    async def _complete(self, messages: list[dict[str, str]], **kwargs: Any) -> str:
        client = self._require_client()
        try:
            completion = await safe_chat_completion(
                client,
                model=self.config.model,
                messages=messages,
                logger=logger,
                retry_attempts=self.config.retry_attempts,
                retry_backoff=self.config.retry_backoff,
                **kwargs,
            )
        except Exception as exc:  # noqa: BLE001
            raise TransientOracleFailure(f"Oracle call failed: {exc}") from exc
        return completion_text(completion)

    async def _structured(self, prompt: str, name: str, schema: dict[str, Any]) -> str:
        return await self._complete(
            [{"role": "user", "content": prompt}],
            response_format=_response_format(name, schema),
            temperature=0.4,
        )

    async def forecast(self, products: Sequence[Product], location: str) -> ForecastResponse:
        self._require_client()
        text = await self._structured(build_forecast_prompt(location, products), "market_forecast", FORECAST_SCHEMA)
        return parse_structured_reply(text, ForecastResponse)

    async def predict_demand(
        self, products: Sequence[Product], location: str, history_summary: str
    ) -> list[DailyPrediction]:
        self._require_client()
        prompt = build_demand_prompt(products, location, history_summary, date.today().isoformat())
        text = await self._structured(prompt, "demand_prediction", DEMAND_SCHEMA)
        return parse_structured_reply(text, _DAYS, unwrap="items")

    async def historical_analysis(
        self, products: Sequence[Product], location: str
    ) -> list[HistoricalProductData]:
        self._require_client()
        text = await self._structured(build_historical_prompt(products, location), "historical_analysis", HISTORICAL_SCHEMA)
        return parse_structured_reply(text, _HISTORY, unwrap="items")

    def start_session(self, products: Sequence[Product], location: str) -> OpenAIChatSession:
        self._require_client()
        return OpenAIChatSession(self, build_assistant_system_prompt(products, location))

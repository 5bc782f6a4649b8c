"""
Demand planning orchestrator: a 7-day per-product sales prediction built on
a locally simulated 30-day sales history.
"""

import logging

import numpy as np

from models.enums import ViewState
from models.errors import TransientOracleFailure
from models.forecast import DailyPrediction, SalesHistoryEntry
from utils.data_generation import synthesize_sales_history

from .base import EnrichmentOrchestrator, StateSnapshot
from .prompts import format_sales_history

logger = logging.getLogger(__name__)

FORECAST_DAYS = 7


def validate_prediction_days(days: list[DailyPrediction], product_names: list[str]) -> list[DailyPrediction]:
    """
    Check a demand reply covers exactly FORECAST_DAYS days.

    Days missing predictions for some products are kept and logged.

    Raises:
        TransientOracleFailure: if the number of day records is wrong.
    """
    if len(days) != FORECAST_DAYS:
        raise TransientOracleFailure(f"Expected {FORECAST_DAYS} day records, got {len(days)}")
    expected = {name.lower() for name in product_names}
    for day in days:
        predicted = {p.product_name.lower() for p in day.predictions}
        missing = expected - predicted
        if missing:
            logger.warning(f"Demand prediction for {day.date} is missing {len(missing)} product(s)")
    return days


class DemandPlanningOrchestrator(EnrichmentOrchestrator[list[DailyPrediction]]):
    """
    The simulated history is regenerated on every refresh and kept in
    `request` so the view can show the context the prediction was built on.
    On oracle failure the result is empty; there is no synthetic prediction.
    """

    view = ViewState.DEMAND_PLANNING

    def __init__(self, *args, rng: np.random.Generator | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.rng = rng or np.random.default_rng()

    def empty_result(self) -> list[DailyPrediction]:
        return []

    def should_fetch(self, snapshot: StateSnapshot) -> bool:
        return bool(snapshot.products)

    def prepare(self, snapshot: StateSnapshot) -> list[SalesHistoryEntry]:
        return synthesize_sales_history(snapshot.products, rng=self.rng)

    @property
    def history_summary(self) -> str:
        return format_sales_history(self.request) if self.request else ""

    async def fetch(self, snapshot: StateSnapshot, request: list[SalesHistoryEntry]) -> list[DailyPrediction]:
        days = await self.oracle.predict_demand(snapshot.products, snapshot.location, format_sales_history(request))
        return validate_prediction_days(list(days), [p.name for p in snapshot.products])

    def fallback(self, snapshot: StateSnapshot) -> list[DailyPrediction]:
        return []

"""
Market forecast orchestrator: demand scores for every catalog item plus a
handful of external trending products for the active location.
"""

import logging
from typing import Any

from models.enums import ViewState
from models.errors import ConfigurationError
from models.forecast import ForecastResponse, TrendData

from .base import EnrichmentOrchestrator, StateSnapshot

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = "Estimated electronics trends based on seasonal analysis."
FALLBACK_SCORE = 50
FALLBACK_REASON = "Data unavailable, estimated baseline."
FALLBACK_ITEM_LIMIT = 5
STATIC_TRENDING_ITEM = TrendData(
    product_name="5G Smartphones", category="Mobile", demand_score=90, reason="Network expansion."
)
CONFIGURATION_ERROR_MESSAGE = "Failed to fetch AI insights. Check your API Key or connection."


def fallback_forecast(snapshot: StateSnapshot) -> ForecastResponse:
    """Flat baseline for the first few catalog items plus one static trending item."""
    baseline = [
        TrendData(
            product_name=p.name,
            category=p.category,
            demand_score=FALLBACK_SCORE,
            reason=FALLBACK_REASON,
        )
        for p in snapshot.products[:FALLBACK_ITEM_LIMIT]
    ]
    return ForecastResponse(
        location=snapshot.location,
        market_summary=FALLBACK_SUMMARY,
        trending_products=[*baseline, STATIC_TRENDING_ITEM],
    )


class MarketForecastOrchestrator(EnrichmentOrchestrator[ForecastResponse | None]):
    view = ViewState.FORECAST

    def empty_result(self) -> ForecastResponse | None:
        return None

    async def fetch(self, snapshot: StateSnapshot, request: Any) -> ForecastResponse:
        forecast = await self.oracle.forecast(snapshot.products, snapshot.location)
        logger.info(
            f"Forecast for {snapshot.location}: {len(forecast.trending_products)} trending products"
        )
        return forecast

    def fallback(self, snapshot: StateSnapshot) -> ForecastResponse:
        return fallback_forecast(snapshot)

    def on_configuration_error(
        self, snapshot: StateSnapshot, exc: ConfigurationError
    ) -> tuple[ForecastResponse | None, str | None]:
        # the forecast view surfaces missing credentials instead of a fallback
        return None, CONFIGURATION_ERROR_MESSAGE

    def in_stock_names(self) -> set[str]:
        """Names of forecast entries that match a catalog product."""
        if self.result is None:
            return set()
        catalog_names = {p.name.lower() for p in self.catalog.products}
        return {t.product_name for t in self.result.trending_products if t.product_name.lower() in catalog_names}

"""
Historical analysis orchestrator: six months of simulated per-product sales
and the aggregate monthly revenue across the catalog.
"""

import logging
from collections.abc import Sequence
from typing import Any

from models.enums import ViewState
from models.forecast import HistoricalAnalysis, HistoricalProductData, RevenuePoint

from .base import EnrichmentOrchestrator, StateSnapshot

logger = logging.getLogger(__name__)


def aggregate_revenue(history: Sequence[HistoricalProductData]) -> list[RevenuePoint]:
    """
    Sum revenue across products per month label.

    Months are matched by identical label. The first product's months set
    the order; labels that only appear in later products are appended in
    the order they are first seen.
    """
    if not history:
        return []
    totals: dict[str, float] = {m.month: 0.0 for m in history[0].monthly_history}
    for product in history:
        for metric in product.monthly_history:
            totals[metric.month] = totals.get(metric.month, 0.0) + metric.revenue
    return [RevenuePoint(month=month, revenue=revenue) for month, revenue in totals.items()]


class HistoricalAnalysisOrchestrator(EnrichmentOrchestrator[HistoricalAnalysis]):
    view = ViewState.HISTORICAL

    def empty_result(self) -> HistoricalAnalysis:
        return HistoricalAnalysis()

    def should_fetch(self, snapshot: StateSnapshot) -> bool:
        return bool(snapshot.products)

    async def fetch(self, snapshot: StateSnapshot, request: Any) -> HistoricalAnalysis:
        history = list(await self.oracle.historical_analysis(snapshot.products, snapshot.location))
        logger.info(f"Historical analysis for {snapshot.location}: {len(history)} products")
        return HistoricalAnalysis(products=history, aggregate=aggregate_revenue(history))

    def fallback(self, snapshot: StateSnapshot) -> HistoricalAnalysis:
        return HistoricalAnalysis()

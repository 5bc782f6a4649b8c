"""Synthetic sales data used as planning context when no real sales feed exists."""

from collections.abc import Sequence

import numpy as np

from models.enums import SalesTrend
from models.forecast import SalesHistoryEntry
from models.inventory import Product

MIN_DAILY_UNITS = 1
MAX_DAILY_UNITS = 10


def synthesize_sales_history(
    products: Sequence[Product],
    seed: int | None = None,
    rng: np.random.Generator | None = None,
) -> list[SalesHistoryEntry]:
    """
    Simulate a 30-day sales summary for each product.

    Each product independently gets an average daily unit count drawn
    uniformly from [MIN_DAILY_UNITS, MAX_DAILY_UNITS] and a coin-flip trend
    flag (Increasing or Stable).

    Args:
        products: Catalog snapshot, one entry is produced per product in order.
        seed: Random seed for reproducibility (ignored when `rng` is given).
        rng: Optional numpy Generator to draw from.

    Returns:
        One SalesHistoryEntry per product.
    """
    rng = rng or np.random.default_rng(seed)
    averages = rng.integers(MIN_DAILY_UNITS, MAX_DAILY_UNITS + 1, size=len(products))
    increasing = rng.random(size=len(products)) > 0.5
    return [
        SalesHistoryEntry(
            product_name=product.name,
            average_daily_units=int(avg),
            trend=SalesTrend.INCREASING if up else SalesTrend.STABLE,
        )
        for product, avg, up in zip(products, averages, increasing)
    ]

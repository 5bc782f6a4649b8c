"""
Data models for oracle-derived records: market forecast, demand prediction
and historical analysis. Field aliases follow the oracle's JSON shapes.
"""

from pydantic import BaseModel, ConfigDict, Field

from .enums import SalesTrend


class OracleRecord(BaseModel):
    """Base for records exchanged with the oracle in camelCase."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TrendData(OracleRecord):
    product_name: str = Field(alias="productName")
    category: str
    demand_score: int = Field(alias="demandScore", ge=0, le=100)
    reason: str


class ForecastResponse(OracleRecord):
    location: str
    market_summary: str = Field(alias="marketSummary")
    trending_products: list[TrendData] = Field(alias="trendingProducts", default_factory=list)


class ProductPrediction(OracleRecord):
    product_name: str = Field(alias="productName")
    predicted_sales: int = Field(alias="predictedSales")
    reasoning: str


class DailyPrediction(OracleRecord):
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    predictions: list[ProductPrediction] = Field(default_factory=list)


class MonthlyMetric(OracleRecord):
    month: str
    units_sold: int = Field(alias="unitsSold")
    revenue: float
    average_price: float = Field(alias="averagePrice")


class HistoricalProductData(OracleRecord):
    product_name: str = Field(alias="productName")
    total_units_sold: int = Field(alias="totalUnitsSold")
    total_revenue: float = Field(alias="totalRevenue")
    insight: str
    monthly_history: list[MonthlyMetric] = Field(alias="monthlyHistory", default_factory=list)


class RevenuePoint(OracleRecord):
    """One point of the aggregate revenue series."""

    month: str
    revenue: float


class SalesHistoryEntry(OracleRecord):
    """Locally simulated 30-day sales summary for one product."""

    product_name: str = Field(alias="productName")
    average_daily_units: int = Field(alias="averageDailyUnits", ge=1, le=10)
    trend: SalesTrend


class HistoricalAnalysis(OracleRecord):
    """Per-product history plus the aggregate revenue series derived from it."""

    products: list[HistoricalProductData] = Field(default_factory=list)
    aggregate: list[RevenuePoint] = Field(default_factory=list)

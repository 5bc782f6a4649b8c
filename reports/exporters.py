"""
Report exporters: pure transforms from the catalog or a market forecast into
a tabular ReportDocument. Rendering to PDF lives in reports.pdf.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any

import pandas as pd

from models.forecast import ForecastResponse
from models.inventory import CatalogSummary, Product

RUPEE = "₹"

CATALOG_COLUMNS = ["SKU", "Product Name", "Category", "Qty", "Unit Price", "Total Value"]
FORECAST_COLUMNS = ["Product", "Category", "Demand Score", "Reason"]


def format_inr(amount: float, symbol: str = RUPEE) -> str:
    """Format an amount with Indian digit grouping, e.g. 1234567.5 -> ₹12,34,567.5."""
    sign = "-" if amount < 0 else ""
    whole, _, fraction = f"{abs(amount):.2f}".partition(".")
    head, tail = whole[:-3], whole[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    grouped = ",".join([*groups, tail])
    fraction = fraction.rstrip("0")
    return f"{sign}{symbol}{grouped}{'.' + fraction if fraction else ''}"


@dataclass
class ReportDocument:
    """A titled narrative plus one table, ready to render or download."""

    title: str
    filename: str
    columns: list[str]
    rows: list[list[Any]]
    subtitle: str = ""
    summary: list[str] = field(default_factory=list)
    totals: list[Any] | None = None
    money_columns: frozenset[int] = frozenset()
    footer: str = ""

    def format_cell(self, index: int, value: Any, symbol: str = RUPEE) -> str:
        if index in self.money_columns and isinstance(value, (int, float)):
            return format_inr(value, symbol)
        return "" if value is None else str(value)

    def formatted_rows(self, symbol: str = RUPEE) -> list[list[str]]:
        return [[self.format_cell(i, v, symbol) for i, v in enumerate(row)] for row in self.rows]

    def formatted_totals(self, symbol: str = RUPEE) -> list[str] | None:
        if self.totals is None:
            return None
        return [self.format_cell(i, v, symbol) for i, v in enumerate(self.totals)]

    def to_dataframe(self) -> pd.DataFrame:
        """Raw table values (totals row excluded) as a DataFrame."""
        return pd.DataFrame(self.rows, columns=self.columns)

    def to_csv(self) -> str:
        frame = self.to_dataframe()
        if self.totals is not None:
            frame = pd.concat([frame, pd.DataFrame([self.totals], columns=self.columns)], ignore_index=True)
        return frame.to_csv(index=False)


def export_catalog(products: Sequence[Product], generated_on: date | None = None) -> ReportDocument:
    """Tabular snapshot of the catalog with a totals row for quantity and value."""
    generated_on = generated_on or date.today()
    summary = CatalogSummary.of(products)
    rows = [[p.sku, p.name, p.category, p.quantity, p.price, p.line_value] for p in products]
    return ReportDocument(
        title="NexusInv",
        subtitle="Electronics Inventory Report",
        filename=f"electronics-inventory-{generated_on.isoformat()}.pdf",
        columns=list(CATALOG_COLUMNS),
        rows=rows,
        summary=[
            f"Generated on: {generated_on.strftime('%d/%m/%Y')}",
            f"Total SKU Count: {summary.sku_count}",
            f"Total Stock Quantity: {summary.total_quantity}",
            f"Total Inventory Value: {format_inr(summary.total_value)}",
        ],
        totals=["", "", "TOTAL", summary.total_quantity, "", summary.total_value],
        money_columns=frozenset({4, 5}),
        footer="NexusInv - AI Powered Electronics Inventory System",
    )


def forecast_filename(location: str) -> str:
    slug = re.sub(r"\s+", "-", location).lower()
    return f"forecast-{slug}.pdf"


def export_forecast(forecast: ForecastResponse) -> ReportDocument:
    """Narrative market summary plus the trend table."""
    rows = [[t.product_name, t.category, t.demand_score, t.reason] for t in forecast.trending_products]
    return ReportDocument(
        title=f"Market Forecast Report: {forecast.location}",
        filename=forecast_filename(forecast.location),
        columns=list(FORECAST_COLUMNS),
        rows=rows,
        summary=[forecast.market_summary],
    )

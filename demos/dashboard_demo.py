"""
Walkthrough of the inventory dashboard core.

Loads (or seeds) the catalog, edits stock, visits every enrichment view,
chats with the assistant and writes both reports next to the storage file.
Without OPENAI_API_KEY every view shows its offline fallback.

Run with: python -m demos.dashboard_demo
"""

import asyncio

from config.config import DashboardConfig
from dashboard.app import Dashboard
from models.enums import ViewState
from reports.exporters import export_catalog, export_forecast
from reports.pdf import render_pdf
from utils.logger import get_logger
from utils.markdown import render_html

logger = get_logger("dashboard-demo")


async def main() -> None:
    config = DashboardConfig.from_env()
    config.storage_path.parent.mkdir(parents=True, exist_ok=True)
    dashboard = Dashboard.from_config(config)
    await dashboard.start()

    summary = dashboard.summary()
    logger.info(
        f"Catalog: {summary.sku_count} SKUs, {summary.total_quantity} units, value {summary.total_value:,.0f}"
    )

    first = dashboard.products[0]
    await dashboard.adjust_stock(first.id, -3)
    logger.info(f"Sold 3 x {first.name}; now {dashboard.catalog.get(first.id).quantity} in stock")
    logger.info(f"Search 'samsung': {[p.name for p in dashboard.search('samsung')]}")

    await dashboard.select_view(ViewState.FORECAST)
    forecast_view = dashboard.active_orchestrator
    if forecast_view.error:
        logger.warning(forecast_view.error)
    elif forecast_view.result is not None:
        for trend in forecast_view.result.trending_products:
            logger.info(f"  {trend.product_name:<28} {trend.demand_score:>3}  {trend.reason}")
        forecast_doc = export_forecast(forecast_view.result)
        (config.storage_path.parent / forecast_doc.filename).write_bytes(render_pdf(forecast_doc))

    await dashboard.select_view(ViewState.DEMAND_PLANNING)
    demand_view = dashboard.active_orchestrator
    logger.info(demand_view.history_summary)
    logger.info(f"Demand forecast days: {len(demand_view.result)}")

    await dashboard.set_location("Bengaluru")
    await dashboard.select_view(ViewState.HISTORICAL)
    history_view = dashboard.active_orchestrator
    for point in history_view.result.aggregate:
        logger.info(f"  {point.month}: {point.revenue:,.0f}")

    dashboard.assistant.toggle()
    reply = await dashboard.assistant.send("Which products should I restock first?")
    logger.info(render_html(dashboard.assistant.render(reply)))

    pixel = await dashboard.add_product(
        {"name": "Pixel 9", "category": "Smartphones", "price": "79999", "quantity": "5", "sku": "GGL-PX9"}
    )
    await dashboard.assistant.wait_for_context_updates()
    hidden = [m for m in dashboard.assistant.conversation.get_full_history() if m.hidden]
    logger.info(f"Assistant transcript: {len(dashboard.assistant.messages)} visible, {len(hidden)} context updates")
    await dashboard.remove_product(pixel.id)

    catalog_doc = export_catalog(dashboard.products)
    (config.storage_path.parent / catalog_doc.filename).write_bytes(render_pdf(catalog_doc))
    logger.info(f"Wrote {catalog_doc.filename}")

    dashboard.stop()


if __name__ == "__main__":
    asyncio.run(main())

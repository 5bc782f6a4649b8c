import pytest

from agents.base import StateSnapshot
from agents.market_forecast import (
    CONFIGURATION_ERROR_MESSAGE,
    FALLBACK_REASON,
    FALLBACK_SCORE,
    FALLBACK_SUMMARY,
    STATIC_TRENDING_ITEM,
    MarketForecastOrchestrator,
    fallback_forecast,
)
from connectors.storage import InMemoryStorage
from dashboard.catalog_store import STORAGE_KEY, CatalogStore, serialize_catalog
from dashboard.location import LocationContext
from tests.mocks import StubOracle, failing_oracle, make_product, unconfigured_oracle
from utils.event_bus import EventBus


def build(oracle, products=None, location="Chennai"):
    storage = InMemoryStorage()
    if products is not None:
        storage.set_item(STORAGE_KEY, serialize_catalog(products))
    catalog = CatalogStore(storage)
    return MarketForecastOrchestrator(catalog, LocationContext(location), oracle, EventBus())


@pytest.mark.parametrize("count, expected_baseline", [(0, 0), (3, 3), (5, 5), (12, 5)])
def test_fallback_covers_first_five_items_plus_static_entry(count, expected_baseline):
    products = tuple(make_product(str(i), f"Item {i}") for i in range(count))
    forecast = fallback_forecast(StateSnapshot(products, "Goa", 0))

    assert forecast.location == "Goa"
    assert forecast.market_summary == FALLBACK_SUMMARY
    assert len(forecast.trending_products) == expected_baseline + 1
    baseline = forecast.trending_products[:-1]
    assert [t.product_name for t in baseline] == [p.name for p in products[:5]]
    assert all(t.demand_score == FALLBACK_SCORE and t.reason == FALLBACK_REASON for t in baseline)
    assert forecast.trending_products[-1] == STATIC_TRENDING_ITEM


@pytest.mark.asyncio
async def test_mount_fetches_forecast_for_catalog_and_location():
    oracle = StubOracle()
    orchestrator = build(oracle, location="Mumbai")

    await orchestrator.mount()

    name, products, location = oracle.calls[0]
    assert name == "forecast"
    assert location == "Mumbai"
    assert products == orchestrator.catalog.products
    assert orchestrator.result.market_summary == "Strong demand in Mumbai."
    assert orchestrator.error is None
    assert orchestrator.loading is False


@pytest.mark.asyncio
async def test_empty_catalog_still_asks_oracle():
    oracle = StubOracle()
    orchestrator = build(oracle, products=[])

    await orchestrator.mount()

    assert len(oracle.calls) == 1
    assert [t.product_name for t in orchestrator.result.trending_products] == ["Foldable Phone"]


@pytest.mark.asyncio
async def test_oracle_failure_uses_fallback():
    orchestrator = build(failing_oracle())

    await orchestrator.mount()

    result = orchestrator.result
    assert result.market_summary == FALLBACK_SUMMARY
    assert len(result.trending_products) == 6
    assert result.trending_products[0].product_name == "iPhone 15 Pro"
    assert orchestrator.error is None


@pytest.mark.asyncio
async def test_missing_credentials_surface_error_without_fallback():
    orchestrator = build(unconfigured_oracle())

    await orchestrator.mount()

    assert orchestrator.result is None
    assert orchestrator.error == CONFIGURATION_ERROR_MESSAGE


@pytest.mark.asyncio
async def test_in_stock_names_match_catalog_case_insensitively():
    products = [make_product("1", "Sony WH-1000XM5"), make_product("2", "Kindle")]
    orchestrator = build(StubOracle(), products=products)

    assert orchestrator.in_stock_names() == set()
    await orchestrator.mount()

    assert orchestrator.in_stock_names() == {"Sony WH-1000XM5", "Kindle"}

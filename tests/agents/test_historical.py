import pytest

from agents.historical import HistoricalAnalysisOrchestrator, aggregate_revenue
from connectors.storage import InMemoryStorage
from dashboard.catalog_store import STORAGE_KEY, CatalogStore, serialize_catalog
from dashboard.location import LocationContext
from tests.mocks import StubOracle, failing_oracle, make_history, make_product
from utils.event_bus import EventBus


def build(oracle, products=None):
    storage = InMemoryStorage()
    if products is not None:
        storage.set_item(STORAGE_KEY, serialize_catalog(products))
    return HistoricalAnalysisOrchestrator(CatalogStore(storage), LocationContext(), oracle, EventBus())


def test_aggregate_sums_revenue_per_month():
    history = [
        make_history("A", {"Jan": 100, "Feb": 200}),
        make_history("B", {"Jan": 50, "Feb": 75}),
    ]
    points = aggregate_revenue(history)
    assert [(p.month, p.revenue) for p in points] == [("Jan", 150), ("Feb", 275)]


def test_aggregate_appends_labels_first_seen_later():
    history = [
        make_history("A", {"Jan": 10, "Feb": 20}),
        make_history("B", {"Mar": 5, "Jan": 1}),
        make_history("C", {"Apr": 3, "Mar": 2}),
    ]
    points = aggregate_revenue(history)
    assert [p.month for p in points] == ["Jan", "Feb", "Mar", "Apr"]
    assert [p.revenue for p in points] == [11, 20, 7, 3]


def test_aggregate_empty_history():
    assert aggregate_revenue([]) == []


def test_aggregate_total_equals_sum_of_product_revenue():
    history = [make_history(f"P{i}", {"Jan": i * 10.5, "Feb": i * 3.0}) for i in range(1, 6)]
    total = sum(p.revenue for p in aggregate_revenue(history))
    assert total == pytest.approx(sum(m.revenue for h in history for m in h.monthly_history))


@pytest.mark.asyncio
async def test_mount_builds_products_and_aggregate():
    products = [make_product("1", "A"), make_product("2", "B")]
    oracle = StubOracle()
    oracle.history = [make_history("A", {"Jan": 100, "Feb": 200}), make_history("B", {"Jan": 50, "Feb": 75})]
    orchestrator = build(oracle, products=products)

    await orchestrator.mount()

    assert [p.product_name for p in orchestrator.result.products] == ["A", "B"]
    assert [(p.month, p.revenue) for p in orchestrator.result.aggregate] == [("Jan", 150), ("Feb", 275)]


@pytest.mark.asyncio
async def test_empty_catalog_skips_oracle():
    oracle = StubOracle()
    orchestrator = build(oracle, products=[])

    await orchestrator.mount()

    assert oracle.calls == []
    assert orchestrator.result.products == []
    assert orchestrator.result.aggregate == []


@pytest.mark.asyncio
async def test_oracle_failure_gives_empty_analysis():
    orchestrator = build(failing_oracle())
    await orchestrator.mount()
    assert orchestrator.result.products == []
    assert orchestrator.result.aggregate == []

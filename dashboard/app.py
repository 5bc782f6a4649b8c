"""
Application state container for the inventory dashboard.

`Dashboard` owns the catalog store, location context, view router and the
assistant panel, and is the single mutation entry point: every change goes
through it, is persisted by the store and then published on the event bus
so the mounted orchestrators can refetch.
"""

import logging
from collections.abc import Mapping
from typing import Any

from agents.assistant import AssistantOrchestrator
from agents.demand_planning import DemandPlanningOrchestrator
from agents.historical import HistoricalAnalysisOrchestrator
from agents.market_forecast import MarketForecastOrchestrator
from config.config import DashboardConfig
from connectors.oracle import InventoryOracle, OpenAIOracle
from connectors.storage import JsonFileStorage, KeyValueStorage
from models.enums import DashboardEventType, EventSource, ViewState
from models.errors import NotFound
from models.events import DashboardEvent
from models.inventory import CatalogSummary, Product, ProductDraft, filter_products
from utils.event_bus import EventBus

from .catalog_store import CatalogStore
from .location import LocationContext
from .router import ViewRouter

logger = logging.getLogger(__name__)

ORCHESTRATORS = {
    ViewState.FORECAST: MarketForecastOrchestrator,
    ViewState.DEMAND_PLANNING: DemandPlanningOrchestrator,
    ViewState.HISTORICAL: HistoricalAnalysisOrchestrator,
}


class Dashboard:
    def __init__(
        self,
        storage: KeyValueStorage,
        oracle: InventoryOracle,
        *,
        storage_key: str = "nexusinv_products",
        default_location: str = "Chennai",
        oracle_timeout: float = 30.0,
        event_bus: EventBus | None = None,
    ):
        self.event_bus = event_bus or EventBus()
        self.oracle = oracle
        self.oracle_timeout = oracle_timeout
        self.catalog = CatalogStore(storage, key=storage_key)
        self.location = LocationContext(default_location)
        self.router = ViewRouter({view: self._factory(cls) for view, cls in ORCHESTRATORS.items()})
        self.assistant = AssistantOrchestrator(
            self.catalog, self.location, oracle, self.event_bus, timeout_seconds=oracle_timeout
        )

    @classmethod
    def from_config(cls, config: DashboardConfig, oracle: InventoryOracle | None = None) -> "Dashboard":
        """Wire file storage and the OpenAI oracle from configuration."""
        return cls(
            JsonFileStorage(config.storage_path),
            oracle if oracle is not None else OpenAIOracle(config.oracle),
            storage_key=config.storage_key,
            default_location=config.default_location,
            oracle_timeout=config.oracle.timeout_seconds,
        )

    def _factory(self, orchestrator_cls):
        def build():
            return orchestrator_cls(
                self.catalog, self.location, self.oracle, self.event_bus, timeout_seconds=self.oracle_timeout
            )

        return build

    # --- Lifecycle --- #

    async def start(self) -> None:
        await self.router.start()
        self.assistant.mount()

    def stop(self) -> None:
        self.router.stop()
        self.assistant.unmount()

    # --- Read side --- #

    @property
    def products(self) -> tuple[Product, ...]:
        return self.catalog.products

    @property
    def current_view(self) -> ViewState:
        return self.router.current

    @property
    def active_orchestrator(self):
        return self.router.active

    def search(self, term: str) -> list[Product]:
        return filter_products(self.catalog.products, term)

    def summary(self) -> CatalogSummary:
        return CatalogSummary.of(self.catalog.products)

    # --- Write side --- #

    async def _publish(self, event_type: DashboardEventType, source: EventSource, **payload: Any) -> None:
        await self.event_bus.publish(DashboardEvent(event_type=event_type, source=source, payload=payload))

    async def _catalog_changed(self, action: str, product_id: str) -> None:
        await self._publish(
            DashboardEventType.CATALOG_CHANGED,
            EventSource.CATALOG_STORE,
            action=action,
            product_id=product_id,
            revision=self.catalog.revision,
        )

    async def add_product(self, form: ProductDraft | Mapping[str, Any]) -> Product:
        draft = form if isinstance(form, ProductDraft) else ProductDraft.from_form(form)
        product = self.catalog.add(draft)
        await self._catalog_changed("add", product.id)
        return product

    async def update_product(self, product_id: str, form: ProductDraft | Mapping[str, Any]) -> Product | None:
        """Apply an edit-form submit. An unknown id is ignored and returns None."""
        draft = form if isinstance(form, ProductDraft) else ProductDraft.from_form(form)
        try:
            product = self.catalog.update(product_id, draft)
        except NotFound:
            logger.info(f"Ignoring edit for unknown product {product_id}.")
            return None
        await self._catalog_changed("update", product_id)
        return product

    async def remove_product(self, product_id: str) -> bool:
        removed = self.catalog.remove(product_id)
        if removed:
            await self._catalog_changed("remove", product_id)
        return removed

    async def adjust_stock(self, product_id: str, delta: int) -> Product | None:
        product = self.catalog.adjust_stock(product_id, delta)
        if product is not None:
            await self._catalog_changed("adjust_stock", product_id)
        return product

    async def set_location(self, value: str) -> bool:
        """Set the location; blank input is ignored and the prior value kept."""
        if not self.location.set(value):
            return False
        await self._publish(DashboardEventType.LOCATION_CHANGED, EventSource.LOCATION, location=self.location.get())
        return True

    async def select_view(self, view: ViewState) -> bool:
        previous = self.router.current
        changed = await self.router.select(view)
        if changed:
            await self._publish(
                DashboardEventType.VIEW_CHANGED, EventSource.ROUTER, previous=previous.value, current=self.router.current.value
            )
        return changed

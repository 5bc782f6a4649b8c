"""
Base class for the view-bound enrichment orchestrators.

An orchestrator derives a request from a snapshot of (catalog, location),
asks the oracle, and maps the reply into view-ready records. When the
oracle is unavailable it substitutes a deterministic fallback so the view
is never left without a result.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from connectors.oracle import InventoryOracle
from dashboard.catalog_store import CatalogStore
from dashboard.location import LocationContext
from models.enums import DashboardEventType, ViewState
from models.errors import ConfigurationError, TransientOracleFailure
from models.events import DashboardEvent
from models.inventory import Product
from utils.event_bus import EventBus

logger_base = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ORACLE_TIMEOUT = 30.0

WATCHED_EVENTS = (DashboardEventType.CATALOG_CHANGED, DashboardEventType.LOCATION_CHANGED)


@dataclass(frozen=True)
class StateSnapshot:
    """The catalog and location captured when a request is built."""

    products: tuple[Product, ...]
    location: str
    revision: int


class EnrichmentOrchestrator(Generic[T]):
    """
    Shared lifecycle: `mount` subscribes to catalog/location changes and
    fetches; every change triggers a fresh `refresh`; `unmount` drops the
    derived data.

    Each refresh is tagged with a generation number. A reply that arrives
    after a newer refresh has started (or after unmount) is discarded.
    """

    view: ViewState

    def __init__(
        self,
        catalog: CatalogStore,
        location: LocationContext,
        oracle: InventoryOracle,
        event_bus: EventBus,
        *,
        timeout_seconds: float = DEFAULT_ORACLE_TIMEOUT,
    ):
        self.catalog = catalog
        self.location = location
        self.oracle = oracle
        self.event_bus = event_bus
        self.timeout_seconds = timeout_seconds
        self.mounted = False
        self.loading = False
        self.error: str | None = None
        self.result: T = self.empty_result()
        self.request: Any = None
        self.fetch_count = 0
        self._generation = 0

    # --- Subclass hooks --- #

    def empty_result(self) -> T:
        raise NotImplementedError

    def should_fetch(self, snapshot: StateSnapshot) -> bool:
        """Whether the oracle is worth asking for this snapshot."""
        return True

    def prepare(self, snapshot: StateSnapshot) -> Any:
        """Build any locally derived request input. Runs before every fetch."""
        return None

    async def fetch(self, snapshot: StateSnapshot, request: Any) -> T:
        raise NotImplementedError

    def fallback(self, snapshot: StateSnapshot) -> T:
        raise NotImplementedError

    def on_configuration_error(self, snapshot: StateSnapshot, exc: ConfigurationError) -> tuple[T, str | None]:
        """Result and error message used when the oracle has no credentials."""
        return self.fallback(snapshot), None

    # --- Lifecycle --- #

    @property
    def generation(self) -> int:
        return self._generation

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(self.catalog.products, self.location.get(), self.catalog.revision)

    async def mount(self) -> None:
        if self.mounted:
            return
        self.mounted = True
        for event_type in WATCHED_EVENTS:
            self.event_bus.subscribe(event_type, self.on_state_changed)
        logger_base.debug(f"{type(self).__name__} mounted for {self.view.value}")
        await self.refresh()

    def unmount(self) -> None:
        if not self.mounted:
            return
        for event_type in WATCHED_EVENTS:
            self.event_bus.unsubscribe(event_type, self.on_state_changed)
        self.mounted = False
        self._generation += 1  # invalidates anything in flight
        self.loading = False
        self.error = None
        self.request = None
        self.result = self.empty_result()
        logger_base.debug(f"{type(self).__name__} unmounted, derived data discarded")

    async def on_state_changed(self, event: DashboardEvent) -> None:
        await self.refresh()

    async def refresh(self) -> T | None:
        """
        Rebuild the request from current state and fetch.

        Returns the new result, or None when the orchestrator is not mounted
        or the reply was discarded as stale.
        """
        if not self.mounted:
            return None
        self._generation += 1
        generation = self._generation
        snapshot = self.snapshot()
        request = self.prepare(snapshot)
        error: str | None = None
        self.loading = True

        if not self.should_fetch(snapshot):
            result = self.empty_result()
        else:
            self.fetch_count += 1
            try:
                result = await asyncio.wait_for(self.fetch(snapshot, request), timeout=self.timeout_seconds)
            except ConfigurationError as exc:
                logger_base.warning(f"{self.view.value}: oracle not configured: {exc}")
                result, error = self.on_configuration_error(snapshot, exc)
            except asyncio.TimeoutError:
                logger_base.warning(f"{self.view.value}: oracle timed out after {self.timeout_seconds}s, using fallback")
                result = self.fallback(snapshot)
            except TransientOracleFailure as exc:
                logger_base.warning(f"{self.view.value}: oracle failed, using fallback: {exc}")
                result = self.fallback(snapshot)
            except Exception as exc:  # noqa: BLE001
                logger_base.error(f"{self.view.value}: unexpected oracle error, using fallback: {exc}", exc_info=True)
                result = self.fallback(snapshot)

        if generation != self._generation:
            logger_base.debug(f"{self.view.value}: discarding stale reply for generation {generation}")
            return None

        self.result = result
        self.request = request
        self.error = error
        self.loading = False
        return result

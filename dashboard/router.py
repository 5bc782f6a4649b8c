"""
View router: tracks the active screen and keeps exactly the active view's
orchestrator mounted.
"""

import logging
from collections.abc import Callable

from agents.base import EnrichmentOrchestrator
from models.enums import ViewState

logger = logging.getLogger(__name__)

OrchestratorFactory = Callable[[], EnrichmentOrchestrator]


class ViewRouter:
    """
    Four mutually exclusive views, any reachable from any other.

    Selecting a view unmounts the previous view's orchestrator (dropping its
    derived data) and mounts a freshly built one for the new view. Views
    without a factory (the inventory table) mount nothing.
    """

    def __init__(
        self,
        factories: dict[ViewState, OrchestratorFactory] | None = None,
        initial: ViewState = ViewState.INVENTORY,
    ):
        self.factories = dict(factories or {})
        self._current = initial
        self.active: EnrichmentOrchestrator | None = None

    @property
    def current(self) -> ViewState:
        return self._current

    async def start(self) -> None:
        """Mount the initial view's orchestrator."""
        if self.active is None:
            await self._mount(self._current)

    async def select(self, view: ViewState) -> bool:
        """Switch to `view`. Returns False when it was already active."""
        view = ViewState(view)
        if view == self._current and (self.active is not None or view not in self.factories):
            return False
        previous = self._current
        if self.active is not None:
            self.active.unmount()
            self.active = None
        self._current = view
        logger.info(f"View changed: {previous.value} -> {view.value}")
        await self._mount(view)
        return True

    async def _mount(self, view: ViewState) -> None:
        factory = self.factories.get(view)
        if factory is None:
            return
        orchestrator = factory()
        self.active = orchestrator
        await orchestrator.mount()

    def stop(self) -> None:
        if self.active is not None:
            self.active.unmount()
            self.active = None

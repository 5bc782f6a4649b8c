"""
Conversational assistant orchestrator.

Unlike the one-shot view orchestrators, the assistant keeps a persistent
oracle session for as long as the dashboard that hosts the panel is
mounted. The session is seeded with the catalog and location when the
panel is first opened and kept in sync through hidden context updates.
"""

import asyncio
import logging

from connectors.oracle import InventoryOracle, OracleSession
from dashboard.catalog_store import CatalogStore
from dashboard.location import LocationContext
from models.chat import ChatMessage
from models.enums import ChatRole, DashboardEventType
from models.errors import ConfigurationError
from models.events import DashboardEvent
from utils.event_bus import EventBus
from utils.markdown import Block, BlockKind, Span, format_message

from .base import DEFAULT_ORACLE_TIMEOUT
from .conversation_manager import ConversationManager
from .prompts import build_context_update_message, build_greeting

logger = logging.getLogger(__name__)

ERROR_REPLY = "Sorry, I encountered an error processing your request."
EMPTY_REPLY = "I'm having trouble connecting to the network."


class AssistantOrchestrator:
    def __init__(
        self,
        catalog: CatalogStore,
        location: LocationContext,
        oracle: InventoryOracle,
        event_bus: EventBus,
        *,
        timeout_seconds: float = DEFAULT_ORACLE_TIMEOUT,
        max_history: int = 200,
    ):
        self.catalog = catalog
        self.location = location
        self.oracle = oracle
        self.event_bus = event_bus
        self.timeout_seconds = timeout_seconds
        self.conversation = ConversationManager(max_history)
        self.session: OracleSession | None = None
        self.is_open = False
        self.loading = False
        self.mounted = False
        self._catalog_size = len(catalog)
        self._updates: set[asyncio.Task] = set()

    @property
    def messages(self) -> list[ChatMessage]:
        """Visible transcript."""
        return self.conversation.visible_messages()

    def mount(self) -> None:
        if self.mounted:
            return
        self.mounted = True
        self._catalog_size = len(self.catalog)
        self.event_bus.subscribe(DashboardEventType.CATALOG_CHANGED, self.on_catalog_changed)

    def unmount(self) -> None:
        """End the session: transcript and oracle context are discarded."""
        if not self.mounted:
            return
        self.event_bus.unsubscribe(DashboardEventType.CATALOG_CHANGED, self.on_catalog_changed)
        for task in self._updates:
            task.cancel()
        self._updates.clear()
        self.mounted = False
        self.is_open = False
        self.session = None
        self.conversation.clear_history()

    def open(self) -> None:
        """Show the panel; the first open greets the user and starts the oracle session."""
        self.mount()
        if not self.conversation.visible_messages():
            self.conversation.add_message(ChatRole.MODEL, build_greeting(len(self.catalog), self.location.get()))
        self.is_open = True
        if self.session is None:
            self._start_session()

    def close(self) -> None:
        """Hide the panel. The session and transcript survive until unmount."""
        self.is_open = False

    def toggle(self) -> bool:
        if self.is_open:
            self.close()
        else:
            self.open()
        return self.is_open

    def _start_session(self) -> None:
        try:
            self.session = self.oracle.start_session(self.catalog.products, self.location.get())
            logger.info(f"Assistant session started for {self.location.get()} with {len(self.catalog)} products")
        except ConfigurationError as exc:
            logger.error(f"Assistant unavailable: {exc}")
            self.session = None

    async def send(self, text: str) -> ChatMessage | None:
        """
        Send a user turn. The user message is added to the transcript right
        away; the reply (or a generic error turn) follows once the oracle
        answers. Blank input is ignored.
        """
        if not text or not text.strip():
            return None
        self.conversation.add_message(ChatRole.USER, text)
        self.loading = True
        try:
            if self.session is None:
                raise ConfigurationError("No assistant session")
            async with self.conversation.lock:
                reply = await asyncio.wait_for(self.session.send(text), timeout=self.timeout_seconds)
            reply_text = reply or EMPTY_REPLY
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Chat Error: {exc!r}")
            reply_text = ERROR_REPLY
        finally:
            self.loading = False
        return self.conversation.add_message(ChatRole.MODEL, reply_text)

    async def on_catalog_changed(self, event: DashboardEvent) -> None:
        size = len(self.catalog)
        changed = size != self._catalog_size
        self._catalog_size = size
        if not (changed and self.is_open and self.session is not None and size > 0):
            return
        task = asyncio.create_task(self._send_context_update(build_context_update_message(self.catalog.products)))
        self._updates.add(task)
        task.add_done_callback(self._updates.discard)

    async def _send_context_update(self, message: str) -> None:
        session = self.session
        if session is None:
            return
        try:
            async with self.conversation.lock:
                await asyncio.wait_for(session.send(message), timeout=self.timeout_seconds)
            self.conversation.add_message(ChatRole.USER, message, hidden=True)
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Failed to update chat context: {exc!r}")

    async def wait_for_context_updates(self) -> None:
        """Wait for any context updates still in flight."""
        if self._updates:
            await asyncio.gather(*list(self._updates), return_exceptions=True)

    @staticmethod
    def render(message: ChatMessage) -> list[Block]:
        """Formatted blocks for a transcript entry. User text is shown as typed."""
        if message.role is ChatRole.USER:
            return [Block(BlockKind.PARAGRAPH, (Span(message.text),))]
        return format_message(message.text)

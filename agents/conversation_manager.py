"""Manages the assistant transcript and serializes turns sent to the oracle session."""

import asyncio
import logging
from collections import deque

from models.chat import ChatMessage
from models.enums import ChatRole

logger = logging.getLogger(__name__)


class ConversationManager:
    """
    Holds the ordered chat transcript for one assistant session, including
    hidden context-update turns, and the lock that keeps turns sent to the
    oracle session strictly one at a time.
    """

    def __init__(self, max_history: int = 200):
        """
        Initializes the conversation manager.

        Args:
            max_history: The maximum number of turns kept; the oldest are
                         dropped first.
        """
        self.max_history = max_history
        self._history: deque[ChatMessage] = deque(maxlen=max_history)
        self.lock = asyncio.Lock()
        logger.debug(f"ConversationManager initialized with max history: {max_history}")

    def add_message(self, role: ChatRole, text: str, hidden: bool = False) -> ChatMessage:
        """
        Appends a turn to the transcript.

        Args:
            role: Who produced the turn.
            text: The text content of the turn.
            hidden: True for context updates that are never shown to the user.

        Returns:
            The stored message.
        """
        message = ChatMessage(role=role, text=text, hidden=hidden)
        self._history.append(message)
        logger.debug(f"Added {role.value} message (hidden={hidden}). History size: {len(self._history)}")
        return message

    def visible_messages(self) -> list[ChatMessage]:
        """The transcript as shown to the user, oldest first."""
        return [m for m in self._history if not m.hidden]

    def get_full_history(self) -> list[ChatMessage]:
        return list(self._history)

    def clear_history(self) -> None:
        self._history.clear()
        logger.info("Cleared conversation history.")

    def __len__(self) -> int:
        return len(self._history)

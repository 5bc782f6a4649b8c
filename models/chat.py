"""
Chat transcript models for the assistant panel.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from .enums import ChatRole


class ChatMessage(BaseModel):
    """One chat turn. Hidden turns are context updates kept out of the transcript."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: ChatRole
    text: str
    hidden: bool = False
    timestamp: datetime = Field(default_factory=datetime.now)

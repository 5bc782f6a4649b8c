"""
Data models for events within the dashboard.
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .enums import DashboardEventType, EventSource


class DashboardEvent(BaseModel):
    """Published on the event bus whenever shared dashboard state changes."""

    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    event_type: DashboardEventType
    payload: dict[str, Any] = Field(default_factory=dict)
    source: EventSource
    timestamp: datetime = Field(default_factory=datetime.now)

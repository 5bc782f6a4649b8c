"""
Centralized Enum definitions for the project.
"""

from enum import Enum


class ViewState(str, Enum):
    """Screens selectable through the view router"""

    INVENTORY = "INVENTORY"
    FORECAST = "FORECAST"
    DEMAND_PLANNING = "DEMAND_PLANNING"
    HISTORICAL = "HISTORICAL"


class ChatRole(str, Enum):
    """Speaker of a chat turn"""

    USER = "user"
    MODEL = "model"


class SalesTrend(str, Enum):
    """Direction flag of a simulated sales history"""

    INCREASING = "Increasing"
    STABLE = "Stable"


class DashboardEventType(str, Enum):
    """Events published when shared dashboard state changes"""

    CATALOG_CHANGED = "catalog.changed"
    LOCATION_CHANGED = "location.changed"
    VIEW_CHANGED = "view.changed"


class EventSource(str, Enum):
    """Component that published an event"""

    CATALOG_STORE = "catalog_store"
    LOCATION = "location"
    ROUTER = "router"
    TEST = "test"

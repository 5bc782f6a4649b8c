"""
Error taxonomy for the inventory dashboard.

Nothing here is fatal to the process: each error is raised at a boundary
and handled by the component that owns the degraded state.
"""


class DashboardError(Exception):
    """Base class for all dashboard errors."""


class ConfigurationError(DashboardError):
    """A required setting (e.g. the oracle API key) is missing."""


class TransientOracleFailure(DashboardError):
    """The oracle call failed, timed out or returned an unusable reply."""


class PersistenceFailure(DashboardError):
    """Reading from or writing to durable storage failed."""


class ValidationRejection(DashboardError):
    """User input was rejected at the input boundary."""


class NotFound(DashboardError):
    """The requested product id is not in the catalog."""


class ReportGenerationError(DashboardError):
    """A report document could not be rendered."""

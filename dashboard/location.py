"""Location context: the active market/region read by every enrichment request."""

import logging

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "Chennai"


class LocationContext:
    def __init__(self, initial: str = DEFAULT_LOCATION):
        self._value = initial

    def get(self) -> str:
        return self._value

    def set(self, value: str) -> bool:
        """Set the location. Blank input is ignored and the prior value kept."""
        if not value or not value.strip():
            logger.debug("Ignoring blank location input.")
            return False
        if value == self._value:
            return False
        self._value = value
        logger.info(f"Location set to {value!r}.")
        return True

"""
Caching utilities for solar calculations to improve performance
"""

import logging
from collections import OrderedDict
from datetime import date
from typing import Dict, Any, Optional

from .constants import SolarConstants

logger = logging.getLogger(__name__)


class SolarCache:
    """Caches pvlib Location objects and per-day event results"""

    def __init__(self, max_days: int = SolarConstants.MAX_CACHED_DAYS):
        self.max_days = max_days

        # Cache for pvlib Location objects to avoid recreation
        self._location_cache: Dict[str, Any] = {}

        # Day event results are deterministic, so entries never expire; the
        # oldest insertions are evicted once max_days is exceeded
        self._events_cache: "OrderedDict[str, Any]" = OrderedDict()

    def get_location(self, cache_key: str) -> Any:
        """Get cached pvlib Location object"""
        return self._location_cache.get(cache_key)

    def set_location(self, cache_key: str, location: Any) -> None:
        """Cache a pvlib Location object"""
        self._location_cache[cache_key] = location
        logger.debug(f"Cached location object: {cache_key}")

    def get_events(self, cache_key: str) -> Optional[Any]:
        """Get a cached DayEventSet"""
        events = self._events_cache.get(cache_key)
        if events is not None:
            logger.debug(f"Using cached solar events: {cache_key}")
        return events

    def set_events(self, cache_key: str, events: Any) -> None:
        """Cache a DayEventSet"""
        self._events_cache[cache_key] = events
        self._cleanup_events_cache()
        logger.debug(f"Cached solar events: {cache_key}")

    def _cleanup_events_cache(self) -> None:
        """Evict the oldest entries beyond max_days"""
        evicted = 0
        while len(self._events_cache) > self.max_days:
            self._events_cache.popitem(last=False)
            evicted += 1

        if evicted:
            logger.debug(f"Evicted {evicted} solar event cache entries")

    def create_events_cache_key(
        self, day: date, lat: float, lon: float, timezone: str, mode: str
    ) -> str:
        """Create a standardized cache key for day event results"""
        return f"{day.isoformat()}_{lat}_{lon}_{timezone}_{mode}"

    def create_location_cache_key(self, lat: float, lon: float, timezone: str) -> str:
        """Create a standardized cache key for location objects"""
        return f"{lat}_{lon}_{timezone}"

    def clear_all(self) -> None:
        """Clear all caches (useful for testing or memory management)"""
        self._location_cache.clear()
        self._events_cache.clear()
        logger.info("Cleared all solar caches")

    def get_cache_stats(self) -> Dict[str, int]:
        """Get statistics about cache usage"""
        return {
            "locations_cached": len(self._location_cache),
            "days_cached": len(self._events_cache),
        }

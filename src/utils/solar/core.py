"""
Core solar calculation utilities for sunrise/sunset event pairs
"""

import logging
import math
from datetime import date, datetime
from typing import Union

import ephem
import pandas as pd
import pytz
from pvlib import location

from models.config import Mode
from models.solar import DayEventSet
from .cache import SolarCache
from .constants import SolarConstants

logger = logging.getLogger(__name__)


class InvalidPositionError(ValueError):
    """Raised when coordinates are outside the valid latitude/longitude range"""


class NoSolarEventError(ValueError):
    """Raised when the sun never crosses the required horizon on a given day"""


class SolarCalculator:
    """Computes solar event pairs per calendar day using pvlib"""

    def __init__(
        self,
        timezone: str = SolarConstants.DEFAULT_TIMEZONE,
        cache: SolarCache = None,
    ):
        # Fail fast on unknown timezone names
        pytz.timezone(timezone)
        self.timezone = timezone
        self._cache = cache or SolarCache()

    @staticmethod
    def validate_position(latitude: float, longitude: float) -> None:
        """Raise InvalidPositionError for out-of-range coordinates"""
        lat_min, lat_max = SolarConstants.LATITUDE_RANGE
        lon_min, lon_max = SolarConstants.LONGITUDE_RANGE

        try:
            latitude = float(latitude)
            longitude = float(longitude)
        except (TypeError, ValueError) as e:
            raise InvalidPositionError(f"Coordinates must be numbers: {e}") from e

        if not (math.isfinite(latitude) and lat_min <= latitude <= lat_max):
            raise InvalidPositionError(f"Latitude {latitude} out of range")
        if not (math.isfinite(longitude) and lon_min <= longitude <= lon_max):
            raise InvalidPositionError(f"Longitude {longitude} out of range")

    def _get_or_create_site(self, latitude: float, longitude: float):
        """Get cached pvlib Location object or create a new one"""
        location_cache_key = self._cache.create_location_cache_key(
            latitude, longitude, self.timezone
        )

        # Check cache first
        site = self._cache.get_location(location_cache_key)
        if site:
            return site

        # Altitude is passed explicitly so pvlib skips its elevation lookup
        site = location.Location(
            latitude=latitude,
            longitude=longitude,
            tz=self.timezone,
            altitude=0,
            name="Sunrise-Sunset Location",
        )

        self._cache.set_location(location_cache_key, site)
        return site

    @staticmethod
    def _crossing(
        site,
        reference: Union[date, pd.Timestamp],
        column: str,
        horizon: str,
        next_or_previous: str = "next",
    ) -> pd.Timestamp:
        """Find the sun's next (or previous) rise or set around a reference time"""
        # pvlib requires a timezone-aware DatetimeIndex
        if isinstance(reference, pd.Timestamp):
            times_index = pd.DatetimeIndex([reference])
        else:
            # Some zones skip midnight on DST days
            times_index = pd.DatetimeIndex([pd.Timestamp(reference)]).tz_localize(
                site.tz, nonexistent="shift_forward"
            )

        try:
            times = site.get_sun_rise_set_transit(
                times_index,
                method="pyephem",
                next_or_previous=next_or_previous,
                horizon=horizon,
                pressure=SolarConstants.EPHEM_PRESSURE,
            )
        except ephem.CircumpolarError as e:
            raise NoSolarEventError(
                f"No {column} at horizon {horizon} after {reference}: {e}"
            ) from e

        value = times[column].iat[0]
        if pd.isna(value):
            raise NoSolarEventError(f"No {column} at horizon {horizon} after {reference}")
        return pd.Timestamp(value)

    @staticmethod
    def _to_utc(value: pd.Timestamp) -> datetime:
        return value.to_pydatetime().astimezone(pytz.utc)

    def get_events_for_day(
        self, day: date, latitude: float, longitude: float, mode: Mode
    ) -> DayEventSet:
        """
        Get the start/end instants of the given solar period for one day.

        The search starts at local midnight of ``day`` in the calculator's
        timezone. Instants are returned as aware UTC datetimes.

        Raises:
            InvalidPositionError: coordinates are out of range
            NoSolarEventError: the sun does not cross the horizon that day
        """
        mode = Mode(mode)
        self.validate_position(latitude, longitude)

        cache_key = self._cache.create_events_cache_key(
            day, latitude, longitude, self.timezone, mode.value
        )
        cached_events = self._cache.get_events(cache_key)
        if cached_events is not None:
            return cached_events

        site = self._get_or_create_site(latitude, longitude)

        if mode == Mode.SUNRISE:
            start = self._crossing(
                site, day, "sunrise", SolarConstants.HORIZON_UPPER_LIMB
            )
            end = self._crossing(
                site, start, "sunrise", SolarConstants.HORIZON_LOWER_LIMB
            )
        else:
            end = self._crossing(site, day, "sunset", SolarConstants.HORIZON_UPPER_LIMB)
            start = self._crossing(
                site,
                end,
                "sunset",
                SolarConstants.HORIZON_LOWER_LIMB,
                next_or_previous="previous",
            )

        events = DayEventSet(
            day=day, mode=mode, start=self._to_utc(start), end=self._to_utc(end)
        )
        logger.debug(
            f"Calculated {mode.value} for {day} at ({latitude}, {longitude}): "
            f"{events.start.isoformat()} - {events.end.isoformat()}"
        )

        self._cache.set_events(cache_key, events)
        return events

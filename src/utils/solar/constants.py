"""
Constants for solar event calculations
"""


class SolarConstants:
    """Constants used throughout the solar calculation package"""

    # ephem horizons for the sun's upper limb with refraction disabled
    # (pressure=0). Standard refraction and the solar semi-diameter are folded
    # into the values so they match the usual center elevations:
    #   -0.833 deg center (upper limb touches horizon)  -> -0.566 deg limb
    #   -0.3 deg center (lower limb touches horizon)    -> -0.033 deg limb
    HORIZON_UPPER_LIMB = "-0:34"
    HORIZON_LOWER_LIMB = "-0:02"
    EPHEM_PRESSURE = 0

    # Consecutive days searched for the next event pair, starting today
    WINDOW_DAYS = 3

    # Maximum number of (day, position, mode) results kept in memory
    MAX_CACHED_DAYS = 256

    LATITUDE_RANGE = (-90.0, 90.0)
    LONGITUDE_RANGE = (-180.0, 180.0)

    DEFAULT_TIMEZONE = "UTC"

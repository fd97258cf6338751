"""
Solar calculation package for the sunrise-sunset sensors

This package provides per-day sunrise/sunset event pairs using pvlib-python.
"""

from .core import SolarCalculator, InvalidPositionError, NoSolarEventError
from .cache import SolarCache
from .constants import SolarConstants

__all__ = [
    "SolarCalculator",
    "SolarCache",
    "SolarConstants",
    "InvalidPositionError",
    "NoSolarEventError",
]

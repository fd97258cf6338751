"""
Utility modules for the sunrise-sunset sensor service
"""

from .solar import SolarCalculator
from .solar_event_scheduler import SolarEventScheduler
from .timers import TimerService
from .position_utils import PositionSensor
from .storage import SensorStorage

__all__ = [
    "SolarCalculator",
    "SolarEventScheduler",
    "TimerService",
    "PositionSensor",
    "SensorStorage",
]

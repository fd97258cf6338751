"""
Package initialization for models
"""

# API models (for FastAPI)
from .api import (
    PositionUpdate,
    PositionSensorInfo,
    PositionListResponse,
    SensorCreateRequest,
    SettingValueRequest,
    SettingInfo,
    SensorInfo,
    SensorListResponse,
    SettingsResponse,
)

# Solar models
from .solar import DayEventSet

# Configuration models
from .config import (
    Mode,
    Position,
    ScheduleConfig,
    PositionSensorConfig,
    ServiceConfig,
)

__all__ = [
    # API models
    "PositionUpdate",
    "PositionSensorInfo",
    "PositionListResponse",
    "SensorCreateRequest",
    "SettingValueRequest",
    "SettingInfo",
    "SensorInfo",
    "SensorListResponse",
    "SettingsResponse",
    # Solar models
    "DayEventSet",
    # Config models
    "Mode",
    "Position",
    "ScheduleConfig",
    "PositionSensorConfig",
    "ServiceConfig",
]

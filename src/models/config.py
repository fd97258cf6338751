"""
Pydantic models for configuration data
"""

from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Mode(str, Enum):
    """Solar period a sensor follows"""

    SUNRISE = "sunrise"
    SUNSET = "sunset"


class Position(BaseModel):
    """Geographic position snapshot reported by a position sensor"""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")


class ScheduleConfig(BaseModel):
    """Immutable configuration snapshot for a solar event scheduler"""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    position_source: Optional[Any] = Field(
        default=None, description="Position source exposing position and subscribe()"
    )
    mode: Optional[Mode] = Field(default=None, description="Sunrise or sunset")

    @property
    def is_complete(self) -> bool:
        return self.position_source is not None and self.mode is not None


class PositionSensorConfig(BaseModel):
    """Position sensor declared in the configuration file"""

    id: str = Field(..., description="Position sensor ID")
    name: Optional[str] = Field(default=None, description="Friendly name")
    latitude: Optional[float] = Field(
        default=None, ge=-90, le=90, description="Initial latitude in degrees"
    )
    longitude: Optional[float] = Field(
        default=None, ge=-180, le=180, description="Initial longitude in degrees"
    )


class ServiceConfig(BaseModel):
    """Service configuration loaded from the positions config file"""

    timezone: Optional[str] = Field(
        default="UTC",
        description="Timezone whose midnight starts each solar day (e.g., 'America/Los_Angeles')",
    )
    positions: List[PositionSensorConfig] = Field(
        default_factory=list, description="Position sensors available for linking"
    )

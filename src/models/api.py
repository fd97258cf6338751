"""
Pydantic models for FastAPI requests and responses
"""

from datetime import datetime
from typing import Optional, Any, List
from pydantic import BaseModel, Field


class PositionUpdate(BaseModel):
    """Request model for creating or moving a position sensor"""

    name: Optional[str] = Field(default=None, description="Friendly name")
    latitude: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in degrees")


class PositionSensorInfo(BaseModel):
    """Information about a position sensor"""

    id: str = Field(..., description="Position sensor ID")
    name: str = Field(..., description="Friendly name")
    latitude: Optional[float] = Field(None, description="Latitude in degrees")
    longitude: Optional[float] = Field(None, description="Longitude in degrees")


class PositionListResponse(BaseModel):
    """Response for listing position sensors"""

    positions: List[PositionSensorInfo] = Field(
        ..., description="List of position sensors"
    )
    total_count: int = Field(..., description="Total number of position sensors")


class SensorCreateRequest(BaseModel):
    """Request model for creating a sunrise-sunset sensor"""

    name: Optional[str] = Field(default=None, description="Friendly name")


class SettingValueRequest(BaseModel):
    """Request model for changing one sensor setting"""

    value: Optional[str] = Field(
        default=None, description="New value, or null to clear the setting"
    )


class SettingInfo(BaseModel):
    """One entry of a sensor's settings surface"""

    key: str = Field(..., description="Setting key")
    title: str = Field(..., description="Human-readable title")
    description: Optional[str] = Field(None, description="Setting description")
    value: Optional[Any] = Field(None, description="Current value")
    choices: List[str] = Field(default_factory=list, description="Allowed values")
    type: Optional[str] = Field(None, description="Setting type hint")


class SensorInfo(BaseModel):
    """Status of a sunrise-sunset sensor"""

    id: str = Field(..., description="Sensor native ID")
    name: str = Field(..., description="Friendly name")
    binary_state: bool = Field(..., description="True inside the solar period")
    mode: Optional[str] = Field(None, description="Configured mode")
    linked_position_sensor: Optional[str] = Field(
        None, description="ID of the linked position sensor"
    )
    next_start: Optional[datetime] = Field(None, description="Armed start instant")
    next_end: Optional[datetime] = Field(None, description="Armed end instant")


class SensorListResponse(BaseModel):
    """Response for listing sensors"""

    sensors: List[SensorInfo] = Field(..., description="List of sensors")
    total_count: int = Field(..., description="Total number of sensors")
    timestamp: datetime = Field(
        default_factory=datetime.now, description="Response timestamp"
    )


class SettingsResponse(BaseModel):
    """Response for a sensor's settings surface"""

    sensor_id: str = Field(..., description="Sensor native ID")
    settings: List[SettingInfo] = Field(..., description="Current settings")

"""
Sunrise-sunset sensor API endpoints
"""

import logging
from fastapi import APIRouter, HTTPException
from models.api import (
    SensorCreateRequest,
    SensorInfo,
    SensorListResponse,
    SettingValueRequest,
    SettingsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# This will be injected by main.py
manager = None


def set_manager(manager_instance):
    """Set the global sensor manager instance"""
    global manager
    manager = manager_instance


def _require_manager():
    if not manager:
        raise HTTPException(status_code=503, detail="Sensor manager not initialized")
    return manager


def _require_device(sensor_id: str):
    device = _require_manager().get_device(sensor_id)
    if device is None:
        raise HTTPException(status_code=404, detail=f"Sensor {sensor_id} not found")
    return device


@router.get("/sensors", response_model=SensorListResponse, tags=["Sensors"])
async def get_sensors():
    """
    Get all sunrise-sunset sensors

    Returns every sensor with its binary state, settings and armed instants.
    """
    devices = _require_manager().get_devices()
    sensors = [SensorInfo(**device.get_status()) for device in devices]
    return SensorListResponse(sensors=sensors, total_count=len(sensors))


@router.post("/sensors", response_model=SensorInfo, status_code=201, tags=["Sensors"])
async def create_sensor(request: SensorCreateRequest):
    """
    Create a new sunrise-sunset sensor

    **Request Body:**
    ```json
    {
        "name": "Porch sunset"
    }
    ```

    The new sensor stays idle until both `linkedPositionSensor` and `mode`
    are set through its settings.
    """
    sensor_id = _require_manager().create_device(request.name)
    return SensorInfo(**_require_device(sensor_id).get_status())


@router.get("/sensors/{sensor_id}", response_model=SensorInfo, tags=["Sensors"])
async def get_sensor(sensor_id: str):
    """Get the state of one sensor"""
    return SensorInfo(**_require_device(sensor_id).get_status())


@router.delete("/sensors/{sensor_id}", tags=["Sensors"])
async def delete_sensor(sensor_id: str):
    """Release a sensor, cancelling its timers, and delete it"""
    if not _require_manager().release_device(sensor_id):
        raise HTTPException(status_code=404, detail=f"Sensor {sensor_id} not found")
    return {"success": True, "message": f"Sensor {sensor_id} deleted"}


@router.get(
    "/sensors/{sensor_id}/settings", response_model=SettingsResponse, tags=["Settings"]
)
async def get_sensor_settings(sensor_id: str):
    """Get the settings surface of one sensor"""
    device = _require_device(sensor_id)
    return SettingsResponse(sensor_id=sensor_id, settings=device.get_settings())


@router.put(
    "/sensors/{sensor_id}/settings/{key}",
    response_model=SettingsResponse,
    tags=["Settings"],
)
async def put_sensor_setting(sensor_id: str, key: str, request: SettingValueRequest):
    """
    Change one sensor setting

    **Keys:**
    * **linkedPositionSensor**: ID of a position sensor
    * **mode**: `sunrise` or `sunset`

    The sensor recomputes its schedule immediately.
    """
    device = _require_device(sensor_id)
    try:
        device.put_setting(key, request.value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return SettingsResponse(sensor_id=sensor_id, settings=device.get_settings())

"""
Position sensor API endpoints
"""

import logging
from fastapi import APIRouter, HTTPException
from models.api import PositionListResponse, PositionSensorInfo, PositionUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

# This will be injected by main.py
manager = None


def set_manager(manager_instance):
    """Set the global sensor manager instance"""
    global manager
    manager = manager_instance


def _to_info(sensor) -> PositionSensorInfo:
    position = sensor.position
    return PositionSensorInfo(
        id=sensor.id,
        name=sensor.name,
        latitude=position.latitude if position else None,
        longitude=position.longitude if position else None,
    )


@router.get("/positions", response_model=PositionListResponse, tags=["Positions"])
async def get_positions():
    """Get all position sensors that sunrise-sunset sensors can link to"""
    if not manager:
        raise HTTPException(status_code=503, detail="Sensor manager not initialized")

    positions = [_to_info(sensor) for sensor in manager.get_position_sensors()]
    return PositionListResponse(positions=positions, total_count=len(positions))


@router.put(
    "/positions/{position_id}", response_model=PositionSensorInfo, tags=["Positions"]
)
async def put_position(position_id: str, request: PositionUpdate):
    """
    Create a position sensor or report a new position for it

    **Request Body:**
    ```json
    {
        "name": "Home",
        "latitude": 47.6,
        "longitude": -122.3
    }
    ```

    Every sensor linked to this position sensor recomputes its schedule.
    """
    if not manager:
        raise HTTPException(status_code=503, detail="Sensor manager not initialized")

    sensor = manager.add_position_sensor(
        position_id, request.name, request.latitude, request.longitude
    )
    return _to_info(sensor)

"""
Device provider that creates and owns sunrise-sunset sensors
"""

import logging
import uuid
from typing import Dict, List, Optional

from models.config import Position, ServiceConfig
from utils.position_utils import PositionSensor
from utils.solar import SolarCalculator
from utils.solar_event_scheduler import utc_now
from utils.storage import SensorStorage
from utils.timers import TimerService
from devices.sunrise_sunset_sensor import DEFAULT_SENSOR_NAME, SunriseSunsetSensor

logger = logging.getLogger(__name__)


class SensorManager:
    """Creates, restores and releases sensors and the position sensors they link to"""

    def __init__(
        self,
        storage: SensorStorage = None,
        timers=None,
        solar_times=None,
        timezone: str = "UTC",
        clock=utc_now,
    ):
        self.storage = storage or SensorStorage()
        self.timers = timers or TimerService()
        self.timezone = timezone
        self.solar_times = solar_times or SolarCalculator(timezone=timezone)
        self.clock = clock
        self.devices: Dict[str, SunriseSunsetSensor] = {}
        self.positions: Dict[str, PositionSensor] = {}

    @classmethod
    def from_config(cls, config: ServiceConfig, storage: SensorStorage, timers=None):
        """Build a manager with the position sensors declared in config"""
        manager = cls(
            storage=storage, timers=timers, timezone=config.timezone or "UTC"
        )
        for position in config.positions:
            manager.add_position_sensor(
                position.id, position.name, position.latitude, position.longitude
            )
        return manager

    # Position sensors

    def add_position_sensor(
        self,
        sensor_id: str,
        name: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> PositionSensor:
        """Register a position sensor, or move an existing one"""
        existing = self.positions.get(sensor_id)
        if existing:
            if name:
                existing.name = name
            if latitude is not None and longitude is not None:
                existing.update(latitude, longitude)
            return existing

        position = None
        if latitude is not None and longitude is not None:
            position = Position(latitude=latitude, longitude=longitude)
        sensor = PositionSensor(sensor_id, name, position)
        self.positions[sensor_id] = sensor
        logger.info(f"Added position sensor {sensor_id}")

        # Sensors linked before this position sensor existed can now arm
        for device in self.devices.values():
            if device.linked_position_sensor == sensor_id:
                device.setup_sensor()

        return sensor

    def update_position(self, sensor_id: str, latitude: float, longitude: float):
        sensor = self.positions.get(sensor_id)
        if sensor is None:
            raise KeyError(sensor_id)
        return sensor.update(latitude, longitude)

    def get_position_sensor(self, sensor_id: str) -> Optional[PositionSensor]:
        return self.positions.get(sensor_id)

    def get_position_sensors(self) -> List[PositionSensor]:
        return list(self.positions.values())

    # Sunrise-sunset sensors

    def _build_device(self, native_id: str) -> SunriseSunsetSensor:
        return SunriseSunsetSensor(
            native_id,
            storage=self.storage,
            position_lookup=self.get_position_sensor,
            position_choices=lambda: list(self.positions),
            solar_times=self.solar_times,
            timers=self.timers,
            timezone=self.timezone,
            clock=self.clock,
        )

    def create_device(self, name: Optional[str] = None) -> str:
        """Create a new sensor and return its native ID"""
        native_id = str(uuid.uuid4())
        self.storage.add_device(native_id, name or DEFAULT_SENSOR_NAME)
        self.get_device(native_id)
        logger.info(f"Created sensor {native_id} ({name or DEFAULT_SENSOR_NAME})")
        return native_id

    def get_device(self, native_id: str) -> Optional[SunriseSunsetSensor]:
        """Get a sensor, creating its instance from storage on first access"""
        if native_id in self.devices:
            return self.devices[native_id]
        if not self.storage.has_device(native_id):
            return None

        device = self._build_device(native_id)
        self.devices[native_id] = device
        device.setup_sensor()
        return device

    def get_devices(self) -> List[SunriseSunsetSensor]:
        return [self.get_device(native_id) for native_id in self.storage.devices()]

    def restore_devices(self) -> int:
        """Instantiate every stored sensor so its timers are armed"""
        devices = self.get_devices()
        logger.info(f"Restored {len(devices)} sunrise-sunset sensors")
        return len(devices)

    def release_device(self, native_id: str) -> bool:
        """Release a sensor and delete it from storage"""
        device = self.devices.pop(native_id, None)
        if device:
            device.release()
        removed = self.storage.remove_device(native_id)
        if removed:
            logger.info(f"Released sensor {native_id}")
        return removed or device is not None

    async def start(self):
        await self.timers.start()
        self.restore_devices()

    async def shutdown(self):
        for device in self.devices.values():
            device.release()
        self.devices.clear()
        await self.timers.shutdown()

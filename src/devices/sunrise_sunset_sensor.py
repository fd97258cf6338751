"""
Sunrise-sunset binary sensor device
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from models.api import SettingInfo
from models.config import Mode
from utils.solar_event_scheduler import SolarEventScheduler, utc_now
from utils.storage import SensorStorage

logger = logging.getLogger(__name__)

LINKED_POSITION_SENSOR = "linkedPositionSensor"
MODE = "mode"
DEFAULT_SENSOR_NAME = "New Sunrise-Sunset Sensor"


class SunriseSunsetSensor:
    """Binary sensor that is on during the configured sunrise or sunset period"""

    def __init__(
        self,
        native_id: str,
        storage: SensorStorage,
        position_lookup: Callable[[str], Any],
        position_choices: Callable[[], List[str]],
        solar_times,
        timers,
        timezone: str = "UTC",
        clock=utc_now,
    ):
        self.native_id = native_id
        self.storage = storage
        self.position_lookup = position_lookup
        self.position_choices = position_choices
        self.binary_state = False
        self._state_listeners: List[Callable[[str, bool], None]] = []

        self.scheduler = SolarEventScheduler(
            solar_times,
            timers,
            on_state_change=self._on_state_change,
            clock=clock,
            timezone=timezone,
            name=f"sensor {native_id}",
        )

    @property
    def name(self) -> str:
        return self.storage.get_name(self.native_id) or DEFAULT_SENSOR_NAME

    @property
    def linked_position_sensor(self) -> Optional[str]:
        return self.storage.get_item(self.native_id, LINKED_POSITION_SENSOR)

    @property
    def mode(self) -> Optional[str]:
        return self.storage.get_item(self.native_id, MODE)

    def listen(self, listener: Callable[[str, bool], None]) -> None:
        """Observe binary state changes as (native_id, state)"""
        self._state_listeners.append(listener)

    def _on_state_change(self, value: bool) -> None:
        self.binary_state = value
        for listener in list(self._state_listeners):
            try:
                listener(self.native_id, value)
            except Exception as e:
                logger.error(f"State listener failed for {self.native_id}: {e}")

    def get_settings(self) -> List[SettingInfo]:
        """Settings surface: linked position sensor and mode"""
        return [
            SettingInfo(
                key=LINKED_POSITION_SENSOR,
                title="Linked PositionSensor",
                description="The position sensor linked with this sunrise-sunset sensor for geolocation data.",
                value=self.linked_position_sensor,
                choices=self.position_choices(),
                type="device",
            ),
            SettingInfo(
                key=MODE,
                title="Mode",
                value=self.mode,
                choices=[mode.value for mode in Mode],
            ),
        ]

    def put_setting(self, key: str, value: Optional[str]) -> None:
        """Store a setting and set the sensor up again"""
        if key not in (LINKED_POSITION_SENSOR, MODE):
            raise ValueError(f"Unknown setting: {key}")

        self.storage.set_item(self.native_id, key, value)
        logger.info(f"Sensor {self.native_id} setting {key} = {value}")
        self.setup_sensor()

    def setup_sensor(self) -> None:
        """Resolve stored settings and reconfigure the scheduler"""
        source = None
        linked_id = self.linked_position_sensor
        if linked_id:
            source = self.position_lookup(linked_id)
            if source is None:
                logger.warning(
                    f"Sensor {self.native_id} is linked to unknown position sensor {linked_id}"
                )

        self.scheduler.configure(source, self.mode)

    def get_status(self) -> Dict[str, Any]:
        return {
            "id": self.native_id,
            "name": self.name,
            "binary_state": self.binary_state,
            "mode": self.mode,
            "linked_position_sensor": self.linked_position_sensor,
            "next_start": self.scheduler.next_start,
            "next_end": self.scheduler.next_end,
        }

    def release(self) -> None:
        self.scheduler.release()

"""
Position sensors that feed geographic positions to the solar schedulers
"""

import logging
from typing import Callable, Dict, Optional

from models.config import Position

logger = logging.getLogger(__name__)

PositionListener = Callable[[Position], None]


class Subscription:
    """Handle returned by PositionSensor.subscribe()"""

    def __init__(self, sensor: "PositionSensor", token: int):
        self._sensor = sensor
        self._token = token

    @property
    def active(self) -> bool:
        return self._sensor is not None

    def cancel(self) -> None:
        """Remove the listener; safe to call more than once"""
        if self._sensor is None:
            return
        self._sensor._listeners.pop(self._token, None)
        self._sensor = None


class PositionSensor:
    """In-memory position source with change notifications"""

    def __init__(
        self, sensor_id: str, name: Optional[str] = None, position: Position = None
    ):
        self.id = sensor_id
        self.name = name or sensor_id
        self.position = position
        self._listeners: Dict[int, PositionListener] = {}
        self._next_token = 0

    def subscribe(self, listener: PositionListener) -> Subscription:
        """Call listener with the new position after every update"""
        token = self._next_token
        self._next_token += 1
        self._listeners[token] = listener
        return Subscription(self, token)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def update(self, latitude: float, longitude: float) -> Position:
        """Store a new position and notify subscribers"""
        self.position = Position(latitude=latitude, longitude=longitude)
        logger.info(f"Position sensor {self.id} moved to {latitude}, {longitude}")

        # Listeners may cancel or re-subscribe while being notified; only the
        # subscriptions present before the update and still live are called
        for token in list(self._listeners):
            listener = self._listeners.get(token)
            if listener is not None:
                listener(self.position)

        return self.position

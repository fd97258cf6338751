"""
Solar event scheduler that flips a binary state at sunrise/sunset periods
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any, Callable, List, Optional

import pytz

from models.config import Mode, ScheduleConfig
from models.solar import DayEventSet
from utils.solar import InvalidPositionError, NoSolarEventError, SolarConstants

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(pytz.utc)


class ScheduleState:
    """Timers and subscription owned by one scheduler"""

    def __init__(self):
        self.start_timer = None
        self.end_timer = None
        self.position_subscription = None
        self.start_at: Optional[datetime] = None
        self.end_at: Optional[datetime] = None

    @property
    def is_armed(self) -> bool:
        return self.start_timer is not None or self.end_timer is not None

    def cancel_timers(self) -> None:
        if self.start_timer is not None:
            self.start_timer.cancel()
        if self.end_timer is not None:
            self.end_timer.cancel()
        self.start_timer = None
        self.end_timer = None
        self.start_at = None
        self.end_at = None

    def disarm(self) -> None:
        """Cancel both timers and the position subscription"""
        self.cancel_timers()
        if self.position_subscription is not None:
            self.position_subscription.cancel()
            self.position_subscription = None


class SolarEventScheduler:
    """
    Arms start/end timers for the next sunrise or sunset period.

    The scheduler reads the position from its configured source, searches a
    three-day window starting at local midnight for the first day with a
    future start or end instant, and arms a single-shot timer for each future
    instant. The start timer turns the active state on; the end timer turns it
    off and schedules the following period. Any position change re-runs the
    whole computation.

    Collaborators are injected:
        solar_times: object with get_events_for_day(day, lat, lon, mode)
        timers: object with call_later(delay, callback) -> handle.cancel()
        on_state_change: called with the new active state when it changes
        clock: returns the current aware datetime
        timezone: name of the timezone whose midnight starts a day
    """

    def __init__(
        self,
        solar_times,
        timers,
        on_state_change: Optional[Callable[[bool], None]] = None,
        clock: Callable[[], datetime] = utc_now,
        timezone: str = SolarConstants.DEFAULT_TIMEZONE,
        name: str = "sensor",
    ):
        self.solar_times = solar_times
        self.timers = timers
        self.on_state_change = on_state_change
        self.clock = clock
        self.tz = pytz.timezone(timezone)
        self.name = name

        self.config = ScheduleConfig()
        self.state = ScheduleState()
        self.active = False

    @property
    def is_armed(self) -> bool:
        return self.state.is_armed

    @property
    def next_start(self) -> Optional[datetime]:
        return self.state.start_at

    @property
    def next_end(self) -> Optional[datetime]:
        return self.state.end_at

    def configure(self, position_source: Any, mode: Any) -> None:
        """Store a new configuration snapshot and recompute the schedule"""
        if mode is not None and not isinstance(mode, Mode):
            try:
                mode = Mode(mode)
            except ValueError:
                logger.warning(f"Ignoring unknown mode {mode!r} for {self.name}")
                mode = None

        previous_mode = self.config.mode
        self.config = ScheduleConfig(position_source=position_source, mode=mode)

        if mode is not None and previous_mode is not None and mode != previous_mode:
            self._set_active(False)

        self.reschedule()

    def reschedule(self) -> None:
        """Disarm, then arm timers for the next future start/end pair"""
        self.state.disarm()

        config = self.config
        if not config.is_complete:
            logger.debug(f"{self.name} is not fully configured, staying idle")
            return

        try:
            source = config.position_source
            self.state.position_subscription = source.subscribe(
                self._on_position_changed
            )

            position = source.position
            if position is None:
                logger.info(f"{self.name} is waiting for a position")
                return

            now = self.clock()
            for day in self._window_days(now):
                try:
                    events = self.solar_times.get_events_for_day(
                        day, position.latitude, position.longitude, config.mode
                    )
                except NoSolarEventError as e:
                    logger.debug(f"No {config.mode.value} for {self.name} on {day}: {e}")
                    continue

                if self._arm(events, now):
                    # Only an in-progress period (end armed, start elapsed) stays on
                    if self.state.start_timer is not None:
                        self._set_active(False)
                    return

            logger.warning(
                f"No future {config.mode.value} found for {self.name} within "
                f"{SolarConstants.WINDOW_DAYS} days of {now.isoformat()}"
            )
            self._set_active(False)

        except InvalidPositionError as e:
            logger.error(f"Invalid position for {self.name}: {e}")
            self.state.cancel_timers()
        except Exception as e:
            logger.error(f"Error rescheduling {self.name}: {e}")
            self.state.cancel_timers()

    def _window_days(self, now: datetime) -> List[date]:
        """Calendar days of the search window, starting at local today"""
        today = now.astimezone(self.tz).date()
        return [today + timedelta(days=i) for i in range(SolarConstants.WINDOW_DAYS)]

    def _arm(self, events: DayEventSet, now: datetime) -> bool:
        """Arm timers for the future instants of one day; True if any were armed"""
        mode = events.mode.value
        has_event = False

        if events.start > now:
            logger.info(f"Next {mode} start for {self.name} will be {events.start}")
            self.state.start_timer = self.timers.call_later(
                events.start - now, self.on_start_fired
            )
            self.state.start_at = events.start
            has_event = True

        if events.end > now:
            logger.info(f"Next {mode} end for {self.name} will be {events.end}")
            self.state.end_timer = self.timers.call_later(
                events.end - now, self.on_end_fired
            )
            self.state.end_at = events.end
            has_event = True

        return has_event

    def _on_position_changed(self, position=None) -> None:
        logger.debug(f"Position changed for {self.name}, rescheduling")
        self.reschedule()

    def _set_active(self, value: bool) -> None:
        if self.active == value:
            return
        self.active = value
        logger.info(f"{self.name} is now {'active' if value else 'inactive'}")
        if self.on_state_change:
            self.on_state_change(value)

    def on_start_fired(self) -> None:
        self.state.start_timer = None
        self.state.start_at = None
        self._set_active(True)

    def on_end_fired(self) -> None:
        self.state.end_timer = None
        self.state.end_at = None
        self._set_active(False)
        self.reschedule()

    def release(self) -> None:
        """Disarm everything and forget the configuration"""
        self.state.disarm()
        self.config = ScheduleConfig()
        self._set_active(False)

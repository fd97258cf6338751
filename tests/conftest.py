"""
Pytest configuration and fixtures
"""

import sys
import os
from datetime import date, datetime, time, timedelta

import pytest
import pytz

# Add src to Python path for all tests
tests_dir = os.path.dirname(__file__)
project_root = os.path.dirname(tests_dir)
src_path = os.path.join(project_root, "src")
src_path = os.path.abspath(src_path)

if src_path not in sys.path:
    sys.path.insert(0, src_path)

from models.config import Mode  # noqa: E402
from models.solar import DayEventSet  # noqa: E402
from utils.solar import NoSolarEventError  # noqa: E402

SEATTLE_TZ = pytz.timezone("America/Los_Angeles")


def local_time(day: date, hour: int, minute: int = 0, tz=SEATTLE_TZ) -> datetime:
    """Aware UTC instant for a local wall-clock time"""
    return tz.localize(datetime.combine(day, time(hour, minute))).astimezone(pytz.utc)


class FakeClock:
    """Settable clock"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeTimer:
    def __init__(self, run_at: datetime, callback):
        self.run_at = run_at
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True


class FakeTimers:
    """Timer capability driven by a FakeClock"""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.timers = []
        self.running = False

    async def start(self):
        self.running = True

    async def shutdown(self):
        self.running = False

    def call_later(self, delay: timedelta, callback) -> FakeTimer:
        timer = FakeTimer(self.clock.now + delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self):
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance(self, until: datetime) -> None:
        """Fire due timers in order, moving the clock to each fire time"""
        while True:
            due = sorted(
                (t for t in self.pending if t.run_at <= until), key=lambda t: t.run_at
            )
            if not due:
                break
            timer = due[0]
            self.clock.now = timer.run_at
            timer.fired = True
            timer.callback()
        self.clock.now = until


class FakeSolarTimes:
    """
    Deterministic solar times in Seattle local time.

    Sunrise runs 06:00-06:05 and sunset 19:00-19:05 every day unless the day
    is listed in missing_days.
    """

    SUNRISE = ((6, 0), (6, 5))
    SUNSET = ((19, 0), (19, 5))

    def __init__(self, missing_days=None, error=None):
        self.missing_days = set(missing_days or [])
        self.error = error
        self.calls = []

    def get_events_for_day(self, day, latitude, longitude, mode):
        self.calls.append((day, latitude, longitude, Mode(mode)))
        if self.error:
            raise self.error
        if day in self.missing_days:
            raise NoSolarEventError(f"No event on {day}")

        (start_h, start_m), (end_h, end_m) = (
            self.SUNRISE if Mode(mode) == Mode.SUNRISE else self.SUNSET
        )
        return DayEventSet(
            day=day,
            mode=Mode(mode),
            start=local_time(day, start_h, start_m),
            end=local_time(day, end_h, end_m),
        )


TODAY = date(2024, 6, 21)


@pytest.fixture
def clock():
    return FakeClock(local_time(TODAY, 3, 0))


@pytest.fixture
def timers(clock):
    return FakeTimers(clock)


@pytest.fixture
def solar_times():
    return FakeSolarTimes()

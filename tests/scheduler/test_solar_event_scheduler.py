"""
Tests for SolarEventScheduler
"""

import logging
from datetime import time, timedelta
from unittest.mock import Mock

import pytest

from conftest import SEATTLE_TZ, TODAY, FakeSolarTimes, local_time
from models.config import Mode, Position
from utils.position_utils import PositionSensor
from utils.solar import InvalidPositionError, SolarCalculator
from utils.solar_event_scheduler import SolarEventScheduler

TOMORROW = TODAY + timedelta(days=1)
DAY_AFTER = TODAY + timedelta(days=2)


class TestSolarEventScheduler:
    """Test cases for SolarEventScheduler"""

    @pytest.fixture
    def seattle(self):
        return PositionSensor(
            "home", "Home", Position(latitude=47.6, longitude=-122.3)
        )

    @pytest.fixture
    def states(self):
        return []

    @pytest.fixture
    def scheduler(self, solar_times, timers, clock, states):
        return SolarEventScheduler(
            solar_times,
            timers,
            on_state_change=states.append,
            clock=clock,
            timezone="America/Los_Angeles",
            name="test",
        )

    def test_arms_todays_pair_before_sunrise(self, scheduler, seattle, timers):
        """Test both instants of today are armed when both are in the future"""
        scheduler.configure(seattle, Mode.SUNRISE)

        assert scheduler.next_start == local_time(TODAY, 6, 0)
        assert scheduler.next_end == local_time(TODAY, 6, 5)
        assert len(timers.pending) == 2
        assert sorted(t.run_at for t in timers.pending) == [
            local_time(TODAY, 6, 0),
            local_time(TODAY, 6, 5),
        ]

    def test_skips_elapsed_start(self, scheduler, seattle, timers, clock):
        """Test an elapsed start is not armed while the end still is"""
        clock.now = local_time(TODAY, 6, 2)

        scheduler.configure(seattle, Mode.SUNRISE)

        assert scheduler.next_start is None
        assert scheduler.next_end == local_time(TODAY, 6, 5)
        assert [t.run_at for t in timers.pending] == [local_time(TODAY, 6, 5)]

    def test_start_equal_to_now_is_not_armed(self, scheduler, seattle, timers, clock):
        """Test the strict future check excludes an instant equal to now"""
        clock.now = local_time(TODAY, 6, 0)

        scheduler.configure(seattle, Mode.SUNRISE)

        assert scheduler.next_start is None
        assert scheduler.next_end == local_time(TODAY, 6, 5)

    def test_late_evening_selects_tomorrow(self, scheduler, seattle, timers, clock):
        """Test 23:00 local after today's sunrise arms tomorrow's pair"""
        clock.now = local_time(TODAY, 23, 0)

        scheduler.configure(seattle, Mode.SUNRISE)

        assert scheduler.next_start == local_time(TOMORROW, 6, 0)
        assert scheduler.next_end == local_time(TOMORROW, 6, 5)
        assert len(timers.pending) == 2
        assert all(t.run_at > clock.now for t in timers.pending)

    def test_timer_delay_is_relative_to_now(self, scheduler, seattle, timers, clock):
        """Test timers fire exactly at the event instants"""
        clock.now = local_time(TODAY, 5, 30)

        scheduler.configure(seattle, Mode.SUNSET)

        start_timer, end_timer = timers.pending
        assert start_timer.run_at - clock.now == timedelta(hours=13, minutes=30)
        assert end_timer.run_at == local_time(TODAY, 19, 5)

    def test_falls_back_to_day_after_tomorrow(self, seattle, timers, clock, states):
        """Test a day without events is skipped within the window"""
        solar_times = FakeSolarTimes(missing_days=[TOMORROW])
        scheduler = SolarEventScheduler(
            solar_times, timers, states.append, clock, "America/Los_Angeles"
        )
        clock.now = local_time(TODAY, 21, 0)

        scheduler.configure(seattle, Mode.SUNSET)

        assert scheduler.next_start == local_time(DAY_AFTER, 19, 0)
        assert scheduler.next_end == local_time(DAY_AFTER, 19, 5)
        assert [call[0] for call in solar_times.calls] == [TODAY, TOMORROW, DAY_AFTER]

    def test_sunset_fallback_uses_sunset_events(self, seattle, timers, clock, states):
        """Test every fallback day is armed with the configured mode"""
        solar_times = FakeSolarTimes(missing_days=[TOMORROW])
        scheduler = SolarEventScheduler(
            solar_times, timers, states.append, clock, "America/Los_Angeles"
        )
        clock.now = local_time(TODAY, 21, 0)

        scheduler.configure(seattle, "sunset")

        assert {call[3] for call in solar_times.calls} == {Mode.SUNSET}
        assert scheduler.next_start == local_time(DAY_AFTER, 19, 0)

    def test_stops_at_first_day_with_future_event(self, scheduler, seattle, solar_times):
        """Test later window days are not requested once a day arms"""
        scheduler.configure(seattle, Mode.SUNRISE)

        assert [call[0] for call in solar_times.calls] == [TODAY]

    def test_no_future_event_stays_disarmed(self, seattle, timers, clock, caplog):
        """Test an exhausted window leaves no timers and logs a warning"""
        solar_times = FakeSolarTimes(missing_days=[TODAY, TOMORROW, DAY_AFTER])
        scheduler = SolarEventScheduler(
            solar_times, timers, timezone="America/Los_Angeles", clock=clock
        )

        with caplog.at_level(logging.WARNING):
            scheduler.configure(seattle, Mode.SUNRISE)

        assert not scheduler.is_armed
        assert timers.pending == []
        assert seattle.listener_count == 1
        assert "No future sunrise" in caplog.text

    def test_reschedule_is_idempotent(self, scheduler, seattle, timers):
        """Test a second reschedule re-arms the same instants"""
        scheduler.configure(seattle, Mode.SUNRISE)
        first = sorted(t.run_at for t in timers.pending)
        first_timers = list(timers.pending)

        scheduler.reschedule()

        assert sorted(t.run_at for t in timers.pending) == first
        assert all(t.cancelled for t in first_timers)
        assert len(timers.pending) == 2
        assert seattle.listener_count == 1

    def test_start_fire_activates_without_rescheduling(
        self, scheduler, seattle, timers, solar_times, states
    ):
        """Test the start timer only turns the state on"""
        scheduler.configure(seattle, Mode.SUNRISE)
        calls_before = len(solar_times.calls)

        timers.advance(local_time(TODAY, 6, 1))

        assert scheduler.active is True
        assert states == [True]
        assert len(solar_times.calls) == calls_before
        assert [t.run_at for t in timers.pending] == [local_time(TODAY, 6, 5)]

    def test_end_fire_deactivates_and_rearms(self, scheduler, seattle, timers, states):
        """Test the end timer turns the state off and arms the next day"""
        scheduler.configure(seattle, Mode.SUNRISE)

        timers.advance(local_time(TODAY, 6, 6))

        assert scheduler.active is False
        assert states == [True, False]
        assert scheduler.next_start == local_time(TOMORROW, 6, 0)
        assert scheduler.next_end == local_time(TOMORROW, 6, 5)

    def test_runs_indefinitely(self, scheduler, seattle, timers, states):
        """Test consecutive cycles alternate on and off without skipping"""
        scheduler.configure(seattle, Mode.SUNSET)

        timers.advance(local_time(TODAY + timedelta(days=3), 12, 0))

        assert states == [True, False] * 3
        assert scheduler.next_start == local_time(TODAY + timedelta(days=3), 19, 0)

    def test_release_cancels_everything(self, scheduler, seattle, timers, states):
        """Test no armed timer fires after release"""
        scheduler.configure(seattle, Mode.SUNRISE)

        scheduler.release()
        timers.advance(local_time(DAY_AFTER, 12, 0))

        assert states == []
        assert timers.pending == []
        assert seattle.listener_count == 0
        assert not scheduler.is_armed

    def test_release_is_idempotent(self, scheduler, seattle):
        """Test release can be called repeatedly and before configure"""
        scheduler.release()
        scheduler.configure(seattle, Mode.SUNRISE)
        scheduler.release()
        scheduler.release()

        assert not scheduler.is_armed

    def test_release_while_active_turns_off(self, scheduler, seattle, timers, states):
        """Test release returns an active sensor to inactive"""
        scheduler.configure(seattle, Mode.SUNRISE)
        timers.advance(local_time(TODAY, 6, 1))

        scheduler.release()

        assert states == [True, False]

    @pytest.mark.parametrize("mode", [None, "noon", ""])
    def test_incomplete_mode_is_quiescent(self, scheduler, seattle, timers, mode):
        """Test a missing or unknown mode arms nothing"""
        scheduler.configure(seattle, mode)

        assert timers.pending == []
        assert seattle.listener_count == 0
        assert scheduler.config.mode is None

    def test_missing_source_is_quiescent(self, scheduler, timers, solar_times):
        """Test a missing position source arms nothing"""
        scheduler.configure(None, Mode.SUNRISE)

        assert timers.pending == []
        assert solar_times.calls == []

    def test_waits_for_first_position(self, scheduler, timers):
        """Test a source without a position is watched until it reports one"""
        source = PositionSensor("car")

        scheduler.configure(source, Mode.SUNRISE)
        assert timers.pending == []
        assert source.listener_count == 1

        source.update(47.6, -122.3)
        assert len(timers.pending) == 2

    def test_position_change_reschedules(self, scheduler, seattle, timers, solar_times):
        """Test a position update recomputes with the new coordinates"""
        scheduler.configure(seattle, Mode.SUNRISE)
        old_timers = list(timers.pending)

        seattle.update(45.5, -122.7)

        assert solar_times.calls[-1][1:3] == (45.5, -122.7)
        assert all(t.cancelled for t in old_timers)
        assert len(timers.pending) == 2
        assert seattle.listener_count == 1

    def test_position_change_during_period_keeps_active(
        self, scheduler, seattle, timers, states
    ):
        """Test moving inside the active window keeps the sensor on until end"""
        scheduler.configure(seattle, Mode.SUNRISE)
        timers.advance(local_time(TODAY, 6, 2))

        seattle.update(47.7, -122.4)

        assert scheduler.active is True
        assert [t.run_at for t in timers.pending] == [local_time(TODAY, 6, 5)]

        timers.advance(local_time(TODAY, 6, 10))
        assert states == [True, False]

    def test_position_change_after_period_turns_off(
        self, scheduler, seattle, timers, solar_times, states
    ):
        """Test moving so today's period has already ended turns the sensor off"""
        scheduler.configure(seattle, Mode.SUNRISE)
        timers.advance(local_time(TODAY, 6, 1))
        assert scheduler.active is True

        # Further east the sun rises earlier
        solar_times.SUNRISE = ((5, 0), (5, 5))
        seattle.update(47.6, -110.0)

        assert scheduler.active is False
        assert states == [True, False]
        assert scheduler.next_start == local_time(TOMORROW, 5, 0)
        assert scheduler.next_end == local_time(TOMORROW, 5, 5)

        timers.advance(local_time(TODAY, 23, 0))
        assert states == [True, False]

        timers.advance(local_time(TOMORROW, 5, 2))
        assert states == [True, False, True]

    def test_exhausted_window_while_active_turns_off(
        self, scheduler, seattle, timers, solar_times, states
    ):
        """Test a move with no future period in the window clears the state"""
        scheduler.configure(seattle, Mode.SUNRISE)
        timers.advance(local_time(TODAY, 6, 1))

        solar_times.missing_days = {TODAY, TOMORROW, DAY_AFTER}
        seattle.update(78.2, 15.6)

        assert not scheduler.is_armed
        assert states == [True, False]

    def test_reconfigure_supersedes_old_timers(self, scheduler, seattle, timers, states):
        """Test timers from a previous configuration never fire"""
        scheduler.configure(seattle, Mode.SUNRISE)
        scheduler.configure(seattle, Mode.SUNSET)

        timers.advance(local_time(TODAY, 12, 0))

        assert states == []
        assert scheduler.next_start == local_time(TODAY, 19, 0)

    def test_mode_change_while_active_resets_state(
        self, scheduler, seattle, timers, states
    ):
        """Test switching mode during an active period turns the sensor off"""
        scheduler.configure(seattle, Mode.SUNRISE)
        timers.advance(local_time(TODAY, 6, 1))

        scheduler.configure(seattle, Mode.SUNSET)

        assert scheduler.active is False
        assert states == [True, False]

    def test_invalid_position_disarms(self, seattle, timers, clock, caplog):
        """Test an invalid position is logged and leaves the scheduler idle"""
        solar_times = FakeSolarTimes(error=InvalidPositionError("Latitude 95 out of range"))
        scheduler = SolarEventScheduler(solar_times, timers, clock=clock)

        with caplog.at_level(logging.ERROR):
            scheduler.configure(seattle, Mode.SUNRISE)

        assert timers.pending == []
        assert "Invalid position" in caplog.text
        assert seattle.listener_count == 1

    def test_unexpected_error_is_not_raised(self, seattle, timers, clock, caplog):
        """Test reschedule never raises to its caller"""
        solar_times = FakeSolarTimes(error=RuntimeError("backend down"))
        scheduler = SolarEventScheduler(solar_times, timers, clock=clock)

        with caplog.at_level(logging.ERROR):
            scheduler.configure(seattle, Mode.SUNSET)

        assert not scheduler.is_armed
        assert "backend down" in caplog.text

    def test_state_notification_only_on_change(self, solar_times, timers, clock):
        """Test an end firing while already inactive emits nothing"""
        on_change = Mock()
        scheduler = SolarEventScheduler(solar_times, timers, on_change, clock)

        scheduler.on_end_fired()

        on_change.assert_not_called()


class TestSchedulerWithSolarCalculator:
    """SolarEventScheduler driven by real pvlib solar times"""

    @pytest.fixture
    def calculator(self):
        return SolarCalculator(timezone="America/Los_Angeles")

    def test_late_evening_arms_tomorrows_sunrise(self, calculator, timers, clock):
        """Test Seattle at 23:00 local arms tomorrow's sunrise pair"""
        clock.now = local_time(TODAY, 23, 0)
        seattle = PositionSensor("home", "Home", Position(latitude=47.6, longitude=-122.3))
        scheduler = SolarEventScheduler(
            calculator, timers, clock=clock, timezone="America/Los_Angeles"
        )

        scheduler.configure(seattle, Mode.SUNRISE)

        expected = calculator.get_events_for_day(TOMORROW, 47.6, -122.3, Mode.SUNRISE)
        assert scheduler.next_start == expected.start
        assert scheduler.next_end == expected.end
        assert sorted(t.run_at for t in timers.pending) == [expected.start, expected.end]

        # Seattle's solstice sunrise is a little after 05:10 PDT
        start_local = expected.start.astimezone(SEATTLE_TZ)
        assert start_local.date() == TOMORROW
        assert time(5, 0) < start_local.time() < time(5, 30)
        assert timedelta(0) < expected.end - expected.start < timedelta(minutes=10)

    def test_midnight_sun_arms_nothing(self, calculator, timers, clock):
        """Test a sunset search in midnight sun arms nothing and stays quiet"""
        clock.now = local_time(TODAY, 12, 0)
        tromso = PositionSensor("boat", "Boat", Position(latitude=69.65, longitude=18.96))
        scheduler = SolarEventScheduler(
            calculator, timers, clock=clock, timezone="America/Los_Angeles"
        )

        scheduler.configure(tromso, Mode.SUNSET)

        assert not scheduler.is_armed
        assert timers.pending == []

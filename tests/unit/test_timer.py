from datetime import datetime, timedelta, timezone

import pytest

from core.registry import TimerRegistry
from core.timing.clock import format_elapsed, until_next_second, whole_seconds
from core.timing.timer import Timer

T0 = datetime(2026, 10, 19, 8, 0, 0, tzinfo=timezone.utc)


def at(seconds: float) -> datetime:
    return T0 + timedelta(seconds=seconds)


@pytest.mark.parametrize(
    "seconds, text",
    [
        (0, "0:00"),
        (0.999, "0:00"),
        (59.9, "0:59"),
        (61, "1:01"),
        (3599, "59:59"),
        (3600, "1:00:00"),
        (3661, "1:01:01"),
        (36000 + 62, "10:01:02"),
        (100 * 3600 + 5, "100:00:05"),
    ],
)
def test_format_elapsed(seconds, text):
    assert format_elapsed(timedelta(seconds=seconds)) == text


def test_minutes_use_modulo():
    # 2:46:40 -> minutes are 46; a bitwise AND with 60 would give 44
    assert format_elapsed(timedelta(seconds=10000)) == "2:46:40"


def test_helpers():
    assert whole_seconds(timedelta(seconds=1.9)) == 1
    assert whole_seconds(timedelta(seconds=-3)) == 0
    assert until_next_second(timedelta(seconds=2.25)) == timedelta(seconds=0.75)
    assert until_next_second(timedelta(0)) == timedelta(seconds=1)


def test_created_timer_is_running_from_zero():
    t = Timer.started(T0)

    assert t.is_running
    assert t.running_since == T0
    assert t.elapsed(T0) == timedelta(0)


def test_stop_banks_interval():
    t = Timer.started(T0)
    t.stop(at(10))

    assert not t.is_running
    assert t.accumulated == timedelta(seconds=10)
    assert t.elapsed(at(500)) == timedelta(seconds=10)


def test_stop_when_stopped_is_noop():
    t = Timer.started(T0)
    t.stop(at(5))
    t.stop(at(50))

    assert t.accumulated == timedelta(seconds=5)
    assert t.elapsed(at(60)) == timedelta(seconds=5)


def test_start_while_running_rebases_without_losing_time():
    t = Timer.started(T0)
    t.start(at(30))

    assert t.running_since == at(30)
    assert t.accumulated == timedelta(seconds=30)
    assert t.elapsed(at(40)) == timedelta(seconds=40)


def test_elapsed_is_sum_of_intervals():
    t = Timer.started(T0)
    t.stop(at(10))      # 10
    t.start(at(20))
    t.stop(at(25))      # 5
    t.start(at(100))
    t.start(at(110))    # re-base, 10 banked
    t.stop(at(111))     # 1
    t.start(at(200))    # still running

    assert t.elapsed(at(204)) == timedelta(seconds=10 + 5 + 10 + 1 + 4)


def test_double_toggle_restores_state():
    t = Timer.started(T0)
    before = t.elapsed(at(7))

    t.toggle(at(7))
    assert not t.is_running
    t.toggle(at(7))

    assert t.is_running
    assert t.elapsed(at(7)) == before


def test_clock_before_start_counts_as_zero():
    t = Timer.started(at(100))

    assert t.elapsed(at(90)) == timedelta(0)
    t.stop(at(90))
    assert t.accumulated == timedelta(0)


def test_negative_accumulated_rejected():
    with pytest.raises(ValueError):
        Timer(accumulated=timedelta(seconds=-1))


def test_naive_timestamps_are_taken_as_utc():
    t = Timer(running_since=datetime(2026, 10, 19, 8, 0, 0))

    assert t.running_since == T0


def test_scenario_minute_then_hour():
    registry = TimerRegistry()
    t = registry.create("main", T0)
    assert format_elapsed(t.elapsed(T0)) == "0:00"

    assert format_elapsed(t.elapsed(at(61))) == "1:01"

    t.stop(at(61))
    t.toggle(at(61))
    assert t.is_running
    assert format_elapsed(t.elapsed(at(61 + 3600))) == "1:01:01"

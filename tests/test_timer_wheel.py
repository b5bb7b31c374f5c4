import pytest

from sockbook.timer_wheel import TimeWheel, WheelTimer


def _ticks_until_fired(wheel, timer, limit=1000):
    fired = []
    timer.callback = fired.append
    timer.user_data = "done"
    for count in range(1, limit + 1):
        wheel.tick()
        if fired:
            return count
    raise AssertionError("timer never fired")


def test_negative_timeout_gives_no_timer():
    wheel = TimeWheel()
    assert wheel.add_timer(-1) is None
    assert len(wheel) == 0


def test_default_wheel_places_long_timer_by_rotation():
    wheel = TimeWheel()
    timer = wheel.add_timer(120)
    assert isinstance(timer, WheelTimer)
    assert timer.rotation == 2
    assert timer.time_slot == 0


@pytest.mark.parametrize("timeout", [1, 3, 9, 10])
def test_timer_fires_after_its_timeout(timeout):
    wheel = TimeWheel(slots=4)
    timer = wheel.add_timer(timeout)
    assert _ticks_until_fired(wheel, timer) == timeout + 1
    assert len(wheel) == 0


def test_short_timeout_is_rounded_up_to_one_tick():
    wheel = TimeWheel(slots=8, interval=2)
    zero = wheel.add_timer(0)
    one = wheel.add_timer(1)
    assert zero.time_slot == one.time_slot
    assert zero.rotation == one.rotation == 0


def test_interval_divides_timeout():
    wheel = TimeWheel(slots=8, interval=2)
    a = wheel.add_timer(4)
    b = wheel.add_timer(5)
    assert a.time_slot == b.time_slot


def test_deleted_timer_never_fires():
    wheel = TimeWheel(slots=4)
    fired = []
    kept = wheel.add_timer(2, fired.append, "kept")
    dropped = wheel.add_timer(2, fired.append, "dropped")
    assert len(wheel) == 2
    wheel.del_timer(dropped)
    assert len(wheel) == 1
    for _ in range(4):
        wheel.tick()
    assert fired == ["kept"]
    assert kept.rotation == 0


def test_delete_unknown_timer_raises():
    wheel = TimeWheel()
    stray = WheelTimer(0, 5)
    with pytest.raises(ValueError):
        wheel.del_timer(stray)


def test_same_slot_different_rotations():
    wheel = TimeWheel(slots=4)
    fired = []
    wheel.add_timer(1, fired.append, "soon")
    late = wheel.add_timer(5, fired.append, "late")
    wheel.tick()
    wheel.tick()
    assert fired == ["soon"]
    assert len(wheel) == 1
    assert late.rotation == 0


def test_tick_advances_and_wraps_current_slot(capsys):
    wheel = TimeWheel(slots=3)
    for _ in range(3):
        wheel.tick()
    assert wheel.cur_slot == 0
    assert "current slot is0" in capsys.readouterr().out


def test_invalid_wheel_shape_rejected():
    with pytest.raises(ValueError):
        TimeWheel(slots=0)
    with pytest.raises(ValueError):
        TimeWheel(interval=0)
import pytest

from sockbook.sorted_timers import SortedTimerList, Timer


def _expires(timers):
    return [timer.expire for timer in timers]


def test_add_keeps_ascending_order():
    timers = SortedTimerList()
    for expire in [30, 10, 20, 40, 5]:
        timers.add_timer(Timer(expire))
    assert _expires(timers) == sorted([30, 10, 20, 40, 5])
    assert len(timers) == 5


def test_equal_expiry_keeps_insertion_order():
    timers = SortedTimerList()
    first, second, third = Timer(10), Timer(10), Timer(10)
    for timer in (first, second, third):
        timers.add_timer(timer)
    assert list(timers) == [first, second, third]


def test_add_none_is_ignored():
    timers = SortedTimerList()
    timers.add_timer(None)
    assert len(timers) == 0


def test_adjust_moves_extended_head():
    timers = SortedTimerList()
    a, b, c = Timer(1), Timer(2), Timer(3)
    for timer in (a, b, c):
        timers.add_timer(timer)
    a.expire = 10
    timers.adjust_timer(a)
    assert list(timers) == [b, c, a]


def test_adjust_moves_extended_middle():
    timers = SortedTimerList()
    a, b, c, d = Timer(1), Timer(2), Timer(3), Timer(4)
    for timer in (a, b, c, d):
        timers.add_timer(timer)
    b.expire = 3.5
    timers.adjust_timer(b)
    assert list(timers) == [a, c, b, d]


def test_adjust_without_need_to_move():
    timers = SortedTimerList()
    a, b = Timer(1), Timer(5)
    timers.add_timer(a)
    timers.add_timer(b)
    a.expire = 2
    timers.adjust_timer(a)
    b.expire = 100
    timers.adjust_timer(b)
    assert list(timers) == [a, b]


def test_del_head_tail_and_middle():
    timers = SortedTimerList()
    a, b, c = Timer(1), Timer(2), Timer(3)
    for timer in (a, b, c):
        timers.add_timer(timer)
    timers.del_timer(b)
    assert list(timers) == [a, c]
    timers.del_timer(a)
    timers.del_timer(c)
    assert list(timers) == []


def test_del_unknown_timer_raises():
    timers = SortedTimerList()
    timers.add_timer(Timer(1))
    with pytest.raises(ValueError):
        timers.del_timer(Timer(1))


def test_tick_runs_expired_timers_in_order():
    fired = []
    timers = SortedTimerList()
    for expire in (3, 1, 2, 10):
        timers.add_timer(Timer(expire, fired.append, expire))
    timers.tick(now=3)
    assert fired == [1, 2, 3]
    assert _expires(timers) == [10]


def test_tick_before_expiry_runs_nothing():
    fired = []
    timers = SortedTimerList()
    timers.add_timer(Timer(5, fired.append, "late"))
    timers.tick(now=4)
    assert fired == []
    assert len(timers) == 1


def test_tick_uses_current_time_by_default():
    fired = []
    timers = SortedTimerList()
    timers.add_timer(Timer(0, fired.append, "old"))
    timers.add_timer(Timer(float("inf"), fired.append, "never"))
    timers.tick()
    assert fired == ["old"]
    assert len(timers) == 1
import pytest

from sockbook.timer_heap import HeapTimer, TimeHeap


def _timer(expire, sink=None):
    return HeapTimer(expire, sink.append if sink is not None else None, expire, now=0)


def test_timer_expiry_is_relative_to_now():
    assert HeapTimer(5, now=100).expire == 105


def test_empty_heap():
    heap = TimeHeap(4)
    assert heap.empty()
    assert heap.top() is None
    heap.pop_timer()
    assert len(heap) == 0


def test_top_is_earliest():
    heap = TimeHeap(4)
    for expire in [7, 3, 9, 1, 5]:
        heap.add_timer(_timer(expire))
    assert heap.top().expire == 1
    assert len(heap) == 5


def test_capacity_doubles_when_full():
    heap = TimeHeap(2)
    for expire in [1, 2, 3]:
        heap.add_timer(_timer(expire))
    assert heap.capacity == 4
    assert len(heap) == 3


def test_tick_runs_due_timers_in_order():
    fired = []
    expires = [8, 2, 6, 4, 10, 1, 9]
    heap = TimeHeap(2)
    for expire in expires:
        heap.add_timer(_timer(expire, fired))
    heap.tick(now=6)
    assert fired == sorted(e for e in expires if e <= 6)
    assert heap.top().expire == min(e for e in expires if e > 6)


def test_pop_yields_sorted_order():
    expires = [5, 3, 8, 3, 1, 9, 2, 7]
    heap = TimeHeap(len(expires))
    for expire in expires:
        heap.add_timer(_timer(expire))
    popped = []
    while not heap.empty():
        popped.append(heap.top().expire)
        heap.pop_timer()
    assert popped == sorted(expires)


def test_initial_timers_are_heapified():
    expires = [9, 4, 7, 1, 8, 2]
    heap = TimeHeap(10, [_timer(e) for e in expires])
    popped = []
    while not heap.empty():
        popped.append(heap.top().expire)
        heap.pop_timer()
    assert popped == sorted(expires)


def test_capacity_smaller_than_initial_timers_raises():
    with pytest.raises(ValueError):
        TimeHeap(1, [_timer(1), _timer(2)])


def test_deleted_timer_is_skipped_but_removed():
    fired = []
    heap = TimeHeap(4)
    cancelled = _timer(1, fired)
    heap.add_timer(cancelled)
    heap.add_timer(_timer(2, fired))
    heap.del_timer(cancelled)
    assert cancelled.callback is None
    heap.tick(now=3)
    assert fired == [2]
    assert heap.empty()
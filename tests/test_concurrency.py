import threading

import pytest

from relnotes.utils.concurrency import fan_out, run_both


def test_fan_out_keeps_input_order():
    assert fan_out(lambda x: x * 2, [3, 1, 2], max_workers=4) == [6, 2, 4]


def test_fan_out_empty():
    assert fan_out(lambda x: x, []) == []


def test_fan_out_is_bounded():
    active = 0
    peak = 0
    lock = threading.Lock()
    gate = threading.Event()

    def work(i):
        nonlocal active, peak
        with lock:
            active += 1
            peak = max(peak, active)
        gate.wait(0.01)
        with lock:
            active -= 1
        return i

    assert fan_out(work, range(10), max_workers=3) == list(range(10))
    assert peak <= 3


def test_fan_out_propagates_first_error():
    def work(i):
        if i == 2:
            raise ValueError("bad item")
        return i

    with pytest.raises(ValueError, match="bad item"):
        fan_out(work, [1, 2, 3], max_workers=2)


def test_run_both():
    assert run_both(lambda: "a", lambda: 1) == ("a", 1)
    assert run_both(lambda: "a", lambda: 1, max_workers=1) == ("a", 1)

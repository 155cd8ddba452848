import threading

import pytest

from totp_engine import CodeTicker


def test_ticks_until_stopped():
    ticks = []
    enough = threading.Event()

    def callback():
        ticks.append(1)
        if len(ticks) >= 3:
            enough.set()

    ticker = CodeTicker(callback, interval=0.01).start()
    assert enough.wait(5)
    ticker.stop(timeout=5)
    assert not ticker.running
    count = len(ticks)
    assert ticker.wait(0)
    assert len(ticks) == count


def test_callback_error_stops_ticker():
    def callback():
        raise RuntimeError("render failed")

    ticker = CodeTicker(callback, interval=0.01).start()
    assert ticker.wait(5)
    ticker.stop(timeout=5)
    assert not ticker.running


def test_cannot_start_twice():
    ticker = CodeTicker(lambda: None, interval=0.01).start()
    try:
        with pytest.raises(RuntimeError):
            ticker.start()
    finally:
        ticker.stop(timeout=5)


def test_stop_is_idempotent():
    ticker = CodeTicker(lambda: None)
    ticker.stop()
    ticker.stop()
    assert not ticker.running


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        CodeTicker(lambda: None, interval=0)

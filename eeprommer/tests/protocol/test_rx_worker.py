from __future__ import annotations

import time

from eeprommer.protocol._internal.rx_worker import RxWorker


class Pump:
    def __init__(self, fail_times: int = 0):
        self.calls = 0
        self.fail_times = fail_times

    def __call__(self):
        self.calls += 1
        if self.fail_times:
            self.fail_times -= 1
            raise RuntimeError("boom")


def _wait_for(cond, timeout=0.5):
    deadline = time.time() + timeout
    while not cond() and time.time() < deadline:
        time.sleep(0.005)


def test_stops_cleanly():
    pump = Pump()
    w = RxWorker(pump)

    w.start()
    _wait_for(lambda: pump.calls > 0)
    w.stop()
    w.join(timeout=0.2)

    assert not w.is_alive()
    assert w.stopping
    assert w.name == "eeprommer-rx"
    assert pump.calls > 0


def test_survives_pump_exceptions_and_counts_them(caplog):
    pump = Pump(fail_times=2)
    w = RxWorker(pump, describe=lambda: "036c0010")

    with caplog.at_level("ERROR"):
        w.start()
        _wait_for(lambda: pump.calls >= 3)
        w.stop()
        w.join(timeout=0.2)

    assert not w.is_alive()
    assert pump.calls >= 3
    assert w.errors == 2
    assert "RX_WORKER_EXCEPTION pending=036c0010" in caplog.text


def test_stop_before_start_never_pumps():
    pump = Pump()
    w = RxWorker(pump)
    w.stop()
    w.start()
    w.join(timeout=0.2)

    assert pump.calls == 0

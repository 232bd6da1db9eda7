import pytest

from common.ticker import Ticker


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class FakeEvent:
    """Stop event whose wait() moves the fake clock instead of sleeping."""

    def __init__(self, clock):
        self.clock = clock
        self._set = False

    def is_set(self):
        return self._set

    def set(self):
        self._set = True

    def wait(self, timeout=None):
        if not self._set:
            self.clock.now += timeout
        return self._set


def build_ticker(period, task_durations, stop_after):
    clock = FakeClock()
    event = FakeEvent(clock)
    starts = []
    durations = iter(task_durations)

    def task():
        starts.append(clock.now)
        clock.now += next(durations, 0.0)
        if len(starts) == stop_after:
            event.set()

    return Ticker(period, task, stop_event=event, clock=clock), starts


def test_ticks_at_fixed_rate():
    ticker, starts = build_ticker(10.0, [1.0, 2.0, 3.0, 0.5], stop_after=4)

    ticker.run()

    assert starts == [0.0, 10.0, 20.0, 30.0]


def test_overrun_fires_overdue_ticks_back_to_back():
    ticker, starts = build_ticker(10.0, [1.0, 25.0, 0.0, 0.0, 0.0], stop_after=5)

    ticker.run()

    # Tick 1 ends at 35: the 20 and 30 slots run immediately, then back on schedule
    assert starts == [0.0, 10.0, 35.0, 35.0, 40.0]


def test_initial_delay_postpones_first_tick():
    clock = FakeClock()
    event = FakeEvent(clock)
    starts = []

    def task():
        starts.append(clock.now)
        event.set()

    Ticker(5.0, task, stop_event=event, initial_delay=2.0, clock=clock).run()

    assert starts == [2.0]


def test_failing_task_does_not_stop_schedule(caplog):
    clock = FakeClock()
    event = FakeEvent(clock)
    calls = []

    def task():
        calls.append(clock.now)
        if len(calls) == 3:
            event.set()
        raise RuntimeError("publish failed")

    ticker = Ticker(1.0, task, stop_event=event, clock=clock)
    ticker.run()

    assert calls == [0.0, 1.0, 2.0]
    assert ticker.ticks == 3
    assert "publish failed" in caplog.text


def test_stop_before_run_never_ticks():
    calls = []
    ticker = Ticker(1.0, lambda: calls.append(1))

    ticker.stop()
    ticker.run()

    assert calls == []


@pytest.mark.parametrize("period", [0, -1])
def test_period_must_be_positive(period):
    with pytest.raises(ValueError):
        Ticker(period, lambda: None)

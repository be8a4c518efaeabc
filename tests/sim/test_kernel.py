# tests/sim/test_kernel.py
import pytest

from map_motion.sim.clock import ManualClock
from map_motion.sim.hooks import NoopHooks
from map_motion.sim.kernel import Kernel


# --- test hook that records the run lifecycle ---
class TraceHooks(NoopHooks):
    def __init__(self):
        self.trace = []

    def run_start(self, *, max_ticks, tick_s):
        self.trace.append(("start", max_ticks, tick_s))

    def run_end(self, *, ticks, wall_ms):
        assert wall_ms >= 0
        self.trace.append(("end", ticks))


class Countdown:
    def __init__(self, n: int):
        self.n = n
        self.calls = []

    def __call__(self) -> bool:
        self.calls.append(self.n)
        self.n -= 1
        return self.n > 0


def test_runs_until_idle():
    clock, hooks = ManualClock(), TraceHooks()
    k = Kernel(clock, hooks=hooks)
    k.on_tick(Countdown(5))

    ticks = k.run(tick_s=0.1)

    assert ticks == 5
    assert clock.t == pytest.approx(0.5)
    assert hooks.trace == [("start", None, 0.1), ("end", 5)]


def test_max_ticks_caps_the_run():
    k = Kernel(ManualClock())
    k.on_tick(Countdown(1_000))
    assert k.run(tick_s=0.01, max_ticks=7) == 7
    assert k.ticks == 7


def test_busy_if_any_handler_is_busy():
    k = Kernel(ManualClock())
    short, long = Countdown(2), Countdown(4)
    k.on_tick(short)
    k.on_tick(long)
    assert k.run(tick_s=1.0) == 4
    assert len(short.calls) == 4  # handlers keep being called while anyone is busy


def test_run_without_handlers_stops_after_one_tick():
    assert Kernel(ManualClock()).run(tick_s=0.5) == 1


def test_run_arguments_are_validated():
    k = Kernel(ManualClock())
    with pytest.raises(ValueError):
        k.run(tick_s=0.0)
    with pytest.raises(ValueError):
        k.run(tick_s=0.1, until_idle=False)

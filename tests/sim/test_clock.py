import pytest

from map_motion.app.protocols import WallClock
from map_motion.sim.clock import FRAME_30HZ, ManualClock, MonotonicClock, ms


def test_manual_clock_moves_only_when_told():
    c = ManualClock()
    assert c.now() == 0.0
    c.advance(1.5)
    c.sleep(ms(500))
    assert c.now() == pytest.approx(2.0)
    c.sleep(-1.0)  # ignored
    assert c.now() == pytest.approx(2.0)
    with pytest.raises(ValueError):
        c.advance(-0.1)


def test_monotonic_clock_never_goes_back():
    c = MonotonicClock()
    a = c.now()
    c.sleep(0.001)
    assert c.now() >= a


def test_clocks_satisfy_the_protocol():
    assert isinstance(ManualClock(), WallClock)
    assert isinstance(MonotonicClock(), WallClock)
    assert FRAME_30HZ == pytest.approx(0.0333, abs=1e-4)

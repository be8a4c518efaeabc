import math

import numpy as np
import pytest

from map_motion.domain.entities.geography import Point
from map_motion.domain.entities.motion import Actor
from map_motion.domain.errors import InvalidCoordinate
from map_motion.domain.mechanics.mechanics_movers import LegMover
from map_motion.sim.clock import ManualClock


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def leg(clock) -> LegMover:
    return LegMover(clock)


def test_reaches_target_after_expected_time_and_arrives_once(clock, leg):
    actor = Actor(1, Point(0.0, 0.0))
    target = Point(100.0, 0.0)
    leg.start(actor.loc, 1.0)

    arrivals = 0
    for _ in range(2000):  # 2000 * 50 ms = 100 s
        clock.advance(0.05)
        arrivals += leg.step(actor, target, 1.0)
    assert abs(actor.loc.x - 100.0) < 0.01 and abs(actor.loc.y) < 1e-9

    for _ in range(20):
        clock.advance(0.05)
        arrivals += leg.step(actor, target, 1.0)
    assert arrivals == 1
    assert actor.loc == target
    assert not leg.is_moving


def test_irregular_ticks_do_not_drift(clock):
    rng = np.random.default_rng(7)
    # includes ticks below the throttle interval; the last one is long enough to apply
    deltas = [float(d) for d in rng.uniform(0.005, 0.2, size=400)] + [0.1]
    total = sum(deltas)
    target = Point(1_000.0, 500.0)

    a = Actor(1, Point(0.0, 0.0))
    leg_a = LegMover(clock)
    leg_a.start(a.loc, 3.0)
    for d in deltas:
        clock.advance(d)
        leg_a.step(a, target, 3.0)

    clock_b = ManualClock()
    b = Actor(2, Point(0.0, 0.0))
    leg_b = LegMover(clock_b)
    leg_b.start(b.loc, 3.0)
    clock_b.advance(total)
    leg_b.step(b, target, 3.0)

    assert a.loc.distance_to(b.loc) < 0.01
    assert a.loc.distance_to(Point(0.0, 0.0)) == pytest.approx(3.0 * total)


def test_updates_are_throttled(clock, leg):
    actor = Actor(1, Point(0.0, 0.0))
    leg.start(actor.loc, 10.0)
    clock.advance(0.01)
    assert leg.step(actor, Point(100.0, 0.0), 10.0) is False
    assert actor.loc == Point(0.0, 0.0)

    clock.advance(0.03)  # 40 ms since start
    leg.step(actor, Point(100.0, 0.0), 10.0)
    assert actor.loc.x == pytest.approx(0.4)


def test_idle_step_is_a_no_op(clock, leg):
    actor = Actor(1, Point(1.0, 2.0))
    clock.advance(5.0)
    assert leg.step(actor, Point(50.0, 50.0), 1.0) is False
    assert actor.loc == Point(1.0, 2.0)


def test_time_scale_and_meters_per_unit(clock, leg):
    actor = Actor(1, Point(0.0, 0.0))
    leg.start(actor.loc, 1.0)
    clock.advance(10.0)
    leg.step(actor, Point(0.0, 1_000.0), 1.0, time_scale=2.0, meters_per_unit=4.0)
    assert actor.loc.y == pytest.approx(5.0)  # 1 m/s * 2 * 10 s / 4 m per unit


def test_clamped_step_lands_exactly_on_target(clock, leg):
    actor = Actor(1, Point(0.0, 0.0))
    target = Point(3.0, 4.0)
    leg.start(actor.loc, 100.0)
    clock.advance(1.0)
    assert leg.step(actor, target, 100.0) is False
    assert actor.loc == target
    assert leg.state.accumulated_error == pytest.approx(95.0)
    clock.advance(0.05)
    assert leg.step(actor, target, 100.0) is True


def test_zero_speed_never_moves(clock, leg):
    actor = Actor(1, Point(0.0, 0.0))
    leg.start(actor.loc, 0.0)
    for _ in range(10):
        clock.advance(1.0)
        assert leg.step(actor, Point(10.0, 0.0), 0.0) is False
    assert actor.loc == Point(0.0, 0.0)


def test_restart_while_moving_is_rejected(leg):
    leg.start(Point(0.0, 0.0), 1.0)
    with pytest.raises(RuntimeError):
        leg.start(Point(0.0, 0.0), 1.0)
    leg.reset()
    leg.start(Point(0.0, 0.0), 1.0)
    assert leg.is_moving


@pytest.mark.parametrize("speed", [-1.0, math.nan, math.inf])
def test_invalid_speed(leg, speed):
    with pytest.raises(InvalidCoordinate):
        leg.start(Point(0.0, 0.0), speed)


def test_invalid_scale_factors(clock, leg):
    actor = Actor(1, Point(0.0, 0.0))
    leg.start(actor.loc, 1.0)
    clock.advance(1.0)
    with pytest.raises(InvalidCoordinate):
        leg.step(actor, Point(1.0, 0.0), 1.0, meters_per_unit=0.0)
    with pytest.raises(InvalidCoordinate):
        leg.step(actor, Point(1.0, 0.0), 1.0, time_scale=-1.0)


def test_non_finite_start_position(leg):
    with pytest.raises(InvalidCoordinate):
        leg.start(Point(math.nan, 0.0), 1.0)
    assert not leg.is_moving

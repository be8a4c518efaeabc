"""Frame-rate independent stepping of one actor toward one target.

Updates are throttled to a fixed minimum interval, and the distance moved on
each applied update comes from the wall-clock time since the previous one.
The signed difference between the step that was intended and the step that
was applied is carried into the next update, so clamping near the target
does not bias the realised speed over many steps.
"""

import math

from map_motion.app.protocols import Movable, WallClock
from map_motion.domain.entities.geography import Point
from map_motion.domain.entities.motion import MovementState
from map_motion.domain.errors import InvalidCoordinate
from map_motion.sim.clock import FRAME_30HZ

ARRIVE_EPSILON_M = 0.01


def _require_positive(name: str, v: float) -> None:
    if not math.isfinite(v) or v <= 0:
        raise InvalidCoordinate(f"{name} must be finite and > 0, got {v}", {name: v})


def require_speed(speed: float) -> None:
    if not math.isfinite(speed) or speed < 0:
        raise InvalidCoordinate(f"speed must be finite and >= 0, got {speed}", {"speed": speed})


class LegMover:
    def __init__(
        self,
        clock: WallClock,
        *,
        min_interval_s: float = FRAME_30HZ,
        arrive_epsilon_m: float = ARRIVE_EPSILON_M,
    ):
        self.clock = clock
        self.min_interval_s = min_interval_s
        self.arrive_epsilon_m = arrive_epsilon_m
        self.state = MovementState()

    @property
    def is_moving(self) -> bool:
        return self.state.is_moving

    def start(self, position: Point, speed: float) -> None:
        if self.state.is_moving:
            raise RuntimeError("leg already in progress; reset() before starting another")
        require_speed(speed)
        if not (math.isfinite(position.x) and math.isfinite(position.y)):
            raise InvalidCoordinate(
                f"non-finite start position {position}", {"x": position.x, "y": position.y}
            )
        now = self.clock.now()
        self.state = MovementState(
            last_update_time=now,
            target_speed=speed,
            accumulated_error=0.0,
            is_moving=True,
        )

    def reset(self) -> None:
        self.state = MovementState()

    def step(
        self,
        actor: Movable,
        target: Point,
        speed: float,
        time_scale: float = 1.0,
        meters_per_unit: float = 1.0,
    ) -> bool:
        """Advance `actor.loc` toward `target`; True exactly once, on arrival."""
        st = self.state
        if not st.is_moving:
            return False
        require_speed(speed)
        _require_positive("time_scale", time_scale)
        _require_positive("meters_per_unit", meters_per_unit)

        now = self.clock.now()
        elapsed = now - st.last_update_time
        if elapsed < self.min_interval_s:
            return False

        pos = actor.loc
        remaining = pos.distance_to(target)
        if remaining * meters_per_unit < self.arrive_epsilon_m:
            actor.loc = target
            st.is_moving = False
            st.last_update_time = now
            return True

        intended = speed * time_scale * elapsed / meters_per_unit + st.accumulated_error
        applied = min(max(intended, 0.0), remaining)
        if applied >= remaining:
            actor.loc = target
        else:
            f = applied / remaining
            actor.loc = Point(pos.x + f * (target.x - pos.x), pos.y + f * (target.y - pos.y))

        st.accumulated_error = intended - applied
        st.target_speed = speed
        st.last_update_time = now
        return False

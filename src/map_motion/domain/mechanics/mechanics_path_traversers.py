from collections.abc import Iterable

from map_motion.app.protocols import Movable
from map_motion.domain.entities.geography import Point
from map_motion.domain.entities.motion import PathMovementState, Pt, to_point
from map_motion.domain.mechanics.mechanics_movers import LegMover, require_speed
from map_motion.sim.hooks import MotionHooks, NoopHooks


class PathMover:
    """Chains LegMover legs across an ordered sequence of waypoints.

    The leg mover is reset between legs so each leg starts from a clean
    timing and error baseline. `current_index == len(waypoints)` is the only
    terminal condition.
    """

    def __init__(self, leg: LegMover, *, hooks: MotionHooks | None = None, label=None):
        self.leg = leg
        self.hooks = hooks or NoopHooks()
        self.label = label
        self.state = PathMovementState()

    @property
    def active(self) -> bool:
        return self.state.active

    @property
    def current_index(self) -> int:
        return self.state.current_index

    @property
    def current_target(self) -> Point | None:
        return self.state.current_target()

    def start(self, waypoints: Iterable[Pt], speed: float) -> bool:
        pts = tuple(to_point(p) for p in waypoints)
        if not pts:
            return False
        require_speed(speed)
        self.leg.reset()
        self.state = PathMovementState(waypoints=pts, current_index=0, speed=speed, active=True)
        self.hooks.path_started(label=self.label, waypoints=len(pts), speed=speed)
        return True

    def reset(self) -> None:
        self.leg.reset()
        self.state = PathMovementState()

    def step(
        self,
        actor: Movable,
        speed: float | None = None,
        time_scale: float = 1.0,
        meters_per_unit: float = 1.0,
    ) -> bool:
        st = self.state
        if not (0 <= st.current_index <= len(st.waypoints)):
            raise RuntimeError(
                f"path cursor {st.current_index} outside 0..{len(st.waypoints)}"
            )
        if not st.active or st.finished:
            return True

        v = st.speed if speed is None else speed
        if not self.leg.is_moving:
            self.leg.start(actor.loc, v)

        target = st.waypoints[st.current_index]
        if not self.leg.step(actor, target, v, time_scale, meters_per_unit):
            return False

        self.hooks.leg_arrived(label=self.label, index=st.current_index, at=target)
        st.current_index += 1
        if not st.finished:
            self.leg.reset()
            return False

        st.active = False
        self.leg.reset()
        self.hooks.path_done(label=self.label, legs=len(st.waypoints))
        return True

from dataclasses import dataclass, field

from map_motion.domain.entities.geography import Point

Pt = Point | tuple[float, float]


def to_point(p: Pt) -> Point:
    return p if isinstance(p, Point) else Point(float(p[0]), float(p[1]))


@dataclass
class MovementState:
    """Timing and error carry for one active leg."""

    last_update_time: float | None = None
    target_speed: float = 0.0
    accumulated_error: float = 0.0  # plane units, signed
    is_moving: bool = False


@dataclass
class PathMovementState:
    waypoints: tuple[Point, ...] = ()
    current_index: int = 0
    speed: float = 0.0
    active: bool = False

    @property
    def finished(self) -> bool:
        return self.current_index >= len(self.waypoints)

    def current_target(self) -> Point | None:
        if self.finished:
            return None
        return self.waypoints[self.current_index]


@dataclass
class Actor:
    """Anything with a mutable plane position that a mover can drive."""

    id: int | str
    loc: Point = field(default_factory=lambda: Point(0.0, 0.0))

from dataclasses import dataclass, field

from map_motion.app.protocols import Pathfinder, UnitScale, WallClock
from map_motion.config.models import MovementModel
from map_motion.domain.entities.geography import NodeId, Point
from map_motion.domain.mechanics.mechanics_geospace import MapProjection
from map_motion.domain.mechanics.mechanics_movers import LegMover
from map_motion.domain.mechanics.mechanics_path_traversers import PathMover
from map_motion.domain.mechanics.mechanics_speeds import MercatorScale
from map_motion.sim.hooks import MotionHooks, NoopHooks


@dataclass
class Mechanics:
    """Façade bundling the planner, projection, unit scale and mover settings."""

    router: Pathfinder
    projection: MapProjection
    scale: UnitScale
    clock: WallClock
    movement: MovementModel
    hooks: MotionHooks = field(default_factory=NoopHooks)

    def find_path(self, start: NodeId, goal: NodeId) -> list[NodeId]:
        return self.router.find_path(start, goal)

    def waypoints(self, path: list[NodeId]) -> list[Point]:
        return self.router.points(path)

    def meters_per_unit(self) -> float:
        return self.scale.meters_per_unit()

    def leg_mover(self) -> LegMover:
        return LegMover(
            self.clock,
            min_interval_s=self.movement.min_interval_s,
            arrive_epsilon_m=self.movement.arrive_epsilon_m,
        )

    def path_mover(self, label=None) -> PathMover:
        return PathMover(self.leg_mover(), hooks=self.hooks, label=label)

    def set_projection(self, projection: MapProjection) -> None:
        """Move the plane origin/zoom; a Mercator scale follows the projection."""
        self.projection = projection
        if isinstance(self.scale, MercatorScale):
            self.scale.projection = projection

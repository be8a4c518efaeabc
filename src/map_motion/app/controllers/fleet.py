# map_motion/app/controllers/fleet.py
from collections.abc import Sequence

from map_motion.domain.entities.geography import GeoPoint, NodeId, Point
from map_motion.domain.entities.motion import Actor, Pt, to_point
from map_motion.domain.errors import EmptyWaypoints, NoPathFound, UnknownNode
from map_motion.domain.mechanics.mechanics_core import Mechanics
from map_motion.domain.state import Assignment, FleetState
from map_motion.runtime.resources import GraphArrays, links_from_arrays, nodes_from_arrays


class FleetController:
    """Host-facing entry point: graph ingestion, routing and per-tick stepping.

    The host owns the mapping from actor identity to mover; each actor gets
    its own PathMover, so no state is shared between actors.
    """

    def __init__(self, world: FleetState, mechanics: Mechanics):
        self.world = world
        self.mechanics = mechanics

    # ---------------- graph

    def set_nodes(self, ids: Sequence, xs: Sequence, ys: Sequence) -> None:
        self.mechanics.router.set_nodes(nodes_from_arrays(ids, xs, ys))

    def set_links(self, from_ids: Sequence, to_ids: Sequence, distances: Sequence | None = None):
        """Links without a distance take the Euclidean length of the nodes loaded
        at this point, so call set_nodes first; a later set_nodes does not
        recompute them and links to then-unknown nodes stay unreachable.
        """
        self.mechanics.router.set_links(links_from_arrays(from_ids, to_ids, distances))

    def load_graph(self, graph: GraphArrays) -> None:
        self.mechanics.router.set_nodes(graph.nodes())
        self.mechanics.router.set_links(graph.links())

    def find_path(self, start: NodeId, goal: NodeId) -> list[NodeId]:
        return self.mechanics.find_path(start, goal)

    # ---------------- actors

    def add_actor(self, actor_id, loc: Pt = (0.0, 0.0)) -> Actor:
        a = Actor(id=actor_id, loc=to_point(loc))
        self.world.add_actor(a)
        return a

    def actor_geo(self, actor_id) -> GeoPoint:
        loc = self.world.actor(actor_id).loc
        return self.mechanics.projection.to_geo(loc.x, loc.y)

    def is_moving(self, actor_id) -> bool:
        asg = self.world.assignments.get(actor_id)
        return asg is not None and asg.mover.active

    def follow(
        self,
        actor_id,
        waypoints: Sequence[Pt],
        speed: float,
        *,
        meters_per_unit: float | None = None,
    ) -> None:
        """Replace the actor's current order; a rejected order leaves it untouched."""
        self.world.actor(actor_id)
        mpu = self.mechanics.meters_per_unit() if meters_per_unit is None else meters_per_unit
        mover = self.mechanics.path_mover(label=actor_id)
        if not mover.start(waypoints, speed):
            raise EmptyWaypoints(f"no waypoints for actor {actor_id!r}", {"actor_id": actor_id})
        self.world.release(actor_id)
        self.world.assignments[actor_id] = Assignment(mover, speed, mpu)

    def follow_path(self, actor_id, node_path: list[NodeId], speed: float, **kw) -> None:
        self.follow(actor_id, self.mechanics.waypoints(node_path), speed, **kw)

    def route_actor(self, actor_id, start: NodeId, goal: NodeId, speed: float, **kw) -> list[NodeId]:
        path = self.find_path(start, goal)
        if not path:
            for n in (start, goal):
                if not self.mechanics.router.has_node(n):
                    raise UnknownNode(f"node {n!r} is not in the current graph", {"node": n})
            raise NoPathFound(f"no path from {start!r} to {goal!r}", {"start": start, "goal": goal})
        self.follow_path(actor_id, path, speed, **kw)
        return path

    def move_actor_to(self, actor_id, target: Pt, speed: float, **kw) -> None:
        self.follow(actor_id, [to_point(target)], speed, **kw)

    def move_actor_to_geo(self, actor_id, lat: float, lon: float, speed_mps: float) -> Point:
        proj = self.mechanics.projection
        target = proj.to_plane(lat, lon)
        self.follow(actor_id, [target], speed_mps, meters_per_unit=proj.meters_per_unit())
        return target

    def cancel(self, actor_id) -> None:
        self.world.release(actor_id)

    # ---------------- stepping

    def tick(self, time_scale: float | None = None) -> list:
        """Step every moving actor once; return the ids that finished."""
        ts = self.mechanics.movement.time_scale if time_scale is None else time_scale
        finished = []
        for actor_id, asg in list(self.world.assignments.items()):
            actor = self.world.actors[actor_id]
            if asg.mover.step(actor, asg.speed, ts, asg.meters_per_unit):
                finished.append(actor_id)
                del self.world.assignments[actor_id]
        return finished

    def idle(self) -> bool:
        return not self.world.assignments

    def on_tick(self) -> bool:
        """Kernel tick handler: step everyone, report whether anyone is still moving."""
        self.tick()
        return not self.idle()

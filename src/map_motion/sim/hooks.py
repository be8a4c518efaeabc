# sim/hooks.py
from typing import Protocol

from map_motion.domain.entities.geography import NodeId, Point


class MotionHooks(Protocol):
    def run_start(self, *, max_ticks, tick_s): ...
    def run_end(self, *, ticks, wall_ms): ...
    def path_search(
        self, *, start: NodeId, goal: NodeId, found: bool, hops: int, cost: float, explored: int
    ): ...
    def path_started(self, *, label, waypoints: int, speed: float): ...
    def leg_arrived(self, *, label, index: int, at: Point): ...
    def path_done(self, *, label, legs: int): ...
    def error(self, *, reason: str, **kw): ...


class NoopHooks:
    def run_start(self, **_):
        pass

    def run_end(self, **_):
        pass

    def path_search(self, **_):
        pass

    def path_started(self, **_):
        pass

    def leg_arrived(self, **_):
        pass

    def path_done(self, **_):
        pass

    def error(self, **_):
        pass

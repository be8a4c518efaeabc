import heapq
import itertools
import math
from collections.abc import Iterable
from dataclasses import dataclass

from map_motion.app.protocols import Pathfinder
from map_motion.domain.entities.geography import Link, NetworkGraph, Node, NodeId, Point
from map_motion.domain.errors import GraphInputError, NoPathFound, UnknownNode
from map_motion.sim.hooks import MotionHooks, NoopHooks


class HeapOpenSet:
    """Min-heap keyed by fScore with lazy deletion of superseded entries."""

    def __init__(self):
        self._heap: list[tuple[float, int, NodeId]] = []
        self._best: dict[NodeId, float] = {}
        self._seq = itertools.count()

    def push(self, n: NodeId, f: float) -> None:
        self._best[n] = f
        heapq.heappush(self._heap, (f, next(self._seq), n))

    def pop(self) -> NodeId:
        while self._heap:
            f, _, n = heapq.heappop(self._heap)
            if self._best.get(n) == f:
                del self._best[n]
                return n
        raise IndexError("pop from empty open set")

    def __bool__(self) -> bool:
        return bool(self._best)


class LinearOpenSet:
    """Linear scan for the minimum fScore; fine for small graphs."""

    def __init__(self):
        self._f: dict[NodeId, float] = {}

    def push(self, n: NodeId, f: float) -> None:
        self._f[n] = f

    def pop(self) -> NodeId:
        n = min(self._f, key=self._f.__getitem__)
        del self._f[n]
        return n

    def __bool__(self) -> bool:
        return bool(self._f)


OPEN_SETS = {"heap": HeapOpenSet, "linear": LinearOpenSet}


@dataclass
class SearchStats:
    start: NodeId
    goal: NodeId
    explored: int = 0
    found: bool = False


class AStarRouter(Pathfinder):
    """A* over a sparse bidirectional graph in plane coordinates.

    The heuristic is the straight-line distance between node coordinates. It is
    admissible as long as every link distance is at least the straight-line
    distance between its endpoints, which holds for links whose distance was
    derived from the coordinates. Callers supplying shorter custom distances
    get a valid path, but not necessarily the cheapest one.
    """

    def __init__(self, open_set: str = "heap", hooks: MotionHooks | None = None):
        if open_set not in OPEN_SETS:
            raise ValueError(f"Unknown open set {open_set!r}; expected one of {sorted(OPEN_SETS)}")
        self.open_set = open_set
        self.G = NetworkGraph()
        self.hooks = hooks or NoopHooks()
        self.last_search: SearchStats | None = None

    # ---------------- graph ingestion

    def set_nodes(self, nodes: Iterable[tuple[NodeId, float, float]]) -> None:
        table: dict[NodeId, Node] = {}
        for nid, x, y in nodes:
            table[nid] = Node(nid, float(x), float(y))
        self.G.nodes = table

    def set_links(self, links: Iterable[tuple[NodeId, NodeId, float | None]]) -> None:
        adj: dict[NodeId, list[Link]] = {}
        for u, v, dist in links:
            d = self._link_distance(u, v, dist)
            adj.setdefault(u, []).append(Link(v, d))
            adj.setdefault(v, []).append(Link(u, d))
        self.G.adjacency = adj

    def _link_distance(self, u: NodeId, v: NodeId, dist: float | None) -> float:
        if dist is None:
            if u in self.G.nodes and v in self.G.nodes:
                return self.G.node_point(u).distance_to(self.G.node_point(v))
            return math.inf  # dangling; never expanded
        d = float(dist)
        if math.isnan(d) or d < 0:
            raise GraphInputError(
                f"link {u!r}->{v!r} has invalid distance {dist!r}",
                {"from": u, "to": v, "distance": dist},
            )
        return d

    # ---------------- search

    def has_node(self, n: NodeId) -> bool:
        return n in self.G.nodes

    def heuristic(self, u: NodeId, goal: NodeId) -> float:
        return self.G.node_point(u).distance_to(self.G.node_point(goal))

    def find_path(self, start: NodeId, goal: NodeId) -> list[NodeId]:
        stats = SearchStats(start, goal)
        self.last_search = stats
        if start not in self.G.nodes or goal not in self.G.nodes:
            self._report(stats, [])
            return []
        if start == goal:
            stats.found = True
            self._report(stats, [start])
            return [start]

        g_score: dict[NodeId, float] = {start: 0.0}
        came_from: dict[NodeId, NodeId] = {}
        open_set = OPEN_SETS[self.open_set]()
        open_set.push(start, self.heuristic(start, goal))

        while open_set:
            current = open_set.pop()
            stats.explored += 1
            if current == goal:
                path = self._reconstruct(came_from, current)
                stats.found = True
                self._report(stats, path)
                return path
            g_cur = g_score[current]
            for link in self.G.neighbors(current):
                if link.to not in self.G.nodes:
                    continue
                tentative = g_cur + link.distance
                if tentative < g_score.get(link.to, math.inf):
                    came_from[link.to] = current
                    g_score[link.to] = tentative
                    open_set.push(link.to, tentative + self.heuristic(link.to, goal))

        self._report(stats, [])
        return []

    def route(self, start: NodeId, goal: NodeId) -> list[NodeId]:
        """find_path, but raising instead of returning an empty path."""
        for n in (start, goal):
            if n not in self.G.nodes:
                raise UnknownNode(f"node {n!r} is not in the current graph", {"node": n})
        path = self.find_path(start, goal)
        if not path:
            raise NoPathFound(
                f"no path from {start!r} to {goal!r}",
                {"start": start, "goal": goal, "explored": self.last_search.explored},
            )
        return path

    @staticmethod
    def _reconstruct(came_from: dict[NodeId, NodeId], current: NodeId) -> list[NodeId]:
        path = [current]
        while current in came_from:
            current = came_from[current]
            path.append(current)
        path.reverse()
        return path

    def _report(self, stats: SearchStats, path: list[NodeId]) -> None:
        self.hooks.path_search(
            start=stats.start,
            goal=stats.goal,
            found=stats.found,
            hops=max(0, len(path) - 1),
            cost=self.path_cost(path) if path else math.inf,
            explored=stats.explored,
        )

    # ---------------- helpers

    def path_cost(self, path: list[NodeId]) -> float:
        total = 0.0
        for u, v in zip(path, path[1:]):
            d = self.G.link_distance(u, v)
            if d is None:
                raise UnknownNode(f"no link between {u!r} and {v!r}", {"from": u, "to": v})
            total += d
        return total

    def points(self, path: list[NodeId]) -> list[Point]:
        return [self.G.node_point(n) for n in path]

    def nearest_node(self, p: Point) -> NodeId | None:
        return self.G.nearest_node(p)

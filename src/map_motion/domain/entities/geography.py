import math
from dataclasses import dataclass, field

NodeId = int | str


# Core geometry types used by mechanics
@dataclass(frozen=True)
class Point:
    x: float  # plane units, Y up
    y: float

    def distance_to(self, other: "Point") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


@dataclass(frozen=True)
class GeoPoint:
    lat: float  # degrees
    lon: float


@dataclass(frozen=True)
class TileAddress:
    zoom: int
    x: int
    y: int


@dataclass(frozen=True)
class Tile:
    """A tile placed on screen for a (possibly fractional) zoom level."""

    address: TileAddress
    actual_zoom: float
    screen_x: int
    screen_y: int
    scale: float
    url: str


@dataclass(frozen=True)
class Bounds:
    north: float
    south: float
    east: float
    west: float


@dataclass(frozen=True)
class Node:
    id: NodeId
    x: float
    y: float

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True)
class Link:
    to: NodeId
    distance: float


@dataclass
class NetworkGraph:
    """Nodes plus bidirectional weighted adjacency, rebuilt wholesale."""

    nodes: dict[NodeId, Node] = field(default_factory=dict)
    adjacency: dict[NodeId, list[Link]] = field(default_factory=dict)

    def node_point(self, n: NodeId) -> Point:
        return self.nodes[n].point

    def neighbors(self, n: NodeId) -> list[Link]:
        return self.adjacency.get(n, [])

    def link_distance(self, u: NodeId, v: NodeId) -> float | None:
        best = None
        for link in self.neighbors(u):
            if link.to == v and (best is None or link.distance < best):
                best = link.distance
        return best

    def nearest_node(self, p: Point) -> NodeId | None:
        best, best_d = None, math.inf
        for n in self.nodes.values():
            d = math.hypot(n.x - p.x, n.y - p.y)
            if d < best_d:
                best, best_d = n.id, d
        return best

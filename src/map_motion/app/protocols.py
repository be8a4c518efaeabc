from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

from map_motion.domain.entities.geography import NodeId, Point, TileAddress


# ------------- Mechanics --------------------
@runtime_checkable
class WallClock(Protocol):
    """Seconds from an arbitrary origin; `sleep` lets a host loop wait."""

    def now(self) -> float: ...
    def sleep(self, dt: float) -> None: ...


@runtime_checkable
class Movable(Protocol):
    loc: Point


@runtime_checkable
class Pathfinder(Protocol):
    """
    Responsibilities:
      • Own the node/link graph, replaced wholesale on each set_* call.
      • Return the cheapest node sequence between two node ids ([] if none).
    Units: plane units for coordinates and link distances.
    """

    def set_nodes(self, nodes: Iterable[tuple[NodeId, float, float]]) -> None: ...
    def set_links(self, links: Iterable[tuple[NodeId, NodeId, float | None]]) -> None: ...
    def has_node(self, n: NodeId) -> bool: ...
    def find_path(self, start: NodeId, goal: NodeId) -> list[NodeId]: ...
    def points(self, path: list[NodeId]) -> list[Point]: ...


@runtime_checkable
class UnitScale(Protocol):
    """
    Meters per plane unit. Speeds handed to the movers are divided by this,
    so 1.0 means "plane units per second" and a map scale means "meters per second".
    """

    def meters_per_unit(self) -> float: ...


# --------------- External collaborators -------------------------


@runtime_checkable
class TileSource(Protocol):
    """Given a tile address return a decoded image, or raise TileUnavailable."""

    def get_image(self, tile: TileAddress) -> Any: ...

# domain/errors.py
from dataclasses import dataclass, field
from typing import Any


@dataclass(eq=False)
class MotionError(Exception):
    """Recoverable failure raised by the planner, movers or projection."""

    message: str
    details: dict[str, Any] = field(default_factory=dict)

    reason_code = "motion_error"

    def __str__(self) -> str:
        return self.message


class InvalidCoordinate(MotionError, ValueError):
    """NaN/out-of-range lat/lon, or a non-finite speed, zoom or scale."""

    reason_code = "invalid_coordinate"


class UnknownNode(MotionError, LookupError):
    reason_code = "unknown_node"


class EmptyWaypoints(MotionError, ValueError):
    reason_code = "empty_waypoints"


class NoPathFound(MotionError):
    """Search exhausted the open set without reaching the goal."""

    reason_code = "no_path_found"


class GraphInputError(MotionError, ValueError):
    """Mismatched parallel arrays or an invalid link distance."""

    reason_code = "graph_input"


class TileUnavailable(MotionError):
    reason_code = "tile_unavailable"

# map_motion/io/business_events.py

from dataclasses import dataclass


# Base type for analytics events (recorded, never fed back into movement)
@dataclass
class BizEvent:
    run_id: str
    t: float  # clock time
    seq: int  # emission order within the run
    name: str  # stable event name


@dataclass
class PathFoundBiz(BizEvent):
    start: int | str
    goal: int | str
    found: bool
    hops: int
    cost: float | None = None
    explored: int = 0


@dataclass
class PathStartedBiz(BizEvent):
    label: int | str | None
    waypoints: int
    speed: float


@dataclass
class LegArrivedBiz(BizEvent):
    label: int | str | None
    index: int
    at: tuple[float, float]


@dataclass
class PathCompletedBiz(BizEvent):
    label: int | str | None
    legs: int

# io/kernel_logging.py
import itertools
import json
import logging
import math
import sys

from map_motion.io.business_events import (
    LegArrivedBiz,
    PathCompletedBiz,
    PathFoundBiz,
    PathStartedBiz,
)
from map_motion.io.recorder import Recorder
from map_motion.sim.hooks import NoopHooks


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, default=str)


def _default_json_logger(name="map_motion", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class MotionLogging(NoopHooks):
    """
    One place to shape and emit structured logs for the host loop, searches and
    path movement, and to forward the matching analytics events to a recorder.
    """

    def __init__(
        self,
        run_id: str = "local",
        clock=None,
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.clock, self.debug, self.sample_every = (
            run_id,
            clock,
            debug,
            max(1, sample_every),
        )
        self.recorder = recorder
        self.log = logger or _default_json_logger(level=level)
        self._seq = itertools.count()
        self._searches = 0
        self._arrivals = 0

    # --------------- Helpers -----------------------------

    def _now(self) -> float | None:
        return self.clock.now() if self.clock else None

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        t = self._now()
        if t is not None:
            payload["t"] = t
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    def _biz(self, cls, name: str, **fields):
        if self.recorder:
            t = self._now()
            self.recorder.emit(
                cls(
                    run_id=self.run_id,
                    t=0.0 if t is None else t,
                    seq=next(self._seq),
                    name=name,
                    **fields,
                )
            )

    # --------------------------------------------------------

    # host loop lifecycle

    def run_start(self, *, max_ticks: int | None, tick_s: float):
        self._emit("INFO", "run_start", max_ticks=max_ticks, tick_s=tick_s)

    def run_end(self, *, ticks: int, **extra):
        self._emit("INFO", "run_end", ticks=ticks, **extra)

    # planner

    def path_search(self, *, start, goal, found: bool, hops: int, cost: float, explored: int):
        self._searches += 1
        extra = {
            "start": start,
            "goal": goal,
            "found": found,
            "hops": hops,
            "cost": cost if math.isfinite(cost) else None,
            "explored": explored,
        }
        if not found:
            self._emit("WARNING", "path_not_found", **extra)
        elif self.debug and (self._searches % self.sample_every) == 0:
            self._emit("DEBUG", "path_found", **extra)
        self._biz(PathFoundBiz, "PathFound", **extra)

    # movement

    def path_started(self, *, label, waypoints: int, speed: float):
        self._emit("INFO", "path_started", label=label, waypoints=waypoints, speed=speed)
        self._biz(PathStartedBiz, "PathStarted", label=label, waypoints=waypoints, speed=speed)

    def leg_arrived(self, *, label, index: int, at):
        self._arrivals += 1
        if self.debug and (self._arrivals % self.sample_every) == 0:
            self._emit("DEBUG", "leg_arrived", label=label, index=index, x=at.x, y=at.y)
        self._biz(LegArrivedBiz, "LegArrived", label=label, index=index, at=(at.x, at.y))

    def path_done(self, *, label, legs: int):
        self._emit("INFO", "path_done", label=label, legs=legs)
        self._biz(PathCompletedBiz, "PathCompleted", label=label, legs=legs)

    def error(self, *, reason: str, **extra):
        self._emit("ERROR", "motion_error", reason=reason, **extra)

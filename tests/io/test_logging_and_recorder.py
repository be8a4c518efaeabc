import io
import json
import logging

import pytest

from map_motion.domain.entities.geography import Point
from map_motion.io.business_events import LegArrivedBiz, PathCompletedBiz, PathFoundBiz
from map_motion.io.kernel_logging import MotionLogging, _JsonFormatter
from map_motion.io.recorder import JsonlSink, MemorySink, Recorder
from map_motion.sim.clock import ManualClock


@pytest.fixture
def memory() -> MemorySink:
    return MemorySink()


@pytest.fixture
def hooks(memory) -> MotionLogging:
    return MotionLogging(
        run_id="t-1",
        clock=ManualClock(12.5),
        debug=True,
        logger=logging.getLogger("map_motion.test"),
        recorder=Recorder(memory),
    )


def _records(caplog, msg):
    return [r for r in caplog.records if r.getMessage() == msg]


def test_path_lifecycle_is_logged_and_recorded(hooks, memory, caplog):
    caplog.set_level(logging.DEBUG, logger="map_motion.test")
    hooks.path_started(label="car", waypoints=2, speed=3.0)
    hooks.leg_arrived(label="car", index=0, at=Point(1.0, 2.0))
    hooks.path_done(label="car", legs=2)

    (done,) = _records(caplog, "path_done")
    assert done.extra["run_id"] == "t-1"
    assert done.extra["t"] == 12.5
    assert done.extra["legs"] == 2
    assert _records(caplog, "leg_arrived")[0].levelname == "DEBUG"

    names = [e.name for e in memory.events]
    assert names == ["PathStarted", "LegArrived", "PathCompleted"]
    assert [e.seq for e in memory.events] == [0, 1, 2]
    arrived = memory.events[1]
    assert isinstance(arrived, LegArrivedBiz) and arrived.at == (1.0, 2.0)
    assert isinstance(memory.events[2], PathCompletedBiz)


def test_failed_search_is_a_warning(hooks, memory, caplog):
    caplog.set_level(logging.INFO, logger="map_motion.test")
    hooks.path_search(start=1, goal=2, found=False, hops=0, cost=float("inf"), explored=3)
    (rec,) = _records(caplog, "path_not_found")
    assert rec.levelname == "WARNING"
    assert rec.extra["cost"] is None
    (ev,) = memory.events
    assert isinstance(ev, PathFoundBiz) and not ev.found


def test_debug_logs_are_sampled(memory, caplog):
    caplog.set_level(logging.DEBUG, logger="map_motion.sampled")
    h = MotionLogging(
        debug=True,
        sample_every=3,
        logger=logging.getLogger("map_motion.sampled"),
        recorder=Recorder(memory),
    )
    for i in range(9):
        h.path_search(start=0, goal=i, found=True, hops=1, cost=1.0, explored=2)
    assert len(_records(caplog, "path_found")) == 3
    assert len(memory.events) == 9  # analytics are never sampled


def test_errors_carry_their_reason(hooks, caplog):
    caplog.set_level(logging.INFO, logger="map_motion.test")
    hooks.error(reason="tile_unavailable", tile="https://x/1/2/3.png")
    (rec,) = _records(caplog, "motion_error")
    assert rec.levelname == "ERROR"
    assert rec.extra["reason"] == "tile_unavailable"


def test_json_formatter_merges_extra_fields():
    record = logging.LogRecord("map_motion", logging.INFO, __file__, 1, "run_end", None, None)
    record.extra = {"run_id": "r", "ticks": 4}
    out = json.loads(_JsonFormatter().format(record))
    assert out == {"level": "INFO", "msg": "run_end", "logger": "map_motion", "run_id": "r", "ticks": 4}


def test_jsonl_sink_writes_one_event_per_line():
    buf = io.StringIO()
    rec = Recorder(JsonlSink(buf))
    rec.emit(PathCompletedBiz(run_id="r", t=1.0, seq=0, name="PathCompleted", label="a", legs=3))
    rec.emit(PathCompletedBiz(run_id="r", t=2.0, seq=1, name="PathCompleted", label="b", legs=1))
    lines = buf.getvalue().splitlines()
    assert [json.loads(line)["label"] for line in lines] == ["a", "b"]


class BrokenSink:
    def write(self, ev) -> None:
        raise OSError("disk full")


def test_broken_sink_does_not_starve_the_others(memory, caplog):
    rec = Recorder(BrokenSink(), memory)
    ev = PathCompletedBiz(run_id="r", t=0.0, seq=0, name="PathCompleted", label=None, legs=1)
    with caplog.at_level(logging.ERROR, logger="map_motion.recorder"):
        rec.emit(ev)
    assert memory.events == [ev]
    assert rec.failed == 1
    assert "BrokenSink" in caplog.text

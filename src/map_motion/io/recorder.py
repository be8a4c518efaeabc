# map_motion/io/recorder.py
import json
import logging
import sys
from dataclasses import asdict
from typing import Protocol

log = logging.getLogger("map_motion.recorder")


class Sink(Protocol):
    def write(self, ev) -> None: ...


class JsonlSink:
    def __init__(self, fp=sys.stdout):
        self.fp = fp

    def write(self, ev) -> None:
        self.fp.write(json.dumps(asdict(ev)) + "\n")


class MemorySink:
    def __init__(self):
        self.events: list = []

    def write(self, ev) -> None:
        self.events.append(ev)


class Recorder:
    """Fans analytics events out to sinks; a failing sink never stops movement."""

    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)
        self.failed = 0

    def emit(self, ev) -> None:
        for s in self.sinks:
            try:
                s.write(ev)
            except (OSError, TypeError, ValueError):
                self.failed += 1
                log.exception("sink %s failed to write %s", type(s).__name__, type(ev).__name__)

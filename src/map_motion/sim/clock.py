# sim/clock.py
from __future__ import annotations

import time
from dataclasses import dataclass

MS = 1e-3

FRAME_30HZ = 1.0 / 30.0


def ms(x: float) -> float:
    return x * MS


class MonotonicClock:
    """Wall clock in seconds; only differences are meaningful."""

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, dt: float) -> None:
        if dt > 0:
            time.sleep(dt)


@dataclass
class ManualClock:
    """Clock that only moves when told to; sleeping advances it instantly."""

    t: float = 0.0

    def now(self) -> float:
        return self.t

    def advance(self, dt: float) -> float:
        if dt < 0:
            raise ValueError(f"cannot move clock backwards by {dt}")
        self.t += dt
        return self.t

    def sleep(self, dt: float) -> None:
        self.advance(max(0.0, dt))

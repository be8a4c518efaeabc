# sim/kernel.py

import time
from collections.abc import Callable

from .hooks import MotionHooks, NoopHooks

# A tick handler reports whether it still has work to do.
TickHandler = Callable[[], bool]


class Kernel:
    """Fixed-cadence host loop: sleep one tick, call every handler, repeat."""

    def __init__(self, clock, hooks: MotionHooks | None = None):
        self.clock = clock
        self._handlers: list[TickHandler] = []
        self._hooks = hooks or NoopHooks()
        self.ticks = 0

    def on_tick(self, handler: TickHandler) -> None:
        self._handlers.append(handler)

    def step(self) -> bool:
        busy = False
        for h in self._handlers:
            busy = bool(h()) or busy
        self.ticks += 1
        return busy

    def run(self, *, tick_s: float, max_ticks: int | None = None, until_idle: bool = True) -> int:
        if tick_s <= 0:
            raise ValueError(f"tick_s must be > 0, got {tick_s}")
        if max_ticks is None and not until_idle:
            raise ValueError("run() needs max_ticks or until_idle to terminate")
        t0 = time.perf_counter()
        self._hooks.run_start(max_ticks=max_ticks, tick_s=tick_s)
        processed = 0
        while max_ticks is None or processed < max_ticks:
            self.clock.sleep(tick_s)
            busy = self.step()
            processed += 1
            if until_idle and not busy:
                break
        self._hooks.run_end(
            ticks=processed,
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
        return processed

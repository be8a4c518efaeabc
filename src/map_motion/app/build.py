# map_motion/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from map_motion.app.controllers.fleet import FleetController
from map_motion.app.controllers.viewport import MapViewport
from map_motion.app.protocols import WallClock
from map_motion.config.models import AppModel
from map_motion.domain.mechanics.mechanics_core import Mechanics
from map_motion.domain.mechanics.mechanics_factory import build_mechanics
from map_motion.domain.state import FleetState
from map_motion.io.kernel_logging import MotionLogging  # JSON logs
from map_motion.io.recorder import JsonlSink, Recorder, Sink
from map_motion.runtime.registries import resolve_graph
from map_motion.sim.clock import MonotonicClock
from map_motion.sim.hooks import MotionHooks, NoopHooks
from map_motion.sim.kernel import Kernel


@dataclass
class App:
    cfg: AppModel
    kernel: Kernel
    clock: WallClock
    hooks: MotionHooks
    world: FleetState
    mechanics: Mechanics
    fleet: FleetController
    viewport: MapViewport

    def run(self, max_ticks: int | None = None) -> int:
        return self.kernel.run(tick_s=self.cfg.mechanics.movement.tick_s, max_ticks=max_ticks)


def build(
    cfg: AppModel | Mapping,
    *,
    clock: WallClock | None = None,
    use_logging: bool = True,
    sinks: tuple[Sink, ...] = (),
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, AppModel) else AppModel.model_validate(cfg)

    # 1) Clock
    clock = clock or MonotonicClock()

    # 2) Hooks: JSON logs plus a recorder for analytics
    recorder = Recorder(*(sinks or (JsonlSink(),)))
    hooks = (
        MotionLogging(
            run_id=model.run_id,
            recorder=recorder,
            clock=clock,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )
    kernel = Kernel(clock, hooks=hooks)

    # 3) Mechanics, world and controllers
    mechanics = build_mechanics(model.mechanics, model.map, clock=clock, hooks=hooks)
    world = FleetState()
    fleet = FleetController(world=world, mechanics=mechanics)
    viewport = MapViewport(model.map, mechanics)

    # 4) Optional graph from disk
    graph = resolve_graph(model.graph)
    if graph is not None:
        fleet.load_graph(graph)

    # 5) Wiring
    kernel.on_tick(fleet.on_tick)

    return App(model, kernel, clock, hooks, world, mechanics, fleet, viewport)

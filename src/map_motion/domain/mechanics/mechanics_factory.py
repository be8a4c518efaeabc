# map_motion/domain/mechanics/mechanics_factory.py

from map_motion.app.protocols import WallClock
from map_motion.config.models import MapModel, MechanicsModel
from map_motion.domain.mechanics.mechanics_core import Mechanics
from map_motion.domain.mechanics.mechanics_geospace import MapProjection
from map_motion.runtime.registries import make_router, make_scale
from map_motion.sim.clock import MonotonicClock
from map_motion.sim.hooks import MotionHooks, NoopHooks


def build_mechanics(
    cfg: MechanicsModel,
    map_cfg: MapModel | None = None,
    *,
    clock: WallClock | None = None,
    hooks: MotionHooks | None = None,
) -> Mechanics:
    map_cfg = map_cfg or MapModel()
    hooks = hooks or NoopHooks()
    projection = MapProjection(map_cfg.center_lat, map_cfg.center_lon, map_cfg.zoom)

    router = make_router(cfg.router, deps={"hooks": hooks})
    scale = make_scale(cfg.scale, deps={"projection": projection})

    return Mechanics(
        router=router,
        projection=projection,
        scale=scale,
        clock=clock or MonotonicClock(),
        movement=cfg.movement,
        hooks=hooks,
    )

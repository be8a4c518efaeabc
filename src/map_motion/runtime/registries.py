# runtime/registries.py
from collections.abc import Callable
from typing import Any

from map_motion.app.protocols import Pathfinder, UnitScale
from map_motion.config.models import (
    GraphByPath,
    RouterAStarModel,
    RouterUnion,
    ScaleMercatorModel,
    ScalePlaneModel,
    ScaleUnion,
)
from map_motion.domain.mechanics.mechanics_routers import AStarRouter
from map_motion.domain.mechanics.mechanics_speeds import MercatorScale, PlaneUnitScale
from map_motion.runtime.resources import GraphArrays, load_graph_from_path

ScaleFactory = Callable[[ScaleUnion, dict[str, Any]], UnitScale]
RouterFactory = Callable[[RouterUnion, dict[str, Any]], Pathfinder]

_scale_registry: dict[str, ScaleFactory] = {}
_router_registry: dict[str, RouterFactory] = {}


# ------------------- Unit scales ---------------------------


def register_scale(kind: str):
    def deco(fn: ScaleFactory):
        _scale_registry[kind] = fn
        return fn

    return deco


def make_scale(cfg: ScaleUnion, *, deps: dict) -> UnitScale:
    try:
        factory = _scale_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown scale kind {cfg.kind!r}") from None
    return factory(cfg, deps)


@register_scale("plane")
def _make_plane(cfg: ScalePlaneModel, deps):
    return PlaneUnitScale(cfg.meters_per_unit)


@register_scale("mercator")
def _make_mercator(cfg: ScaleMercatorModel, deps):
    return MercatorScale(deps["projection"])


# --------------------- Route planners  ---------------------


def register_router(kind: str):
    def deco(fn: RouterFactory):
        _router_registry[kind] = fn
        return fn

    return deco


def make_router(cfg: RouterUnion, *, deps: dict) -> Pathfinder:
    try:
        factory = _router_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown router kind {cfg.kind!r}") from None
    return factory(cfg, deps)


@register_router("astar")
def _make_astar(cfg: RouterAStarModel, deps):
    return AStarRouter(open_set=cfg.open_set, hooks=deps.get("hooks"))


# --------------------- Graph sources ---------------------


def resolve_graph(ref: GraphByPath | None) -> GraphArrays | None:
    if ref is None:
        return None
    g = load_graph_from_path(ref.file, ref.fmt)
    if ref.must_exist and g is None:
        raise FileNotFoundError(ref.file)
    return g

# main.py
import argparse

from map_motion.app.build import build
from map_motion.io.config import load_config
from map_motion.sim.clock import ManualClock


def run(config: str | None, max_ticks: int | None) -> int:
    cfg = load_config(config) if config else load_config({"mechanics": {"scale": {"kind": "mercator"}}})
    app = build(cfg, clock=ManualClock())

    # Small demo grid when no graph file is configured
    if cfg.graph is None:
        app.fleet.set_nodes(["a", "b", "c", "d"], [0, 100, 100, 0], [0, 0, 100, 100])
        app.fleet.set_links(["a", "b", "c", "a"], ["b", "c", "d", "d"])

    nodes = app.fleet.mechanics.router.G.nodes
    start, goal = next(iter(nodes)), list(nodes)[-1]
    app.fleet.add_actor("demo", nodes[start].point)
    app.fleet.route_actor("demo", start, goal, speed=5.0)
    ticks = app.run(max_ticks=max_ticks)
    geo = app.fleet.actor_geo("demo")
    print(f"arrived after {ticks} ticks at {geo.lat:.6f}, {geo.lon:.6f}")
    return ticks


if __name__ == "__main__":
    p = argparse.ArgumentParser(description="Route one actor across a graph and walk it there.")
    p.add_argument("--config", help="JSON config file (AppModel)")
    p.add_argument("--max-ticks", type=int, default=100_000)
    args = p.parse_args()
    run(args.config, args.max_ticks)

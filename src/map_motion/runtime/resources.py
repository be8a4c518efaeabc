# map_motion/runtime/resources.py
import json
from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import numpy as np

from map_motion.domain.entities.geography import NodeId
from map_motion.domain.errors import GraphInputError


@dataclass(frozen=True)
class GraphArrays:
    """Parallel arrays as a host supplies them."""

    node_ids: tuple[NodeId, ...]
    xs: tuple[float, ...]
    ys: tuple[float, ...]
    link_from: tuple[NodeId, ...] = ()
    link_to: tuple[NodeId, ...] = ()
    link_distance: tuple[float, ...] | None = None

    def nodes(self) -> list[tuple[NodeId, float, float]]:
        return nodes_from_arrays(self.node_ids, self.xs, self.ys)

    def links(self) -> list[tuple[NodeId, NodeId, float | None]]:
        return links_from_arrays(self.link_from, self.link_to, self.link_distance)


def _py(v):
    # numpy scalars -> plain python so ids stay usable as dict keys
    return v.item() if isinstance(v, np.generic) else v


def nodes_from_arrays(ids: Sequence, xs: Sequence, ys: Sequence) -> list[tuple[NodeId, float, float]]:
    if not (len(ids) == len(xs) == len(ys)):
        raise GraphInputError(
            f"node arrays differ in length: ids={len(ids)} x={len(xs)} y={len(ys)}",
            {"ids": len(ids), "x": len(xs), "y": len(ys)},
        )
    return [(_py(n), float(x), float(y)) for n, x, y in zip(ids, xs, ys)]


def links_from_arrays(
    from_ids: Sequence, to_ids: Sequence, distances: Sequence | None = None
) -> list[tuple[NodeId, NodeId, float | None]]:
    if len(from_ids) != len(to_ids):
        raise GraphInputError(
            f"link arrays differ in length: from={len(from_ids)} to={len(to_ids)}",
            {"from": len(from_ids), "to": len(to_ids)},
        )
    if distances is None:
        return [(_py(u), _py(v), None) for u, v in zip(from_ids, to_ids)]
    if len(distances) != len(from_ids):
        raise GraphInputError(
            f"link distance array has length {len(distances)}, expected {len(from_ids)}",
            {"distance": len(distances), "from": len(from_ids)},
        )
    return [(_py(u), _py(v), float(d)) for u, v, d in zip(from_ids, to_ids, distances)]


def _load_json(file: str) -> GraphArrays:
    with open(file, encoding="utf-8") as f:
        data = json.load(f)
    nodes, links = data.get("nodes", {}), data.get("links", {})
    dist = links.get("distance")
    return GraphArrays(
        node_ids=tuple(nodes.get("id", ())),
        xs=tuple(nodes.get("x", ())),
        ys=tuple(nodes.get("y", ())),
        link_from=tuple(links.get("from", ())),
        link_to=tuple(links.get("to", ())),
        link_distance=None if dist is None else tuple(dist),
    )


def _load_npz(file: str) -> GraphArrays:
    with np.load(file, allow_pickle=False) as z:
        dist = z["link_distance"] if "link_distance" in z.files else None
        return GraphArrays(
            node_ids=tuple(_py(v) for v in z["node_id"]),
            xs=tuple(float(v) for v in z["node_x"]),
            ys=tuple(float(v) for v in z["node_y"]),
            link_from=tuple(_py(v) for v in z["link_from"]),
            link_to=tuple(_py(v) for v in z["link_to"]),
            link_distance=None if dist is None else tuple(float(v) for v in dist),
        )


@lru_cache(maxsize=8)
def load_graph_from_path(file: str, fmt: str) -> GraphArrays | None:
    if not Path(file).exists():
        return None
    if fmt == "json":
        return _load_json(file)
    if fmt == "npz":
        return _load_npz(file)
    raise ValueError(f"Unsupported graph fmt {fmt!r}")

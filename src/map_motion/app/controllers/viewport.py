# map_motion/app/controllers/viewport.py
import math
from typing import Any

from map_motion.app.protocols import TileSource
from map_motion.config.models import MAX_LATITUDE, MapModel
from map_motion.domain.entities.geography import Bounds, GeoPoint, Tile, TileAddress
from map_motion.domain.errors import InvalidCoordinate, TileUnavailable
from map_motion.domain.mechanics.mechanics_core import Mechanics
from map_motion.domain.mechanics.mechanics_geospace import TILE_SIZE, geo_to_pixel, tile_url

_PAN = {
    "north": (1, 0),
    "up": (1, 0),
    "south": (-1, 0),
    "down": (-1, 0),
    "east": (0, 1),
    "right": (0, 1),
    "west": (0, -1),
    "left": (0, -1),
}


def zoom_levels(min_zoom: float, max_zoom: float, step: float) -> list[float]:
    n = int(math.floor((max_zoom - min_zoom) / step + 1e-9)) + 1
    return [round(min_zoom + i * step, 2) for i in range(n)]


def _wrap_lon(lon: float) -> float:
    return (lon + 180.0) % 360.0 - 180.0


class MapViewport:
    """Pan/zoom state of the visible map and the tiles that cover it.

    The viewport owns the map centre and zoom and pushes every change into the
    shared projection. Actor plane positions are not re-projected, and orders
    already in flight keep the meters-per-unit captured when they were given;
    hosts that move the view mid-route re-issue orders from `actor_geo`.
    """

    def __init__(self, cfg: MapModel, mechanics: Mechanics):
        self.cfg = cfg
        self.mechanics = mechanics
        self.levels = zoom_levels(cfg.min_zoom, cfg.max_zoom, cfg.zoom_step)
        self.set_zoom(mechanics.projection.zoom)

    # ---------------- state

    @property
    def center(self) -> GeoPoint:
        p = self.mechanics.projection
        return GeoPoint(p.center_lat, p.center_lon)

    @property
    def zoom(self) -> float:
        return self.mechanics.projection.zoom

    def nearest_zoom(self, zoom: float) -> float:
        return min(self.levels, key=lambda z: abs(z - zoom))

    def set_zoom(self, zoom: float) -> float:
        if not math.isfinite(zoom):
            raise InvalidCoordinate(f"non-finite zoom {zoom}", {"zoom": zoom})
        z = self.nearest_zoom(zoom)
        self.mechanics.set_projection(self.mechanics.projection.with_zoom(z))
        return z

    def zoom_in(self) -> float:
        i = self.levels.index(self.nearest_zoom(self.zoom))
        return self.set_zoom(self.levels[min(i + 1, len(self.levels) - 1)])

    def zoom_out(self) -> float:
        i = self.levels.index(self.nearest_zoom(self.zoom))
        return self.set_zoom(self.levels[max(i - 1, 0)])

    def recenter(self, lat: float, lon: float) -> GeoPoint:
        if not (math.isfinite(lat) and math.isfinite(lon)) or abs(lat) > 90.0 or abs(lon) > 180.0:
            raise InvalidCoordinate(f"invalid centre ({lat}, {lon})", {"lat": lat, "lon": lon})
        lat = max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))  # polar band where Mercator ends
        self.mechanics.set_projection(self.mechanics.projection.recentered(lat, lon))
        return self.center

    def pan(self, direction: str, amount: float | None = None) -> GeoPoint:
        try:
            dlat, dlon = _PAN[direction]
        except KeyError:
            raise ValueError(
                f"Unknown pan direction {direction!r}; expected one of {sorted(_PAN)}"
            ) from None
        step = self.cfg.pan_step_deg if amount is None else amount
        c = self.center
        lat = max(-90.0, min(90.0, c.lat + dlat * step))
        return self.recenter(lat, _wrap_lon(c.lon + dlon * step))

    # ---------------- geometry

    def bounds(self) -> Bounds:
        hw, hh = self.cfg.viewport_width / 2, self.cfg.viewport_height / 2
        proj = self.mechanics.projection
        nw = proj.to_geo(-hw, hh)
        se = proj.to_geo(hw, -hh)
        return Bounds(north=nw.lat, south=se.lat, east=se.lon, west=nw.lon)

    def visible_tiles(self, template: str | None = None) -> list[Tile]:
        """Tiles covering the viewport, scaled up from the integer zoom below."""
        template = template or self.cfg.tile_url
        base = math.floor(self.zoom)
        scale = 2.0 ** (self.zoom - base)
        size = TILE_SIZE * scale
        c = self.center
        px, py = geo_to_pixel(c.lat, c.lon, base)
        hw = self.cfg.viewport_width / 2 / scale
        hh = self.cfg.viewport_height / 2 / scale

        min_x, max_x = math.floor((px - hw) / TILE_SIZE), math.ceil((px + hw) / TILE_SIZE)
        min_y, max_y = math.floor((py - hh) / TILE_SIZE), math.ceil((py + hh) / TILE_SIZE)
        off_x = (px - hw - min_x * TILE_SIZE) * scale
        off_y = (py - hh - min_y * TILE_SIZE) * scale

        n = 2**base
        tiles = []
        for y in range(min_y, max_y):
            if not 0 <= y < n:
                continue  # beyond the poles
            for x in range(min_x, max_x):
                addr = TileAddress(base, x % n, y)
                tiles.append(
                    Tile(
                        address=addr,
                        actual_zoom=self.zoom,
                        screen_x=round((x - min_x) * size - off_x),
                        screen_y=round((y - min_y) * size - off_y),
                        scale=scale,
                        url=tile_url(template, addr),
                    )
                )
        return tiles

    def tile_url(self, tile: TileAddress, template: str | None = None) -> str:
        return tile_url(template or self.cfg.tile_url, tile)

    # ---------------- images

    def load_tiles(self, source: TileSource) -> list[tuple[Tile, Any]]:
        """Fetch every visible tile; a tile that cannot be loaded pairs with None."""
        out = []
        for tile in self.visible_tiles():
            try:
                image = source.get_image(tile.address)
            except TileUnavailable as exc:
                fallback = self.cfg.fallback_tile_url
                self.mechanics.hooks.error(
                    reason=exc.reason_code,
                    tile=tile.url,
                    fallback=self.tile_url(tile.address, fallback) if fallback else None,
                    detail=str(exc),
                )
                image = None
            out.append((tile, image))
        return out

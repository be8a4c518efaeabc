"""Web-Mercator projection between geographic, plane and tile coordinates.

The plane is centred on a reference point: (0, 0) is the projected centre,
X grows east and Y grows north (screen convention, the opposite of raw
Mercator pixel Y). One plane unit is one pixel at the given zoom.
"""

import math
from dataclasses import dataclass, replace

import numpy as np

from map_motion.domain.entities.geography import GeoPoint, Point, TileAddress
from map_motion.domain.errors import InvalidCoordinate

TILE_SIZE = 256
EARTH_CIRCUMFERENCE_M = 40_075_016.686
MAX_LATITUDE = 85.05112878  # |lat| where the Mercator square ends

# WGS84, for the ellipsoidal distance
SEMI_MAJOR_AXIS_M = 6_378_137.0
ECCENTRICITY_SQ = 0.00669438


def _check_lat_lon(lat: float, lon: float) -> None:
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise InvalidCoordinate(f"non-finite coordinate ({lat}, {lon})", {"lat": lat, "lon": lon})
    if abs(lat) > 90.0 or abs(lon) > 180.0:
        raise InvalidCoordinate(
            f"coordinate out of range ({lat}, {lon})", {"lat": lat, "lon": lon}
        )


def _check_zoom(zoom: float) -> None:
    if not math.isfinite(zoom):
        raise InvalidCoordinate(f"non-finite zoom {zoom}", {"zoom": zoom})


def clamp_latitude(lat: float) -> float:
    return max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))


def world_width(zoom: float) -> float:
    return TILE_SIZE * 2.0**zoom


def mercator_x(lon: float, zoom: float) -> float:
    return (lon + 180.0) / 360.0 * world_width(zoom)


def mercator_y(lat: float, zoom: float) -> float:
    s = math.sin(math.radians(clamp_latitude(lat)))
    return world_width(zoom) * (0.5 - math.log((1 + s) / (1 - s)) / (4 * math.pi))


def geo_to_pixel(lat: float, lon: float, zoom: float) -> tuple[float, float]:
    """Global pixel position at `zoom` (origin top-left of the world, Y down)."""
    _check_lat_lon(lat, lon)
    _check_zoom(zoom)
    return mercator_x(lon, zoom), mercator_y(lat, zoom)


def geo_to_plane(
    lat: float, lon: float, center_lat: float, center_lon: float, zoom: float
) -> Point:
    px, py = geo_to_pixel(lat, lon, zoom)
    cx, cy = geo_to_pixel(center_lat, center_lon, zoom)
    return Point(px - cx, -(py - cy))


def plane_to_geo(x: float, y: float, center_lat: float, center_lon: float, zoom: float) -> GeoPoint:
    if not (math.isfinite(x) and math.isfinite(y)):
        raise InvalidCoordinate(f"non-finite plane point ({x}, {y})", {"x": x, "y": y})
    cx, cy = geo_to_pixel(center_lat, center_lon, zoom)
    w = world_width(zoom)
    mx, my = cx + x, cy - y
    lon = mx / w * 360.0 - 180.0
    n = math.pi - 2.0 * math.pi * my / w
    lat = math.degrees(math.atan(math.sinh(n)))
    return GeoPoint(lat, lon)


def geo_to_plane_many(
    lats, lons, center_lat: float, center_lon: float, zoom: float
) -> np.ndarray:
    """Vectorised geo_to_plane; returns an (N, 2) array of plane points."""
    la = np.asarray(lats, dtype=float)
    lo = np.asarray(lons, dtype=float)
    if la.shape != lo.shape:
        raise InvalidCoordinate(
            f"lat/lon arrays differ in shape: {la.shape} vs {lo.shape}",
            {"lats": la.shape, "lons": lo.shape},
        )
    bad = ~(np.isfinite(la) & np.isfinite(lo)) | (np.abs(la) > 90.0) | (np.abs(lo) > 180.0)
    if bad.any():
        raise InvalidCoordinate(
            f"invalid coordinates at indices {np.where(bad)[0].tolist()}",
            {"indices": np.where(bad)[0].tolist()},
        )
    cx, cy = geo_to_pixel(center_lat, center_lon, zoom)
    w = world_width(zoom)
    s = np.sin(np.radians(np.clip(la, -MAX_LATITUDE, MAX_LATITUDE)))
    px = (lo + 180.0) / 360.0 * w
    py = w * (0.5 - np.log((1 + s) / (1 - s)) / (4 * np.pi))
    return np.column_stack([px - cx, -(py - cy)])


def meters_per_plane_unit(lat: float, zoom: float) -> float:
    _check_lat_lon(lat, 0.0)
    _check_zoom(zoom)
    if abs(lat) > MAX_LATITUDE:
        raise InvalidCoordinate(
            f"latitude {lat} outside the Mercator range ±{MAX_LATITUDE}", {"lat": lat}
        )
    return EARTH_CIRCUMFERENCE_M * math.cos(math.radians(lat)) / 2.0 ** (zoom + 8)


def distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Ellipsoidal (Hubeny) distance in meters."""
    _check_lat_lon(lat1, lon1)
    _check_lat_lon(lat2, lon2)
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = phi2 - phi1
    dlam = math.radians((lon2 - lon1 + 180.0) % 360.0 - 180.0)
    phi_m = (phi1 + phi2) / 2.0
    w = math.sqrt(1.0 - ECCENTRICITY_SQ * math.sin(phi_m) ** 2)
    m = SEMI_MAJOR_AXIS_M * (1.0 - ECCENTRICITY_SQ) / w**3  # meridional
    n = SEMI_MAJOR_AXIS_M / w  # prime vertical
    return math.hypot(m * dphi, n * math.cos(phi_m) * dlam)


# -------- tile addressing


def geo_to_tile(lat: float, lon: float, zoom: float) -> TileAddress:
    z = math.floor(zoom)
    px, py = geo_to_pixel(lat, lon, z)
    n = 2**z
    x = int(px // TILE_SIZE) % n
    y = min(n - 1, max(0, int(py // TILE_SIZE)))
    return TileAddress(z, x, y)


def tile_to_geo(tile: TileAddress) -> GeoPoint:
    """North-west corner of a tile."""
    n = 2.0**tile.zoom
    lon = tile.x / n * 360.0 - 180.0
    lat = math.degrees(math.atan(math.sinh(math.pi * (1.0 - 2.0 * tile.y / n))))
    return GeoPoint(lat, lon)


def tile_key(tile: TileAddress) -> str:
    return f"{tile.zoom}_{tile.x}_{tile.y}"


def tile_url(template: str, tile: TileAddress) -> str:
    return (
        template.replace("{z}", str(tile.zoom))
        .replace("{x}", str(tile.x))
        .replace("{y}", str(tile.y))
    )


@dataclass(frozen=True)
class MapProjection:
    center_lat: float
    center_lon: float
    zoom: float

    def __post_init__(self):
        _check_lat_lon(self.center_lat, self.center_lon)
        _check_zoom(self.zoom)

    def to_plane(self, lat: float, lon: float) -> Point:
        return geo_to_plane(lat, lon, self.center_lat, self.center_lon, self.zoom)

    def to_geo(self, x: float, y: float) -> GeoPoint:
        return plane_to_geo(x, y, self.center_lat, self.center_lon, self.zoom)

    def meters_per_unit(self, lat: float | None = None) -> float:
        return meters_per_plane_unit(self.center_lat if lat is None else lat, self.zoom)

    def recentered(self, lat: float, lon: float) -> "MapProjection":
        return replace(self, center_lat=lat, center_lon=lon)

    def with_zoom(self, zoom: float) -> "MapProjection":
        return replace(self, zoom=zoom)

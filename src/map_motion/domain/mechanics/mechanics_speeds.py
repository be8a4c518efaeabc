import math

from map_motion.app.protocols import UnitScale
from map_motion.domain.errors import InvalidCoordinate
from map_motion.domain.mechanics.mechanics_geospace import MapProjection


class PlaneUnitScale(UnitScale):
    """Speeds are given directly in plane units per second."""

    def __init__(self, meters_per_unit: float = 1.0):
        if not math.isfinite(meters_per_unit) or meters_per_unit <= 0:
            raise InvalidCoordinate(
                f"meters_per_unit must be finite and > 0, got {meters_per_unit}",
                {"meters_per_unit": meters_per_unit},
            )
        self.m = meters_per_unit

    def meters_per_unit(self) -> float:
        return self.m


class MercatorScale(UnitScale):
    """Speeds are in meters per second, scaled at the projection centre."""

    def __init__(self, projection: MapProjection):
        self.projection = projection

    def meters_per_unit(self) -> float:
        return self.projection.meters_per_unit()


def kmh_to_mps(v_kmh: float) -> float:
    return v_kmh / 3.6

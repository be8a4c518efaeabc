import os
from math import isfinite
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

MAX_LATITUDE = 85.05112878
DEFAULT_TILE_URL = "https://cartodb-basemaps-a.global.ssl.fastly.net/light_all/{z}/{x}/{y}.png"
FALLBACK_TILE_URL = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = Field(default=1, ge=1)


class MapModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    center_lat: float = 35.689185  # Tokyo
    center_lon: float = 139.691648
    zoom: float = 16.0
    min_zoom: float = 10.0
    max_zoom: float = 20.0
    zoom_step: float = Field(default=0.25, gt=0)
    viewport_width: int = Field(default=480, gt=0)
    viewport_height: int = Field(default=360, gt=0)
    pan_step_deg: float = Field(default=0.01, gt=0)
    tile_url: str = DEFAULT_TILE_URL
    fallback_tile_url: str | None = FALLBACK_TILE_URL

    @field_validator("center_lat")
    @classmethod
    def _lat_in_range(cls, v: float) -> float:
        if not isfinite(v) or abs(v) > MAX_LATITUDE:
            raise ValueError(f"center_lat must be finite and within ±{MAX_LATITUDE}")
        return v

    @field_validator("center_lon")
    @classmethod
    def _lon_in_range(cls, v: float) -> float:
        if not isfinite(v) or abs(v) > 180.0:
            raise ValueError("center_lon must be finite and within ±180")
        return v

    @field_validator("zoom", "min_zoom", "max_zoom")
    @classmethod
    def _finite_zoom(cls, v: float, info: ValidationInfo) -> float:
        if not isfinite(v) or v < 0:
            raise ValueError(f"{info.field_name} must be finite and >= 0")
        return v

    @model_validator(mode="after")
    def _check_zoom_range(self):
        if self.min_zoom > self.max_zoom:
            raise ValueError(f"min_zoom {self.min_zoom} > max_zoom {self.max_zoom}")
        return self


class MovementModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    min_interval_s: float = Field(default=1.0 / 30.0, ge=0)  # ~30 Hz cap
    arrive_epsilon_m: float = Field(default=0.01, gt=0)
    time_scale: float = Field(default=1.0, gt=0)
    tick_s: float = Field(default=1.0 / 60.0, gt=0)  # host loop cadence


# ----------------- UNIT SCALES ---------------------


class ScalePlaneModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["plane"] = "plane"
    meters_per_unit: float = Field(default=1.0, gt=0)


class ScaleMercatorModel(BaseModel):
    """meters/second speeds, scaled at the map centre."""

    model_config = ConfigDict(extra="forbid")
    kind: Literal["mercator"] = "mercator"


ScaleUnion = Annotated[ScalePlaneModel | ScaleMercatorModel, Field(discriminator="kind")]

# ----------------- ROUTE PLANNERS ---------------------


class RouterAStarModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["astar"] = "astar"
    open_set: Literal["heap", "linear"] = "heap"


RouterUnion = Annotated[RouterAStarModel, Field(discriminator="kind")]

# ----------------- GRAPH SOURCES ---------------------


class GraphByPath(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["path"] = "path"
    file: str
    fmt: Literal["json", "npz"] = "json"
    must_exist: bool = True

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


# ------------------------------------------------------------------


class MechanicsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    scale: ScaleUnion = Field(default_factory=ScalePlaneModel)
    router: RouterUnion = Field(default_factory=RouterAStarModel)
    movement: MovementModel = Field(default_factory=MovementModel)


class AppModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "map-motion"
    run_id: str = "local"
    log: LogModel = LogModel()
    map: MapModel = MapModel()
    mechanics: MechanicsModel = Field(default_factory=MechanicsModel)
    graph: GraphByPath | None = None

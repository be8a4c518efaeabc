import json

import pytest
from pydantic import ValidationError

from map_motion.config.models import (
    AppModel,
    GraphByPath,
    MapModel,
    MechanicsModel,
    RouterAStarModel,
    ScaleMercatorModel,
    ScalePlaneModel,
)
from map_motion.io.config import load_config


def test_defaults():
    cfg = AppModel()
    assert cfg.map.center_lat == pytest.approx(35.689185)
    assert cfg.map.zoom == 16.0
    assert isinstance(cfg.mechanics.scale, ScalePlaneModel)
    assert isinstance(cfg.mechanics.router, RouterAStarModel)
    assert cfg.mechanics.movement.min_interval_s == pytest.approx(1 / 30)
    assert cfg.graph is None


def test_kind_selects_the_model():
    m = MechanicsModel.model_validate(
        {"scale": {"kind": "mercator"}, "router": {"kind": "astar", "open_set": "linear"}}
    )
    assert isinstance(m.scale, ScaleMercatorModel)
    assert m.router.open_set == "linear"
    with pytest.raises(ValidationError):
        MechanicsModel.model_validate({"scale": {"kind": "furlongs"}})


@pytest.mark.parametrize(
    "bad",
    [
        {"center_lat": 89.0},
        {"center_lon": 181.0},
        {"zoom": float("nan")},
        {"min_zoom": 12, "max_zoom": 11},
        {"zoom_step": 0},
        {"viewport_width": 0},
        {"colour": "blue"},
    ],
)
def test_map_validation(bad):
    with pytest.raises(ValidationError):
        MapModel(**bad)


def test_movement_validation():
    with pytest.raises(ValidationError):
        MechanicsModel.model_validate({"movement": {"arrive_epsilon_m": 0}})
    with pytest.raises(ValidationError):
        MechanicsModel.model_validate({"scale": {"kind": "plane", "meters_per_unit": -2}})


def test_graph_path_is_expanded(monkeypatch, tmp_path):
    monkeypatch.setenv("GRAPH_DIR", str(tmp_path))
    ref = GraphByPath(file="$GRAPH_DIR/roads.json")
    assert ref.file == f"{tmp_path}/roads.json"


def test_load_config_from_file(tmp_path):
    path = tmp_path / "app.json"
    path.write_text(
        json.dumps(
            {
                "run_id": "nightly",
                "log": {"level": "DEBUG"},
                "map": {"center_lat": 51.5, "center_lon": -0.12, "zoom": 14},
                "mechanics": {"scale": {"kind": "mercator"}},
            }
        )
    )
    cfg = load_config(path)
    assert cfg.run_id == "nightly"
    assert cfg.log.level == "DEBUG"
    assert cfg.map.center_lon == pytest.approx(-0.12)
    assert isinstance(cfg.mechanics.scale, ScaleMercatorModel)


def test_load_config_from_mapping():
    assert load_config({"name": "x"}).name == "x"
    with pytest.raises(ValidationError):
        load_config({"nme": "x"})

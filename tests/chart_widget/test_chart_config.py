"""Unit tests for ChartConfig load/save (platformdirs + JSON)."""

import json
import logging

import pytest

from densitycharts.chart_widget.chart_config import SCHEMA_VERSION, ChartConfig, ChartConfigData
from densitycharts.chart_widget.chart_state import ChartState, ChartType
from densitycharts.chart_widget.theme import ThemeMode


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "densitycharts" / "chart_config.json"


def test_default_config_path_uses_app_name():
    path = ChartConfig.default_config_path()
    assert path.name == "chart_config.json"
    assert "densitycharts" in str(path)


def test_load_missing_file_uses_defaults(config_path):
    cfg = ChartConfig.load(config_path=config_path)
    assert cfg.data == ChartConfigData()
    assert cfg.get_chart_states() == []
    assert cfg.get_theme() == ThemeMode.LIGHT
    assert not config_path.exists()


def test_load_create_if_missing_writes_defaults(config_path):
    ChartConfig.load(config_path=config_path, create_if_missing=True)
    assert config_path.exists()
    on_disk = json.loads(config_path.read_text(encoding="utf-8"))
    assert on_disk["schema_version"] == SCHEMA_VERSION


def test_save_and_load_round_trip(config_path):
    state = ChartState(xcol="a", ycol="b", chart_type=ChartType.DENSITY_CONTOUR, kde_bandwidth=0.25)
    cfg = ChartConfig.load(config_path=config_path)
    cfg.set_chart_states([state])
    cfg.set_theme("dark")
    cfg.set_control_panel_splitter_value(30)
    cfg.save()

    loaded = ChartConfig.load(config_path=config_path)
    assert loaded.get_chart_states() == [state]
    assert loaded.get_theme() == ThemeMode.DARK
    assert loaded.get_control_panel_splitter_value() == 30


def test_load_corrupt_json_uses_defaults(config_path):
    config_path.parent.mkdir(parents=True)
    config_path.write_text("{not json", encoding="utf-8")
    cfg = ChartConfig.load(config_path=config_path)
    assert cfg.data == ChartConfigData()


def test_load_non_dict_json_uses_defaults(config_path):
    config_path.parent.mkdir(parents=True)
    config_path.write_text("[1, 2, 3]", encoding="utf-8")
    assert ChartConfig.load(config_path=config_path).data == ChartConfigData()


def _write(path, payload):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_schema_mismatch_resets_by_default(config_path):
    _write(config_path, {"schema_version": SCHEMA_VERSION + 1, "theme": "dark"})
    cfg = ChartConfig.load(config_path=config_path)
    assert cfg.get_theme() == ThemeMode.LIGHT


@pytest.mark.parametrize("bad_version", [None, "abc", [1]])
def test_load_unparseable_schema_version_resets(config_path, bad_version):
    _write(config_path, {"schema_version": bad_version, "theme": "dark"})
    cfg = ChartConfig.load(config_path=config_path)
    assert cfg.data == ChartConfigData()
    assert cfg.get_theme() == ThemeMode.LIGHT


def test_schema_mismatch_can_keep_loaded(config_path):
    _write(config_path, {"schema_version": SCHEMA_VERSION + 1, "theme": "dark"})
    cfg = ChartConfig.load(config_path=config_path, reset_on_version_mismatch=False)
    assert cfg.get_theme() == ThemeMode.DARK
    assert cfg.data.schema_version == SCHEMA_VERSION


def test_from_json_dict_is_tolerant(caplog):
    with caplog.at_level(logging.WARNING, logger="densitycharts"):
        data = ChartConfigData.from_json_dict({
            "schema_version": SCHEMA_VERSION,
            "chart_states": [{"xcol": "a", "ycol": "b"}, "garbage"],
            "theme": "plotly_dark",
            "control_panel_splitter_value": 90,
            "window_size": [800, 600],
        })
    assert data.chart_states == [{"xcol": "a", "ycol": "b"}]
    assert data.theme == "dark"
    assert data.control_panel_splitter_value == 50.0
    assert "window_size" in caplog.text


def test_from_json_dict_bad_splitter_value():
    data = ChartConfigData.from_json_dict({"control_panel_splitter_value": "wide"})
    assert data.control_panel_splitter_value == 25.0


def test_get_chart_states_skips_unparseable_entries(config_path):
    _write(config_path, {
        "schema_version": SCHEMA_VERSION,
        "chart_states": [
            {"xcol": "a", "ycol": "b", "chart_type": "pie"},
            {"xcol": "a", "ycol": "b", "chart_type": "surface_3d", "zcol": "c"},
        ],
    })
    states = ChartConfig.load(config_path=config_path).get_chart_states()
    assert len(states) == 1
    assert states[0].chart_type == ChartType.SURFACE_3D


def test_splitter_value_is_clamped(config_path):
    cfg = ChartConfig(path=config_path)
    cfg.set_control_panel_splitter_value(-5)
    assert cfg.get_control_panel_splitter_value() == 0.0
    cfg.set_control_panel_splitter_value(75)
    assert cfg.get_control_panel_splitter_value() == 50.0


def test_save_failure_is_raised(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    cfg = ChartConfig(path=blocker / "chart_config.json")
    with pytest.raises(OSError):
        cfg.save()

"""Unit tests for ChartState serialization and validation."""

import pytest

from densitycharts.chart_widget.chart_state import ChartState, ChartType, SmoothingMode
from densitycharts.chart_widget.colorbar import ColorBarConfig


def test_chart_state_defaults():
    """A new ChartState is a 20x20 count histogram with auto color limits."""
    state = ChartState(xcol="x", ycol="y")
    assert state.chart_type == ChartType.HISTOGRAM_2D
    assert state.nbinsx == 20
    assert state.nbinsy == 20
    assert state.histfunc == "count"
    assert state.histnorm == ""
    assert state.smoothing == SmoothingMode.NONE
    assert state.kde_bandwidth == "scott"
    assert state.zcol is None
    assert state.color_col is None
    assert state.colorbar.is_auto
    state.validate()


def test_chart_state_from_dict_round_trip():
    """from_dict(to_dict(state)) reproduces every field."""
    state = ChartState(
        xcol="height",
        ycol="weight",
        chart_type=ChartType.BINNED_HEATMAP,
        zcol="score",
        nbinsx=12,
        nbinsy=8,
        histfunc="avg",
        smoothing=SmoothingMode.BEST,
        kde_bandwidth=0.3,
        correlation_columns=["height", "weight"],
        x_range=[150.0, 190.0],
        z_range=[0.0, 1.0],
        title="custom",
        colorbar=ColorBarConfig(colorscale="Hot", zmin=0.0, zmax=5.0, reverse=True, tick_format=".2f"),
    )
    restored = ChartState.from_dict(state.to_dict())
    assert restored == state
    assert restored.to_dict() == state.to_dict()


def test_chart_state_to_dict_is_json_friendly():
    """Enums are stored by value."""
    d = ChartState(xcol="a", ycol="b", chart_type=ChartType.SURFACE_3D, smoothing=SmoothingMode.FAST).to_dict()
    assert d["chart_type"] == "surface_3d"
    assert d["smoothing"] == "fast"
    assert isinstance(d["colorbar"], dict)


def test_chart_state_from_dict_missing_keys_use_defaults():
    """Only xcol/ycol given: everything else takes defaults."""
    state = ChartState.from_dict({"xcol": "a", "ycol": "b"})
    assert state == ChartState(xcol="a", ycol="b")


def test_chart_state_from_dict_unknown_chart_type_raises():
    with pytest.raises(ValueError):
        ChartState.from_dict({"xcol": "a", "ycol": "b", "chart_type": "pie"})


@pytest.mark.parametrize(
    "zsmooth, expected",
    [
        (False, SmoothingMode.NONE),
        ("fast", SmoothingMode.FAST),
        ("best", SmoothingMode.BEST),
        (None, SmoothingMode.NONE),
    ],
)
def test_chart_state_from_dict_accepts_plotly_zsmooth(zsmooth, expected):
    """A Plotly-style zsmooth key is accepted in place of smoothing."""
    state = ChartState.from_dict({"xcol": "a", "ycol": "b", "zsmooth": zsmooth})
    assert state.smoothing == expected


def test_smoothing_mode_maps_to_zsmooth():
    assert SmoothingMode.NONE.zsmooth is False
    assert SmoothingMode.FAST.zsmooth == "fast"
    assert SmoothingMode.BEST.zsmooth == "best"


def test_smoothing_mode_coerce_rejects_unknown():
    with pytest.raises(ValueError):
        SmoothingMode.coerce("blurry")


def test_chart_state_from_dict_malformed_range_is_none():
    """A range that is not a 2-sequence of numbers is dropped."""
    state = ChartState.from_dict({"xcol": "a", "ycol": "b", "x_range": [1.0], "y_range": "wide"})
    assert state.x_range is None
    assert state.y_range is None


def test_chart_state_from_dict_bandwidth():
    """kde_bandwidth is a rule name (lower-cased) or a float factor."""
    assert ChartState.from_dict({"xcol": "a", "ycol": "b", "kde_bandwidth": 0.5}).kde_bandwidth == 0.5
    assert ChartState.from_dict({"xcol": "a", "ycol": "b", "kde_bandwidth": "Silverman"}).kde_bandwidth == "silverman"


def test_chart_state_from_dict_null_values_use_defaults():
    """Explicit nulls (e.g. hand-edited JSON) behave like missing keys."""
    keys = (
        "chart_type", "nbinsx", "nbinsy", "histfunc", "kde_bandwidth", "grid_size", "ncontours",
        "show_points", "correlation_method", "show_values", "surface_method", "point_size", "opacity",
    )
    data = {"xcol": "a", "ycol": "b"}
    data.update({key: None for key in keys})
    assert ChartState.from_dict(data) == ChartState(xcol="a", ycol="b")


def test_chart_state_copy_is_independent():
    """Mutating a copy (including its color bar) leaves the original unchanged."""
    state = ChartState(xcol="a", ycol="b", x_range=[0.0, 1.0])
    other = state.copy()
    other.colorbar.zmin = 3.0
    other.x_range[1] = 5.0
    other.nbinsx = 99
    assert state.colorbar.zmin is None
    assert state.x_range == [0.0, 1.0]
    assert state.nbinsx == 20


@pytest.mark.parametrize(
    "changes",
    [
        {"nbinsx": 0},
        {"nbinsy": -3},
        {"grid_size": 1},
        {"ncontours": 0},
        {"histfunc": "median"},
        {"histnorm": "percentage"},
        {"correlation_method": "cosine"},
        {"surface_method": "spline"},
        {"kde_bandwidth": "wide"},
        {"kde_bandwidth": 0.0},
        {"x_range": [2.0, 1.0]},
        {"y_range": [1.0, 1.0]},
        {"z_range": [5.0, -5.0]},
        {"opacity": 0.0},
        {"opacity": 1.5},
        {"point_size": 0},
        {"point_size": -3},
        {"colorbar": ColorBarConfig(colorscale="NotAScale")},
        {"colorbar": ColorBarConfig(zmin=1.0, zmax=1.0)},
    ],
)
def test_chart_state_validate_rejects_bad_options(changes):
    state = ChartState(xcol="a", ycol="b", **changes)
    with pytest.raises(ValueError):
        state.validate()


def test_chart_state_validate_error_names_value():
    """The error message carries the offending value."""
    with pytest.raises(ValueError) as exc_info:
        ChartState(xcol="a", ycol="b", histnorm="percentage").validate()
    assert "percentage" in str(exc_info.value)

"""Unit tests for colorscale resolution and ColorBarConfig."""

import pytest

from densitycharts.chart_widget.colorbar import (
    COLORSCALE_OPTIONS,
    DEFAULT_COLORSCALE,
    TRACE_KIND_HEATMAP,
    TRACE_KIND_MARKER,
    TRACE_KIND_SURFACE,
    ColorBarConfig,
    resolve_colorscale,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Viridis", ("Viridis", False)),
        ("inverted_grays", ("Greys", True)),
        ("Hot_r", ("Hot", True)),
        ("", (DEFAULT_COLORSCALE, False)),
        (None, (DEFAULT_COLORSCALE, False)),
    ],
)
def test_resolve_colorscale(name, expected):
    assert resolve_colorscale(name) == expected


def test_colorscale_options_have_label_and_value():
    values = [o["value"] for o in COLORSCALE_OPTIONS]
    assert DEFAULT_COLORSCALE in values
    assert "inverted_grays" in values
    assert all(o["label"] for o in COLORSCALE_OPTIONS)


def test_trace_kwargs_heatmap_auto():
    """Default config autoscales heatmap-like traces via zauto."""
    kwargs = ColorBarConfig().trace_kwargs(TRACE_KIND_HEATMAP)
    assert kwargs == {
        "colorscale": "Viridis",
        "reversescale": False,
        "showscale": True,
        "zauto": True,
    }


def test_trace_kwargs_heatmap_limits_and_title():
    cfg = ColorBarConfig(zmin=0.0, zmax=10.0, tick_format=".1f")
    kwargs = cfg.trace_kwargs(TRACE_KIND_HEATMAP, default_title="count")
    assert kwargs["zauto"] is False
    assert kwargs["zmin"] == 0.0
    assert kwargs["zmax"] == 10.0
    assert kwargs["colorbar"] == {"title": {"text": "count"}, "tickformat": ".1f"}


def test_trace_kwargs_explicit_title_wins():
    kwargs = ColorBarConfig(title="mass").trace_kwargs(TRACE_KIND_HEATMAP, default_title="count")
    assert kwargs["colorbar"]["title"]["text"] == "mass"


@pytest.mark.parametrize("kind", [TRACE_KIND_SURFACE, TRACE_KIND_MARKER])
def test_trace_kwargs_surface_and_marker_use_cmin_cmax(kind):
    kwargs = ColorBarConfig(zmin=-1.0, zmax=2.0).trace_kwargs(kind)
    assert kwargs["cmin"] == -1.0
    assert kwargs["cmax"] == 2.0
    assert kwargs["cauto"] is False
    assert "zmin" not in kwargs
    assert "zauto" not in kwargs


def test_trace_kwargs_single_limit():
    """Only zmin set: limits are not automatic, zmax is left to the library."""
    cfg = ColorBarConfig(zmin=0.0)
    assert not cfg.is_auto
    kwargs = cfg.trace_kwargs(TRACE_KIND_HEATMAP)
    assert kwargs["zauto"] is False
    assert kwargs["zmin"] == 0.0
    assert "zmax" not in kwargs


@pytest.mark.parametrize(
    "colorscale, reverse, expected_name, expected_reversed",
    [
        ("Viridis", True, "Viridis", True),
        ("inverted_grays", False, "Greys", True),
        ("inverted_grays", True, "Greys", False),
        ("Hot_r", True, "Hot", False),
    ],
)
def test_trace_kwargs_reverse_combines_with_name(colorscale, reverse, expected_name, expected_reversed):
    kwargs = ColorBarConfig(colorscale=colorscale, reverse=reverse).trace_kwargs()
    assert kwargs["colorscale"] == expected_name
    assert kwargs["reversescale"] is expected_reversed


def test_trace_kwargs_hidden_scale():
    assert ColorBarConfig(show_scale=False).trace_kwargs()["showscale"] is False


def test_trace_kwargs_unknown_kind_raises():
    with pytest.raises(ValueError):
        ColorBarConfig().trace_kwargs("pie")


@pytest.mark.parametrize("zmin, zmax", [(1.0, 1.0), (2.0, 1.0)])
def test_validate_rejects_inverted_limits(zmin, zmax):
    cfg = ColorBarConfig(zmin=zmin, zmax=zmax)
    with pytest.raises(ValueError):
        cfg.validate()
    with pytest.raises(ValueError):
        cfg.trace_kwargs()


def test_colorbar_round_trip():
    cfg = ColorBarConfig(colorscale="Jet", zmin=-2.0, zmax=2.0, show_scale=False, title="t", reverse=True, tick_format=".0%")
    assert ColorBarConfig.from_dict(cfg.to_dict()) == cfg


def test_colorbar_from_dict_tolerates_bad_input():
    assert ColorBarConfig.from_dict(None) == ColorBarConfig()
    assert ColorBarConfig.from_dict({"zmin": "1.5"}).zmin == 1.5
    assert ColorBarConfig.from_dict({"colorscale": ""}).colorscale == DEFAULT_COLORSCALE


@pytest.mark.parametrize("colorscale", ["NotAScale", "NotAScale_r"])
def test_validate_rejects_unknown_colorscale(colorscale):
    with pytest.raises(ValueError, match="NotAScale"):
        ColorBarConfig(colorscale=colorscale).validate()


@pytest.mark.parametrize("option", COLORSCALE_OPTIONS)
def test_validate_accepts_offered_colorscales(option):
    ColorBarConfig(colorscale=option["value"]).validate()


@pytest.mark.parametrize("colorscale", ["viridis", "Hot_r", "rdbu_r"])
def test_validate_accepts_lower_case_and_reversed_names(colorscale):
    ColorBarConfig(colorscale=colorscale).validate()

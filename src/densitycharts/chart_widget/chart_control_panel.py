"""Control panel UI for the chart controller.

Builds and owns all left-panel widgets (chart type, x/y/z columns, binning,
smoothing, density and surface options, color bar, axis limits). Provides
state<->widget sync (bind_state, get_state) and sync_controls(chart_type).
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import pandas as pd
from nicegui import ui

from densitycharts.utils.logging import get_logger
from densitycharts.chart_widget.chart_state import (
    CHART_TYPES_2D,
    CHART_TYPES_3D,
    CORRELATION_METHODS,
    HISTFUNC_OPTIONS,
    HISTNORM_OPTIONS,
    KDE_BANDWIDTH_RULES,
    SMOOTHABLE_CHART_TYPES,
    SURFACE_METHODS,
    ChartState,
    ChartType,
    SmoothingMode,
)
from densitycharts.chart_widget.colorbar import COLORSCALE_OPTIONS, ColorBarConfig
from densitycharts.chart_widget.plot_helpers import categorical_candidates, numeric_columns

logger = get_logger(__name__)

# Sentinel for "no column" / "no normalization" in selects
NONE_OPTION = "(none)"

CHART_TYPE_LABELS = {
    ChartType.HISTOGRAM_2D.value: "2D Histogram",
    ChartType.HISTOGRAM_2D_CONTOUR.value: "2D Histogram Contour",
    ChartType.BINNED_HEATMAP.value: "Binned Heatmap",
    ChartType.DENSITY_HEATMAP.value: "Density Heatmap (KDE)",
    ChartType.DENSITY_CONTOUR.value: "Density Contour (KDE)",
    ChartType.CORRELATION_HEATMAP.value: "Correlation Heatmap",
    ChartType.SCATTER_3D.value: "3D Scatter",
    ChartType.SURFACE_3D.value: "3D Surface",
}

_BINNED_CHART_TYPES = {ChartType.HISTOGRAM_2D, ChartType.HISTOGRAM_2D_CONTOUR, ChartType.BINNED_HEATMAP}
_KDE_CHART_TYPES = {ChartType.DENSITY_HEATMAP, ChartType.DENSITY_CONTOUR}
_CONTOUR_CHART_TYPES = {ChartType.HISTOGRAM_2D_CONTOUR, ChartType.DENSITY_CONTOUR}


def _optional_col(value: Any) -> Optional[str]:
    if value is None or str(value) == NONE_OPTION or str(value) == "":
        return None
    return str(value)


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _range(lo: Any, hi: Any) -> Optional[list[float]]:
    """[lo, hi] when both limits are set, else None (autorange)."""
    lo_f, hi_f = _optional_float(lo), _optional_float(hi)
    if lo_f is None or hi_f is None:
        return None
    return [lo_f, hi_f]


def state_from_values(values: dict[str, Any], base: ChartState) -> ChartState:
    """Build a ChartState from raw widget values, falling back to base for missing keys.

    Args:
        values: Widget values keyed by control name (the keys of values_from_state()).
        base: State supplying defaults for controls that are absent or empty.

    Returns:
        A new ChartState. It is not validated; FigureGenerator.make_figure() does that.
    """
    def get(name: str, default: Any) -> Any:
        v = values.get(name)
        return default if v is None else v

    def axis_range(axis: str, default: Optional[list[float]]) -> Optional[list[float]]:
        if f"{axis}_min" not in values and f"{axis}_max" not in values:
            return default
        return _range(values.get(f"{axis}_min"), values.get(f"{axis}_max"))

    try:
        chart_type = ChartType(str(get("chart_type", base.chart_type.value)))
    except ValueError:
        chart_type = base.chart_type

    if "kde_bandwidth_factor" in values:
        bandwidth_factor = _optional_float(values["kde_bandwidth_factor"])
    else:
        bandwidth_factor = None if isinstance(base.kde_bandwidth, str) else float(base.kde_bandwidth)
    kde_bandwidth = bandwidth_factor if bandwidth_factor is not None else str(
        get("kde_bandwidth_rule", base.kde_bandwidth if isinstance(base.kde_bandwidth, str) else "scott")
    )
    histnorm = str(get("histnorm", base.histnorm))
    if histnorm == NONE_OPTION:
        histnorm = ""

    colorbar = ColorBarConfig(
        colorscale=str(get("colorscale", base.colorbar.colorscale)),
        zmin=_optional_float(values["zmin"]) if "zmin" in values else base.colorbar.zmin,
        zmax=_optional_float(values["zmax"]) if "zmax" in values else base.colorbar.zmax,
        show_scale=bool(get("show_scale", base.colorbar.show_scale)),
        title=base.colorbar.title,
        reverse=bool(get("reverse_scale", base.colorbar.reverse)),
        tick_format=base.colorbar.tick_format,
    )
    return ChartState(
        xcol=str(get("xcol", base.xcol)),
        ycol=str(get("ycol", base.ycol)),
        chart_type=chart_type,
        zcol=_optional_col(values.get("zcol", base.zcol)),
        color_col=_optional_col(values.get("color_col", base.color_col)),
        nbinsx=int(get("nbinsx", base.nbinsx)),
        nbinsy=int(get("nbinsy", base.nbinsy)),
        histfunc=str(get("histfunc", base.histfunc)),
        histnorm=histnorm,
        smoothing=SmoothingMode.coerce(get("smoothing", base.smoothing.value)),
        kde_bandwidth=kde_bandwidth,
        grid_size=int(get("grid_size", base.grid_size)),
        ncontours=int(get("ncontours", base.ncontours)),
        show_points=bool(get("show_points", base.show_points)),
        correlation_method=str(get("correlation_method", base.correlation_method)),
        correlation_columns=base.correlation_columns,
        show_values=bool(get("show_values", base.show_values)),
        surface_method=str(get("surface_method", base.surface_method)),
        x_range=axis_range("x", base.x_range),
        y_range=axis_range("y", base.y_range),
        z_range=axis_range("z", base.z_range),
        point_size=int(get("point_size", base.point_size)),
        opacity=float(get("opacity", base.opacity)),
        title=base.title,
        colorbar=colorbar,
    )


def values_from_state(state: ChartState) -> dict[str, Any]:
    """Inverse of state_from_values: widget values for a ChartState."""
    def lim(rng: Optional[list[float]], i: int) -> Optional[float]:
        return None if rng is None else rng[i]

    return {
        "chart_type": state.chart_type.value,
        "xcol": state.xcol,
        "ycol": state.ycol,
        "zcol": state.zcol or NONE_OPTION,
        "color_col": state.color_col or NONE_OPTION,
        "nbinsx": state.nbinsx,
        "nbinsy": state.nbinsy,
        "histfunc": state.histfunc,
        "histnorm": state.histnorm or NONE_OPTION,
        "smoothing": state.smoothing.value,
        "kde_bandwidth_rule": state.kde_bandwidth if isinstance(state.kde_bandwidth, str) else "scott",
        "kde_bandwidth_factor": None if isinstance(state.kde_bandwidth, str) else state.kde_bandwidth,
        "grid_size": state.grid_size,
        "ncontours": state.ncontours,
        "show_points": state.show_points,
        "correlation_method": state.correlation_method,
        "show_values": state.show_values,
        "surface_method": state.surface_method,
        "x_min": lim(state.x_range, 0),
        "x_max": lim(state.x_range, 1),
        "y_min": lim(state.y_range, 0),
        "y_max": lim(state.y_range, 1),
        "z_min": lim(state.z_range, 0),
        "z_max": lim(state.z_range, 1),
        "point_size": state.point_size,
        "opacity": state.opacity,
        "colorscale": state.colorbar.colorscale,
        "zmin": state.colorbar.zmin,
        "zmax": state.colorbar.zmax,
        "show_scale": state.colorbar.show_scale,
        "reverse_scale": state.colorbar.reverse,
    }


def enabled_controls(chart_type: ChartType) -> dict[str, bool]:
    """Which option controls apply to chart_type (others are disabled in the UI)."""
    is_2d = chart_type in CHART_TYPES_2D
    is_3d = chart_type in CHART_TYPES_3D
    binned = chart_type in _BINNED_CHART_TYPES
    kde = chart_type in _KDE_CHART_TYPES
    corr = chart_type == ChartType.CORRELATION_HEATMAP
    return {
        "xcol": not corr,
        "ycol": not corr,
        "zcol": binned or is_3d,
        "color_col": chart_type == ChartType.SCATTER_3D,
        "nbinsx": binned,
        "nbinsy": binned,
        "histfunc": binned,
        "histnorm": binned,
        "smoothing": chart_type in SMOOTHABLE_CHART_TYPES,
        "kde_bandwidth_rule": kde,
        "kde_bandwidth_factor": kde,
        "grid_size": kde or chart_type == ChartType.SURFACE_3D,
        "ncontours": chart_type in _CONTOUR_CHART_TYPES,
        "show_points": is_2d or chart_type == ChartType.SURFACE_3D,
        "correlation_method": corr,
        "show_values": corr,
        "surface_method": chart_type == ChartType.SURFACE_3D,
        "x_min": not corr,
        "x_max": not corr,
        "y_min": not corr,
        "y_max": not corr,
        "z_min": is_3d,
        "z_max": is_3d,
        "point_size": is_2d or is_3d,
        "opacity": is_3d,
    }


class ChartControlPanel:
    """Left-panel UI for chart configuration."""

    def __init__(
        self,
        df: pd.DataFrame,
        *,
        initial_state: ChartState,
        on_any_change: Callable[[], None],
        on_save_config: Callable[[], None],
        on_reset_to_default: Callable[[], None],
    ) -> None:
        self.df = df
        self._initial_state = initial_state
        self._on_any_change = on_any_change
        self._on_save_config = on_save_config
        self._on_reset_to_default = on_reset_to_default

        # control name -> nicegui element (set in build())
        self._widgets: dict[str, Any] = {}

    def _select(self, name: str, options: Any, value: Any, label: str) -> ui.select:
        w = ui.select(options=options, value=value, label=label, on_change=self._on_any_change).classes("w-full")
        self._widgets[name] = w
        return w

    def _number(self, name: str, value: Any, label: str, **kwargs: Any) -> ui.number:
        w = ui.number(label=label, value=value, on_change=self._on_any_change, **kwargs).classes("flex-1")
        self._widgets[name] = w
        return w

    def _checkbox(self, name: str, value: bool, label: str) -> ui.checkbox:
        w = ui.checkbox(label, value=value, on_change=self._on_any_change)
        self._widgets[name] = w
        return w

    def _column_options(self) -> tuple[list[str], list[str], list[str]]:
        """(x/y options, optional z options, color-by options) for the current df."""
        num_cols = numeric_columns(self.df)
        optional_cols = [NONE_OPTION] + num_cols
        color_cols = [NONE_OPTION] + list(dict.fromkeys(num_cols + categorical_candidates(self.df)))
        return num_cols, optional_cols, color_cols

    def build(self) -> None:
        """Build the control panel inside the current UI container. Call once inside splitter.before."""
        v = values_from_state(self._initial_state)
        num_cols, optional_cols, color_cols = self._column_options()

        with ui.column().classes("w-full h-full p-4 gap-3 overflow-y-auto"):
            with ui.row().classes("w-full gap-2"):
                ui.button("Save Config", on_click=self._on_save_config).classes("flex-1")
                ui.button("Reset", on_click=self._on_reset_to_default).classes("flex-1")

            self._select("chart_type", CHART_TYPE_LABELS, v["chart_type"], "Chart type")

            with ui.card().classes("w-full"):
                ui.label("Columns").classes("text-sm font-semibold")
                self._select("xcol", num_cols, v["xcol"], "X column")
                self._select("ycol", num_cols, v["ycol"], "Y column")
                self._select("zcol", optional_cols, v["zcol"], "Z column")
                self._select("color_col", color_cols, v["color_col"], "Color by")

            with ui.card().classes("w-full"):
                ui.label("Binning").classes("text-sm font-semibold")
                with ui.row().classes("w-full gap-2 items-center"):
                    self._number("nbinsx", v["nbinsx"], "X bins", min=1, max=500, step=1)
                    self._number("nbinsy", v["nbinsy"], "Y bins", min=1, max=500, step=1)
                self._select("histfunc", list(HISTFUNC_OPTIONS), v["histfunc"], "Aggregate (histfunc)")
                self._select(
                    "histnorm",
                    [NONE_OPTION] + [h for h in HISTNORM_OPTIONS if h],
                    v["histnorm"],
                    "Normalization (histnorm)",
                )
                self._select(
                    "smoothing",
                    {m.value: m.value.capitalize() for m in SmoothingMode},
                    v["smoothing"],
                    "Smoothing",
                )

            with ui.card().classes("w-full"):
                ui.label("Density / Surface").classes("text-sm font-semibold")
                self._select("kde_bandwidth_rule", list(KDE_BANDWIDTH_RULES), v["kde_bandwidth_rule"], "Bandwidth rule")
                with ui.row().classes("w-full gap-2 items-center"):
                    self._number("kde_bandwidth_factor", v["kde_bandwidth_factor"], "Bandwidth factor", min=0.01, step=0.05)
                    self._number("grid_size", v["grid_size"], "Grid size", min=2, max=400, step=10)
                    self._number("ncontours", v["ncontours"], "Contours", min=1, max=100, step=1)
                self._select("surface_method", list(SURFACE_METHODS), v["surface_method"], "Interpolation")
                self._select("correlation_method", list(CORRELATION_METHODS), v["correlation_method"], "Correlation")
                self._checkbox("show_values", v["show_values"], "Cell values")

            with ui.card().classes("w-full"):
                ui.label("Color Bar").classes("text-sm font-semibold")
                self._select(
                    "colorscale",
                    {o["value"]: o["label"] for o in COLORSCALE_OPTIONS},
                    v["colorscale"],
                    "Colorscale",
                )
                with ui.row().classes("w-full gap-2 items-center"):
                    self._number("zmin", v["zmin"], "Color min")
                    self._number("zmax", v["zmax"], "Color max")
                with ui.row().classes("w-full gap-2 items-center"):
                    self._checkbox("show_scale", v["show_scale"], "Show")
                    self._checkbox("reverse_scale", v["reverse_scale"], "Reverse")

            with ui.card().classes("w-full"):
                ui.label("Axis Limits").classes("text-sm font-semibold")
                for axis in ("x", "y", "z"):
                    with ui.row().classes("w-full gap-2 items-center"):
                        self._number(f"{axis}_min", v[f"{axis}_min"], f"{axis.upper()} min")
                        self._number(f"{axis}_max", v[f"{axis}_max"], f"{axis.upper()} max")

            with ui.card().classes("w-full"):
                ui.label("Markers").classes("text-sm font-semibold")
                with ui.row().classes("w-full gap-2 items-center"):
                    self._checkbox("show_points", v["show_points"], "Points")
                    self._number("point_size", v["point_size"], "Point Size", min=1, max=20, step=1)
                    self._number("opacity", v["opacity"], "Opacity", min=0.05, max=1.0, step=0.05)

        self.sync_controls(self._initial_state.chart_type)

    def bind_state(self, state: ChartState) -> None:
        """Populate all widgets from a ChartState."""
        if not self._widgets:
            return
        for name, value in values_from_state(state).items():
            w = self._widgets.get(name)
            if w is not None:
                w.value = value
        self.sync_controls(state.chart_type)

    def get_state(self, base: ChartState) -> ChartState:
        """Build ChartState from current widget values; base fills anything not shown in the panel."""
        values = {name: w.value for name, w in self._widgets.items()}
        return state_from_values(values, base)

    def sync_controls(self, chart_type: ChartType) -> None:
        """Enable/disable controls based on chart type."""
        for name, enabled in enabled_controls(chart_type).items():
            w = self._widgets.get(name)
            if w is not None:
                w.set_enabled(enabled)

    def update_columns(self, df: pd.DataFrame, state: ChartState) -> None:
        """Swap in a new dataframe: refresh the column selects, then bind state."""
        self.df = df
        if not self._widgets:
            return
        num_cols, optional_cols, color_cols = self._column_options()
        v = values_from_state(state)
        for name, options in (
            ("xcol", num_cols),
            ("ycol", num_cols),
            ("zcol", optional_cols),
            ("color_col", color_cols),
        ):
            self._widgets[name].set_options(options, value=v[name])
        self.bind_state(state)

"""Plotly figure generation for density, heatmap and 3D charts.

This module provides the FigureGenerator class for creating Plotly figure
dictionaries from a ChartState. Every chart follows the same sequence:
construct the figure, attach one layer (2D histogram, heatmap, contour,
3D scatter or surface), configure the color bar, then apply axis limits.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Optional, Union

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from densitycharts.utils.logging import get_logger
from densitycharts.chart_widget.chart_state import (
    SMOOTHABLE_CHART_TYPES,
    ChartState,
    ChartType,
)
from densitycharts.chart_widget.colorbar import (
    DEFAULT_COLORSCALE,
    DIVERGING_COLORSCALE,
    TRACE_KIND_HEATMAP,
    TRACE_KIND_MARKER,
    TRACE_KIND_SURFACE,
)
from densitycharts.chart_widget.data_processor import DataFrameProcessor
from densitycharts.chart_widget.theme import (
    ThemeMode,
    get_theme_colors,
    get_theme_template,
    resolve_theme,
)

logger = get_logger(__name__)

# Overlay color for raw sample points on 2D charts
POINTS_OVERLAY_COLOR = "rgba(255, 255, 255, 0.6)"

# Chart types that need zcol
_ZCOL_REQUIRED = frozenset({ChartType.SCATTER_3D, ChartType.SURFACE_3D})

_DEFAULT_TITLES = {
    ChartType.HISTOGRAM_2D: "2D histogram of {y} vs {x}",
    ChartType.HISTOGRAM_2D_CONTOUR: "2D histogram contour of {y} vs {x}",
    ChartType.BINNED_HEATMAP: "Binned heatmap of {y} vs {x}",
    ChartType.DENSITY_HEATMAP: "Kernel density of {y} vs {x}",
    ChartType.DENSITY_CONTOUR: "Kernel density contour of {y} vs {x}",
    ChartType.CORRELATION_HEATMAP: "Correlation matrix ({method})",
    ChartType.SCATTER_3D: "3D scatter of {x}, {y}, {z}",
    ChartType.SURFACE_3D: "Surface of {z} over {x}, {y}",
}


def _z_label(histfunc: str, histnorm: str, zcol: Optional[str]) -> str:
    """Color bar title for binned charts, e.g. 'count', 'sum(mass)', 'probability'."""
    if histnorm:
        return histnorm
    if histfunc == "count" or not zcol:
        return "count"
    return f"{histfunc}({zcol})"


def _grid_list(z: np.ndarray) -> list:
    """2D array to nested lists, NaN kept as None so gaps stay gaps in JSON."""
    return [[None if np.isnan(v) else float(v) for v in row] for row in np.asarray(z, dtype=float)]


class FigureGenerator:
    """Generates Plotly figure dictionaries from a ChartState.

    Attributes:
        data_processor: DataFrameProcessor instance for data operations.
        theme: ThemeMode used for templates and font colors.
    """

    def __init__(
        self,
        data_processor: DataFrameProcessor,
        theme: Optional[Union[str, ThemeMode]] = None,
    ) -> None:
        """Initialize FigureGenerator with a data processor.

        Args:
            data_processor: DataFrameProcessor wrapping the chart data.
            theme: ThemeMode or 'light'/'dark'. Defaults to LIGHT.
        """
        self.data_processor = data_processor
        self.theme = resolve_theme(theme)

    @property
    def df(self) -> pd.DataFrame:
        return self.data_processor.df

    def make_figure(self, state: ChartState) -> dict:
        """Generate a Plotly figure dictionary for state.

        Args:
            state: ChartState describing the chart.

        Returns:
            Plotly figure dictionary (ready for ui.plotly / update_figure).

        Raises:
            ValueError: If state holds invalid options or names unknown columns.
        """
        logger.info(
            f"FigureGenerator.make_figure: chart_type={state.chart_type.value}, "
            f"rows={len(self.df)}, xcol={state.xcol}, ycol={state.ycol}, zcol={state.zcol}"
        )
        state.validate()
        self._check_columns(state)

        try:
            if state.chart_type == ChartType.HISTOGRAM_2D:
                result = self._figure_histogram_2d(state)
            elif state.chart_type == ChartType.HISTOGRAM_2D_CONTOUR:
                result = self._figure_histogram_2d_contour(state)
            elif state.chart_type == ChartType.BINNED_HEATMAP:
                result = self._figure_binned_heatmap(state)
            elif state.chart_type == ChartType.DENSITY_HEATMAP:
                result = self._figure_density(state, contour=False)
            elif state.chart_type == ChartType.DENSITY_CONTOUR:
                result = self._figure_density(state, contour=True)
            elif state.chart_type == ChartType.CORRELATION_HEATMAP:
                result = self._figure_correlation_heatmap(state)
            elif state.chart_type == ChartType.SCATTER_3D:
                result = self._figure_scatter_3d(state)
            else:
                result = self._figure_surface_3d(state)
        except ValueError as e:
            # valid options, but the data cannot support this chart
            logger.warning(f"Cannot build {state.chart_type.value} chart: {e}")
            # first line only; Qhull diagnostics run to dozens of lines
            message = (str(e).splitlines() or [""])[0]
            return self.empty_figure(message)

        logger.debug(f"Figure generated: {len(result.get('data', []))} traces")
        return result

    # -----------------------------
    # Shared pieces
    # -----------------------------
    def _check_columns(self, state: ChartState) -> None:
        if state.chart_type == ChartType.CORRELATION_HEATMAP:
            needed = list(state.correlation_columns or [])
        else:
            needed = [state.xcol, state.ycol]
            if state.chart_type in _ZCOL_REQUIRED:
                if not state.zcol:
                    raise ValueError(f"{state.chart_type.value} chart requires zcol")
                needed.append(state.zcol)
            elif state.zcol and state.histfunc != "count":
                needed.append(state.zcol)
            if state.chart_type == ChartType.SCATTER_3D and state.color_col:
                needed.append(state.color_col)
        missing = [c for c in needed if c not in self.df.columns]
        if missing:
            raise ValueError(f"Unknown column(s) {missing}; available: {list(self.df.columns)}")

    def _title(self, state: ChartState) -> str:
        if state.title:
            return state.title
        return _DEFAULT_TITLES[state.chart_type].format(
            x=state.xcol, y=state.ycol, z=state.zcol, method=state.correlation_method,
        )

    def _base_layout(self, state: ChartState) -> dict[str, Any]:
        _bg_color, fg_color = get_theme_colors(self.theme)
        return dict(
            template=get_theme_template(self.theme),
            font=dict(color=fg_color),
            title=dict(text=self._title(state)),
            margin=dict(l=50, r=20, t=50, b=50),
            uirevision="keep",
        )

    def _layout_2d(self, state: ChartState) -> dict[str, Any]:
        layout = self._base_layout(state)
        xaxis: dict[str, Any] = dict(title=dict(text=state.xcol))
        yaxis: dict[str, Any] = dict(title=dict(text=state.ycol))
        if state.x_range is not None:
            xaxis["range"] = list(state.x_range)
        if state.y_range is not None:
            yaxis["range"] = list(state.y_range)
        layout["xaxis"] = xaxis
        layout["yaxis"] = yaxis
        return layout

    def _layout_3d(self, state: ChartState) -> dict[str, Any]:
        layout = self._base_layout(state)
        scene: dict[str, Any] = {}
        for axis, col, rng in (
            ("xaxis", state.xcol, state.x_range),
            ("yaxis", state.ycol, state.y_range),
            ("zaxis", state.zcol, state.z_range),
        ):
            axis_layout: dict[str, Any] = dict(title=dict(text=col))
            if rng is not None:
                axis_layout["range"] = list(rng)
            scene[axis] = axis_layout
        layout["scene"] = scene
        layout["margin"] = dict(l=0, r=0, t=50, b=0)
        return layout

    def _smoothing(self, state: ChartState) -> Union[bool, str]:
        if state.chart_type not in SMOOTHABLE_CHART_TYPES:
            return False
        return state.smoothing.zsmooth

    def _xy_bins(self, state: ChartState) -> dict[str, Any]:
        """xbins/ybins so the library bins inside explicit axis limits."""
        out: dict[str, Any] = {}
        if state.x_range is not None:
            lo, hi = state.x_range
            out["xbins"] = dict(start=lo, end=hi, size=(hi - lo) / state.nbinsx)
        if state.y_range is not None:
            lo, hi = state.y_range
            out["ybins"] = dict(start=lo, end=hi, size=(hi - lo) / state.nbinsy)
        return out

    def _add_points_overlay(self, fig: go.Figure, state: ChartState) -> None:
        if not state.show_points:
            return
        values = self.data_processor.get_values([state.xcol, state.ycol])
        fig.add_trace(go.Scatter(
            x=values[state.xcol].to_numpy(),
            y=values[state.ycol].to_numpy(),
            mode="markers",
            name="samples",
            marker=dict(size=max(1, state.point_size // 2), color=POINTS_OVERLAY_COLOR),
            showlegend=False,
            hoverinfo="skip",
        ))

    def empty_figure(self, message: str) -> dict:
        """Themed figure with a centered message and no traces."""
        _bg_color, fg_color = get_theme_colors(self.theme)
        fig = go.Figure()
        fig.update_layout(
            template=get_theme_template(self.theme),
            font=dict(color=fg_color),
            xaxis=dict(visible=False),
            yaxis=dict(visible=False),
            annotations=[dict(
                text=message,
                xref="paper",
                yref="paper",
                x=0.5,
                y=0.5,
                showarrow=False,
            )],
        )
        return fig.to_dict()

    # -----------------------------
    # 2D charts
    # -----------------------------
    def _figure_histogram_2d(self, state: ChartState) -> dict:
        """Library-binned 2D histogram (go.Histogram2d)."""
        uses_z = bool(state.zcol) and state.histfunc != "count"
        values = self.data_processor.get_values(
            [state.xcol, state.ycol] + ([state.zcol] if uses_z else [])
        )
        if values.empty:
            raise ValueError(f"No valid rows for {state.xcol} x {state.ycol}")

        trace_kwargs: dict[str, Any] = dict(
            x=values[state.xcol].to_numpy(),
            y=values[state.ycol].to_numpy(),
            nbinsx=state.nbinsx,
            nbinsy=state.nbinsy,
            histfunc=state.histfunc if uses_z else "count",
            histnorm=state.histnorm,
            zsmooth=self._smoothing(state),
            name="histogram",
            **self._xy_bins(state),
            **state.colorbar.trace_kwargs(
                TRACE_KIND_HEATMAP,
                default_title=_z_label(state.histfunc, state.histnorm, state.zcol if uses_z else None),
            ),
        )
        if uses_z:
            trace_kwargs["z"] = values[state.zcol].to_numpy()

        fig = go.Figure()
        fig.add_trace(go.Histogram2d(**trace_kwargs))
        self._add_points_overlay(fig, state)
        fig.update_layout(**self._layout_2d(state))
        return fig.to_dict()

    def _figure_histogram_2d_contour(self, state: ChartState) -> dict:
        """Library-binned 2D histogram drawn as filled contours (go.Histogram2dContour)."""
        uses_z = bool(state.zcol) and state.histfunc != "count"
        values = self.data_processor.get_values(
            [state.xcol, state.ycol] + ([state.zcol] if uses_z else [])
        )
        if values.empty:
            raise ValueError(f"No valid rows for {state.xcol} x {state.ycol}")

        trace_kwargs: dict[str, Any] = dict(
            x=values[state.xcol].to_numpy(),
            y=values[state.ycol].to_numpy(),
            nbinsx=state.nbinsx,
            nbinsy=state.nbinsy,
            histfunc=state.histfunc if uses_z else "count",
            histnorm=state.histnorm,
            ncontours=state.ncontours,
            contours=dict(coloring="heatmap"),
            name="histogram contour",
            **self._xy_bins(state),
            **state.colorbar.trace_kwargs(
                TRACE_KIND_HEATMAP,
                default_title=_z_label(state.histfunc, state.histnorm, state.zcol if uses_z else None),
            ),
        )
        if uses_z:
            trace_kwargs["z"] = values[state.zcol].to_numpy()

        fig = go.Figure()
        fig.add_trace(go.Histogram2dContour(**trace_kwargs))
        self._add_points_overlay(fig, state)
        fig.update_layout(**self._layout_2d(state))
        return fig.to_dict()

    def _figure_binned_heatmap(self, state: ChartState) -> dict:
        """Heatmap of bins precomputed by DataFrameProcessor.bin_2d."""
        grid = self.data_processor.bin_2d(
            state.xcol,
            state.ycol,
            nbinsx=state.nbinsx,
            nbinsy=state.nbinsy,
            histfunc=state.histfunc if state.zcol else "count",
            histnorm=state.histnorm,
            zcol=state.zcol,
            x_range=state.x_range,
            y_range=state.y_range,
        )
        z_label = _z_label(grid.histfunc, grid.histnorm, state.zcol)
        fig = go.Figure()
        fig.add_trace(go.Heatmap(
            x=grid.x_centers.tolist(),
            y=grid.y_centers.tolist(),
            z=_grid_list(grid.z),
            zsmooth=self._smoothing(state),
            hoverongaps=False,
            name="bins",
            hovertemplate=(
                f"{state.xcol}=%{{x:.3g}}<br>{state.ycol}=%{{y:.3g}}<br>"
                f"{z_label}=%{{z:.3g}}<extra></extra>"
            ),
            **state.colorbar.trace_kwargs(TRACE_KIND_HEATMAP, default_title=z_label),
        ))
        self._add_points_overlay(fig, state)
        fig.update_layout(**self._layout_2d(state))
        return fig.to_dict()

    def _figure_density(self, state: ChartState, *, contour: bool) -> dict:
        """Gaussian KDE evaluated on a grid, as a heatmap or filled contour."""
        grid = self.data_processor.kde_grid(
            state.xcol,
            state.ycol,
            grid_size=state.grid_size,
            bandwidth=state.kde_bandwidth,
            x_range=state.x_range,
            y_range=state.y_range,
        )
        color_kwargs = state.colorbar.trace_kwargs(TRACE_KIND_HEATMAP, default_title="density")
        fig = go.Figure()
        if contour:
            fig.add_trace(go.Contour(
                x=grid.x.tolist(),
                y=grid.y.tolist(),
                z=_grid_list(grid.z),
                ncontours=state.ncontours,
                contours=dict(coloring="fill"),
                name="density",
                **color_kwargs,
            ))
        else:
            fig.add_trace(go.Heatmap(
                x=grid.x.tolist(),
                y=grid.y.tolist(),
                z=_grid_list(grid.z),
                zsmooth=self._smoothing(state),
                name="density",
                hovertemplate=(
                    f"{state.xcol}=%{{x:.3g}}<br>{state.ycol}=%{{y:.3g}}<br>"
                    "density=%{z:.3g}<extra></extra>"
                ),
                **color_kwargs,
            ))
        self._add_points_overlay(fig, state)
        fig.update_layout(**self._layout_2d(state))
        return fig.to_dict()

    def _figure_correlation_heatmap(self, state: ChartState) -> dict:
        """Correlation matrix heatmap on a diverging scale, limits [-1, 1] unless set."""
        corr = self.data_processor.correlation_matrix(
            state.correlation_columns,
            method=state.correlation_method,
        )
        colorbar = state.colorbar
        if colorbar.colorscale == DEFAULT_COLORSCALE:
            colorbar = dataclasses.replace(colorbar, colorscale=DIVERGING_COLORSCALE)
        if colorbar.is_auto:
            colorbar = dataclasses.replace(colorbar, zmin=-1.0, zmax=1.0)

        labels = [str(c) for c in corr.columns]
        z = corr.to_numpy(dtype=float)
        trace_kwargs: dict[str, Any] = dict(
            x=labels,
            y=labels,
            z=_grid_list(z),
            zsmooth=self._smoothing(state),
            hoverongaps=False,
            name="correlation",
            hovertemplate="%{y} / %{x}: %{z:.3f}<extra></extra>",
            **colorbar.trace_kwargs(TRACE_KIND_HEATMAP, default_title=state.correlation_method),
        )
        if state.show_values:
            trace_kwargs["text"] = [["" if np.isnan(v) else f"{v:.2f}" for v in row] for row in z]
            trace_kwargs["texttemplate"] = "%{text}"

        fig = go.Figure()
        fig.add_trace(go.Heatmap(**trace_kwargs))
        layout = self._base_layout(state)
        layout["xaxis"] = dict(tickangle=-30, side="bottom")
        # first column at the top so the diagonal runs top-left to bottom-right
        layout["yaxis"] = dict(autorange="reversed")
        fig.update_layout(**layout)
        return fig.to_dict()

    # -----------------------------
    # 3D charts
    # -----------------------------
    def _figure_scatter_3d(self, state: ChartState) -> dict:
        """3D scatter; markers colored by color_col (numeric scale or one trace per category) or by z."""
        color_col = state.color_col
        categorical = bool(color_col) and color_col not in self.data_processor.numeric_columns()
        numeric_cols = [state.xcol, state.ycol, state.zcol]
        if color_col and not categorical:
            numeric_cols.append(color_col)
        values = self.data_processor.get_values(numeric_cols)
        if values.empty:
            raise ValueError(f"No valid rows for {state.xcol}, {state.ycol}, {state.zcol}")

        fig = go.Figure()
        if categorical:
            groups = self.df.loc[values.index, color_col].astype(str)
            for group_value, idx in groups.groupby(groups, sort=True).groups.items():
                sub = values.loc[idx]
                fig.add_trace(go.Scatter3d(
                    x=sub[state.xcol].to_numpy(),
                    y=sub[state.ycol].to_numpy(),
                    z=sub[state.zcol].to_numpy(),
                    mode="markers",
                    name=str(group_value),
                    marker=dict(size=state.point_size, opacity=state.opacity),
                ))
            fig.update_layout(legend_title_text=color_col)
        else:
            color_source = color_col if color_col else state.zcol
            marker = dict(
                size=state.point_size,
                opacity=state.opacity,
                color=values[color_source].to_numpy(),
                **state.colorbar.trace_kwargs(TRACE_KIND_MARKER, default_title=color_source),
            )
            fig.add_trace(go.Scatter3d(
                x=values[state.xcol].to_numpy(),
                y=values[state.ycol].to_numpy(),
                z=values[state.zcol].to_numpy(),
                mode="markers",
                name="points",
                marker=marker,
                showlegend=False,
            ))
        fig.update_layout(**self._layout_3d(state))
        return fig.to_dict()

    def _figure_surface_3d(self, state: ChartState) -> dict:
        """Surface from a regular grid or from scattered points interpolated onto one."""
        grid = self.data_processor.surface_grid(
            state.xcol,
            state.ycol,
            state.zcol,
            grid_size=state.grid_size,
            method=state.surface_method,
        )
        fig = go.Figure()
        fig.add_trace(go.Surface(
            x=grid.x.tolist(),
            y=grid.y.tolist(),
            z=_grid_list(grid.z),
            opacity=state.opacity,
            name="surface",
            contours=dict(z=dict(show=True, usecolormap=True, project=dict(z=True))),
            **state.colorbar.trace_kwargs(TRACE_KIND_SURFACE, default_title=state.zcol),
        ))
        if state.show_points:
            values = self.data_processor.get_values([state.xcol, state.ycol, state.zcol])
            fig.add_trace(go.Scatter3d(
                x=values[state.xcol].to_numpy(),
                y=values[state.ycol].to_numpy(),
                z=values[state.zcol].to_numpy(),
                mode="markers",
                name="samples",
                marker=dict(size=max(1, state.point_size // 2), color="black"),
                showlegend=False,
            ))
        fig.update_layout(**self._layout_3d(state))
        return fig.to_dict()

"""DataFrame processing for density, heatmap and surface charts.

This module provides the DataFrameProcessor class that prepares value grids
for the figure generator. All numerical work is delegated: 2D binning to
numpy/scipy, kernel density estimation to scipy.stats.gaussian_kde,
correlation to pandas and surface interpolation to scipy.interpolate.griddata.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np
import pandas as pd
from scipy.interpolate import griddata
from scipy.spatial import QhullError
from scipy.stats import binned_statistic_2d, gaussian_kde

from densitycharts.utils.logging import get_logger
from densitycharts.chart_widget.plot_helpers import numeric_columns

logger = get_logger(__name__)

# fraction of the data span added on each side of a KDE grid
KDE_GRID_PADDING = 0.1

# binned_statistic_2d names for the Plotly histfunc values it handles
_BINNED_STATISTIC = {"avg": "mean", "min": "min", "max": "max"}


@dataclass
class BinnedGrid:
    """2D histogram result. z has shape (len(y_centers), len(x_centers))."""
    x_edges: np.ndarray
    y_edges: np.ndarray
    z: np.ndarray
    histfunc: str = "count"
    histnorm: str = ""

    @property
    def x_centers(self) -> np.ndarray:
        return (self.x_edges[:-1] + self.x_edges[1:]) / 2

    @property
    def y_centers(self) -> np.ndarray:
        return (self.y_edges[:-1] + self.y_edges[1:]) / 2


@dataclass
class DensityGrid:
    """Kernel density estimate evaluated on a regular grid. z has shape (len(y), len(x))."""
    x: np.ndarray
    y: np.ndarray
    z: np.ndarray
    bandwidth: float  # scipy's kde.factor


@dataclass
class SurfaceGrid:
    """Height values on a regular grid. z has shape (len(y), len(x)); NaN where undefined."""
    x: np.ndarray
    y: np.ndarray
    z: np.ndarray
    interpolated: bool


def _span(values: np.ndarray, value_range: Optional[Sequence[float]]) -> tuple[float, float]:
    """Return (lo, hi) from an explicit range or the data, widening a zero-width span."""
    if value_range is not None:
        lo, hi = float(value_range[0]), float(value_range[1])
    else:
        lo, hi = float(np.min(values)), float(np.max(values))
    if lo == hi:
        lo, hi = lo - 0.5, hi + 0.5
    return lo, hi


def _padded_span(values: np.ndarray, value_range: Optional[Sequence[float]]) -> tuple[float, float]:
    """Like _span, but pads a data-derived span by KDE_GRID_PADDING on both sides."""
    if value_range is not None:
        return _span(values, value_range)
    lo, hi = _span(values, None)
    pad = (hi - lo) * KDE_GRID_PADDING
    return lo - pad, hi + pad


class DataFrameProcessor:
    """Prepares DataFrame columns as value grids for charting.

    Attributes:
        df: The source DataFrame.
    """

    def __init__(self, df: pd.DataFrame) -> None:
        """Initialize DataFrameProcessor with a dataframe.

        Args:
            df: DataFrame with at least one numeric column.

        Raises:
            ValueError: If df has no numeric columns.
        """
        self.df = df
        if not numeric_columns(df):
            raise ValueError("df must contain at least one numeric column")

    def numeric_columns(self) -> list[str]:
        """Numeric column names of the source dataframe."""
        return numeric_columns(self.df)

    def get_values(self, columns: Sequence[str]) -> pd.DataFrame:
        """Get numeric values for columns, dropping rows with NaN in any of them.

        Non-numeric entries are coerced to NaN (and therefore dropped).

        Args:
            columns: Column names to extract; duplicates are allowed (e.g. x == y).

        Returns:
            DataFrame with one float column per unique requested name.

        Raises:
            ValueError: If a column is not in the dataframe.
        """
        missing = [c for c in columns if c not in self.df.columns]
        if missing:
            raise ValueError(f"Unknown column(s) {missing}; available: {list(self.df.columns)}")
        unique_cols = list(dict.fromkeys(columns))
        out = self.df[unique_cols].apply(pd.to_numeric, errors="coerce")
        n_before = len(out)
        out = out.dropna()
        if len(out) < n_before:
            logger.debug(f"Dropped {n_before - len(out)} row(s) with missing values in {unique_cols}")
        return out

    def bin_2d(
        self,
        xcol: str,
        ycol: str,
        *,
        nbinsx: int = 20,
        nbinsy: int = 20,
        histfunc: str = "count",
        histnorm: str = "",
        zcol: Optional[str] = None,
        x_range: Optional[Sequence[float]] = None,
        y_range: Optional[Sequence[float]] = None,
    ) -> BinnedGrid:
        """Precompute a 2D histogram of (x, y), optionally aggregating zcol.

        count/sum use numpy.histogram2d; avg/min/max use
        scipy.stats.binned_statistic_2d (empty bins are NaN). histnorm
        follows Plotly's meaning and applies to count and sum:
        'percent', 'probability', 'density' (per unit area) and
        'probability density'.

        Raises:
            ValueError: On non-positive bins, an unknown histfunc/histnorm,
                a histfunc other than count without zcol, or no valid rows.
        """
        if nbinsx < 1 or nbinsy < 1:
            raise ValueError(f"Bin counts must be positive, got nbinsx={nbinsx}, nbinsy={nbinsy}")
        if histfunc != "count" and not zcol:
            raise ValueError(f"histfunc={histfunc!r} requires a z column to aggregate")
        if histfunc not in ("count", "sum", *_BINNED_STATISTIC):
            raise ValueError(f"Unknown histfunc {histfunc!r}")
        if histnorm not in ("", "percent", "probability", "density", "probability density"):
            raise ValueError(f"Unknown histnorm {histnorm!r}")

        cols = [xcol, ycol] + ([zcol] if zcol and histfunc != "count" else [])
        values = self.get_values(cols)
        if values.empty:
            raise ValueError(f"No valid rows for columns {cols}")
        x = values[xcol].to_numpy()
        y = values[ycol].to_numpy()
        bin_range = [_span(x, x_range), _span(y, y_range)]

        if histfunc in _BINNED_STATISTIC:
            result = binned_statistic_2d(
                x, y, values[zcol].to_numpy(),
                statistic=_BINNED_STATISTIC[histfunc],
                bins=[nbinsx, nbinsy],
                range=bin_range,
            )
            counts_xy = result.statistic
            x_edges, y_edges = result.x_edge, result.y_edge
            if histnorm:
                logger.debug(f"histnorm={histnorm!r} is ignored for histfunc={histfunc!r}")
                histnorm = ""
        else:
            weights = values[zcol].to_numpy() if histfunc == "sum" else None
            counts_xy, x_edges, y_edges = np.histogram2d(
                x, y, bins=[nbinsx, nbinsy], range=bin_range, weights=weights,
            )
            counts_xy = counts_xy.astype(float)
            if histnorm:
                total = float(np.sum(counts_xy))
                area = np.outer(np.diff(x_edges), np.diff(y_edges))
                if histnorm == "percent":
                    counts_xy = 100.0 * counts_xy / total if total else counts_xy
                elif histnorm == "probability":
                    counts_xy = counts_xy / total if total else counts_xy
                elif histnorm == "density":
                    counts_xy = counts_xy / area
                else:
                    counts_xy = counts_xy / (total * area) if total else counts_xy

        # numpy/scipy return (x, y) indexing; charts want rows = y
        z = np.asarray(counts_xy, dtype=float).T
        logger.debug(f"bin_2d: {xcol} x {ycol}, bins=({nbinsx}, {nbinsy}), histfunc={histfunc}, histnorm={histnorm!r}")
        return BinnedGrid(
            x_edges=np.asarray(x_edges, dtype=float),
            y_edges=np.asarray(y_edges, dtype=float),
            z=z,
            histfunc=histfunc,
            histnorm=histnorm,
        )

    def kde_grid(
        self,
        xcol: str,
        ycol: str,
        *,
        grid_size: int = 100,
        bandwidth: Union[str, float] = "scott",
        x_range: Optional[Sequence[float]] = None,
        y_range: Optional[Sequence[float]] = None,
    ) -> DensityGrid:
        """Evaluate a Gaussian kernel density estimate of (x, y) on a regular grid.

        Args:
            xcol: Column for x samples.
            ycol: Column for y samples.
            grid_size: Number of grid points per axis.
            bandwidth: 'scott', 'silverman' or a scalar factor (scipy bw_method).
            x_range: Optional [min, max] for the grid; default is the data span padded by 10%.
            y_range: Same for y.

        Raises:
            ValueError: With fewer than 3 valid points, grid_size < 2, or when
                the covariance of the samples is singular (e.g. collinear data).
        """
        if grid_size < 2:
            raise ValueError(f"grid_size must be at least 2, got {grid_size}")
        if xcol == ycol:
            raise ValueError("Kernel density estimate needs two different columns")
        values = self.get_values([xcol, ycol])
        if len(values) < 3:
            raise ValueError(f"Kernel density estimate needs at least 3 points, got {len(values)}")
        x = values[xcol].to_numpy()
        y = values[ycol].to_numpy()

        try:
            kde = gaussian_kde(np.vstack([x, y]), bw_method=bandwidth)
        except np.linalg.LinAlgError as e:
            raise ValueError(f"Kernel density estimate failed for {xcol} x {ycol}: {e}") from e

        x_lo, x_hi = _padded_span(x, x_range)
        y_lo, y_hi = _padded_span(y, y_range)
        xs = np.linspace(x_lo, x_hi, grid_size)
        ys = np.linspace(y_lo, y_hi, grid_size)
        xx, yy = np.meshgrid(xs, ys)
        z = kde(np.vstack([xx.ravel(), yy.ravel()])).reshape(xx.shape)
        logger.debug(f"kde_grid: {xcol} x {ycol}, n={len(x)}, grid={grid_size}, factor={kde.factor:.4f}")
        return DensityGrid(x=xs, y=ys, z=z, bandwidth=float(kde.factor))

    def correlation_matrix(
        self,
        columns: Optional[Sequence[str]] = None,
        method: str = "pearson",
    ) -> pd.DataFrame:
        """Pairwise correlation of numeric columns (pandas DataFrame.corr).

        Args:
            columns: Columns to correlate; None uses all numeric columns.
            method: 'pearson', 'kendall' or 'spearman'.

        Returns:
            Square DataFrame indexed and labelled by column name.

        Raises:
            ValueError: With fewer than two columns or an unknown column.
        """
        cols = list(columns) if columns else self.numeric_columns()
        if len(cols) < 2:
            raise ValueError(f"Correlation matrix needs at least two numeric columns, got {cols}")
        missing = [c for c in cols if c not in self.df.columns]
        if missing:
            raise ValueError(f"Unknown column(s) {missing}")
        values = self.df[cols].apply(pd.to_numeric, errors="coerce")
        return values.corr(method=method)

    def surface_grid(
        self,
        xcol: str,
        ycol: str,
        zcol: str,
        *,
        grid_size: int = 100,
        method: str = "linear",
    ) -> SurfaceGrid:
        """Arrange (x, y, z) rows as a surface.

        Rows that already cover a full regular (x, y) grid are pivoted
        directly (duplicates averaged). Scattered rows are interpolated onto a
        grid_size x grid_size mesh with scipy.interpolate.griddata; cells
        outside the convex hull of the samples are NaN.

        Raises:
            ValueError: With fewer than 3 points, or when the points are
                degenerate (e.g. all collinear) for the interpolator.
        """
        values = self.get_values([xcol, ycol, zcol])
        if len(values) < 3:
            raise ValueError(f"Surface needs at least 3 points, got {len(values)}")

        pivot = values.pivot_table(index=ycol, columns=xcol, values=zcol, aggfunc="mean")
        if pivot.shape[0] >= 2 and pivot.shape[1] >= 2 and not pivot.isna().to_numpy().any():
            logger.debug(f"surface_grid: regular {pivot.shape[1]} x {pivot.shape[0]} grid, no interpolation")
            return SurfaceGrid(
                x=pivot.columns.to_numpy(dtype=float),
                y=pivot.index.to_numpy(dtype=float),
                z=pivot.to_numpy(dtype=float),
                interpolated=False,
            )

        if grid_size < 2:
            raise ValueError(f"grid_size must be at least 2, got {grid_size}")
        x = values[xcol].to_numpy()
        y = values[ycol].to_numpy()
        xs = np.linspace(*_span(x, None), grid_size)
        ys = np.linspace(*_span(y, None), grid_size)
        xx, yy = np.meshgrid(xs, ys)
        try:
            z = griddata((x, y), values[zcol].to_numpy(), (xx, yy), method=method)
        except QhullError as e:
            raise ValueError(f"Cannot interpolate a surface from {len(x)} degenerate points: {e}") from e
        logger.debug(f"surface_grid: interpolated {len(x)} points onto {grid_size} x {grid_size} ({method})")
        return SurfaceGrid(x=xs, y=ys, z=np.asarray(z, dtype=float), interpolated=True)

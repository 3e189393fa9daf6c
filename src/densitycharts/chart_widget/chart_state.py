"""Chart state for density, heatmap and 3D charts.

This module defines the ChartType and SmoothingMode enums and the ChartState
dataclass used to describe, serialize and validate one chart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from densitycharts.chart_widget.colorbar import ColorBarConfig


class ChartType(Enum):
    """Enumeration of available chart types."""
    HISTOGRAM_2D = "histogram_2d"
    HISTOGRAM_2D_CONTOUR = "histogram_2d_contour"
    BINNED_HEATMAP = "binned_heatmap"
    DENSITY_HEATMAP = "density_heatmap"
    DENSITY_CONTOUR = "density_contour"
    CORRELATION_HEATMAP = "correlation_heatmap"
    SCATTER_3D = "scatter_3d"
    SURFACE_3D = "surface_3d"


class SmoothingMode(Enum):
    """Heatmap smoothing, mapped onto Plotly's zsmooth."""
    NONE = "none"
    FAST = "fast"
    BEST = "best"

    @property
    def zsmooth(self) -> Union[bool, str]:
        """Plotly zsmooth value: False, 'fast' or 'best'."""
        if self is SmoothingMode.NONE:
            return False
        return self.value

    @classmethod
    def coerce(cls, value: Any) -> "SmoothingMode":
        """Accept a SmoothingMode, its string value, or a Plotly zsmooth value (False/'fast'/'best')."""
        if isinstance(value, SmoothingMode):
            return value
        if value is None or value is False:
            return cls.NONE
        s = str(value).lower()
        if s in ("false", ""):
            return cls.NONE
        return cls(s)


# chart types whose axes are x/y columns of the data (2D layout axes)
CHART_TYPES_2D = frozenset({
    ChartType.HISTOGRAM_2D,
    ChartType.HISTOGRAM_2D_CONTOUR,
    ChartType.BINNED_HEATMAP,
    ChartType.DENSITY_HEATMAP,
    ChartType.DENSITY_CONTOUR,
})
CHART_TYPES_3D = frozenset({ChartType.SCATTER_3D, ChartType.SURFACE_3D})
# chart types that honour SmoothingMode
SMOOTHABLE_CHART_TYPES = frozenset({
    ChartType.HISTOGRAM_2D,
    ChartType.BINNED_HEATMAP,
    ChartType.DENSITY_HEATMAP,
    ChartType.CORRELATION_HEATMAP,
})

HISTNORM_OPTIONS = ("", "percent", "probability", "density", "probability density")
HISTFUNC_OPTIONS = ("count", "sum", "avg", "min", "max")
CORRELATION_METHODS = ("pearson", "kendall", "spearman")
SURFACE_METHODS = ("linear", "nearest", "cubic")
KDE_BANDWIDTH_RULES = ("scott", "silverman")


def _range_or_none(value: Any) -> Optional[list[float]]:
    """Coerce a 2-sequence to [lo, hi] floats; None and malformed values become None."""
    if value is None:
        return None
    try:
        lo, hi = value
        return [float(lo), float(hi)]
    except (TypeError, ValueError):
        return None


def _or_default(value: Any, default: Any) -> Any:
    return default if value is None else value


def _bandwidth(value: Any) -> Union[str, float]:
    if value is None:
        return "scott"
    if isinstance(value, str):
        return value.lower()
    return float(value)


@dataclass
class ChartState:
    """Configuration state for a single chart.

    Holds data selection (x/y/z columns), chart type, binning and smoothing
    options, density/interpolation settings, axis limits and the color bar.
    """
    xcol: str
    ycol: str
    chart_type: ChartType = ChartType.HISTOGRAM_2D
    zcol: Optional[str] = None             # aggregated by 2D histograms, height for surfaces, third axis for scatter_3d
    color_col: Optional[str] = None        # scatter_3d marker color; None colors by z
    nbinsx: int = 20
    nbinsy: int = 20
    histfunc: str = "count"
    histnorm: str = ""
    smoothing: SmoothingMode = SmoothingMode.NONE
    kde_bandwidth: Union[str, float] = "scott"
    grid_size: int = 100                   # KDE and surface grid resolution per axis
    ncontours: int = 15
    show_points: bool = False              # overlay raw points on 2D charts
    correlation_method: str = "pearson"
    correlation_columns: Optional[list[str]] = None   # None = all numeric columns
    show_values: bool = True               # cell text on correlation heatmaps
    surface_method: str = "linear"
    x_range: Optional[list[float]] = None
    y_range: Optional[list[float]] = None
    z_range: Optional[list[float]] = None
    point_size: int = 4
    opacity: float = 0.8
    title: Optional[str] = None
    colorbar: ColorBarConfig = field(default_factory=ColorBarConfig)

    def validate(self) -> None:
        """Check option values.

        Raises:
            ValueError: On non-positive bins or grid size, unknown histfunc,
                histnorm, correlation or interpolation method, bad bandwidth,
                inverted axis ranges, opacity or point size out of range, or an
                invalid color bar.
        """
        if int(self.nbinsx) < 1 or int(self.nbinsy) < 1:
            raise ValueError(f"Bin counts must be positive, got nbinsx={self.nbinsx}, nbinsy={self.nbinsy}")
        if int(self.grid_size) < 2:
            raise ValueError(f"grid_size must be at least 2, got {self.grid_size}")
        if int(self.ncontours) < 1:
            raise ValueError(f"ncontours must be positive, got {self.ncontours}")
        if self.histfunc not in HISTFUNC_OPTIONS:
            raise ValueError(f"Unknown histfunc {self.histfunc!r}; expected one of {HISTFUNC_OPTIONS}")
        if self.histnorm not in HISTNORM_OPTIONS:
            raise ValueError(f"Unknown histnorm {self.histnorm!r}; expected one of {HISTNORM_OPTIONS}")
        if self.correlation_method not in CORRELATION_METHODS:
            raise ValueError(
                f"Unknown correlation_method {self.correlation_method!r}; expected one of {CORRELATION_METHODS}"
            )
        if self.surface_method not in SURFACE_METHODS:
            raise ValueError(f"Unknown surface_method {self.surface_method!r}; expected one of {SURFACE_METHODS}")
        if isinstance(self.kde_bandwidth, str):
            if self.kde_bandwidth not in KDE_BANDWIDTH_RULES:
                raise ValueError(
                    f"Unknown kde_bandwidth rule {self.kde_bandwidth!r}; expected one of {KDE_BANDWIDTH_RULES} or a number"
                )
        elif float(self.kde_bandwidth) <= 0:
            raise ValueError(f"kde_bandwidth must be positive, got {self.kde_bandwidth}")
        for name in ("x_range", "y_range", "z_range"):
            rng = getattr(self, name)
            if rng is not None and float(rng[0]) >= float(rng[1]):
                raise ValueError(f"{name} must be [min, max] with min < max, got {rng}")
        if not 0.0 < float(self.opacity) <= 1.0:
            raise ValueError(f"opacity must be in (0, 1], got {self.opacity}")
        if int(self.point_size) < 1:
            raise ValueError(f"point_size must be at least 1, got {self.point_size}")
        self.colorbar.validate()

    def copy(self) -> "ChartState":
        """Deep copy via the dict representation."""
        return ChartState.from_dict(self.to_dict())

    def to_dict(self) -> dict[str, Any]:
        """Serialize ChartState to dictionary.

        Returns:
            JSON-friendly dictionary representation with all fields.
        """
        return {
            "xcol": self.xcol,
            "ycol": self.ycol,
            "chart_type": self.chart_type.value,
            "zcol": self.zcol,
            "color_col": self.color_col,
            "nbinsx": self.nbinsx,
            "nbinsy": self.nbinsy,
            "histfunc": self.histfunc,
            "histnorm": self.histnorm,
            "smoothing": self.smoothing.value,
            "kde_bandwidth": self.kde_bandwidth,
            "grid_size": self.grid_size,
            "ncontours": self.ncontours,
            "show_points": self.show_points,
            "correlation_method": self.correlation_method,
            "correlation_columns": list(self.correlation_columns) if self.correlation_columns is not None else None,
            "show_values": self.show_values,
            "surface_method": self.surface_method,
            "x_range": self.x_range,
            "y_range": self.y_range,
            "z_range": self.z_range,
            "point_size": self.point_size,
            "opacity": self.opacity,
            "title": self.title,
            "colorbar": self.colorbar.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChartState":
        """Deserialize ChartState from dictionary.

        Missing keys and null values take their defaults. A Plotly-style 'zsmooth' key
        (False/'fast'/'best') is accepted in place of 'smoothing'.

        Args:
            data: Dictionary containing ChartState fields.

        Returns:
            ChartState instance created from dictionary data.

        Raises:
            ValueError: If chart_type or smoothing holds an unknown value.
        """
        chart_type = ChartType(_or_default(data.get("chart_type"), ChartType.HISTOGRAM_2D.value))
        if "smoothing" in data:
            smoothing = SmoothingMode.coerce(data["smoothing"])
        else:
            smoothing = SmoothingMode.coerce(data.get("zsmooth"))
        corr_cols = data.get("correlation_columns")
        return cls(
            xcol=str(_or_default(data.get("xcol"), "")),
            ycol=str(_or_default(data.get("ycol"), "")),
            chart_type=chart_type,
            zcol=data.get("zcol"),  # Can be None
            color_col=data.get("color_col"),  # Can be None
            nbinsx=int(_or_default(data.get("nbinsx"), 20)),
            nbinsy=int(_or_default(data.get("nbinsy"), 20)),
            histfunc=str(_or_default(data.get("histfunc"), "count")),
            histnorm=str(data.get("histnorm") or ""),
            smoothing=smoothing,
            kde_bandwidth=_bandwidth(data.get("kde_bandwidth")),
            grid_size=int(_or_default(data.get("grid_size"), 100)),
            ncontours=int(_or_default(data.get("ncontours"), 15)),
            show_points=bool(_or_default(data.get("show_points"), False)),
            correlation_method=str(_or_default(data.get("correlation_method"), "pearson")),
            correlation_columns=[str(c) for c in corr_cols] if isinstance(corr_cols, list) else None,
            show_values=bool(_or_default(data.get("show_values"), True)),
            surface_method=str(_or_default(data.get("surface_method"), "linear")),
            x_range=_range_or_none(data.get("x_range")),
            y_range=_range_or_none(data.get("y_range")),
            z_range=_range_or_none(data.get("z_range")),
            point_size=int(_or_default(data.get("point_size"), 4)),
            opacity=float(_or_default(data.get("opacity"), 0.8)),
            title=data.get("title"),
            colorbar=ColorBarConfig.from_dict(data.get("colorbar")),
        )

"""Colorscale options and color bar configuration for density charts.

A ColorBarConfig describes the color-bar step of building a chart: which
named Plotly colorscale to use, the color-scale limits and how the bar is
labelled. Plotly spells the limits differently per trace type, so
trace_kwargs() returns the right keyword set for heatmap-like traces,
surfaces and 3D scatter markers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from plotly.colors import named_colorscales

# Named Plotly colorscales offered in the UI
COLORSCALE_OPTIONS: List[Dict[str, str]] = [
    {"label": "Viridis", "value": "Viridis"},
    {"label": "Cividis", "value": "Cividis"},
    {"label": "Plasma", "value": "Plasma"},
    {"label": "Inferno", "value": "Inferno"},
    {"label": "Hot", "value": "Hot"},
    {"label": "Jet", "value": "Jet"},
    {"label": "Turbo", "value": "Turbo"},
    {"label": "Blues", "value": "Blues"},
    {"label": "YlGnBu", "value": "YlGnBu"},
    {"label": "Grayscale", "value": "Greys"},
    {"label": "Grayscale (Inverted)", "value": "inverted_grays"},
    {"label": "Red-Blue (diverging)", "value": "RdBu"},
]

DEFAULT_COLORSCALE = "Viridis"
DIVERGING_COLORSCALE = "RdBu"

# trace families that spell the color limits differently
TRACE_KIND_HEATMAP = "heatmap"     # Heatmap, Histogram2d, Histogram2dContour, Contour
TRACE_KIND_SURFACE = "surface"     # Surface
TRACE_KIND_MARKER = "marker"       # Scatter3d marker
_TRACE_KINDS = {TRACE_KIND_HEATMAP, TRACE_KIND_SURFACE, TRACE_KIND_MARKER}


def resolve_colorscale(name: Optional[str]) -> tuple[str, bool]:
    """Map a colorscale option value to (plotly colorscale name, reversed).

    'inverted_grays' and any '<name>_r' resolve to the base scale reversed.
    None or empty falls back to DEFAULT_COLORSCALE.
    """
    if not name:
        return DEFAULT_COLORSCALE, False
    if name == "inverted_grays":
        return "Greys", True
    if name.endswith("_r"):
        return name[:-2], True
    return name, False


@dataclass
class ColorBarConfig:
    """Color bar configuration for a single chart.

    Attributes:
        colorscale: Colorscale option value (see COLORSCALE_OPTIONS).
        zmin: Lower color-scale limit. None with zmax None means autoscale.
        zmax: Upper color-scale limit.
        show_scale: Show the color bar next to the chart.
        title: Color bar title. None lets the figure generator pick one.
        reverse: Reverse the colorscale (combined with '_r' / inverted names).
        tick_format: d3 format string for color bar ticks, e.g. '.2f'.
    """

    colorscale: str = DEFAULT_COLORSCALE
    zmin: Optional[float] = None
    zmax: Optional[float] = None
    show_scale: bool = True
    title: Optional[str] = None
    reverse: bool = False
    tick_format: Optional[str] = None

    @property
    def is_auto(self) -> bool:
        """True when neither color limit is set."""
        return self.zmin is None and self.zmax is None

    def validate(self) -> None:
        """Raise ValueError for an unknown colorscale or color limits that are inverted or equal."""
        scale_name, _ = resolve_colorscale(self.colorscale)
        if scale_name.lower() not in named_colorscales():
            raise ValueError(f"Unknown colorscale {self.colorscale!r}")
        if self.zmin is not None and self.zmax is not None and float(self.zmin) >= float(self.zmax):
            raise ValueError(f"Color bar zmin ({self.zmin}) must be less than zmax ({self.zmax})")

    def _colorbar_dict(self, default_title: Optional[str]) -> dict:
        colorbar: dict[str, Any] = {}
        title = self.title if self.title is not None else default_title
        if title:
            colorbar["title"] = dict(text=title)
        if self.tick_format:
            colorbar["tickformat"] = self.tick_format
        return colorbar

    def trace_kwargs(self, kind: str = TRACE_KIND_HEATMAP, *, default_title: Optional[str] = None) -> dict:
        """Build the color keyword arguments for one Plotly trace.

        Args:
            kind: 'heatmap' (zmin/zmax/zauto), 'surface' (cmin/cmax/cauto)
                or 'marker' (cmin/cmax/cauto, to be placed under marker=).
            default_title: Color bar title used when self.title is None.

        Returns:
            Dict of trace (or marker) properties.

        Raises:
            ValueError: If kind is unknown or the limits are invalid.
        """
        if kind not in _TRACE_KINDS:
            raise ValueError(f"Unknown trace kind {kind!r}; expected one of {sorted(_TRACE_KINDS)}")
        self.validate()

        scale_name, reversed_ = resolve_colorscale(self.colorscale)
        # reverse flag toggles an already-reversed name back
        reversescale = reversed_ != bool(self.reverse)

        low_key, high_key, auto_key = ("zmin", "zmax", "zauto") if kind == TRACE_KIND_HEATMAP else ("cmin", "cmax", "cauto")
        kwargs: dict[str, Any] = {
            "colorscale": scale_name,
            "reversescale": reversescale,
            "showscale": self.show_scale,
        }
        if self.is_auto:
            kwargs[auto_key] = True
        else:
            kwargs[auto_key] = False
            if self.zmin is not None:
                kwargs[low_key] = float(self.zmin)
            if self.zmax is not None:
                kwargs[high_key] = float(self.zmax)

        colorbar = self._colorbar_dict(default_title)
        if colorbar:
            kwargs["colorbar"] = colorbar
        return kwargs

    def to_dict(self) -> dict[str, Any]:
        """Serialize ColorBarConfig to a JSON-friendly dictionary."""
        return {
            "colorscale": self.colorscale,
            "zmin": self.zmin,
            "zmax": self.zmax,
            "show_scale": self.show_scale,
            "title": self.title,
            "reverse": self.reverse,
            "tick_format": self.tick_format,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "ColorBarConfig":
        """Deserialize ColorBarConfig; missing keys take defaults."""
        if not isinstance(data, dict):
            return cls()
        zmin = data.get("zmin")
        zmax = data.get("zmax")
        return cls(
            colorscale=str(data.get("colorscale") or DEFAULT_COLORSCALE),
            zmin=float(zmin) if zmin is not None else None,
            zmax=float(zmax) if zmax is not None else None,
            show_scale=bool(data.get("show_scale", True)),
            title=data.get("title"),
            reverse=bool(data.get("reverse", False)),
            tick_format=data.get("tick_format"),
        )

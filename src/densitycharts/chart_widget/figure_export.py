"""Write chart figure dicts to HTML or JSON files (plotly.io)."""

from __future__ import annotations

from pathlib import Path
from typing import Union

import plotly.graph_objects as go
import plotly.io as pio

from densitycharts.utils.logging import get_logger

logger = get_logger(__name__)

SUPPORTED_SUFFIXES = (".html", ".json")


def save_figure(
    fig_dict: dict,
    path: Union[str, Path],
    *,
    include_plotlyjs: Union[bool, str] = "cdn",
) -> Path:
    """Save a Plotly figure dict as standalone HTML or as Plotly JSON.

    Args:
        fig_dict: Figure dictionary from FigureGenerator.make_figure().
        path: Destination; the suffix (.html or .json) selects the format.
        include_plotlyjs: Passed to plotly.io.write_html ('cdn' keeps files small,
            True embeds plotly.js for offline viewing).

    Returns:
        The path written.

    Raises:
        ValueError: If the suffix is not .html or .json.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported figure file type {path.suffix!r}; use one of {SUPPORTED_SUFFIXES}")

    fig = go.Figure(fig_dict)
    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".html":
        pio.write_html(fig, file=str(path), include_plotlyjs=include_plotlyjs, full_html=True)
    else:
        pio.write_json(fig, file=str(path), pretty=True)
    logger.info(f"Saved figure to {path}")
    return path


def load_figure(path: Union[str, Path]) -> dict:
    """Read a figure saved with save_figure(..., '.json') back to a dict.

    Raises:
        ValueError: If path is not a .json file.
    """
    path = Path(path)
    if path.suffix.lower() != ".json":
        raise ValueError(f"Only .json figures can be loaded, got {path.name!r}")
    fig = pio.read_json(str(path))
    return fig.to_dict()

"""
densitycharts: 2D histograms, heatmaps, density plots and 3D charts from tables.

This package provides:
- ChartState / FigureGenerator: describe a chart and build its Plotly figure
- DataFrameProcessor: binning, kernel density, correlation and surface grids
- ChartController: interactive NiceGUI control panel + chart
- save_figure: write figures to HTML or JSON
- Logging utilities for library and application use

For logging configuration in standalone scripts/demos:
    ```python
    from densitycharts.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```

When used as a library (imported by other applications), logging is
automatically handled by the parent application's configuration.
"""

import logging

from densitycharts.utils.logging import configure_logging, get_logger

from densitycharts.chart_widget.chart_state import ChartState, ChartType, SmoothingMode
from densitycharts.chart_widget.colorbar import ColorBarConfig
from densitycharts.chart_widget.data_processor import DataFrameProcessor
from densitycharts.chart_widget.figure_export import load_figure, save_figure
from densitycharts.chart_widget.figure_generator import FigureGenerator

# Ensure densitycharts logger has NullHandler so logs don't propagate to root
# when no application has configured logging. Applications/demos call
# configure_logging() to replace this with a real handler.
_logger = logging.getLogger("densitycharts")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "ChartState",
    "ChartType",
    "ColorBarConfig",
    "DataFrameProcessor",
    "FigureGenerator",
    "SmoothingMode",
    "configure_logging",
    "get_logger",
    "load_figure",
    "save_figure",
]

__version__ = "0.1.0"

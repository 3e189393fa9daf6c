"""Chart widget: 2D histograms, density and correlation heatmaps and 3D charts with NiceGUI."""

from densitycharts.chart_widget.chart_config import ChartConfig
from densitycharts.chart_widget.chart_controller import ChartController
from densitycharts.chart_widget.chart_state import ChartState, ChartType, SmoothingMode
from densitycharts.chart_widget.colorbar import ColorBarConfig
from densitycharts.chart_widget.data_processor import DataFrameProcessor
from densitycharts.chart_widget.figure_export import load_figure, save_figure
from densitycharts.chart_widget.figure_generator import FigureGenerator

__all__ = [
    "ChartConfig",
    "ChartController",
    "ChartState",
    "ChartType",
    "ColorBarConfig",
    "DataFrameProcessor",
    "FigureGenerator",
    "SmoothingMode",
    "load_figure",
    "save_figure",
]

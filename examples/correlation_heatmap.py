"""Correlation matrix heatmaps (Pearson and Spearman) with cell values."""

from pathlib import Path

from densitycharts import ChartState, ChartType, DataFrameProcessor, FigureGenerator, save_figure
from densitycharts.datasets import measurements
from densitycharts.utils.logging import configure_logging

OUT_DIR = Path(__file__).parent / "output"


def main() -> None:
    configure_logging(level="INFO")

    df = measurements(n=500)
    gen = FigureGenerator(DataFrameProcessor(df))

    for method in ("pearson", "spearman"):
        state = ChartState(
            xcol="height",
            ycol="weight",
            chart_type=ChartType.CORRELATION_HEATMAP,
            correlation_method=method,
            show_values=True,
        )
        save_figure(gen.make_figure(state), OUT_DIR / f"correlation_{method}.html")


if __name__ == "__main__":
    main()

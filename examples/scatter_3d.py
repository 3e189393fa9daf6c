"""3D scatter plots: colored by a numeric column and grouped by category."""

from pathlib import Path

from densitycharts import ChartState, ChartType, ColorBarConfig, DataFrameProcessor, FigureGenerator, save_figure
from densitycharts.datasets import measurements
from densitycharts.utils.logging import configure_logging

OUT_DIR = Path(__file__).parent / "output"


def main() -> None:
    configure_logging(level="INFO")

    df = measurements(n=600)
    gen = FigureGenerator(DataFrameProcessor(df))

    by_score = ChartState(
        xcol="height",
        ycol="weight",
        zcol="age",
        color_col="score",
        chart_type=ChartType.SCATTER_3D,
        point_size=3,
        colorbar=ColorBarConfig(colorscale="Plasma"),
    )
    save_figure(gen.make_figure(by_score), OUT_DIR / "scatter_3d_by_score.html")

    by_group = ChartState(
        xcol="age",
        ycol="reaction_ms",
        zcol="score",
        color_col="group",
        chart_type=ChartType.SCATTER_3D,
        opacity=0.6,
    )
    save_figure(gen.make_figure(by_group), OUT_DIR / "scatter_3d_by_group.html")


if __name__ == "__main__":
    main()

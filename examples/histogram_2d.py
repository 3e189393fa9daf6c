"""2D histogram of two correlated variables.

Builds the same bivariate sample three ways: library-binned counts,
probability-normalized bins with a fixed color range, and filled contours.
Each figure is written to examples/output/ as standalone HTML.
"""

from pathlib import Path

from densitycharts import ChartState, ChartType, ColorBarConfig, DataFrameProcessor, FigureGenerator, save_figure
from densitycharts.datasets import bivariate_normal
from densitycharts.utils.logging import configure_logging

OUT_DIR = Path(__file__).parent / "output"


def main() -> None:
    configure_logging(level="INFO")

    df = bivariate_normal(n=5000, rho=0.7)
    gen = FigureGenerator(DataFrameProcessor(df))

    counts = ChartState(xcol="x", ycol="y", chart_type=ChartType.HISTOGRAM_2D, nbinsx=30, nbinsy=30)
    save_figure(gen.make_figure(counts), OUT_DIR / "histogram_2d_counts.html")

    probability = ChartState(
        xcol="x",
        ycol="y",
        chart_type=ChartType.HISTOGRAM_2D,
        nbinsx=40,
        nbinsy=40,
        histnorm="probability",
        colorbar=ColorBarConfig(colorscale="Hot", reverse=True, zmin=0.0, zmax=0.004, tick_format=".1%"),
    )
    save_figure(gen.make_figure(probability), OUT_DIR / "histogram_2d_probability.html")

    contour = ChartState(
        xcol="x",
        ycol="y",
        chart_type=ChartType.HISTOGRAM_2D_CONTOUR,
        nbinsx=30,
        nbinsy=30,
        ncontours=12,
        show_points=True,
        point_size=3,
    )
    save_figure(gen.make_figure(contour), OUT_DIR / "histogram_2d_contour.html")


if __name__ == "__main__":
    main()

"""Kernel density estimate compared with a 2D histogram.

A two-cluster sample is drawn as a histogram, as a KDE heatmap with
Scott's rule, and as KDE contours with a narrower fixed bandwidth.
"""

from pathlib import Path

from densitycharts import ChartState, ChartType, DataFrameProcessor, FigureGenerator, SmoothingMode, save_figure
from densitycharts.datasets import gaussian_mixture
from densitycharts.utils.logging import configure_logging

OUT_DIR = Path(__file__).parent / "output"


def main() -> None:
    configure_logging(level="INFO")

    df = gaussian_mixture(n=1500)
    gen = FigureGenerator(DataFrameProcessor(df))

    hist = ChartState(xcol="x", ycol="y", chart_type=ChartType.HISTOGRAM_2D, nbinsx=25, nbinsy=25)
    save_figure(gen.make_figure(hist), OUT_DIR / "kde_reference_histogram.html")

    kde = ChartState(
        xcol="x",
        ycol="y",
        chart_type=ChartType.DENSITY_HEATMAP,
        kde_bandwidth="scott",
        grid_size=120,
        smoothing=SmoothingMode.BEST,
    )
    save_figure(gen.make_figure(kde), OUT_DIR / "kde_heatmap.html")

    narrow = ChartState(
        xcol="x",
        ycol="y",
        chart_type=ChartType.DENSITY_CONTOUR,
        kde_bandwidth=0.15,
        ncontours=20,
        show_points=True,
        point_size=2,
        title="Kernel density, bandwidth factor 0.15",
    )
    save_figure(gen.make_figure(narrow), OUT_DIR / "kde_contour_narrow.html")


if __name__ == "__main__":
    main()

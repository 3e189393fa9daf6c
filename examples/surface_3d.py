"""3D surfaces from a regular grid and from scattered samples.

The regular peaks grid is pivoted directly; the scattered samples are
interpolated (linear and cubic) before drawing.
"""

from pathlib import Path

from densitycharts import ChartState, ChartType, ColorBarConfig, DataFrameProcessor, FigureGenerator, save_figure
from densitycharts.datasets import peaks_grid, scattered_peaks
from densitycharts.utils.logging import configure_logging

OUT_DIR = Path(__file__).parent / "output"


def main() -> None:
    configure_logging(level="INFO")

    grid_gen = FigureGenerator(DataFrameProcessor(peaks_grid(n=60)))
    regular = ChartState(
        xcol="x",
        ycol="y",
        zcol="z",
        chart_type=ChartType.SURFACE_3D,
        colorbar=ColorBarConfig(colorscale="Turbo", zmin=-6.0, zmax=8.0),
    )
    save_figure(grid_gen.make_figure(regular), OUT_DIR / "surface_regular.html")

    scattered_gen = FigureGenerator(DataFrameProcessor(scattered_peaks(n=500)), theme="dark")
    for method in ("linear", "cubic"):
        state = ChartState(
            xcol="x",
            ycol="y",
            zcol="z",
            chart_type=ChartType.SURFACE_3D,
            surface_method=method,
            grid_size=80,
            show_points=True,
            z_range=[-8.0, 9.0],
        )
        save_figure(scattered_gen.make_figure(state), OUT_DIR / f"surface_scattered_{method}.html")


if __name__ == "__main__":
    main()

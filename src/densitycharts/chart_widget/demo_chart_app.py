# Demo app for ChartController
"""Demo application showing ChartController on a sample table.

Run with an optional CSV path to chart your own data:

    python -m densitycharts.chart_widget.demo_chart_app [table.csv]
"""

from __future__ import annotations

import sys

from nicegui import ui

from densitycharts import datasets
from densitycharts.utils.gui_defaults import set_up_gui_defaults
from densitycharts.utils.logging import configure_logging
from densitycharts.chart_widget.chart_controller import ChartController


# ----------------------------
# Demo entrypoint
# ----------------------------

def main() -> None:
    """Demo entrypoint: control panel + chart for measurements() or a CSV file."""

    configure_logging(level="INFO")

    if len(sys.argv) > 1:
        df = datasets.load_csv(sys.argv[1])
    else:
        df = datasets.measurements(n=500)

    set_up_gui_defaults()

    ui.page_title("densitycharts demo")

    with ui.column().classes("w-full gap-4 p-4"):
        ctrl = ChartController(df)
        ctrl.build()

    native_bool = False
    if native_bool:
        ui.run(reload=False, native=True, window_size=(1200, 800))
    else:
        ui.run(reload=False)


if __name__ in {"__main__", "__mp_main__"}:
    main()

"""Chart controller for density, heatmap and 3D charts.

Provides ChartController, the entry point for building an interactive chart
UI with NiceGUI: a control panel on the left and a Plotly chart on the right
that is rebuilt whenever a control changes. See the ChartController class
docstring for the public API.
"""

from __future__ import annotations

from typing import Optional, Union

import pandas as pd
from nicegui import ui

from densitycharts.utils.logging import get_logger
from densitycharts.chart_widget.chart_config import ChartConfig
from densitycharts.chart_widget.chart_control_panel import ChartControlPanel
from densitycharts.chart_widget.chart_state import CHART_TYPES_3D, ChartState, ChartType
from densitycharts.chart_widget.data_processor import DataFrameProcessor
from densitycharts.chart_widget.figure_generator import FigureGenerator
from densitycharts.chart_widget.plot_helpers import default_axis_columns
from densitycharts.chart_widget.theme import ThemeMode, resolve_theme

logger = get_logger(__name__)


class ChartController:
    """Controller for one interactive chart with NiceGUI.

    Manages chart state, UI widgets and user interactions. Loads/saves chart
    state through ChartConfig.

    **Public API:**

    - **__init__(df, ...)**: Configure with a dataframe and optional initial state/config.
    - **build(container=None)**: Build the UI (control panel + chart). Call once to render.
    - **make_figure()**: Figure dict for the current state (no UI needed).
    - **set_state(state)**: Replace the current state, sync widgets and replot.
    - **update_df(df)**: Replace the data and replot.
    """

    def __init__(
        self,
        df: pd.DataFrame,
        *,
        chart_state: Optional[ChartState] = None,
        config: Optional[ChartConfig] = None,
        theme: Optional[Union[str, ThemeMode]] = None,
    ) -> None:
        """Initialize the controller.

        Args:
            df: DataFrame with at least one numeric column.
            chart_state: Initial ChartState. If None, the first saved state from
                config is used, else a 2D histogram of the first two numeric columns.
            config: ChartConfig used for load/save. If None, ChartConfig.load()
                reads the per-user config file.
            theme: Theme override; defaults to the theme stored in config.

        Raises:
            ValueError: If df has no numeric columns.
        """
        self.df = df
        self.data_processor = DataFrameProcessor(df)
        self.config = config if config is not None else ChartConfig.load()
        self.theme: ThemeMode = resolve_theme(theme) if theme is not None else self.config.get_theme()
        self.figure_generator = FigureGenerator(self.data_processor, theme=self.theme)

        x_default, y_default, z_default = default_axis_columns(df)
        self.default_chart_state: ChartState = ChartState(
            xcol=x_default,
            ycol=y_default,
            zcol=None,
            chart_type=ChartType.HISTOGRAM_2D,
        )
        if chart_state is not None:
            self.chart_state = chart_state.copy()
        else:
            saved = [s for s in self.config.get_chart_states() if self._columns_exist(s)]
            if saved:
                logger.info(f"Loaded chart state ({saved[0].chart_type.value}) from {self.config.path}")
                self.chart_state = saved[0]
            else:
                logger.info("No usable saved chart config found, using default chart state")
                self.chart_state = self.default_chart_state.copy()
        self._z_default = z_default

        # UI handles
        self._plot: Optional[ui.plotly] = None
        self._control_panel: Optional[ChartControlPanel] = None

    def _columns_exist(self, state: ChartState) -> bool:
        cols = [state.xcol, state.ycol] + [c for c in (state.zcol, state.color_col) if c]
        return all(c in self.df.columns for c in cols)

    def make_figure(self) -> dict:
        """Figure dict for the current chart state."""
        return self.figure_generator.make_figure(self.chart_state)

    def build(self, *, container: Optional[ui.element] = None) -> None:
        """Build the UI (public API): control panel on the left, chart on the right.

        Args:
            container: Optional NiceGUI container to build into. If None, widgets
                are created at the current top level.
        """
        def _build_content() -> None:
            splitter = ui.splitter(
                value=self.config.get_control_panel_splitter_value(),
                limits=(0, 50),
                on_change=lambda e: self.config.set_control_panel_splitter_value(float(e.value)),
            ).classes("w-full h-screen")
            with splitter.before:
                self._control_panel = ChartControlPanel(
                    self.df,
                    initial_state=self.chart_state,
                    on_any_change=self._on_any_change,
                    on_save_config=self._save_config,
                    on_reset_to_default=self._reset_to_default,
                )
                self._control_panel.build()
            with splitter.after:
                self._plot = ui.plotly(self.make_figure()).classes("w-full h-full")

        if container is not None:
            with container:
                _build_content()
        else:
            _build_content()

    def set_state(self, state: ChartState) -> None:
        """Replace the chart state, sync the control panel and replot."""
        self.chart_state = state.copy()
        if self._control_panel is not None:
            self._control_panel.bind_state(self.chart_state)
        self._replot()

    def update_df(self, new_df: pd.DataFrame) -> None:
        """Replace the dataframe and replot. Keeps the state if its columns still exist."""
        self.df = new_df
        self.data_processor = DataFrameProcessor(new_df)
        self.figure_generator = FigureGenerator(self.data_processor, theme=self.theme)
        x_default, y_default, self._z_default = default_axis_columns(new_df)
        self.default_chart_state = ChartState(xcol=x_default, ycol=y_default, chart_type=ChartType.HISTOGRAM_2D)
        if not self._columns_exist(self.chart_state):
            logger.info(f"Columns of current chart missing from new data, resetting to {x_default} x {y_default}")
            chart_type = self.chart_state.chart_type
            zcol = self._z_default if chart_type in CHART_TYPES_3D else None
            self.chart_state = ChartState(xcol=x_default, ycol=y_default, zcol=zcol, chart_type=chart_type)
        if self._control_panel is not None:
            self._control_panel.update_columns(new_df, self.chart_state)
        self._replot()

    def _on_any_change(self, *_args: object) -> None:
        if self._control_panel is None:
            return
        new_state = self._control_panel.get_state(self.chart_state)
        type_changed = new_state.chart_type != self.chart_state.chart_type
        # assign before bind_state: setting widget values re-enters this handler
        self.chart_state = new_state
        if type_changed:
            self._control_panel.sync_controls(new_state.chart_type)
            # 3D charts need a z column; pick one so the switch renders something
            if new_state.chart_type in CHART_TYPES_3D and not new_state.zcol:
                new_state.zcol = self._z_default
                self._control_panel.bind_state(new_state)
        self._replot()

    def _replot(self) -> None:
        if self._plot is None:
            return
        try:
            figure_dict = self.make_figure()
        except ValueError as ex:
            # invalid option combination while the user is still typing; keep the last figure
            logger.warning(f"Not replotting: {ex}")
            ui.notify(str(ex), type="warning")
            return
        self._plot.update_figure(figure_dict)
        self._plot.update()

    def _save_config(self) -> None:
        """Save the current chart state and theme to the config file."""
        self.config.set_chart_states([self.chart_state])
        self.config.set_theme(self.theme)
        self.config.save()
        ui.notify(f"Chart configuration saved ({self.chart_state.chart_type.value})", type="positive")

    def _reset_to_default(self) -> None:
        self.set_state(self.default_chart_state)
        ui.notify("Chart reset to default configuration", type="info")

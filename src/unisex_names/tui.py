#!/usr/bin/env python

from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd
from loguru import logger
from textual import work
from textual.app import App, ComposeResult
from textual.containers import Container, Grid, VerticalScroll
from textual.screen import ModalScreen
from textual.validation import Integer, Number
from textual.widgets import (
    Button, DataTable, Footer, Header, Input, LoadingIndicator, Markdown, Static, TabbedContent, TabPane,
)
from textual_plotext import PlotextPlot

from .assembler import rows_to_frame
from .config import DATA_DIR, LOG_DIR, Thresholds, load_thresholds
from .data_loader import NameDataLoader
from .exceptions import UnisexNamesError
from .logger import setup_logger
from .pipeline import UnisexAnalysis, analyze
from .records import TrendRow

SPARK_BLOCKS = "▁▂▃▄▅▆▇█"
SPARK_WIDTH = 36
BAR_WIDTH = 20

# --- Help Screen ---

HELP_TEXT = """
## Unisex Names

Finds names given to both boys and girls in the U.S. Social Security
Administration (SSA) baby name data.

### How to Use

- A name is **unisex** when both its male and its female share of births are
  above the **share floor**, and its total births are above the **volume floor**.
- Edit the two thresholds on the left and press **Apply** to re-run the classification.
- The **Snapshot** tab shows the whole-period split for every unisex name.
- The **Trends** tab shows the male share year by year; select a row to plot it.
- Use the **Export CSV** button to save the rows of the visible tab.

### Data Source

Data is provided by the [U.S. Social Security Administration](https://www.ssa.gov/oact/babynames/limits.html).

**Press ESC, Q, or ? to close this screen.**
"""


def sparkline(values: Sequence[float], width: int = SPARK_WIDTH) -> str:
    """Draw shares in [0, 1] as block characters on a fixed 0..1 scale, averaging down to ``width``."""
    values = list(values)
    if not values:
        return ""
    if len(values) > width:
        step = len(values) / width
        values = [
            sum(chunk) / len(chunk)
            for chunk in (values[int(i * step):int((i + 1) * step)] for i in range(width))
            if chunk
        ]
    top = len(SPARK_BLOCKS) - 1
    return "".join(SPARK_BLOCKS[min(max(int(value * len(SPARK_BLOCKS)), 0), top)] for value in values)


def split_bar(pct_m: float, width: int = BAR_WIDTH) -> str:
    """A stacked bar: male share as solid blocks, female share as shade."""
    male_cells = round(pct_m * width)
    return "█" * male_cells + "░" * (width - male_cells)


class HelpScreen(ModalScreen):
    """A modal screen that displays help information."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Close Help"),
        ("q", "app.pop_screen", "Close Help"),
        ("?", "app.pop_screen", "Close Help"),
    ]

    def compose(self) -> ComposeResult:
        with Grid(id="help-grid"):
            yield Markdown(HELP_TEXT)


# --- Textual Application ---

class UnisexNamesApp(App):
    """A Textual app listing unisex names and their trends."""

    TITLE = "Unisex Names"

    CSS = """
    #app-grid {
        layout: grid;
        grid-size: 2;
        grid-columns: 36 1fr;
        grid-rows: 1fr;
        height: 100%;
        width: 100%;
    }
    #controls-pane {
        layout: grid;
        grid-rows: 1fr auto;
        padding: 1 2;
        border-right: solid $accent;
    }
    #results-pane {
        padding: 0 1;
        height: 100%;
    }
    .header {
        background: $primary-background-darken-1;
        color: $text;
        padding: 0 1;
        margin-top: 1;
        text-style: bold;
    }
    Button {
        width: 100%;
        margin-top: 1;
    }
    Input.-invalid {
        border: heavy red;
    }
    #trend-plot {
        height: 16;
    }
    #status-container {
        border: round $accent;
        height: auto;
        padding: 0 1;
    }
    #loading-overlay {
        layer: overlay;
        align: center middle;
        background: $background 60%;
    }
    #help-grid {
        width: 80%;
        height: 80%;
        margin: 2 10;
        border: thick $accent;
        background: $surface;
    }
    """

    BINDINGS = [
        ("?", "show_help", "Help"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        data_dir: Path = DATA_DIR,
        thresholds: Optional[Thresholds] = None,
        table_path: Optional[Path] = None,
    ):
        super().__init__()
        self.loader = NameDataLoader(data_dir)
        self.table_path = table_path
        self.thresholds = thresholds or load_thresholds()
        self.status_widget = Static("Loading...")
        self.analysis: Optional[UnisexAnalysis] = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="app-grid"):
            with Container(id="controls-pane"):
                with VerticalScroll():
                    yield Static("Thresholds", classes="header")
                    yield Static("Share floor (each sex):", classes="input-label")
                    yield Input(
                        value=str(self.thresholds.threshold_low),
                        id="threshold_input",
                        validators=[Number(minimum=0, maximum=1)],
                    )
                    yield Static("Volume floor (total births):", classes="input-label")
                    yield Input(
                        value=str(self.thresholds.min_volume),
                        id="volume_input",
                        validators=[Integer(minimum=0)],
                    )
                    yield Button("Apply", variant="primary", id="apply_button", disabled=True)
                    yield Button("Export CSV", id="export_csv_button", disabled=True)
                with Container(id="status-container"):
                    yield self.status_widget
            with Container(id="results-pane"):
                with TabbedContent(id="result-tabs"):
                    with TabPane("Snapshot", id="snapshot-tab"):
                        yield DataTable(id="snapshot-table", cursor_type="row")
                    with TabPane("Trends", id="trends-tab"):
                        yield PlotextPlot(id="trend-plot")
                        yield DataTable(id="trends-table", cursor_type="row")
                with Container(id="loading-overlay"):
                    yield LoadingIndicator()
        yield Footer()

    def action_show_help(self) -> None:
        """Show the help screen."""
        self.push_screen(HelpScreen())

    def on_mount(self) -> None:
        setup_logger(LOG_DIR, console=False)
        self.query_one("#status-container").border_title = "Status"
        self.status_widget.update("Checking for data...")
        self._draw_empty_plot()
        self.load_data_worker()

    @work(exclusive=True, thread=True)
    def load_data_worker(self) -> None:
        self.call_from_thread(self._set_loading, True)
        try:
            status = self._load_records()
        except (UnisexNamesError, OSError, pd.errors.ParserError) as e:
            logger.exception("Loading birth records failed")
            status = f"[bold red]{e}[/]"
        self.call_from_thread(self.status_widget.update, status)
        if self.loader.df is not None:
            self._run_analysis(self.thresholds)
        self.call_from_thread(self._set_loading, False)

    def _load_records(self) -> str:
        """Read the single table given on the command line, else the SSA yearly files."""
        if self.table_path is not None:
            frame = self.loader.read_table(self.table_path)
            return f"Data loaded with {len(frame):,} records from '{self.table_path.name}'."
        for status in self.loader.download_and_extract_data():
            self.call_from_thread(self.status_widget.update, status)
        return self.loader.load_data()

    @work(exclusive=True, thread=True)
    def classify_worker(self, thresholds: Thresholds) -> None:
        self.call_from_thread(self._set_loading, True)
        self._run_analysis(thresholds)
        self.call_from_thread(self._set_loading, False)

    def _run_analysis(self, thresholds: Thresholds) -> None:
        try:
            analysis = analyze(self.loader.df, thresholds)
        except UnisexNamesError as e:
            logger.exception("Classification failed")
            self.call_from_thread(self.status_widget.update, f"[bold red]Classification failed: {e}[/]")
            return
        self.call_from_thread(self._display_analysis, analysis)

    def _set_loading(self, loading: bool) -> None:
        self.query_one("#loading-overlay").display = loading
        ready = not loading and self.loader.df is not None
        self.query_one("#apply_button", Button).disabled = not ready
        self.query_one("#export_csv_button", Button).disabled = not ready or self.analysis is None

    def _display_analysis(self, analysis: UnisexAnalysis) -> None:
        self.analysis = analysis
        self.thresholds = analysis.thresholds

        snapshot_table = self.query_one("#snapshot-table", DataTable)
        snapshot_table.clear(columns=True)
        snapshot_table.add_columns("Name", "Total Births", "% Male", "% Female", "Split (M/F)")
        for row in analysis.snapshot:
            snapshot_table.add_row(
                row.name, f"{row.count_total:,}", f"{row.pct_M:.1%}", f"{row.pct_F:.1%}", split_bar(row.pct_M),
                key=row.name,
            )

        trends_table = self.query_one("#trends-table", DataTable)
        trends_table.clear(columns=True)
        trends_table.add_columns("Name", "Total Births", "% Male", "% Female", "Years", "Male Share by Year")
        for row in analysis.trends:
            years = f"{row.years[0]}-{row.years[-1]}" if row.year_sequence else "-"
            trends_table.add_row(
                row.name, f"{row.count_total:,}", f"{row.pct_M:.1%}", f"{row.pct_F:.1%}", years, sparkline(row.shares),
                key=row.name,
            )

        if analysis.trends:
            self._draw_trend_plot(analysis.trends[0])
        else:
            self._draw_empty_plot()

        thresholds = analysis.thresholds
        status = (
            f"[bold green]{len(analysis.snapshot):,} unisex names[/]\n"
            f"share > {thresholds.threshold_low:g}, births > {thresholds.min_volume:,}"
        )
        if not thresholds.is_satisfiable:
            status += "\n[bold yellow]A share floor of 0.5 or more can never be met.[/]"
        self.status_widget.update(status)

    def _draw_empty_plot(self) -> None:
        plot = self.query_one(PlotextPlot)
        plt = plot.plt
        plt.clear_data()
        plt.title("Male share by year")
        plt.xlabel("Select a name in the Trends table.")
        plt.grid(True, True)
        plot.refresh()

    def _draw_trend_plot(self, row: TrendRow) -> None:
        plot = self.query_one(PlotextPlot)
        plt = plot.plt
        plt.clear_data()
        plt.plot(list(row.years), [share * 100 for share in row.shares], label=f"{row.name} (% male)")
        plt.title(f"Male share of '{row.name}' by year")
        plt.xlabel("Year")
        plt.ylabel("% Male")
        plt.ylim(0, 100)
        plt.grid(True, True)
        plot.refresh()

    def _thresholds_from_inputs(self) -> Optional[Thresholds]:
        threshold_input = self.query_one("#threshold_input", Input)
        volume_input = self.query_one("#volume_input", Input)
        if not threshold_input.is_valid or not volume_input.is_valid:
            self.status_widget.update("[bold red]Enter a share floor in [0, 1] and a non-negative volume floor.[/]")
            return None
        try:
            return Thresholds(float(threshold_input.value), int(volume_input.value))
        except (ValueError, UnisexNamesError) as e:
            self.status_widget.update(f"[bold red]{e}[/]")
            return None

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "apply_button":
            if thresholds := self._thresholds_from_inputs():
                self.classify_worker(thresholds)
        elif event.button.id == "export_csv_button":
            self.export_current_data()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if self.loader.df is None:
            return
        if event.input.id in ("threshold_input", "volume_input"):
            self.query_one("#apply_button", Button).press()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        if self.analysis is None or event.data_table.id != "trends-table":
            return
        selected = event.row_key.value
        for row in self.analysis.trends:
            if row.name == selected:
                self._draw_trend_plot(row)
                break

    def export_current_data(self) -> None:
        if self.analysis is None:
            self.status_widget.update("[bold red]No data to export.[/]")
            return

        active_tab = self.query_one("#result-tabs", TabbedContent).active
        rows: List = self.analysis.trends if active_tab == "trends-tab" else self.analysis.snapshot
        if not rows:
            self.status_widget.update("[bold red]No data to export.[/]")
            return

        filename = "unisex_trends.csv" if active_tab == "trends-tab" else "unisex_snapshot.csv"
        try:
            rows_to_frame(rows).to_csv(filename, index=False)
            self.status_widget.update(f"[bold green]Data exported to '{filename}'[/]")
        except OSError as e:
            self.status_widget.update(f"[bold red]Error exporting data: {e}[/]")

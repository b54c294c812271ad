from pathlib import Path

import pandas as pd

from unisex_names.config import Thresholds
from unisex_names.tui import UnisexNamesApp, sparkline, split_bar


def test_sparkline_scale():
    assert sparkline([0.0, 0.5, 1.0]) == "▁▅█"
    assert sparkline([]) == ""


def test_sparkline_is_averaged_down_to_width():
    line = sparkline([0.0, 0.0, 1.0, 1.0], width=2)
    assert line == "▁█"
    assert len(sparkline([0.5] * 144)) == 36


def test_split_bar():
    assert split_bar(0.5, width=10) == "█████░░░░░"
    assert split_bar(1.0, width=4) == "████"
    assert split_bar(0.0, width=4) == "░░░░"


def test_app_loads_a_single_table(tmp_path: Path):
    """A table path given to the app is read instead of the SSA yearly files."""
    table = tmp_path / "names.csv.gz"
    pd.DataFrame({
        'name': ['Alex', 'Alex'], 'sex': ['M', 'F'], 'year': [2000, 2000], 'count': [40000, 40000],
    }).to_csv(table, index=False, compression="gzip")

    app = UnisexNamesApp(data_dir=tmp_path / "ssa", thresholds=Thresholds(), table_path=table)
    status = app._load_records()

    assert status == "Data loaded with 2 records from 'names.csv.gz'."
    assert app.loader.df['Count'].sum() == 80000
    assert not (tmp_path / "ssa").exists()

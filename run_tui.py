#!/usr/bin/env python

import sys
from pathlib import Path

from unisex_names.tui import UnisexNamesApp

if __name__ == "__main__":
    """
    This script is the entry point for running the Textual User Interface (TUI).
    Pass the path of a (possibly compressed) name/sex/year/count table to analyze
    it instead of the SSA yearly files. Thresholds are read from
    UNISEX_THRESHOLD_LOW / UNISEX_MIN_VOLUME (or a .env file).
    """
    table_path = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    app = UnisexNamesApp(table_path=table_path)
    app.run()

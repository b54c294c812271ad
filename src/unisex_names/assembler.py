#!/usr/bin/env python

from typing import List

import pandas as pd

from .records import COUNT_TOTAL, NAME, PCT_F, PCT_M, YEAR_SEQUENCE, SnapshotRow, TrendRow


def snapshot_rows(classified: pd.DataFrame) -> List[SnapshotRow]:
    return [
        SnapshotRow(name=str(row[NAME]), count_total=int(row[COUNT_TOTAL]), pct_M=float(row[PCT_M]), pct_F=float(row[PCT_F]))
        for _, row in classified.iterrows()
    ]


def trend_rows(classified: pd.DataFrame, trends: pd.DataFrame) -> List[TrendRow]:
    """One TrendRow per classified name, in classification order."""
    sequences = dict(zip(trends[NAME], trends[YEAR_SEQUENCE]))
    return [
        TrendRow(
            name=str(row[NAME]),
            count_total=int(row[COUNT_TOTAL]),
            pct_M=float(row[PCT_M]),
            pct_F=float(row[PCT_F]),
            year_sequence=tuple(sequences[row[NAME]]),
        )
        for _, row in classified.iterrows()
    ]


def rows_to_frame(rows) -> pd.DataFrame:
    """Flatten assembled rows for export; ``year_sequence`` is kept as a list of pairs."""
    return pd.DataFrame([row.as_dict() for row in rows])

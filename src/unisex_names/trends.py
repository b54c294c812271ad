#!/usr/bin/env python

from typing import Dict, Iterable, Tuple

import pandas as pd
from loguru import logger

from .exceptions import ConsistencyError
from .records import (
    COUNT_F, COUNT_M, COUNT_TOTAL, COUNT_TOTAL_YEAR, NAME, NAME_TOTALS_COLUMNS, PCT_F, PCT_M, PCT_M_YEAR, YEAR,
    YEAR_SEQUENCE,
)
from .splitter import to_wide, with_percentages

YEARLY_COLUMNS = [NAME, YEAR, COUNT_M, COUNT_F, COUNT_TOTAL_YEAR, PCT_M_YEAR]
TREND_COLUMNS = NAME_TOTALS_COLUMNS + [YEAR_SEQUENCE]

DEFAULT_TOLERANCE = 1e-12


def yearly_totals(name_sex_year: pd.DataFrame, names: Iterable[str]) -> pd.DataFrame:
    """Per-(name, year) totals and male share for the given names, ascending by name then year."""
    selected = name_sex_year[name_sex_year[NAME].isin(list(names))]
    if selected.empty:
        return pd.DataFrame({
            NAME: pd.Series(dtype="object"),
            YEAR: pd.Series(dtype="int64"),
            COUNT_M: pd.Series(dtype="int64"),
            COUNT_F: pd.Series(dtype="int64"),
            COUNT_TOTAL_YEAR: pd.Series(dtype="int64"),
            PCT_M_YEAR: pd.Series(dtype="float64"),
        })

    yearly = to_wide(selected, index=[NAME, YEAR]).rename(columns={COUNT_TOTAL: COUNT_TOTAL_YEAR})
    # A year holding only zero-count rows has no share; it is left out like a missing year.
    yearly = yearly[yearly[COUNT_TOTAL_YEAR] > 0].copy()
    yearly[PCT_M_YEAR] = yearly[COUNT_M] / yearly[COUNT_TOTAL_YEAR]
    return yearly[YEARLY_COLUMNS].sort_values([NAME, YEAR], kind="mergesort").reset_index(drop=True)


def year_sequences(yearly: pd.DataFrame) -> Dict[str, Tuple[Tuple[int, float], ...]]:
    return {
        name: tuple(zip(group[YEAR].astype(int).tolist(), group[PCT_M_YEAR].tolist()))
        for name, group in yearly.groupby(NAME, sort=True)
    }


def extract_trends(name_sex_year: pd.DataFrame, names: Iterable[str]) -> pd.DataFrame:
    """
    Build the trend series for each of ``names``.

    Overall counts and shares are recomputed from the per-year male and
    female totals rather than taken from the snapshot, so the two can be
    cross-checked with :func:`verify_consistency`.
    """
    yearly = yearly_totals(name_sex_year, names)
    if yearly.empty:
        return pd.DataFrame({column: pd.Series(dtype="object") for column in TREND_COLUMNS})

    overall = yearly.groupby(NAME, sort=True)[[COUNT_M, COUNT_F]].sum().reset_index()
    overall[COUNT_TOTAL] = overall[COUNT_M] + overall[COUNT_F]
    overall = with_percentages(overall)

    sequences = year_sequences(yearly)
    overall[YEAR_SEQUENCE] = overall[NAME].map(sequences.get)
    logger.debug(f"Extracted trends for {len(overall):,} names over {len(yearly):,} name/year rows")
    return overall[TREND_COLUMNS]


def verify_consistency(snapshot: pd.DataFrame, trends: pd.DataFrame, tolerance: float = DEFAULT_TOLERANCE) -> None:
    """Raise ConsistencyError unless every snapshot name has a trend with the same totals and shares."""
    missing = set(snapshot[NAME]) - set(trends[NAME])
    if missing:
        raise ConsistencyError(f"No trend series for {len(missing)} classified name(s), e.g. {sorted(missing)[0]!r}")

    merged = snapshot[[NAME, COUNT_TOTAL, PCT_M, PCT_F]].merge(
        trends[[NAME, COUNT_TOTAL, PCT_M, PCT_F]], on=NAME, suffixes=("_snapshot", "_trend")
    )
    if merged.empty:
        return

    count_diff = merged[f"{COUNT_TOTAL}_snapshot"] != merged[f"{COUNT_TOTAL}_trend"]
    pct_m_diff = (merged[f"{PCT_M}_snapshot"] - merged[f"{PCT_M}_trend"]).abs() > tolerance
    pct_f_diff = (merged[f"{PCT_F}_snapshot"] - merged[f"{PCT_F}_trend"]).abs() > tolerance
    bad = merged[count_diff | pct_m_diff | pct_f_diff]
    if not bad.empty:
        row = bad.iloc[0]
        raise ConsistencyError(
            f"Snapshot and trend statistics disagree for {len(bad)} name(s); "
            f"{row[NAME]!r}: total {row[f'{COUNT_TOTAL}_snapshot']} vs {row[f'{COUNT_TOTAL}_trend']}, "
            f"pct_M {row[f'{PCT_M}_snapshot']} vs {row[f'{PCT_M}_trend']}"
        )

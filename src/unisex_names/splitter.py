#!/usr/bin/env python

import pandas as pd
from loguru import logger

from .exceptions import MalformedRecordError
from .records import (
    COUNT, COUNT_F, COUNT_M, COUNT_TOTAL, FEMALE, MALE, NAME, NAME_TOTALS_COLUMNS, PCT_F, PCT_M, SEX, SEXES,
)


def to_wide(totals: pd.DataFrame, index) -> pd.DataFrame:
    """Pivot sex-keyed counts into ``count_M``/``count_F`` columns, filling absent sexes with 0."""
    unknown = set(totals[SEX].unique()) - set(SEXES)
    if unknown:
        raise MalformedRecordError(f"Unexpected sex values {sorted(map(str, unknown))}; only {list(SEXES)} are allowed")

    wide = totals.pivot_table(index=index, columns=SEX, values=COUNT, aggfunc="sum", fill_value=0)
    wide = wide.reindex(columns=list(SEXES), fill_value=0).astype("int64")
    wide.columns.name = None
    wide = wide.rename(columns={MALE: COUNT_M, FEMALE: COUNT_F}).reset_index()
    wide[COUNT_TOTAL] = wide[COUNT_M] + wide[COUNT_F]
    return wide


def with_percentages(wide: pd.DataFrame) -> pd.DataFrame:
    wide = wide.copy()
    wide[PCT_M] = wide[COUNT_M] / wide[COUNT_TOTAL]
    wide[PCT_F] = wide[COUNT_F] / wide[COUNT_TOTAL]
    return wide


def split_by_sex(name_sex_totals: pd.DataFrame) -> pd.DataFrame:
    """
    Turn per-(name, sex) totals into one NameTotals row per name.

    Names seen with a single sex keep their row with shares of 0 and 1.
    Names whose births add up to zero have no defined share and are dropped.
    """
    if name_sex_totals.empty:
        return pd.DataFrame({
            NAME: pd.Series(dtype="object"),
            COUNT_M: pd.Series(dtype="int64"),
            COUNT_F: pd.Series(dtype="int64"),
            COUNT_TOTAL: pd.Series(dtype="int64"),
            PCT_M: pd.Series(dtype="float64"),
            PCT_F: pd.Series(dtype="float64"),
        })

    wide = to_wide(name_sex_totals, index=NAME)
    empty_names = wide[COUNT_TOTAL] == 0
    if empty_names.any():
        logger.debug(f"Dropping {int(empty_names.sum())} name(s) with zero total births")
        wide = wide[~empty_names]

    wide = with_percentages(wide)
    return wide[NAME_TOTALS_COLUMNS].sort_values(NAME, kind="mergesort").reset_index(drop=True)

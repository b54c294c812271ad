#!/usr/bin/env python

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

import pandas as pd
from loguru import logger

from .records import COUNT, NAME, SEX, YEAR

NAME_SEX_KEYS = [NAME, SEX]
NAME_SEX_YEAR_KEYS = [NAME, SEX, YEAR]


def _empty_totals(keys: Sequence[str]) -> pd.DataFrame:
    columns = {key: pd.Series(dtype="int64" if key == YEAR else "object") for key in keys}
    columns[COUNT] = pd.Series(dtype="int64")
    return pd.DataFrame(columns)


def _reduce(records: pd.DataFrame, keys: Sequence[str]) -> pd.DataFrame:
    if records.empty:
        return _empty_totals(keys)
    return records.groupby(list(keys), sort=True)[COUNT].sum().reset_index()


def aggregate_name_sex(records: pd.DataFrame) -> pd.DataFrame:
    """Sum births per (name, sex) across every year."""
    totals = _reduce(records, NAME_SEX_KEYS)
    logger.debug(f"Aggregated {len(records):,} records into {len(totals):,} name/sex totals")
    return totals


def aggregate_name_sex_year(records: pd.DataFrame) -> pd.DataFrame:
    """Sum births per (name, sex, year); duplicated rows for one key are added together."""
    totals = _reduce(records, NAME_SEX_YEAR_KEYS)
    logger.debug(f"Aggregated {len(records):,} records into {len(totals):,} name/sex/year totals")
    return totals


def partition_by_name(records: pd.DataFrame, partitions: int) -> List[pd.DataFrame]:
    """Split records into ``partitions`` frames so that each name lands in exactly one of them."""
    if partitions < 1:
        raise ValueError(f"partitions must be at least 1, got {partitions}")
    if partitions == 1 or records.empty:
        return [records]
    buckets = pd.util.hash_pandas_object(records[NAME], index=False) % partitions
    return [records[buckets.to_numpy() == i] for i in range(partitions)]


def aggregate_partitioned(
    records: pd.DataFrame,
    keys: Sequence[str] = NAME_SEX_KEYS,
    partitions: int = 4,
    max_workers: Optional[int] = None,
) -> pd.DataFrame:
    """
    Reduce partitions concurrently, then merge the partial sums.

    Integer addition is associative and commutative, so the merged result is
    identical to ``_reduce(records, keys)`` regardless of how rows were split.
    """
    parts = partition_by_name(records, partitions)
    if len(parts) == 1:
        return _reduce(records, keys)

    with ThreadPoolExecutor(max_workers=max_workers or len(parts)) as pool:
        partials = list(pool.map(lambda part: _reduce(part, keys), parts))

    partials = [partial for partial in partials if not partial.empty]
    if not partials:
        return _empty_totals(keys)
    merged = pd.concat(partials, ignore_index=True)
    merged = merged.groupby(list(keys), sort=True)[COUNT].sum().reset_index()
    logger.debug(f"Merged {len(parts)} partitions into {len(merged):,} totals keyed by {list(keys)}")
    return merged

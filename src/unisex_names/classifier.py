#!/usr/bin/env python

from typing import Optional

import pandas as pd
from loguru import logger

from .config import Thresholds
from .records import COUNT_TOTAL, NAME, PCT_F, PCT_M


def unisex_mask(name_totals: pd.DataFrame, thresholds: Thresholds) -> pd.Series:
    """Rows passing all three strict thresholds; a share equal to the floor does not qualify."""
    return (
        (name_totals[PCT_M] > thresholds.threshold_low)
        & (name_totals[PCT_F] > thresholds.threshold_low)
        & (name_totals[COUNT_TOTAL] > thresholds.min_volume)
    )


def classify(name_totals: pd.DataFrame, thresholds: Optional[Thresholds] = None) -> pd.DataFrame:
    """
    Select the unisex names from per-name totals.

    The result keeps the NameTotals columns and is ordered by ``count_total``
    descending, ties broken by name ascending. An empty frame is a valid
    outcome, e.g. when ``threshold_low >= 0.5``.
    """
    thresholds = thresholds or Thresholds()
    if not thresholds.is_satisfiable:
        logger.warning(
            f"threshold_low={thresholds.threshold_low} can never be exceeded by both shares; "
            "no name will qualify"
        )

    unisex = name_totals[unisex_mask(name_totals, thresholds)]
    unisex = unisex.sort_values(NAME, kind="mergesort")
    unisex = unisex.sort_values(COUNT_TOTAL, ascending=False, kind="mergesort").reset_index(drop=True)
    logger.debug(
        f"{len(unisex):,} of {len(name_totals):,} names qualify "
        f"(threshold_low={thresholds.threshold_low}, min_volume={thresholds.min_volume:,})"
    )
    return unisex

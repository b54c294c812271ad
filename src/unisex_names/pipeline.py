#!/usr/bin/env python

from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd
from loguru import logger

from .aggregator import NAME_SEX_KEYS, NAME_SEX_YEAR_KEYS, aggregate_partitioned
from .assembler import snapshot_rows, trend_rows
from .classifier import classify
from .config import Thresholds
from .data_loader import Records, as_record_frame
from .records import NAME, SnapshotRow, TrendRow
from .splitter import split_by_sex
from .trends import extract_trends, verify_consistency


@dataclass(frozen=True)
class UnisexAnalysis:
    """Both result tables of one pipeline run, ready for rendering."""

    thresholds: Thresholds
    snapshot: List[SnapshotRow] = field(default_factory=list)
    trends: List[TrendRow] = field(default_factory=list)

    @property
    def names(self) -> List[str]:
        return [row.name for row in self.snapshot]


def analyze(records: Records, thresholds: Optional[Thresholds] = None, partitions: int = 1) -> UnisexAnalysis:
    """
    Run the full batch: validate, aggregate, split, classify, extract trends, assemble.

    ``partitions > 1`` reduces the records concurrently; the result is the
    same as a sequential run. Malformed records raise MalformedRecordError
    before any aggregation happens.
    """
    thresholds = thresholds or Thresholds()
    frame: pd.DataFrame = as_record_frame(records)
    logger.info(f"Classifying {len(frame):,} birth records")

    name_sex = aggregate_partitioned(frame, NAME_SEX_KEYS, partitions=partitions)
    name_sex_year = aggregate_partitioned(frame, NAME_SEX_YEAR_KEYS, partitions=partitions)

    name_totals = split_by_sex(name_sex)
    classified = classify(name_totals, thresholds)
    trends = extract_trends(name_sex_year, classified[NAME])
    verify_consistency(classified, trends)

    result = UnisexAnalysis(
        thresholds=thresholds,
        snapshot=snapshot_rows(classified),
        trends=trend_rows(classified, trends),
    )
    logger.info(f"Found {len(result.snapshot):,} unisex names")
    return result

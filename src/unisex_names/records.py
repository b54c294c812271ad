#!/usr/bin/env python

from dataclasses import asdict, dataclass
from typing import Any, Dict, Tuple

# Column layout of the tabular birth-record form produced by the loader.
NAME, SEX, YEAR, COUNT = "Name", "Sex", "Year", "Count"
RECORD_COLUMNS = [NAME, SEX, YEAR, COUNT]

MALE, FEMALE = "M", "F"
SEXES = (MALE, FEMALE)

# Wide-form columns shared by the splitter, classifier and trend extractor.
COUNT_M, COUNT_F, COUNT_TOTAL = "count_M", "count_F", "count_total"
PCT_M, PCT_F = "pct_M", "pct_F"
COUNT_TOTAL_YEAR, PCT_M_YEAR = "count_total_year", "pct_M_year"
YEAR_SEQUENCE = "year_sequence"
NAME_TOTALS_COLUMNS = [NAME, COUNT_M, COUNT_F, COUNT_TOTAL, PCT_M, PCT_F]


@dataclass(frozen=True)
class BirthRecord:
    """Number of babies of one sex given a name in one year."""

    name: str
    sex: str
    year: int
    count: int


@dataclass(frozen=True)
class SnapshotRow:
    """Whole-period split for one unisex name."""

    name: str
    count_total: int
    pct_M: float
    pct_F: float

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TrendRow:
    """Whole-period split plus the male share for every year the name occurs."""

    name: str
    count_total: int
    pct_M: float
    pct_F: float
    year_sequence: Tuple[Tuple[int, float], ...]

    @property
    def years(self) -> Tuple[int, ...]:
        return tuple(year for year, _ in self.year_sequence)

    @property
    def shares(self) -> Tuple[float, ...]:
        return tuple(share for _, share in self.year_sequence)

    def as_dict(self) -> Dict[str, Any]:
        row = asdict(self)
        row[YEAR_SEQUENCE] = list(self.year_sequence)
        return row

import math

import pandas as pd
import pytest

from unisex_names.config import Thresholds
from unisex_names.exceptions import MalformedRecordError
from unisex_names.pipeline import analyze
from unisex_names.records import BirthRecord


def test_alex_is_unisex(alex_records):
    """An even split over 90,000 births qualifies under the default thresholds."""
    result = analyze(alex_records)

    assert [row.name for row in result.snapshot] == ["Alex"]
    snapshot = result.snapshot[0]
    assert snapshot.count_total == 90000
    assert snapshot.pct_M == 0.5
    assert snapshot.pct_F == 0.5

    trend = result.trends[0]
    assert trend.name == "Alex"
    assert trend.count_total == 90000
    assert list(trend.year_sequence) == [(2000, 0.5), (2001, 0.5)]


def test_robin_excluded_for_low_male_share():
    result = analyze([BirthRecord("Robin", "M", 1990, 10000), BirthRecord("Robin", "F", 1990, 90000)])
    assert result.snapshot == []
    assert result.trends == []


def test_jordan_excluded_for_low_female_share():
    result = analyze([BirthRecord("Jordan", "M", 1990, 60000), BirthRecord("Jordan", "F", 1990, 1000)])
    assert result.snapshot == []


def test_empty_input():
    """No records is a valid run with empty results."""
    result = analyze([])
    assert result.snapshot == []
    assert result.trends == []

    empty_frame = pd.DataFrame(columns=["Name", "Sex", "Year", "Count"])
    assert analyze(empty_frame).snapshot == []


def test_share_equal_to_threshold_is_excluded():
    records = [BirthRecord("Quinn", "M", 2000, 25000), BirthRecord("Quinn", "F", 2000, 75000)]
    assert analyze(records, Thresholds(threshold_low=0.25, min_volume=0)).snapshot == []
    assert [row.name for row in analyze(records, Thresholds(threshold_low=0.24, min_volume=0)).snapshot] == ["Quinn"]


def test_total_equal_to_min_volume_is_excluded():
    records = [BirthRecord("Sam", "M", 2000, 25000), BirthRecord("Sam", "F", 2000, 25000)]
    assert analyze(records).snapshot == []
    assert len(analyze(records, Thresholds(min_volume=49999)).snapshot) == 1


def test_classification_order(mock_births):
    """Largest totals first; equal totals ordered by name."""
    result = analyze(mock_births)
    assert result.names == ["Riley", "Avery", "Casey"]
    assert [row.name for row in result.trends] == result.names


def test_classified_names_meet_every_threshold(mock_births):
    thresholds = Thresholds(threshold_low=0.2, min_volume=30000)
    result = analyze(mock_births, thresholds)

    assert "Taylor" in result.names
    for row in result.snapshot:
        assert row.pct_M > thresholds.threshold_low
        assert row.pct_F > thresholds.threshold_low
        assert row.count_total > thresholds.min_volume
        assert math.isclose(row.pct_M + row.pct_F, 1.0)


def test_trend_and_snapshot_agree(mock_births):
    result = analyze(mock_births, Thresholds(threshold_low=0.0, min_volume=0))
    snapshot = {row.name: row for row in result.snapshot}

    for trend in result.trends:
        assert trend.count_total == snapshot[trend.name].count_total
        assert math.isclose(trend.pct_M, snapshot[trend.name].pct_M)
        assert math.isclose(trend.pct_F, snapshot[trend.name].pct_F)


def test_year_sequence_skips_missing_years(mock_births):
    result = analyze(mock_births)
    trends = {row.name: row for row in result.trends}

    assert trends["Avery"].year_sequence == ((1990, 0.0), (1992, 1.0))
    assert trends["Casey"].year_sequence == ((1990, 1.0), (1991, 0.0))
    riley = trends["Riley"].year_sequence
    assert [year for year, _ in riley] == [1990, 1991]
    assert riley[0][1] == pytest.approx(60000 / 130000)


def test_duplicate_records_are_summed():
    records = [
        BirthRecord("Alex", "M", 2000, 20000),
        BirthRecord("Alex", "M", 2000, 20000),
        BirthRecord("Alex", "F", 2000, 40000),
    ]
    result = analyze(records, Thresholds(min_volume=0))
    assert result.snapshot[0].count_total == 80000
    assert result.snapshot[0].pct_M == 0.5


def test_analysis_is_repeatable(mock_births):
    first = analyze(mock_births)
    second = analyze(mock_births.sample(frac=1, random_state=7))
    assert first == second


def test_partitioned_run_matches_sequential(mock_births):
    assert analyze(mock_births, partitions=3) == analyze(mock_births, partitions=1)


def test_unsatisfiable_threshold_gives_empty_result(alex_records):
    result = analyze(alex_records, Thresholds(threshold_low=0.5, min_volume=0))
    assert result.snapshot == []
    assert result.trends == []


@pytest.mark.parametrize("bad_record", [
    BirthRecord("Alex", "M", 2000, -1),
    BirthRecord("Alex", "X", 2000, 10),
    BirthRecord("Alex", "M", 2000.5, 10),
    BirthRecord("Alex", "M", "2000", 10),
    BirthRecord("", "F", 2000, 10),
])
def test_malformed_record_fails_the_run(alex_records, bad_record):
    with pytest.raises(MalformedRecordError):
        analyze(alex_records + [bad_record])

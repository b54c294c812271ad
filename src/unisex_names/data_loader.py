#!/usr/bin/env python

import io
import numbers
import zipfile
from dataclasses import asdict
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

import pandas as pd
import requests
from loguru import logger

from .config import DATA_DIR, DATA_URL, END_YEAR, START_YEAR
from .exceptions import MalformedRecordError
from .records import COUNT, NAME, RECORD_COLUMNS, SEX, SEXES, YEAR, BirthRecord

Records = Union[pd.DataFrame, Iterable[BirthRecord]]

INT64_MIN, INT64_MAX = -2 ** 63, 2 ** 63 - 1


def _is_integer(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool) and INT64_MIN <= value <= INT64_MAX


def _non_integer_mask(values: pd.Series) -> pd.Series:
    if pd.api.types.is_bool_dtype(values):
        return pd.Series(True, index=values.index)
    if pd.api.types.is_integer_dtype(values):
        return pd.Series(False, index=values.index)
    if pd.api.types.is_float_dtype(values):
        # inf and values beyond int64 compare equal to their rounding but cannot be cast.
        in_range = (values >= float(INT64_MIN)) & (values < float(2 ** 63))
        return ~in_range | (values != values.round())
    return ~values.map(_is_integer).astype(bool)


def _reject(mask: pd.Series, frame: pd.DataFrame, problem: str) -> None:
    if mask.any():
        example = frame[mask].iloc[0].to_dict()
        raise MalformedRecordError(f"{int(mask.sum()):,} record(s) {problem}, e.g. {example}")


def validate_records(frame: pd.DataFrame) -> pd.DataFrame:
    """
    Check a birth-record frame and return it with normalized column order and dtypes.

    Any malformed row fails the whole batch; nothing is dropped or coerced.
    """
    missing = [column for column in RECORD_COLUMNS if column not in frame.columns]
    if missing:
        raise MalformedRecordError(f"Birth records are missing column(s) {missing}")

    frame = frame[RECORD_COLUMNS]
    _reject(frame.isna().any(axis=1), frame, "with missing values")
    named = frame[NAME].map(lambda name: isinstance(name, str) and name != "").astype(bool)
    _reject(~named, frame, "with an empty or non-text name")
    _reject(~frame[SEX].isin(SEXES), frame, f"with a sex other than {'/'.join(SEXES)}")
    _reject(_non_integer_mask(frame[YEAR]), frame, "with a non-integer or out-of-range year")
    _reject(_non_integer_mask(frame[COUNT]), frame, "with a non-integer or out-of-range count")

    frame = frame.astype({YEAR: "int64", COUNT: "int64"})
    _reject(frame[COUNT] < 0, frame, "with a negative count")
    return frame.reset_index(drop=True)


def records_to_frame(records: Iterable[BirthRecord]) -> pd.DataFrame:
    rows = [asdict(record) for record in records]
    if not rows:
        return pd.DataFrame({
            NAME: pd.Series(dtype="object"),
            SEX: pd.Series(dtype="object"),
            YEAR: pd.Series(dtype="int64"),
            COUNT: pd.Series(dtype="int64"),
        })
    frame = pd.DataFrame(rows).rename(columns={"name": NAME, "sex": SEX, "year": YEAR, "count": COUNT})
    return frame[RECORD_COLUMNS]


def as_record_frame(records: Records) -> pd.DataFrame:
    """Accept either the loader's DataFrame layout or BirthRecord objects and return a validated frame."""
    frame = records if isinstance(records, pd.DataFrame) else records_to_frame(records)
    return validate_records(frame)


class NameDataLoader:
    """Fetches the SSA national names archive and reads it into birth records."""

    def __init__(self, data_dir: Path = DATA_DIR):
        self.data_dir = data_dir
        self.df: Optional[pd.DataFrame] = None

    def download_and_extract_data(self) -> Iterator[str]:
        if self.data_dir.exists():
            yield "Data directory already exists. Skipping download."
            return

        yield "Downloading data..."
        try:
            response = requests.get(DATA_URL, headers={'User-Agent': 'Mozilla/5.0'}, timeout=60)
            response.raise_for_status()
            with zipfile.ZipFile(io.BytesIO(response.content)) as z:
                for member in z.infolist():
                    if member.is_dir() or not Path(member.filename).name.startswith('yob'):
                        continue
                    target_path = self.data_dir / Path(member.filename).name
                    target_path.parent.mkdir(parents=True, exist_ok=True)
                    target_path.write_bytes(z.read(member.filename))
            logger.info(f"Extracted SSA names archive into {self.data_dir}")
            yield "Data download complete."
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error downloading {DATA_URL}: {e}")
            yield f"Network error downloading data: {e}"
        except (zipfile.BadZipFile, IOError) as e:
            logger.error(f"Error processing names archive: {e}")
            yield f"Error processing data file: {e}"

    def load_data(self) -> str:
        if self.df is not None:
            return "Data already loaded."

        all_years_data = []
        error_count = 0
        for year in range(START_YEAR, END_YEAR + 1):
            file_path = self.data_dir / f"yob{year}.txt"
            if file_path.exists():
                try:
                    year_df = pd.read_csv(file_path, names=[NAME, SEX, COUNT])
                    year_df[YEAR] = year
                    all_years_data.append(year_df)
                except pd.errors.ParserError:
                    logger.warning(f"Could not parse {file_path}")
                    error_count += 1

        if not all_years_data:
            self.df = None
            return "No data files found."

        self.df = validate_records(pd.concat(all_years_data, ignore_index=True))
        logger.info(f"Loaded {len(self.df):,} records from {len(all_years_data)} yearly files")

        status = f"Data loaded with {len(self.df):,} records."
        if error_count > 0:
            status += f" [bold red]({error_count} file(s) failed to parse)[/]"
        return status

    def read_table(self, path: Path) -> pd.DataFrame:
        """Read one (optionally compressed) table with name, sex, year and count columns."""
        frame = pd.read_csv(path, compression="infer")
        canonical = {column.lower(): column for column in RECORD_COLUMNS}
        frame = frame.rename(columns=lambda column: canonical.get(str(column).strip().lower(), column))
        self.df = validate_records(frame)
        logger.info(f"Loaded {len(self.df):,} records from {path}")
        return self.df

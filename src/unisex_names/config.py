#!/usr/bin/env python

import math
import numbers
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .exceptions import ConfigurationError

# --- Configuration ---
DATA_URL = "https://www.ssa.gov/oact/babynames/names.zip"
DATA_DIR = Path("baby_names_data")
LOG_DIR = Path("logs")
START_YEAR = 1880
END_YEAR = 2023

DEFAULT_THRESHOLD_LOW = 0.33
DEFAULT_MIN_VOLUME = 50000

THRESHOLD_LOW_ENV = "UNISEX_THRESHOLD_LOW"
MIN_VOLUME_ENV = "UNISEX_MIN_VOLUME"


@dataclass(frozen=True)
class Thresholds:
    """The classification policy: a per-sex share floor and a volume floor.

    A name qualifies when both its male and female shares are strictly
    greater than ``threshold_low`` and its total births are strictly greater
    than ``min_volume``. Since the two shares sum to 1, any
    ``threshold_low >= 0.5`` can never be met and always produces an empty
    classification; such values are accepted as-is.
    """

    threshold_low: float = DEFAULT_THRESHOLD_LOW
    min_volume: int = DEFAULT_MIN_VOLUME

    def __post_init__(self) -> None:
        if isinstance(self.threshold_low, bool) or not isinstance(self.threshold_low, numbers.Real):
            raise ConfigurationError(f"threshold_low must be a number, got {self.threshold_low!r}")
        if math.isnan(self.threshold_low) or not 0.0 <= self.threshold_low <= 1.0:
            raise ConfigurationError(f"threshold_low must lie in [0, 1], got {self.threshold_low}")
        if isinstance(self.min_volume, bool) or not isinstance(self.min_volume, numbers.Integral):
            raise ConfigurationError(f"min_volume must be an integer, got {self.min_volume!r}")
        if self.min_volume < 0:
            raise ConfigurationError(f"min_volume must be non-negative, got {self.min_volume}")
        # NumPy scalars are stored as plain Python numbers.
        object.__setattr__(self, "threshold_low", float(self.threshold_low))
        object.__setattr__(self, "min_volume", int(self.min_volume))

    @property
    def is_satisfiable(self) -> bool:
        return self.threshold_low < 0.5


def load_thresholds() -> Thresholds:
    """Build thresholds from the environment (and a ``.env`` file if present)."""
    load_dotenv()

    raw_low = os.getenv(THRESHOLD_LOW_ENV)
    raw_volume = os.getenv(MIN_VOLUME_ENV)

    try:
        threshold_low = float(raw_low) if raw_low else DEFAULT_THRESHOLD_LOW
    except ValueError as exc:
        raise ConfigurationError(f"{THRESHOLD_LOW_ENV}={raw_low!r} is not a number") from exc
    try:
        min_volume = int(raw_volume) if raw_volume else DEFAULT_MIN_VOLUME
    except ValueError as exc:
        raise ConfigurationError(f"{MIN_VOLUME_ENV}={raw_volume!r} is not an integer") from exc

    return Thresholds(threshold_low=threshold_low, min_volume=min_volume)

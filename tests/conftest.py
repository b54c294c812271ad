import pandas as pd
import pytest

from unisex_names.records import BirthRecord


@pytest.fixture
def alex_records():
    """The two-year, evenly split Alex dataset."""
    return [
        BirthRecord("Alex", "M", 2000, 40000),
        BirthRecord("Alex", "F", 2000, 40000),
        BirthRecord("Alex", "M", 2001, 5000),
        BirthRecord("Alex", "F", 2001, 5000),
    ]


@pytest.fixture
def mock_births():
    """A small, predictable birth-record frame in the loader's column layout."""
    mock_data = {
        'Name': ['Riley', 'Riley', 'Riley', 'Casey', 'Casey', 'Avery', 'Avery', 'Robin', 'Robin',
                 'Jordan', 'Jordan', 'Mary', 'Taylor', 'Taylor', 'Taylor'],
        'Sex': ['M', 'F', 'M', 'M', 'F', 'F', 'M', 'M', 'F', 'M', 'F', 'F', 'M', 'F', 'F'],
        'Year': [1990, 1990, 1991, 1990, 1991, 1990, 1992, 1990, 1990, 1990, 1990, 1990, 1990, 1990, 1992],
        'Count': [60000, 70000, 70000, 50000, 50000, 50000, 50000, 10000, 90000, 60000, 1000, 200000,
                  20000, 10000, 10000],
    }
    return pd.DataFrame(mock_data)
